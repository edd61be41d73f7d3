# Module for setting up logging
import logging
import sys
import os

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

def setup_logging(log_file, level=logging.INFO):
    """Sets up root logging to stdout and an append-mode log file."""
    log_formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Repeated runs in one process must not stack handlers
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    try:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setFormatter(log_formatter)
        root_logger.addHandler(file_handler)
    except OSError as e:
        print(f"Error: Could not set up file logging to {log_file}: {e}", file=sys.stderr)
        sys.exit(1)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    root_logger.addHandler(console_handler)

    # urllib3 logs every connection at DEBUG
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    logging.info(f"Logging to {log_file} at level {logging.getLevelName(level)}")
