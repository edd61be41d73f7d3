# Main script to collect full review texts for records that still need them
import sys
import logging

from config_loader import load_config
from logger_setup import setup_logging
from failure_ledger import LedgerError, load_ledger
from pacing import Pacer
from record_store import StoreError
from fetchers.browser_fetcher import BrowserSession
from fetchers.method_chain import build_methods
from coordinator import RunCoordinator, save_run_report


# --- Main Execution ---
def main(config_path="config.json"):
    """Loads configuration, runs one collection pass, and returns a process exit code."""
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError, RuntimeError) as e:
        print(f"Error: Could not load configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(config['log_file'])
    logging.info("=== Review Text Collection ===")
    logging.info(f"Config: batch={config['batch_size'] or 'all'}, max={config['max_reviews'] or 'all'}, show={config['show_filter'] or 'all'}")
    logging.info(f"ScrapingBee: {'configured' if config['proxy_api_key'] else 'not configured'}")

    try:
        ledger = load_ledger(config['failed_fetches_file'])
    except LedgerError as e:
        logging.error(f"Cannot load failure ledger: {e}")
        return 1
    pacer = Pacer.from_config(config)

    with BrowserSession(headless=config['headless']) as session:
        methods = build_methods(config, pacer, session)
        coordinator = RunCoordinator(config, ledger, methods, pacer)
        try:
            summary, ledger = coordinator.run()
        except StoreError as e:
            logging.error(f"Cannot build worklist: {e}")
            return 1

    if summary['processed']:
        save_run_report(summary, config)
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
