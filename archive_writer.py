# Module for saving raw fetched pages alongside their provenance

import os
import logging
from datetime import datetime, timezone

import constants # Import constants
from record_store import slugify


def archive_basename(record, captured_at):
    """'<outlet>--<critic>_<YYYY-MM-DD>' for a record captured at captured_at."""
    outlet_slug = slugify(record.outlet_id, fallback='unknown-outlet')
    critic_slug = slugify(record.critic)
    return f"{outlet_slug}--{critic_slug}_{captured_at.strftime('%Y-%m-%d')}"


def _metadata_header(record, method_name, captured_at):
    # '--' would terminate the HTML comment early
    def safe(value):
        return str(value).replace('--', '- -')

    lines = [
        "<!--",
        f"  URL: {safe(record.url)}",
        f"  Fetched: {captured_at.isoformat()}",
        f"  Method: {safe(method_name)}",
        f"  Show: {safe(record.show_id)}",
        f"  Outlet: {safe(record.outlet)}",
        f"  Critic: {safe(record.critic or constants.UNKNOWN_CRITIC_SLUG)}",
        "-->",
    ]
    return "\n".join(lines) + "\n"


def save_archive(record, raw_content, method_name, archives_dir, captured_at=None):
    """
    Saves raw_content under archives_dir/<show_id>/ with a metadata header.
    Never overwrites an existing archive: a counter suffix is added instead.
    Returns the written path or None on failure.
    """
    if not raw_content:
        logging.warning(f"Skipping archive for {record.label} due to empty content.")
        return None

    captured_at = captured_at or datetime.now(timezone.utc)
    show_dir = os.path.join(archives_dir, record.show_id)
    try:
        os.makedirs(show_dir, exist_ok=True)
    except OSError as e:
        logging.error(f"Error creating archive directory {show_dir}: {e}")
        return None

    base_filename = archive_basename(record, captured_at)
    full_path = os.path.join(show_dir, f"{base_filename}{constants.ARCHIVE_EXTENSION}")

    # Handle filename collisions
    counter = 1
    while os.path.exists(full_path):
        full_path = os.path.join(show_dir, f"{base_filename}-{counter}{constants.ARCHIVE_EXTENSION}")
        counter += 1
        if counter > constants.FILENAME_COLLISION_LIMIT:
            logging.error(f"Could not find unique archive filename for {record.label} after {constants.FILENAME_COLLISION_LIMIT} attempts.")
            return None

    try:
        # 'x' so a file appearing between the check and the write is never clobbered
        with open(full_path, 'x', encoding='utf-8') as f:
            f.write(_metadata_header(record, method_name, captured_at))
            f.write(raw_content)
        logging.info(f"  Archived: {full_path}")
        return full_path
    except OSError as e:
        logging.error(f"Error writing archive file {full_path}: {e}")
        return None
