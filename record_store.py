# Module for reading and writing per-show review record files

import os
import json
import logging
import re

import constants # Import constants
from models import ReviewRecord


class StoreError(Exception):
    """The review store could not be read."""


# --- Slugs ---
def slugify(name, fallback=constants.UNKNOWN_CRITIC_SLUG):
    """Lowercases a name and reduces it to [a-z0-9-] for use in filenames."""
    slug = re.sub(r'[^a-z0-9]+', '-', (name or '').lower())
    slug = slug[:constants.FILENAME_MAX_LENGTH].strip('-')
    return slug or fallback


# --- Loading ---
def _list_show_dirs(review_texts_dir, show_filter=""):
    try:
        entries = sorted(os.listdir(review_texts_dir))
    except OSError as e:
        raise StoreError(f"Cannot read review texts directory {review_texts_dir}: {e}") from e

    show_dirs = []
    for entry in entries:
        if show_filter and entry != show_filter:
            continue
        if os.path.isdir(os.path.join(review_texts_dir, entry)):
            show_dirs.append(entry)
    return show_dirs


def load_record(file_path, show_id=None):
    """Loads a single record file. Returns a ReviewRecord or None if the file is not a JSON object."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError:
        logging.warning(f"Skipping record with invalid JSON: {file_path}")
        return None
    except UnicodeDecodeError as e:
        logging.warning(f"Skipping record that is not valid UTF-8: {file_path} ({e})")
        return None
    if not isinstance(data, dict):
        logging.warning(f"Skipping record that is not a JSON object: {file_path}")
        return None
    show_id = data.get('showId') or show_id or os.path.basename(os.path.dirname(file_path))
    return ReviewRecord(file_path=file_path, show_id=show_id, data=data)


def iter_records(review_texts_dir, show_filter=""):
    """
    Yields every ReviewRecord under review_texts_dir in stable order
    (show directories by name, then record files by name).
    Raises StoreError if the store itself cannot be listed or read.
    """
    for show_dir in _list_show_dirs(review_texts_dir, show_filter):
        show_path = os.path.join(review_texts_dir, show_dir)
        try:
            files = sorted(f for f in os.listdir(show_path) if f.endswith('.json'))
        except OSError as e:
            raise StoreError(f"Cannot read show directory {show_path}: {e}") from e

        for filename in files:
            file_path = os.path.join(show_path, filename)
            try:
                record = load_record(file_path, show_id=show_dir)
            except OSError as e:
                raise StoreError(f"Cannot read record {file_path}: {e}") from e
            if record is not None:
                yield record


def load_records(review_texts_dir, show_filter=""):
    records = list(iter_records(review_texts_dir, show_filter))
    logging.info(f"Loaded {len(records)} review records from {review_texts_dir}")
    return records


# --- Saving ---
def _write_json_atomic(file_path, data):
    tmp_path = f"{file_path}.tmp"
    with open(tmp_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write('\n')
    os.replace(tmp_path, file_path)


def save_record(record):
    """Writes the record's data back to its file. Returns True on success."""
    try:
        _write_json_atomic(record.file_path, record.data)
        logging.debug(f"Updated record file: {record.file_path}")
        return True
    except (OSError, TypeError) as e:
        logging.error(f"Error writing record file {record.file_path}: {e}")
        return False


def apply_text_update(record, text, word_count, method_name, archive_path, quality, fetched_at):
    """
    Returns a copy of the record's data with the acquired text fields set.
    The record itself is untouched so a failed write leaves it unmodified.
    """
    updated = dict(record.data)
    updated.update({
        'fullText': text,
        'textWordCount': word_count,
        'textStatus': constants.STATUS_COMPLETE,
        'textFetchedAt': fetched_at,
        'textFetchMethod': method_name,
        'sourceMethod': constants.SOURCE_METHOD_MAP.get(method_name, method_name),
        'archivePath': archive_path,
        'textQuality': quality,
    })
    return updated


def commit_text_update(record, updated_data):
    """Persists updated_data for record; on success the in-memory record adopts it."""
    candidate = ReviewRecord(file_path=record.file_path, show_id=record.show_id, data=updated_data)
    if not save_record(candidate):
        return False
    record.data = updated_data
    return True
