# Module for choosing which review records still need text

import logging

import constants # Import constants


def needs_text(record, min_word_count=constants.DEFAULT_MIN_WORD_COUNT):
    """True if the record has no full text or too few words of it."""
    return not record.full_text or record.word_count < min_word_count


def select_work(records, ledger, min_word_count=constants.DEFAULT_MIN_WORD_COUNT, limit=0):
    """
    Returns the records to attempt this run, in store order.
    A record qualifies when it has a URL, still needs text, and has not
    reached the ledger's retry cap. limit=0 means no limit.
    """
    worklist = []
    skipped_capped = 0
    for record in records:
        if not record.url:
            continue
        if not needs_text(record, min_word_count):
            continue
        if ledger.is_exhausted(record.file_path):
            skipped_capped += 1
            continue
        worklist.append(record)

    if skipped_capped:
        logging.debug(f"Skipped {skipped_capped} records at the retry cap ({ledger.max_attempts} attempts)")

    logging.info(f"Found {len(worklist)} reviews needing text")
    if limit > 0:
        worklist = worklist[:limit]
    return worklist
