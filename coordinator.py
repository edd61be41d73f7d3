# Module driving one collection pass over the review store

import os
import json
import logging
from datetime import datetime, timezone
from enum import Enum

import constants # Import constants
import record_store
from archive_writer import save_archive
from config_loader import effective_run_limit
from failure_ledger import flush_ledger
from fetchers.method_chain import run_chain
from text_quality import classify_text_quality, show_title_from_id
from work_selector import select_work


class RunState(Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    PROCESSING = "processing"
    DRAINING = "draining"


SUCCEEDED = "succeeded"
FAILED = "failed"


def summarize(processed, succeeded, failed, failed_records=()):
    success_rate = (succeeded / processed * 100.0) if processed else 0.0
    return {
        'processed': processed,
        'succeeded': succeeded,
        'failed': failed,
        'success_rate': round(success_rate, 1),
        'failed_records': list(failed_records),
    }


class RunCoordinator:
    """
    Runs one sequential pass: select the worklist once, push each record
    through the method chain, and keep the failure ledger flushed every
    checkpoint_interval records. A record's failure never ends the run.
    """

    def __init__(self, config, ledger, methods, pacer):
        self.config = config
        self.ledger = ledger
        self.methods = methods
        self.pacer = pacer
        self.state = RunState.IDLE
        self.min_word_count = config.get('min_word_count', constants.DEFAULT_MIN_WORD_COUNT)
        self.checkpoint_interval = config.get('checkpoint_interval', constants.DEFAULT_CHECKPOINT_INTERVAL)

    def _set_state(self, state):
        logging.debug(f"Run state: {self.state.value} -> {state.value}")
        self.state = state

    # --- Selecting ---
    def select(self, records=None):
        """Builds the worklist snapshot. StoreError from an unreadable store propagates."""
        self._set_state(RunState.SELECTING)
        if records is None:
            records = record_store.load_records(self.config['review_texts_dir'], self.config.get('show_filter', ""))
        return select_work(records, self.ledger, self.min_word_count, effective_run_limit(self.config))

    # --- Processing ---
    def process_record(self, record):
        """Drives one record through fetch, validation, archive and store update."""
        self._set_state(RunState.PROCESSING)
        logging.info(f"Processing: {record.outlet} - {record.critic or 'unknown'}")
        logging.info(f"  URL: {record.url}")

        result, errors = run_chain(self.methods, record, self.pacer, self.min_word_count)
        if result is None:
            logging.info("  FAILED: All methods exhausted")
            entry = self.ledger.record_failure(record, errors)
            logging.debug(f"  Ledger attempts for {record.label}: {entry.attempts}")
            return FAILED

        method_name = result.method.value
        captured_at = datetime.now(timezone.utc)
        archive_path = save_archive(record, result.raw_content, method_name, self.config['archives_dir'], captured_at)
        if not archive_path:
            logging.error(f"  Could not archive content for {record.label}; record left unchanged.")
            return FAILED

        quality = classify_text_quality(result.text, show_title_from_id(record.show_id), result.word_count)
        updated = record_store.apply_text_update(
            record, result.text, result.word_count, method_name, archive_path, quality,
            captured_at.isoformat().replace('+00:00', 'Z'),
        )
        if not record_store.commit_text_update(record, updated):
            logging.error(f"  Could not update record file for {record.label}; record left unchanged.")
            return FAILED

        self.ledger.clear(record.file_path)
        logging.info(f"  SUCCESS: {result.word_count} words via {method_name} (quality: {quality})")
        return SUCCEEDED

    def checkpoint(self, done, total, succeeded, failed):
        flush_ledger(self.ledger, self.config['failed_fetches_file'])
        logging.info(f"--- Progress: {done}/{total} ({succeeded} succeeded, {failed} failed) ---")

    # --- Main Loop ---
    def run(self, records=None):
        """Returns (summary, ledger). The ledger is the same object passed in, updated."""
        worklist = self.select(records)
        if not worklist:
            logging.info("No reviews need text collection")
            self._set_state(RunState.IDLE)
            return summarize(0, 0, 0), self.ledger

        logging.info(f"Processing {len(worklist)} reviews...")
        succeeded = 0
        failed = 0
        failed_records = []

        for index, record in enumerate(worklist):
            try:
                outcome = self.process_record(record)
            except Exception as e:
                logging.error(f"Unexpected error processing {record.label}: {e}", exc_info=True)
                outcome = FAILED

            if outcome == SUCCEEDED:
                succeeded += 1
            else:
                failed += 1
                failed_records.append(record.file_path)

            done = index + 1
            if done % self.checkpoint_interval == 0:
                self.checkpoint(done, len(worklist), succeeded, failed)

            if done < len(worklist):
                self.pacer.wait()

        self._set_state(RunState.DRAINING)
        flush_ledger(self.ledger, self.config['failed_fetches_file'])
        summary = summarize(len(worklist), succeeded, failed, failed_records)
        log_summary(summary, self.config['failed_fetches_file'])
        self._set_state(RunState.IDLE)
        return summary, self.ledger


def log_summary(summary, ledger_file):
    logging.info("--- Collection Complete ---")
    logging.info(f"Processed: {summary['processed']}")
    logging.info(f"Succeeded: {summary['succeeded']}")
    logging.info(f"Failed: {summary['failed']}")
    logging.info(f"Success rate: {summary['success_rate']:.1f}%")
    logging.info(f"Failed fetches logged to: {ledger_file}")


def save_run_report(summary, config, run_date=None):
    """Writes the run summary as JSON to reports_dir. Returns the path or None on failure."""
    run_date = run_date or datetime.now(timezone.utc)
    report = {
        'runDate': run_date.isoformat().replace('+00:00', 'Z'),
        'config': {
            'batchSize': config.get('batch_size', 0),
            'maxReviews': config.get('max_reviews', 0),
            'showFilter': config.get('show_filter', ""),
            'proxyConfigured': bool(config.get('proxy_api_key')),
        },
        'summary': {key: value for key, value in summary.items() if key != 'failed_records'},
        'failed': summary.get('failed_records', []),
    }
    reports_dir = config.get('reports_dir', constants.DEFAULT_REPORTS_DIR)
    report_path = os.path.join(reports_dir, f"{constants.REPORT_FILENAME_PREFIX}{run_date.strftime('%Y-%m-%d')}.json")
    try:
        os.makedirs(reports_dir, exist_ok=True)
        with open(report_path, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2)
        logging.info(f"Report saved: {report_path}")
        return report_path
    except OSError as e:
        logging.error(f"Error writing run report {report_path}: {e}")
        return None
