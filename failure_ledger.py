# Module for the persistent ledger of failed text acquisitions

import os
import json
import logging
from datetime import datetime, timezone

import constants # Import constants
from models import FailureLedgerEntry


class LedgerError(Exception):
    """The failure ledger file exists but cannot be read or parsed."""


def utc_now_iso():
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


class FailureLedger:
    """
    In-memory view of the failed-fetches file, keyed by record file path.
    Only written back when something changed.
    """

    def __init__(self, entries=None, max_attempts=constants.MAX_ATTEMPTS):
        self.max_attempts = max_attempts
        self._entries = {}
        for entry in entries or []:
            self._entries[entry.file_path] = entry
        self.dirty = False

    def __len__(self):
        return len(self._entries)

    def __contains__(self, file_path):
        return file_path in self._entries

    def get(self, file_path):
        return self._entries.get(file_path)

    def entries(self):
        return list(self._entries.values())

    def attempts_for(self, file_path):
        entry = self._entries.get(file_path)
        return entry.attempts if entry else 0

    def is_exhausted(self, file_path):
        return self.attempts_for(file_path) >= self.max_attempts

    def record_failure(self, record, errors, now=None):
        """Find-or-create the entry for record, bump attempts and replace its error list."""
        now = now or utc_now_iso()
        entry = self._entries.get(record.file_path)
        if entry is None:
            entry = FailureLedgerEntry(
                file_path=record.file_path,
                url=record.url or '',
                show_id=record.show_id,
                outlet=record.outlet,
                critic=record.critic,
                attempts=0,
                first_attempt=now,
            )
            self._entries[record.file_path] = entry
        entry.attempts += 1
        entry.last_attempt = now
        entry.url = record.url or entry.url
        entry.errors = [{'method': method, 'error': error} for method, error in errors]
        self.dirty = True
        return entry

    def clear(self, file_path):
        """Drops the entry for a record that has since succeeded."""
        if self._entries.pop(file_path, None) is not None:
            self.dirty = True
            return True
        return False


# --- Persistence ---
def load_ledger(ledger_file, max_attempts=constants.MAX_ATTEMPTS):
    """
    Loads the ledger file. A missing file yields an empty ledger.
    An existing file that cannot be read or parsed raises LedgerError and is
    left as it is: starting over would reset every attempt count.
    """
    if not os.path.exists(ledger_file):
        logging.info(f"No failure ledger at {ledger_file}. Starting with an empty ledger.")
        return FailureLedger(max_attempts=max_attempts)

    try:
        with open(ledger_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LedgerError(f"Could not decode JSON from failure ledger {ledger_file}: {e}") from e
    except OSError as e:
        raise LedgerError(f"Error loading failure ledger {ledger_file}: {e}") from e

    if not isinstance(data, list):
        raise LedgerError(f"Failure ledger {ledger_file} does not contain a valid list.")

    entries = []
    for item in data:
        if isinstance(item, dict) and item.get('filePath'):
            try:
                entries.append(FailureLedgerEntry.from_dict(item))
            except (TypeError, ValueError) as e:
                raise LedgerError(f"Invalid entry for {item['filePath']} in failure ledger {ledger_file}: {e}") from e
        else:
            logging.warning(f"Ignoring malformed ledger entry in {ledger_file}: {item!r}")
    logging.info(f"Loaded {len(entries)} failure ledger entries from {ledger_file}")
    return FailureLedger(entries, max_attempts=max_attempts)


def flush_ledger(ledger, ledger_file):
    """Writes the ledger if it changed since the last flush. Returns True if the file is current."""
    if not ledger.dirty:
        return True
    try:
        ledger_dir = os.path.dirname(ledger_file)
        if ledger_dir:
            os.makedirs(ledger_dir, exist_ok=True)
        tmp_path = f"{ledger_file}.tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump([entry.to_dict() for entry in ledger.entries()], f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, ledger_file)
        ledger.dirty = False
        logging.debug(f"Flushed {len(ledger)} failure ledger entries to {ledger_file}")
        return True
    except OSError as e:
        logging.error(f"Error saving failure ledger {ledger_file}: {e}")
        return False
