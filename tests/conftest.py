import pytest
import sys
import os
import json
import logging

# Ensure the project root is in the Python path for imports in tests
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from models import ReviewRecord, RetrievalError, RetrievalMethod
from fetchers.method_chain import FetchMethod


SENTENCE = "Hamilton is a show that is fun to see and it has a lot of heart."


def article_paragraphs(count, sentence=SENTENCE):
    """count paragraphs of two sentences each (32 words, 129 chars per paragraph)."""
    return [f"{sentence} {sentence}" for _ in range(count)]


def article_html(paragraphs, container='article'):
    body = ''.join(f"<p>{p}</p>" for p in paragraphs)
    return f"<html><head><title>Review</title></head><body><nav>Menu</nav><{container}>{body}</{container}></body></html>"


def stub_html(word_count=100):
    words = ' '.join(['Hamilton'] + ['stage'] * (word_count - 1))
    return f"<html><body><article><p>{words}</p></article></body></html>"


@pytest.fixture
def make_html():
    return article_html


@pytest.fixture
def review_tree(tmp_path):
    """Factory writing record JSON files under tmp_path/review-texts/<show>/<file>."""
    base_dir = tmp_path / "review-texts"
    base_dir.mkdir()

    def _write(show_id, filename, **data):
        show_dir = base_dir / show_id
        show_dir.mkdir(exist_ok=True)
        payload = {'showId': show_id}
        payload.update(data)
        path = show_dir / filename
        path.write_text(json.dumps(payload, indent=2), encoding='utf-8')
        return str(path)

    _write.base_dir = str(base_dir)
    return _write


@pytest.fixture
def run_config(tmp_path):
    return {
        'review_texts_dir': str(tmp_path / "review-texts"),
        'archives_dir': str(tmp_path / "archives"),
        'failed_fetches_file': str(tmp_path / "review-texts" / "failed-fetches.json"),
        'reports_dir': str(tmp_path / "reports"),
        'batch_size': 0,
        'max_reviews': 0,
        'show_filter': "",
        'min_word_count': 300,
        'min_delay_ms': 2000,
        'max_delay_ms': 5000,
        'checkpoint_interval': 10,
        'request_timeout_ms': 30000,
        'settle_ms': 2000,
        'max_retries': 0,
        'retry_delay_seconds': 0,
        'snapshot_year': 2024,
        'proxy_api_key': "test-key",
    }


@pytest.fixture
def make_record():
    def _make(show_id="hamilton-2015", file_path=None, **data):
        data.setdefault('showId', show_id)
        data.setdefault('outletId', 'nytimes')
        data.setdefault('outlet', 'The New York Times')
        data.setdefault('criticName', 'Ben Brantley')
        data.setdefault('url', 'https://example.com/review')
        return ReviewRecord(file_path=file_path or f"/data/{show_id}/{data['outletId']}--review.json", show_id=show_id, data=data)
    return _make


@pytest.fixture(autouse=True)
def configure_logging(caplog):
    """Ensure logging is configured to capture DEBUG level messages for all tests."""
    caplog.set_level(logging.DEBUG, logger="root")


class ScriptedMethod(FetchMethod):
    """FetchMethod replaying scripted outcomes: HTML strings are returned, exceptions raised."""

    def __init__(self, kind, outcomes=(), available=True):
        super().__init__(config={}, pacer=None)
        self.kind = kind
        self.outcomes = list(outcomes)
        self.available = available
        self.calls = []

    def is_available(self):
        return self.available

    def unavailable_reason(self):
        return f"{self.name} disabled"

    def fetch(self, record):
        self.calls.append(record.file_path)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def scripted_methods():
    """Factory for a direct/proxy/snapshot chain of ScriptedMethods."""
    def _build(direct=(), proxy=(), snapshot=(), proxy_available=True):
        return [
            ScriptedMethod(RetrievalMethod.DIRECT, direct or [RetrievalError("HTTP 403")]),
            ScriptedMethod(RetrievalMethod.PROXY, proxy or [RetrievalError("ScrapingBee returned HTTP 500")], available=proxy_available),
            ScriptedMethod(RetrievalMethod.SNAPSHOT, snapshot or [RetrievalError("Archive.org returned HTTP 404")]),
        ]
    return _build
