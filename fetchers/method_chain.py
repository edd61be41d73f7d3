# Module for trying retrieval methods in priority order until one validates

import logging

import constants # Import constants
from content_extractor import extract_article_text
from models import RetrievalError, RetrievalMethod, RetrievalResult
from text_quality import validate_text
from . import browser_fetcher, proxy_fetcher, snapshot_fetcher


class FetchMethod:
    """One retrieval strategy. Subclasses implement fetch(record) -> raw HTML."""

    kind = None

    def __init__(self, config, pacer):
        self.config = config
        self.pacer = pacer

    @property
    def name(self):
        return self.kind.value

    def is_available(self):
        return True

    def unavailable_reason(self):
        return f"{self.name} not available"

    def fetch(self, record):
        raise NotImplementedError

    def attempt(self, record):
        """Runs fetch and extraction once, returning a RetrievalResult instead of raising."""
        if not self.is_available():
            return RetrievalResult(self.kind, error=self.unavailable_reason())
        try:
            raw_content = self.fetch(record)
        except RetrievalError as e:
            return RetrievalResult(self.kind, error=str(e))
        except Exception as e:
            logging.error(f"Unexpected error in {self.name} for {record.url}: {e}", exc_info=True)
            return RetrievalResult(self.kind, error=f"Unexpected error: {e}")

        text = extract_article_text(raw_content)
        return RetrievalResult(self.kind, raw_content=raw_content, text=text)


class DirectFetch(FetchMethod):
    kind = RetrievalMethod.DIRECT

    def __init__(self, config, pacer, session):
        super().__init__(config, pacer)
        self.session = session

    def fetch(self, record):
        return browser_fetcher.fetch_with_browser(self.session, record.url, self.config, self.pacer)


class ProxyFetch(FetchMethod):
    kind = RetrievalMethod.PROXY

    def is_available(self):
        return proxy_fetcher.is_configured(self.config)

    def unavailable_reason(self):
        return "No ScrapingBee API key configured"

    def fetch(self, record):
        return proxy_fetcher.fetch_via_proxy(record.url, config=self.config)


class SnapshotFetch(FetchMethod):
    kind = RetrievalMethod.SNAPSHOT

    def fetch(self, record):
        return snapshot_fetcher.fetch_snapshot(record.url, config=self.config, user_agent=self.pacer.choose_user_agent())


def build_methods(config, pacer, session):
    """The method chain in priority order: browser, proxy, snapshot."""
    return [
        DirectFetch(config, pacer, session),
        ProxyFetch(config, pacer),
        SnapshotFetch(config, pacer),
    ]


def run_chain(methods, record, pacer, min_word_count=constants.DEFAULT_MIN_WORD_COUNT):
    """
    Attempts each method once, in order, until one yields text that validates.
    Returns (accepted_result_or_None, errors) where errors is a list of
    (method_name, reason) for every method that failed or was rejected.
    """
    errors = []
    for index, method in enumerate(methods):
        # Pace every network request after the first
        if index > 0 and method.is_available():
            pacer.wait()

        logging.info(f"  Trying: {method.name}...")
        result = method.attempt(record)
        if not result.ok:
            logging.info(f"  {method.name} error: {result.error}")
            errors.append((method.name, result.error))
            continue

        is_valid, word_count, reason = validate_text(result.text, record.show_id, min_word_count)
        if is_valid:
            result.word_count = word_count
            return result, errors

        logging.info(f"  {method.name} failed validation: {reason}")
        errors.append((method.name, reason))

    return None, errors
