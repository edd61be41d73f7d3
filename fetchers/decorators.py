# Decorators for HTTP-based fetch functions
import time
import logging
import requests
import functools

from models import RetrievalError


def _url_for_log(args, kwargs):
    url = kwargs.get('url')
    if not url:
        for arg in args:
            if isinstance(arg, str) and arg.startswith('http'):
                url = arg
                break
    return f"for {url[:80]}..." if url else ""


def retry_request(max_retries_key="max_retries", delay_key="retry_delay_seconds", label="request"):
    """
    Decorator adding retry with exponential backoff to a function making one HTTP request.

    The wrapped function must accept a 'config' keyword argument and call
    response.raise_for_status() on non-success responses. 429, 5xx, timeouts and
    connection errors are retried up to config[max_retries_key] times; any other
    failure, or the last retryable one, is raised as RetrievalError with a short
    reason prefixed by label.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            config = kwargs.get('config') or {}
            max_retries = config.get(max_retries_key, 0)
            delay = config.get(delay_key, 1)
            log_url_snippet = _url_for_log(args, kwargs)

            retries = 0
            while True:
                if retries > 0:
                    wait_time = (2 ** (retries - 1)) * delay
                    logging.warning(f"Retrying {label} {log_url_snippet} ({retries}/{max_retries}) after {wait_time:.2f} seconds...")
                    time.sleep(wait_time)

                try:
                    return func(*args, **kwargs)

                except requests.exceptions.HTTPError as e:
                    status_code = e.response.status_code if e.response is not None else None
                    reason = f"{label} returned HTTP {status_code or 'error'}"
                    if status_code and (status_code == 429 or status_code >= 500) and retries < max_retries:
                        logging.warning(f"Retryable HTTP error {status_code} {log_url_snippet}.")
                        retries += 1
                        continue
                    raise RetrievalError(reason) from e

                except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                    exc_type = type(e).__name__
                    if retries < max_retries:
                        logging.warning(f"{exc_type} occurred {log_url_snippet}.")
                        retries += 1
                        continue
                    raise RetrievalError(f"{label} {exc_type}: {e}") from e

                except requests.exceptions.RequestException as e:
                    raise RetrievalError(f"{label} request failed: {e}") from e

        return wrapper
    return decorator
