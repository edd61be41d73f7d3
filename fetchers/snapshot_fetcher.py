# Module for fetching archived copies of review pages from the Wayback Machine

import requests
import logging
import constants # Import constants
from .decorators import retry_request # Import the decorator


def snapshot_url(original_url, year=constants.DEFAULT_SNAPSHOT_YEAR):
    """Archive URL resolving to the snapshot of original_url closest to the given year."""
    return f"{constants.SNAPSHOT_BASE_URL}{year}/{original_url}"


@retry_request(label="Archive.org")
def fetch_snapshot(original_url, config, user_agent=None):
    """
    Fetches the archived HTML for original_url.
    Returns the HTML as a string; failures raise RetrievalError via the decorator.
    """
    archive_url = snapshot_url(original_url, config.get('snapshot_year', constants.DEFAULT_SNAPSHOT_YEAR))
    request_timeout = config.get('request_timeout_ms', constants.DEFAULT_REQUEST_TIMEOUT_MS) / 1000.0
    headers = {'User-Agent': user_agent or constants.USER_AGENTS[0]}

    logging.debug(f"Attempting to fetch snapshot: {archive_url}")

    response = requests.get(archive_url, headers=headers, timeout=request_timeout)
    try:
        response.raise_for_status()
        return response.text
    finally:
        response.close()
