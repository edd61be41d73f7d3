# Module for fetching review pages through the ScrapingBee managed proxy

import requests
import logging
import constants # Import constants
from models import RetrievalError
from .decorators import retry_request # Import the decorator


def is_configured(config):
    return bool(config.get('proxy_api_key'))


@retry_request(label="ScrapingBee")
def fetch_via_proxy(url, config):
    """
    Fetches url through the proxy API with JavaScript rendering and premium proxies.
    Returns the rendered HTML; failures raise RetrievalError.
    """
    api_key = config.get('proxy_api_key')
    if not api_key:
        raise RetrievalError("No ScrapingBee API key configured")

    params = {
        'api_key': api_key,
        'url': url,
        'render_js': 'true',
        'premium_proxy': 'true',
    }
    request_timeout = config.get('request_timeout_ms', constants.DEFAULT_REQUEST_TIMEOUT_MS) / 1000.0
    api_url = config.get('proxy_api_url', constants.PROXY_API_URL)

    logging.debug(f"Attempting proxy fetch: {url}")

    # Session is closed with the attempt
    with requests.Session() as session:
        response = session.get(api_url, params=params, timeout=request_timeout)
        try:
            response.raise_for_status()
            return response.text
        finally:
            response.close()
