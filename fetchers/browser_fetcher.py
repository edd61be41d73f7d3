# Module for fetching review pages with a humanized headless browser

import logging

from playwright.sync_api import sync_playwright, Error as PlaywrightError

import constants # Import constants
from content_extractor import detect_block_page
from models import RetrievalError

logger = logging.getLogger(__name__)

STEALTH_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
window.chrome = { runtime: {} };
"""

PAGE_DIMENSIONS_SCRIPT = "() => [document.body ? document.body.scrollHeight : 0, window.innerHeight]"
SCROLL_SCRIPT = "y => window.scrollTo({ top: y, behavior: 'smooth' })"


class BrowserSession:
    """
    Owns the Playwright driver and one Chromium process for a run.
    The browser is launched on first use; every fetch gets its own context.
    """

    def __init__(self, headless=True, launch_args=None):
        self.headless = headless
        self.launch_args = list(launch_args or constants.BROWSER_LAUNCH_ARGS)
        self._playwright = None
        self._browser = None

    @property
    def browser(self):
        if self._browser is None:
            logger.info("Launching headless browser")
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(headless=self.headless, args=self.launch_args)
        return self._browser

    def close(self):
        try:
            if self._browser is not None:
                self._browser.close()
        except PlaywrightError as e:
            logger.warning(f"Error closing browser: {e}")
        finally:
            self._browser = None
            if self._playwright is not None:
                self._playwright.stop()
                self._playwright = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def _human_scroll(page, pacer):
    page_height, viewport_height = page.evaluate(PAGE_DIMENSIONS_SCRIPT)
    for scroll_y, pause_ms in pacer.scroll_plan(page_height, viewport_height):
        page.evaluate(SCROLL_SCRIPT, scroll_y)
        page.wait_for_timeout(pause_ms)


def fetch_with_browser(session, url, config, pacer):
    """
    Loads url in a fresh browser context with a random user agent and
    automation signals masked, waits for the page to settle, scrolls like a
    reader, and returns the rendered HTML. Raises RetrievalError on failure.
    The context is always closed before returning.
    """
    timeout_ms = config.get('request_timeout_ms', constants.DEFAULT_REQUEST_TIMEOUT_MS)
    settle_ms = config.get('settle_ms', constants.DEFAULT_SETTLE_MS)
    user_agent = pacer.choose_user_agent()
    logger.debug(f"Browser fetch {url} as '{user_agent}'")

    try:
        context = session.browser.new_context(
            user_agent=user_agent,
            viewport=constants.VIEWPORT,
            locale='en-US',
            timezone_id='America/New_York',
            geolocation={'latitude': 40.7128, 'longitude': -74.0060},
            permissions=['geolocation'],
            extra_http_headers=constants.BROWSER_HEADERS,
        )
    except PlaywrightError as e:
        raise RetrievalError(f"Browser unavailable: {e}") from e

    try:
        page = context.new_page()
        page.add_init_script(STEALTH_SCRIPT)
        response = page.goto(url, wait_until='domcontentloaded', timeout=timeout_ms)
        if response is None or response.status >= 400:
            raise RetrievalError(f"HTTP {response.status if response else 'no response'}")

        page.wait_for_timeout(settle_ms)
        _human_scroll(page, pacer)
        html = page.content()
    except PlaywrightError as e:
        # Playwright messages carry a multi-line call log after the first line
        message = str(e).strip().splitlines()[0] if str(e).strip() else type(e).__name__
        raise RetrievalError(message) from e
    finally:
        try:
            context.close()
        except PlaywrightError as e:
            logger.warning(f"Error closing browser context for {url}: {e}")

    marker = detect_block_page(html)
    if marker:
        logger.info(f"  Block page marker '{marker}' found for {url}")
        raise RetrievalError("CAPTCHA or access blocked")
    return html
