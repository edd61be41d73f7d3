# Module for turning fetched markup into candidate article text

import logging
import re

# Set up a specific logger for this module
logger = logging.getLogger(__name__)

from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError
import constants # Import constants


# --- Internal Helper Functions ---
def _paragraph_texts(container, min_chars):
    """Stripped text of each <p> under container longer than min_chars, in document order."""
    texts = []
    for paragraph in container.find_all('p'):
        text = paragraph.get_text().strip()
        if len(text) > min_chars:
            texts.append(text)
    return texts


def _best_container_text(soup, selectors):
    """Longest paragraph text found under any of the selectors."""
    best_text = ''
    for selector in selectors:
        try:
            container = soup.select_one(selector)
        except SelectorSyntaxError as e:
            logger.warning(f"Skipping invalid selector '{selector}': {e}")
            continue
        if not container:
            continue
        candidate = '\n\n'.join(_paragraph_texts(container, constants.MIN_CONTAINER_PARAGRAPH_CHARS))
        if len(candidate) > len(best_text):
            logger.debug(f"Selector '{selector}' yielded {len(candidate)} chars")
            best_text = candidate
    return best_text


def _is_boilerplate(text):
    lowered = text.lower()
    return any(marker in lowered for marker in constants.BOILERPLATE_MARKERS)


def _fallback_paragraph_text(soup):
    texts = [
        text for text in _paragraph_texts(soup, constants.MIN_FALLBACK_PARAGRAPH_CHARS)
        if not _is_boilerplate(text)
    ]
    return '\n\n'.join(texts)


def normalize_whitespace(text):
    """Collapses space runs within lines and multiple blank lines into one."""
    text = re.sub(r'[^\S\n]+', ' ', text)
    text = re.sub(r' *\n *', '\n', text)
    text = re.sub(r'\n{2,}', '\n\n', text)
    return text.strip()


# --- Main Extraction ---
def extract_article_text(html_content, selectors=None):
    """
    Returns the best-effort plain-text article body of html_content.

    Container selectors are tried in order and the longest paragraph text
    wins. Below the fallback threshold every substantial non-boilerplate
    paragraph in the document is considered instead.
    """
    if not html_content:
        return ''

    soup = BeautifulSoup(html_content, 'html.parser')
    best_text = _best_container_text(soup, selectors or constants.ARTICLE_SELECTORS)

    if len(best_text) < constants.FALLBACK_TRIGGER_CHARS:
        fallback_text = _fallback_paragraph_text(soup)
        if len(fallback_text) > len(best_text):
            logger.debug(f"Paragraph fallback yielded {len(fallback_text)} chars (containers: {len(best_text)})")
            best_text = fallback_text

    return normalize_whitespace(best_text)


def _visible_text(soup):
    for element in soup(constants.NON_VISIBLE_TAGS):
        element.decompose()
    return soup.get_text(' ')


def detect_block_page(html_content):
    """
    Returns the first bot-wall marker found in the visible text of
    html_content, or None. Script and style bodies are ignored, so a page
    that merely loads a reCAPTCHA widget is not mistaken for a block page.
    """
    if not html_content:
        return None
    visible_text = _visible_text(BeautifulSoup(html_content, 'html.parser'))
    for marker in constants.BLOCK_PAGE_MARKERS:
        if marker in visible_text:
            return marker
    return None

