import pytest

import content_extractor
from conftest import article_paragraphs, article_html

LONG_PARAGRAPH = "The second act gathers real momentum as the ensemble takes the stage together."
OTHER_PARAGRAPH = "Design choices throughout the evening are handsome, restrained and quietly clever."


# --- Tests for extract_article_text ---

def test_extracts_paragraphs_from_article_container():
    html = article_html(article_paragraphs(10))
    text = content_extractor.extract_article_text(html)
    assert text.count("\n\n") == 9
    assert text.startswith("Hamilton is a show")
    assert "Menu" not in text


def test_container_skips_paragraphs_of_thirty_chars_or_fewer():
    html = f"<article><p>Short caption here.</p><p>{LONG_PARAGRAPH}</p></article>"
    assert content_extractor.extract_article_text(html) == LONG_PARAGRAPH


def test_longest_container_candidate_wins():
    html = (
        "<main>"
        f"<div class='entry-content'><p>{LONG_PARAGRAPH}</p></div>"
        f"<p>{OTHER_PARAGRAPH}</p>"
        "</main>"
    )
    # '.entry-content' is tried first but 'main' holds both paragraphs
    text = content_extractor.extract_article_text(html)
    assert text == f"{LONG_PARAGRAPH}\n\n{OTHER_PARAGRAPH}"


def test_fallback_scans_document_when_containers_are_thin():
    html = (
        "<html><body>"
        f"<article><p>{LONG_PARAGRAPH}</p></article>"
        f"<div><p>{OTHER_PARAGRAPH}</p>"
        "<p>We use cookies to improve your experience on this website, please accept.</p>"
        "<p>Sign up for our newsletter to get theatre news delivered every morning.</p>"
        "</div></body></html>"
    )
    text = content_extractor.extract_article_text(html)
    assert text == f"{LONG_PARAGRAPH}\n\n{OTHER_PARAGRAPH}"


def test_fallback_not_used_when_container_is_long_enough():
    paragraphs = article_paragraphs(10) # well over 1000 chars
    html = article_html(paragraphs) + f"<p>{OTHER_PARAGRAPH}</p>"
    text = content_extractor.extract_article_text(html)
    assert OTHER_PARAGRAPH not in text


def test_fallback_requires_more_than_fifty_chars():
    html = "<div><p>This sentence is exactly short enough to skip.</p></div>"
    assert content_extractor.extract_article_text(html) == ""


def test_whitespace_is_normalized():
    html = "<article><p>  Lots   of \t spaces\n   inside this paragraph of review text  </p></article>"
    assert content_extractor.extract_article_text(html) == "Lots of spaces\ninside this paragraph of review text"


@pytest.mark.parametrize("html_content", ["", None, "<html><body></body></html>"])
def test_empty_input_yields_empty_text(html_content):
    assert content_extractor.extract_article_text(html_content) == ""


def test_custom_selectors_are_honoured():
    html = f"<section class='review'><p>{LONG_PARAGRAPH}</p></section>"
    assert content_extractor.extract_article_text(html, selectors=['section.review']) == LONG_PARAGRAPH


def test_invalid_selector_is_skipped(caplog):
    html = f"<article><p>{LONG_PARAGRAPH}</p></article>"
    text = content_extractor.extract_article_text(html, selectors=['[[broken', 'article'])
    assert text == LONG_PARAGRAPH
    assert "Skipping invalid selector '[[broken'" in caplog.text


# --- Tests for normalize_whitespace ---

def test_normalize_whitespace_collapses_blank_lines():
    assert content_extractor.normalize_whitespace("One\n\n\n\n  Two  \n \n Three") == "One\n\nTwo\n\nThree"


# --- Tests for detect_block_page ---

@pytest.mark.parametrize("html_content, expected", [
    ("<html><body>Please complete the captcha</body></html>", "captcha"),
    ("<script src='https://js.datadome.co/tags.js'></script><p>DataDome</p>", "DataDome"),
    ("<h1>Access Denied</h1>", "Access Denied"),
    (article_html(article_paragraphs(3)), None),
    ("", None),
    # Comment forms load reCAPTCHA without blocking the article
    (
        "<script src='https://www.google.com/recaptcha/api.js'></script>"
        + article_html(article_paragraphs(3))
        + "<div class='g-recaptcha' data-sitekey='x'></div><noscript>Enable JS for the captcha</noscript>",
        None,
    ),
    ("<style>.captcha-box { display: none }</style><p>Review text</p>", None),
])
def test_detect_block_page(html_content, expected):
    assert content_extractor.detect_block_page(html_content) == expected
