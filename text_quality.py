"""Acceptance rules and quality tiers for acquired review text.

Both functions are pure: the validator decides whether a candidate ends the
method chain, the classifier labels text that was accepted.
"""

import re

import constants


def count_words(text):
    return len(text.split()) if text else 0


def show_title_from_id(show_id):
    """'hamilton-2015' -> 'hamilton', 'the-outsiders-2024' -> 'the outsiders'."""
    title = re.sub(r'-\d{4}$', '', show_id or '')
    return title.replace('-', ' ').replace('_', ' ').strip().lower()


def show_title_words(show_id):
    return [word for word in show_title_from_id(show_id).split() if len(word) > constants.MIN_TITLE_WORD_LENGTH]


def validate_text(text, show_id, min_word_count=constants.DEFAULT_MIN_WORD_COUNT):
    """
    Returns (is_valid, word_count, reason). reason is None for accepted text.

    Too-short text is rejected before relevance is checked.
    """
    word_count = count_words(text)
    if word_count < min_word_count:
        return False, word_count, f"too short: {word_count} words (need {min_word_count})"

    lowered = text.lower()
    if not any(word in lowered for word in show_title_words(show_id)):
        return False, word_count, "show title not found"

    return True, word_count, None


def classify_text_quality(text, show_title, word_count):
    """Assigns full / partial / excerpt / missing. The first matching rule wins."""
    if not text or not text.strip():
        return constants.QUALITY_MISSING

    char_count = len(text)
    title = (show_title or '').lower()
    has_title = bool(title) and title in text.lower()

    if char_count > constants.FULL_TEXT_MIN_CHARS and has_title and word_count > constants.DEFAULT_MIN_WORD_COUNT:
        return constants.QUALITY_FULL

    if constants.PARTIAL_TEXT_MIN_CHARS <= char_count <= constants.FULL_TEXT_MIN_CHARS:
        return constants.QUALITY_PARTIAL
    if has_title and word_count <= constants.DEFAULT_MIN_WORD_COUNT and char_count >= constants.PARTIAL_TEXT_MIN_CHARS:
        return constants.QUALITY_PARTIAL
    if char_count > constants.FULL_TEXT_MIN_CHARS:
        # Long text that missed 'full' on title or word count
        return constants.QUALITY_PARTIAL

    return constants.QUALITY_EXCERPT
