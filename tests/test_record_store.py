import pytest
import os
import json
from unittest.mock import patch

import constants
import record_store
from models import ReviewRecord


# --- Tests for slugify ---

@pytest.mark.parametrize("name, expected", [
    ("Ben Brantley", "ben-brantley"),
    ("Jesse Green & Co.", "jesse-green-co"),
    ("  O'Brien  ", "o-brien"),
    ("", constants.UNKNOWN_CRITIC_SLUG),
    (None, constants.UNKNOWN_CRITIC_SLUG),
    ("!!!", constants.UNKNOWN_CRITIC_SLUG),
    ("a" * (constants.FILENAME_MAX_LENGTH + 20), "a" * constants.FILENAME_MAX_LENGTH),
])
def test_slugify(name, expected):
    assert record_store.slugify(name) == expected


# --- Tests for loading ---

def test_iter_records_stable_order(review_tree):
    review_tree("wicked-2003", "variety--b.json", url="https://v/b")
    review_tree("hamilton-2015", "nytimes--z.json", url="https://n/z")
    review_tree("hamilton-2015", "ew--a.json", url="https://e/a")

    records = list(record_store.iter_records(review_tree.base_dir))
    labels = [record.label for record in records]
    assert labels == ["hamilton-2015/ew--a.json", "hamilton-2015/nytimes--z.json", "wicked-2003/variety--b.json"]


def test_iter_records_applies_show_filter(review_tree):
    review_tree("wicked-2003", "a.json", url="https://v/a")
    review_tree("hamilton-2015", "b.json", url="https://n/b")
    records = record_store.load_records(review_tree.base_dir, show_filter="wicked-2003")
    assert [record.show_id for record in records] == ["wicked-2003"]


def test_iter_records_skips_invalid_files(review_tree, caplog):
    good = review_tree("hamilton-2015", "good.json", url="https://n/good")
    bad_path = os.path.join(os.path.dirname(good), "bad.json")
    with open(bad_path, 'w', encoding='utf-8') as f:
        f.write("{not json")
    list_path = os.path.join(os.path.dirname(good), "list.json")
    with open(list_path, 'w', encoding='utf-8') as f:
        f.write("[1, 2]")

    records = record_store.load_records(review_tree.base_dir)
    assert [record.file_path for record in records] == [good]
    assert "Skipping record with invalid JSON" in caplog.text


def test_iter_records_skips_undecodable_bytes(review_tree, caplog):
    good = review_tree("hamilton-2015", "good.json", url="https://n/good")
    bad_path = os.path.join(os.path.dirname(good), "bad.json")
    with open(bad_path, 'wb') as f:
        f.write(b'{"url": "https://n/bad", "criticName": "\xff"}')

    records = record_store.load_records(review_tree.base_dir)
    assert [record.file_path for record in records] == [good]
    assert "Skipping record that is not valid UTF-8" in caplog.text


def test_iter_records_ignores_top_level_files(review_tree):
    review_tree("hamilton-2015", "a.json", url="https://n/a")
    with open(os.path.join(review_tree.base_dir, "failed-fetches.json"), 'w', encoding='utf-8') as f:
        f.write("[]")
    assert len(record_store.load_records(review_tree.base_dir)) == 1


def test_show_id_falls_back_to_directory(tmp_path):
    show_dir = tmp_path / "rent-1996"
    show_dir.mkdir()
    path = show_dir / "review.json"
    path.write_text(json.dumps({'url': 'https://x'}), encoding='utf-8')
    record = record_store.load_record(str(path))
    assert record.show_id == "rent-1996"


def test_missing_store_raises_store_error(tmp_path):
    with pytest.raises(record_store.StoreError):
        record_store.load_records(str(tmp_path / "does-not-exist"))


# --- Tests for updates ---

def test_apply_text_update_preserves_unknown_keys(make_record):
    record = make_record(dtliExcerpt="A triumph.", customFlag=True)
    updated = record_store.apply_text_update(
        record, "text body", 2, "archive.org", "/archives/x.html", constants.QUALITY_EXCERPT, "2026-01-01T00:00:00Z",
    )
    assert updated['customFlag'] is True
    assert updated['dtliExcerpt'] == "A triumph."
    assert updated['textStatus'] == constants.STATUS_COMPLETE
    assert updated['textFetchMethod'] == "archive.org"
    assert updated['sourceMethod'] == "archive"
    assert updated['textQuality'] == constants.QUALITY_EXCERPT
    # The record itself is not changed until committed
    assert 'fullText' not in record.data


def test_commit_text_update_writes_file(review_tree):
    path = review_tree("hamilton-2015", "nytimes.json", url="https://n/a", outletId="nytimes")
    record = record_store.load_record(path)
    updated = record_store.apply_text_update(record, "Body", 1, "playwright", "/a.html", "excerpt", "2026-01-01T00:00:00Z")

    assert record_store.commit_text_update(record, updated) is True
    assert record.full_text == "Body"
    with open(path, encoding='utf-8') as f:
        on_disk = json.load(f)
    assert on_disk['fullText'] == "Body"
    assert on_disk['outletId'] == "nytimes"
    assert not os.path.exists(path + ".tmp")


def test_commit_text_update_failure_leaves_record_unchanged(review_tree, caplog):
    path = review_tree("hamilton-2015", "nytimes.json", url="https://n/a")
    record = record_store.load_record(path)
    original = dict(record.data)
    updated = record_store.apply_text_update(record, "Body", 1, "playwright", "/a.html", "excerpt", "2026-01-01T00:00:00Z")

    with patch('record_store._write_json_atomic', side_effect=OSError("disk full")):
        assert record_store.commit_text_update(record, updated) is False

    assert record.data == original
    with open(path, encoding='utf-8') as f:
        assert json.load(f) == original
    assert "Error writing record file" in caplog.text


# --- Tests for ReviewRecord ---

def test_record_word_count_falls_back_to_text():
    record = ReviewRecord(file_path="/x.json", show_id="s", data={'fullText': "one two three"})
    assert record.word_count == 3

