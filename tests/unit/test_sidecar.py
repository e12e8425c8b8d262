# ABOUTME: Unit tests for sidecar selection, parsing, and field extraction.
# ABOUTME: Covers preference order, malformed files, and title/category/tag fallbacks.

import json
import logging
from pathlib import Path

import pytest

from folio.metadata.sidecar import (
    SidecarReadError,
    extract_metadata,
    extract_tags,
    load_work_metadata,
    pick_sidecar,
    read_sidecar,
)


class TestPickSidecar:
    """pick_sidecar prefers well-known names, then the first JSON in natural order."""

    def test_no_json_files(self):
        assert pick_sidecar(["a.png", "notes.txt"]) is None

    def test_empty_listing(self):
        assert pick_sidecar([]) is None

    def test_album_file_beats_generic_names(self):
        names = ["info.json", "meta.json", ".album.json", "a.json"]
        assert pick_sidecar(names) == ".album.json"

    def test_preference_order(self):
        assert pick_sidecar(["info.json", "metadata.json"]) == "metadata.json"
        assert pick_sidecar(["info.json", "meta.json", "metadata.json"]) == "meta.json"

    def test_preferred_match_is_case_insensitive(self):
        assert pick_sidecar(["zz.json", "Meta.JSON"]) == "Meta.JSON"

    def test_falls_back_to_natural_order(self):
        assert pick_sidecar(["gallery10.json", "gallery2.json"]) == "gallery2.json"

    def test_extension_match_is_case_insensitive(self):
        assert pick_sidecar(["DATA.JSON", "a.png"]) == "DATA.JSON"


class TestReadSidecar:
    def test_reads_object(self, tmp_path: Path):
        path = tmp_path / "meta.json"
        path.write_text('{"title": "T", "b": 1, "a": 2}', encoding="utf-8")
        document = read_sidecar(path)
        assert document == {"title": "T", "b": 1, "a": 2}
        assert list(document) == ["title", "b", "a"]

    def test_non_object_document_is_none(self, tmp_path: Path):
        path = tmp_path / "meta.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert read_sidecar(path) is None

    def test_invalid_json_raises(self, tmp_path: Path):
        path = tmp_path / "meta.json"
        path.write_text("{nope", encoding="utf-8")
        with pytest.raises(SidecarReadError, match="meta.json"):
            read_sidecar(path)

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(SidecarReadError):
            read_sidecar(tmp_path / "absent.json")

    def test_non_utf8_raises(self, tmp_path: Path):
        path = tmp_path / "meta.json"
        path.write_bytes(b'{"title": "\xff\xfe"}')
        with pytest.raises(SidecarReadError):
            read_sidecar(path)


class TestExtractTags:
    def test_list_is_trimmed_and_filtered(self):
        assert extract_tags(["  A ", "", "b"]) == ["A", "b"]

    def test_list_drops_non_strings(self):
        assert extract_tags(["x", 3, None, {"y": 1}, "z"]) == ["x", "z"]

    def test_comma_string_is_split(self):
        assert extract_tags("action, drama ,, comedy") == ["action", "drama", "comedy"]

    def test_empty_string_is_absent(self):
        assert extract_tags("") is None

    def test_list_of_blanks_is_absent(self):
        assert extract_tags(["  ", ""]) is None

    def test_other_types_are_absent(self):
        assert extract_tags(42) is None
        assert extract_tags(None) is None
        assert extract_tags({"a": "b"}) is None


class TestExtractMetadata:
    """extract_metadata applies per-field fallbacks and never fails."""

    def test_no_document_falls_back_to_key(self):
        meta = extract_metadata(None, "some/key")
        assert meta.title == "some/key"
        assert meta.category is None
        assert meta.tags is None
        assert meta.raw_metadata is None
        assert meta.published_at is None

    def test_title_preferred_over_name(self):
        meta = extract_metadata({"title": " T ", "name": "N"}, "k")
        assert meta.title == "T"

    def test_name_used_when_title_blank(self):
        meta = extract_metadata({"title": "   ", "name": "N"}, "k")
        assert meta.title == "N"

    def test_non_string_title_ignored(self):
        meta = extract_metadata({"title": 123, "name": ["x"]}, "k")
        assert meta.title == "k"

    def test_category_then_type(self):
        assert extract_metadata({"category": "manga", "type": "x"}, "k").category == "manga"
        assert extract_metadata({"type": "doujinshi"}, "k").category == "doujinshi"
        assert extract_metadata({"category": ""}, "k").category is None

    def test_tags_and_date(self):
        meta = extract_metadata({"tags": "a,b", "date": "2023-04-05"}, "k")
        assert meta.tags == ["a", "b"]
        assert meta.published_at == 1680652800000

    def test_raw_metadata_preserves_document(self):
        document = {"title": "Überschrift", "extra": {"nested": [1, 2]}}
        meta = extract_metadata(document, "k")
        assert json.loads(meta.raw_metadata) == document
        assert "Überschrift" in meta.raw_metadata


class TestLoadWorkMetadata:
    def test_malformed_sidecar_is_logged_and_ignored(self, tmp_path: Path, caplog):
        (tmp_path / "meta.json").write_text("{broken", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            meta, error = load_work_metadata(tmp_path, ["meta.json"], "work")
        assert meta.title == "work"
        assert meta.raw_metadata is None
        assert error is not None
        assert any("meta.json" in r.getMessage() for r in caplog.records)

    def test_well_formed_sidecar(self, tmp_path: Path):
        (tmp_path / "info.json").write_text('{"name": "Named"}', encoding="utf-8")
        meta, error = load_work_metadata(tmp_path, ["info.json"], "work")
        assert meta.title == "Named"
        assert error is None

    def test_no_sidecar(self, tmp_path: Path):
        meta, error = load_work_metadata(tmp_path, ["1.png"], "work")
        assert meta.title == "work"
        assert error is None
