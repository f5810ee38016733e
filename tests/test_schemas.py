"""Tests for bundled schema loading."""

import json

from whisper_captions.schemas import load_schema


class TestLoadSchema:

    def test_reads_schema_file(self, tmp_path):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps({"type": "array"}), encoding="utf-8")
        assert load_schema(path) == {"type": "array"}

    def test_cached_per_path(self, tmp_path):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps({"type": "array"}), encoding="utf-8")
        first = load_schema(path)
        path.write_text(json.dumps({"type": "object"}), encoding="utf-8")
        assert load_schema(path) is first

    def test_distinct_paths_distinct_schemas(self, tmp_path):
        a = tmp_path / "a.json"
        b = tmp_path / "b.json"
        a.write_text(json.dumps({"type": "array"}), encoding="utf-8")
        b.write_text(json.dumps({"type": "object"}), encoding="utf-8")
        assert load_schema(a) != load_schema(b)
