"""Tests for collection import and export."""
import json
from datetime import date, datetime

import pandas as pd
import pytest

from brick_collector.exceptions import InvalidImportError
from brick_collector.io.transfer import (
    collection_name_from_filename,
    dumps_collection,
    export_collection,
    export_collection_csv,
    export_filename,
    import_as_new_collection,
    import_replace_active,
    parse_collection,
)
from tests.conftest import CAFE_CORNER, MUSTANG, UCS_FALCON, always_no, always_yes


class TestExport:

    def test_filename_uses_collection_name_and_date(self):
        assert export_filename("Star Wars UCS!", date(2026, 10, 18)) == "star-wars-ucs-2026-10-18.json"

    def test_export_writes_indented_array(self, collection_store, tmp_path):
        collection_store.add_set(0, UCS_FALCON)
        collection_store.add_set(0, MUSTANG)

        out = export_collection(collection_store, tmp_path, today=date(2026, 1, 2))

        assert out.name == "my-collection-2026-01-02.json"
        text = out.read_text(encoding="utf-8")
        assert json.loads(text) == [UCS_FALCON, MUSTANG]
        assert '\n  {' in text

    def test_csv_export_has_known_columns_first(self, collection_store, tmp_path):
        collection_store.add_set(0, {**CAFE_CORNER, "extra": "x"})

        out = export_collection_csv(collection_store, tmp_path, today=date(2026, 1, 2))

        df = pd.read_csv(out)
        assert list(df.columns) == ["set_num", "name", "year", "num_parts", "theme_id", "set_img_url", "extra"]
        assert df.loc[0, "num_parts"] == 2056

    def test_round_trip_onto_empty_collection(self, collection_store):
        collection_store.add_set(0, UCS_FALCON)
        collection_store.add_set(0, MUSTANG)
        text = dumps_collection(collection_store.active_sets)

        collection_store.create_collection("Empty target")
        import_replace_active(collection_store, text, always_yes)

        assert collection_store.active_sets == collection_store.get(0).sets


class TestParse:

    @pytest.mark.parametrize("payload", ['{"set_num": "1"}', "42", '"text"', "null", "not json at all", ""])
    def test_non_array_payloads_are_rejected(self, payload):
        with pytest.raises(InvalidImportError):
            parse_collection(payload)

    def test_undecodable_bytes_are_rejected(self):
        with pytest.raises(InvalidImportError, match="not UTF-8"):
            parse_collection(b'[{"set_num": "\xff\xfe"}]')

    def test_utf8_bytes_are_accepted(self):
        assert parse_collection(json.dumps([MUSTANG]).encode("utf-8")) == [MUSTANG]

    def test_records_pass_through_unchecked(self):
        assert parse_collection('[1, {"foo": "bar"}]') == [1, {"foo": "bar"}]

    def test_strict_mode_validates_records(self):
        assert parse_collection(json.dumps([MUSTANG]), strict=True) == [MUSTANG]
        with pytest.raises(InvalidImportError):
            parse_collection('[{"name": "no key"}]', strict=True)
        with pytest.raises(InvalidImportError):
            parse_collection('[{"set_num": "1-1", "num_parts": -3}]', strict=True)


class TestImport:

    def test_replace_discards_previous_contents(self, collection_store):
        collection_store.add_set(0, UCS_FALCON)

        assert import_replace_active(collection_store, json.dumps([MUSTANG, MUSTANG]), always_yes) is True

        # wholesale replacement, duplicates inside the file are kept as-is
        assert collection_store.active_sets == [MUSTANG, MUSTANG]

    def test_replace_declined_leaves_collection(self, collection_store):
        collection_store.add_set(0, UCS_FALCON)
        assert import_replace_active(collection_store, json.dumps([MUSTANG]), always_no) is False
        assert collection_store.active_sets == [UCS_FALCON]

    def test_invalid_payload_leaves_collection_unchanged(self, collection_store, memory_store):
        collection_store.add_set(0, UCS_FALCON)
        before = dict((k, memory_store.get_item(k)) for k in memory_store.keys())

        with pytest.raises(InvalidImportError):
            import_replace_active(collection_store, '{"results": []}', always_yes)

        assert collection_store.active_sets == [UCS_FALCON]
        assert dict((k, memory_store.get_item(k)) for k in memory_store.keys()) == before

    def test_import_as_new_collection(self, collection_store):
        collection = import_as_new_collection(collection_store, json.dumps([CAFE_CORNER]), filename="modular_buildings.json")

        assert collection.name == "modular buildings"
        assert collection_store.active_index == 1
        assert collection_store.active_sets == [CAFE_CORNER]

    def test_import_as_new_rejects_objects(self, collection_store):
        with pytest.raises(InvalidImportError):
            import_as_new_collection(collection_store, "{}", filename="x.json")
        assert len(collection_store) == 1

    def test_fallback_name_is_timestamped(self):
        assert collection_name_from_filename(None, now=datetime(2026, 3, 4, 5, 6)) == "Import 2026-03-04 05:06"
        assert collection_name_from_filename("  .json", now=datetime(2026, 3, 4, 5, 6)).startswith("Import")
