"""Tests for dotted key path resolution."""

from __future__ import annotations

from typing import Any

import pytest

from typedconf.errors import (
    InvalidKeyError,
    KeyNotFoundError,
    PathIndexError,
    UnsupportedPathError,
)
from typedconf.nodes import GenericMap, normalize
from typedconf.resolver import assign_path, normalize_key, resolve_path


class TestNormalizeKey:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("db.host", "db.host"),
            ("  db.host  ", "db.host"),
            (".db.host.", "db.host"),
            (" ..db.. ", "db"),
            ("...", ""),
            ("   ", ""),
        ],
    )
    def test_trims_whitespace_then_separators(self, raw: str, expected: str) -> None:
        assert normalize_key(raw) == expected


class TestTopLevel:
    def test_every_top_level_key_resolves_to_its_value(self, sample_data: dict[str, Any]) -> None:
        data = normalize(sample_data)
        for key, value in sample_data.items():
            assert resolve_path(data, key) == value

    def test_verbatim_dotted_key_wins(self, sample_data: dict[str, Any]) -> None:
        assert resolve_path(normalize(sample_data), "dotted.key") == "verbatim"

    def test_key_is_normalized_before_lookup(self, sample_data: dict[str, Any]) -> None:
        assert resolve_path(normalize(sample_data), " .name. ") == "app"

    def test_empty_key_raises_invalid_key(self) -> None:
        with pytest.raises(InvalidKeyError) as exc_info:
            resolve_path({"a": 1}, " . ")
        assert exc_info.value.code == "INVALID_KEY"

    def test_missing_top_level_key(self) -> None:
        with pytest.raises(KeyNotFoundError):
            resolve_path({"a": 1}, "b")

    def test_find_by_path_disabled_only_matches_top_level(self, sample_data: dict[str, Any]) -> None:
        data = normalize(sample_data)
        assert resolve_path(data, "name", find_by_path=False) == "app"
        with pytest.raises(KeyNotFoundError):
            resolve_path(data, "db.host", find_by_path=False)


class TestNestedMaps:
    def test_string_keyed_map(self, sample_data: dict[str, Any]) -> None:
        assert resolve_path(normalize(sample_data), "db.host") == "localhost"

    def test_generic_keyed_map_matches_stringified_key(self, yaml_data: dict[str, Any]) -> None:
        data = normalize(yaml_data)
        assert resolve_path(data, "codes.200") == "ok"
        assert resolve_path(data, "flags.true") == "on_value"
        assert resolve_path(data, "nested.3.name") == "three"

    def test_generic_map_prefers_exact_string_key(self) -> None:
        data = normalize({"m": {1: "int", "1": "str"}})
        assert resolve_path(data, "m.1") == "str"

    def test_typed_string_map(self) -> None:
        data = normalize({"labels": {"env": "prod"}})
        assert resolve_path(data, "labels.env") == "prod"

    def test_missing_nested_key_reports_segment(self, sample_data: dict[str, Any]) -> None:
        with pytest.raises(KeyNotFoundError) as exc_info:
            resolve_path(normalize(sample_data), "db.password")
        assert exc_info.value.details["segment"] == "password"

    def test_missing_top_segment(self, sample_data: dict[str, Any]) -> None:
        with pytest.raises(KeyNotFoundError) as exc_info:
            resolve_path(normalize(sample_data), "cache.host")
        assert exc_info.value.details["segment"] == "cache"

    def test_empty_inner_segment_is_not_found(self, sample_data: dict[str, Any]) -> None:
        with pytest.raises(KeyNotFoundError):
            resolve_path(normalize(sample_data), "db..host")


class TestSequences:
    def test_index_into_sequence(self, sample_data: dict[str, Any]) -> None:
        data = normalize(sample_data)
        assert resolve_path(data, "servers.1.port") == 81
        assert resolve_path(data, "matrix.1.0") == 3

    def test_last_index_is_in_range(self, sample_data: dict[str, Any]) -> None:
        assert resolve_path(normalize(sample_data), "ids.2") == 3

    def test_index_equal_to_length_is_out_of_range(self, sample_data: dict[str, Any]) -> None:
        with pytest.raises(PathIndexError) as exc_info:
            resolve_path(normalize(sample_data), "ids.3")
        assert exc_info.value.length == 3
        assert exc_info.value.segment == "3"

    @pytest.mark.parametrize("segment", ["x", "-1", "+1", " 1", "1e0", "١"])
    def test_non_integer_segment_raises_index_error(self, sample_data: dict[str, Any], segment: str) -> None:
        with pytest.raises(PathIndexError):
            resolve_path(normalize(sample_data), f"tags.{segment}")

    def test_tuple_input_is_indexable(self) -> None:
        data = normalize({"pair": ("a", "b")})
        assert resolve_path(data, "pair.1") == "b"


class TestUnsupportedPath:
    def test_descending_into_scalar(self, sample_data: dict[str, Any]) -> None:
        with pytest.raises(UnsupportedPathError) as exc_info:
            resolve_path(normalize(sample_data), "name.first")
        assert exc_info.value.node_type == "str"

    def test_descending_into_none(self, sample_data: dict[str, Any]) -> None:
        with pytest.raises(UnsupportedPathError):
            resolve_path(normalize(sample_data), "nothing.inner")

    def test_descending_into_unknown_object(self) -> None:
        with pytest.raises(UnsupportedPathError) as exc_info:
            resolve_path(normalize({"s": {1, 2}}), "s.0")
        assert exc_info.value.node_type == "set"


class TestAssignPath:
    def test_top_level(self) -> None:
        data: dict[str, Any] = {}
        assign_path(data, "a", 1)
        assert data == {"a": 1}

    def test_creates_intermediate_maps(self) -> None:
        data: dict[str, Any] = {}
        assign_path(data, "a.b.c", "v")
        assert data == {"a": {"b": {"c": "v"}}}

    def test_replaces_scalar_parent(self) -> None:
        data: dict[str, Any] = {"a": 1}
        assign_path(data, "a.b", 2)
        assert data == {"a": {"b": 2}}

    def test_writes_existing_sequence_index(self) -> None:
        data = normalize({"s": [{"p": 1}, {"p": 2}]})
        assign_path(data, "s.1.p", 9)
        assign_path(data, "s.0", "x")
        assert data == {"s": ["x", {"p": 9}]}

    def test_sequence_index_out_of_range(self) -> None:
        data = normalize({"s": [1]})
        with pytest.raises(PathIndexError):
            assign_path(data, "s.1", 2)

    def test_set_by_path_disabled_writes_verbatim_key(self) -> None:
        data: dict[str, Any] = {}
        assign_path(data, "a.b", 1, set_by_path=False)
        assert data == {"a.b": 1}

    def test_writes_into_generic_map(self) -> None:
        data = normalize({"m": {1: "one"}})
        assign_path(data, "m.two", "2")
        assert isinstance(data["m"], GenericMap)
        assert data["m"]["two"] == "2"

    def test_overwrites_matching_generic_key(self) -> None:
        data = normalize({"ports": {1: 8001, 2: 8002}})
        assign_path(data, "ports.1", 9001)
        assert data == {"ports": {1: 9001, 2: 8002}}
        assert list(data["ports"]) == [1, 2]

    def test_descends_through_matching_generic_key(self) -> None:
        data = normalize({"nested": {3: {"name": "three"}}})
        assign_path(data, "nested.3.name", "drei")
        assert data == {"nested": {3: {"name": "drei"}}}

    def test_empty_key(self) -> None:
        with pytest.raises(InvalidKeyError):
            assign_path({}, "..", 1)
