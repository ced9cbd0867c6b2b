"""Tests for extraction rules and path resolution."""

import pytest

from parts_etl.projector.rules import (
    DEFAULT_RULE_PATHS,
    Extracted,
    ExtractionRule,
    default_keep,
    default_rules,
    path_rule,
    require_paths,
    resolve_path,
)


class TestResolvePath:
    """Tests for resolve_path()."""

    def test_nested_mapping_and_list_index(self, sample_part):
        result = resolve_path(sample_part, "item.datasheets.0.url")

        assert result.ok
        assert result.value == "https://example.com/irlz44n.pdf"

    def test_negative_index(self, sample_part):
        assert resolve_path(sample_part, "item.datasheets.-1.url").value == (
            "https://example.com/irlz44n-alt.pdf"
        )

    def test_missing_key(self, sample_part):
        result = resolve_path(sample_part, "item.manufacturer.name")

        assert not result.ok
        assert "manufacturer" in result.error

    def test_index_out_of_range(self, sample_part):
        sample_part["item"]["datasheets"] = []

        result = resolve_path(sample_part, "item.datasheets.0.url")

        assert not result.ok
        assert "out of range" in result.error

    def test_non_integer_index(self, sample_part):
        assert not resolve_path(sample_part, "item.datasheets.first").ok

    def test_cannot_descend_into_none(self):
        result = resolve_path({"x": 1, "y": None}, "y.z")

        assert not result.ok
        assert "NoneType" in result.error

    def test_cannot_descend_into_string(self):
        assert not resolve_path({"snippet": "abc"}, "snippet.0").ok

    def test_none_leaf_is_resolved(self):
        result = resolve_path({"a": None}, "a")
        assert result == Extracted.success(None)


class TestExtractionRule:
    """Tests for ExtractionRule.apply()."""

    def test_plain_callable_success(self):
        rule = ExtractionRule("A", lambda r: r["x"])
        assert rule.apply({"x": 1}) == Extracted.success(1)

    def test_raising_callable_becomes_failure(self):
        rule = ExtractionRule("B", lambda r: r["y"]["z"])

        result = rule.apply({"x": 1, "y": None})

        assert not result.ok
        assert result.error.startswith("TypeError")
        assert result.unwrap_or_none() is None

    def test_tagged_result_passes_through(self):
        rule = path_rule("B", "y.z")

        result = rule.apply({"y": {"z": 5}})

        assert result == Extracted.success(5)

    def test_path_rule_failure(self):
        assert not path_rule("B", "y.z").apply({"y": None}).ok


class TestKeepPredicate:
    """Tests for require_paths()."""

    def test_all_paths_present(self, sample_part):
        assert default_keep()(sample_part)

    def test_missing_spec_rejected(self, sample_part):
        del sample_part["item"]["specs"]["rds_drain_to_source_resistance_on"]
        assert not default_keep()(sample_part)

    def test_empty_value_list_rejected(self, sample_part):
        sample_part["item"]["specs"]["breakdown_voltage_drain_to_source"]["value"] = []
        assert not default_keep()(sample_part)

    def test_none_value_rejected(self):
        keep = require_paths(["ok"])
        assert not keep({"ok": None})

    def test_no_paths_keeps_everything(self):
        assert require_paths([])({})


class TestDefaultRules:
    """Tests for the built-in MOSFET schema."""

    def test_labels_in_order(self):
        assert [rule.label for rule in default_rules()] == [
            "Description",
            "Datasheet",
            "URL",
            "Manufacturer Part Number",
            "Rds On",
            "Vdss",
        ]

    def test_extracts_sample_part(self, sample_part):
        values = [rule.apply(sample_part).value for rule in default_rules()]

        assert values == [
            "N-Channel 60 V 30A\nPower MOSFET",
            "https://example.com/irlz44n.pdf",
            "https://octopart.com/irlz44n",
            "IRLZ44N",
            "0.022",
            "55",
        ]

    def test_rule_paths_match_rules(self):
        assert len(default_rules()) == len(DEFAULT_RULE_PATHS)


# ============================================================================
# Mark all tests as unit tests
# ============================================================================

pytestmark = pytest.mark.unit
