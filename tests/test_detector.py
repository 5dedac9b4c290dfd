"""Tests for rule_engine/detector.py: running registries over snapshot pairs."""

from __future__ import annotations

import logging

import pytest

from breakcheck.rule_engine.detector import Detector, removed_resources
from breakcheck.rule_engine.models import FieldType, RuleCategory, Violation
from breakcheck.rule_engine.registry import RuleRegistry, default_registry
from breakcheck.rule_engine.rules import ResourceSchemaRule

BASE = "https://docs.example.com/rules"


def _fixed_rule(identifier: str, fields: list[str]) -> ResourceSchemaRule:
    return ResourceSchemaRule(
        name=identifier,
        definition="d",
        identifier=identifier,
        message_template="{{resource}}.{{field}}",
        check=lambda old, new: list(fields),
    )


@pytest.fixture
def detector() -> Detector:
    return Detector(default_registry(), docs_base_url=BASE)


class TestFindViolations:
    def test_removed_field(self, detector, make_snapshot):
        old = make_snapshot(name=FieldType.STRING, size=FieldType.NUMBER)
        new = make_snapshot(name=FieldType.STRING)
        assert detector.find_violations("example_disk", old, new) == [
            Violation(
                rule_identifier="resource-schema-field-removal-or-rename",
                resource="example_disk",
                field="size",
            )
        ]

    def test_fields_sorted_within_rule(self, detector, make_snapshot):
        old = make_snapshot(zeta=FieldType.STRING, alpha=FieldType.STRING, mid=FieldType.STRING)
        fields = [v.field for v in detector.find_violations("r", old, {})]
        assert fields == ["alpha", "mid", "zeta"]

    def test_registry_order_then_field_order(self):
        registry = RuleRegistry(
            RuleCategory.RESOURCE_SCHEMA,
            [_fixed_rule("second", ["b", "a"]), _fixed_rule("first", ["c"])],
        )
        violations = Detector(registry).find_violations("r", {}, {})
        assert [(v.rule_identifier, v.field) for v in violations] == [
            ("second", "a"),
            ("second", "b"),
            ("first", "c"),
        ]

    def test_duplicates_not_collapsed(self):
        registry = RuleRegistry(RuleCategory.RESOURCE_SCHEMA, [_fixed_rule("dup", ["a", "a"])])
        assert len(Detector(registry).find_violations("r", {}, {})) == 2

    def test_rule_fault_propagates(self):
        def broken(old, new):
            raise KeyError("missing")

        registry = RuleRegistry(
            RuleCategory.RESOURCE_SCHEMA,
            [ResourceSchemaRule(name="n", definition="d", identifier="broken", check=broken)],
        )
        with pytest.raises(KeyError):
            Detector(registry).find_violations("r", {}, {})

    def test_logs_per_rule(self, detector, make_snapshot, caplog):
        with caplog.at_level(logging.DEBUG, logger="breakcheck.rule_engine.detector"):
            detector.find_violations("r", make_snapshot(a=FieldType.STRING), {})
        assert "resource-schema-field-removal-or-rename" in caplog.text


class TestDetect:
    def test_scenario_removed_field(self, detector, make_snapshot):
        old = make_snapshot(name=FieldType.STRING, size=FieldType.NUMBER)
        new = make_snapshot(name=FieldType.STRING)
        messages = detector.detect("example_disk", "v5", old, new)
        assert len(messages) == 1
        assert "`size`" in messages[0]
        assert "`example_disk`" in messages[0]
        assert messages[0].endswith(f"{BASE}/v5/resource-schema-field-removal-or-rename")

    def test_scenario_addition(self, detector, make_snapshot):
        old = make_snapshot(a=FieldType.NUMBER)
        new = make_snapshot(a=FieldType.NUMBER, b=FieldType.NUMBER)
        assert detector.detect("r", "v5", old, new) == []

    def test_scenario_empty(self, detector):
        assert detector.detect("r", "v5", {}, {}) == []

    def test_identical_snapshots(self, detector, make_snapshot):
        snap = make_snapshot(a=FieldType.STRING, b=FieldType.MAP)
        assert detector.detect("r", "v5", snap, snap) == []

    def test_default_docs_url(self, make_snapshot):
        from breakcheck.rule_engine.rules import DEFAULT_DOCS_BASE_URL

        messages = Detector(default_registry()).detect(
            "r", "v1", make_snapshot(a=FieldType.STRING), {}
        )
        assert f"{DEFAULT_DOCS_BASE_URL}/v1/" in messages[0]

    def test_custom_registry(self):
        registry = RuleRegistry(RuleCategory.RESOURCE_SCHEMA, [_fixed_rule("mock", ["f"])])
        messages = Detector(registry, docs_base_url="https://d").detect("res", "v9", {}, {})
        assert messages == ["`res`.`f` See: https://d/v9/mock"]


class TestRender:
    def test_unknown_rule(self, detector):
        violation = Violation(rule_identifier="nope", resource="r", field="f")
        with pytest.raises(KeyError):
            detector.render("v1", violation)


class TestDetectProvider:
    def test_compares_shared_resources_in_sorted_order(self, detector, make_snapshot):
        old = {
            "b_res": make_snapshot(x=FieldType.STRING),
            "a_res": make_snapshot(y=FieldType.STRING),
        }
        new = {"b_res": {}, "a_res": {}}
        messages = detector.detect_provider("v1", old, new)
        assert len(messages) == 2
        assert "`a_res`" in messages[0]
        assert "`b_res`" in messages[1]

    def test_skips_removed_and_added_resources(self, detector, make_snapshot, caplog):
        old = {"gone": make_snapshot(x=FieldType.STRING)}
        new = {"added": make_snapshot(y=FieldType.STRING)}
        with caplog.at_level(logging.WARNING, logger="breakcheck.rule_engine.detector"):
            assert detector.detect_provider("v1", old, new) == []
        assert "gone" in caplog.text
        assert all(r.levelno == logging.WARNING for r in caplog.records)

    def test_empty(self, detector):
        assert detector.detect_provider("v1", {}, {}) == []


class TestRemovedResources:
    def test_lists_resources_missing_from_new(self, make_snapshot):
        old = {
            "disk": make_snapshot(size=FieldType.NUMBER),
            "net": make_snapshot(name=FieldType.STRING),
            "bucket": {},
        }
        new = {"net": make_snapshot(name=FieldType.STRING), "subnet": {}}
        assert removed_resources(old, new) == ["bucket", "disk"]

    def test_none_removed(self, make_snapshot):
        snap = {"net": make_snapshot(name=FieldType.STRING)}
        assert removed_resources(snap, snap) == []
        assert removed_resources({}, snap) == []
