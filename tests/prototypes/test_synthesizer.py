"""Tests for prototype synthesis."""

from __future__ import annotations

from pathlib import Path

import pytest

from sketchpp.errors import SynthesisSkip
from sketchpp.models import SourceFile, TagKind, TagRecord
from sketchpp.prototypes import PrototypeSynthesizer, build_prototype
from sketchpp.unifier import SourceUnifier


def _function(name: str, line: int, returntype: str = "void", signature: str = "()", **extra) -> TagRecord:  # type: ignore[no-untyped-def]
    return TagRecord(
        name=name,
        kind=TagKind.FUNCTION,
        line=line,
        returntype=returntype,
        signature=signature,
        code=extra.pop("code", f"{returntype} {name}{signature}"),
        **extra,
    )


def test_only_prototype_and_function_kinds_survive() -> None:
    records = [
        _function("setup", 2),
        TagRecord(name="counter", kind=TagKind.OTHER, line=1, returntype="int", signature="()"),
    ]

    result = PrototypeSynthesizer().synthesize(records)

    assert [record.name for record in result] == ["setup"]


def test_declared_names_get_no_new_prototype() -> None:
    records = [
        TagRecord(name="loop", kind=TagKind.PROTOTYPE, line=1, returntype="void", signature="()"),
        _function("setup", 3),
        _function("loop", 7),
    ]

    result = PrototypeSynthesizer().synthesize(records)

    assert [record.prototype for record in result] == ["void setup();"]


def test_builds_terminated_prototype_and_strips_defaults() -> None:
    result = PrototypeSynthesizer().synthesize(
        [_function("add", 4, returntype="int", signature="(int a, int b=0)")]
    )

    assert result[0].prototype == "int add(int a, int b);"


def test_template_reuses_declarator_verbatim() -> None:
    record = _function(
        "max",
        1,
        returntype="T",
        signature="(T a, T b)",
        code="template<typename T> T max(T a, T b)",
    )

    result = PrototypeSynthesizer().synthesize([record])

    assert result[0].prototype == "template<typename T> T max(T a, T b)"


def test_template_return_type_without_code_is_rebuilt() -> None:
    record = TagRecord(
        name="twice",
        kind=TagKind.FUNCTION,
        line=1,
        returntype="template<class T> T",
        signature="(T v)",
    )

    assert build_prototype(record) == "template<class T> T twice(T v);"


@pytest.mark.parametrize("missing", ["returntype", "signature"])
def test_incomplete_records_are_dropped(missing: str) -> None:
    broken = _function("broken", 2)
    setattr(broken, missing, None)
    records = [broken, _function("setup", 5)]

    with pytest.raises(SynthesisSkip):
        build_prototype(broken)
    result = PrototypeSynthesizer().synthesize(records)

    assert [record.name for record in result] == ["setup"]


def test_dropped_record_is_reported_at_original_location() -> None:
    buffer = SourceUnifier().unify(
        [SourceFile(path=Path("Blink.ino"), basename="Blink.ino", content="a\nb\n")]
    )
    synthesizer = PrototypeSynthesizer(buffer)

    assert synthesizer._where(TagRecord(name="x", line=3)) == "Blink.ino:2"
    assert synthesizer._where(TagRecord(name="x", line=40)) == "unified line 40"
    assert synthesizer._where(TagRecord(name="x")) == "unknown line"


def test_results_are_sorted_by_unified_line_stably() -> None:
    records = [
        _function("late", 30),
        _function("first_tie", 10),
        _function("second_tie", 10),
        _function("early", 2),
    ]

    result = PrototypeSynthesizer().synthesize(records)

    assert [record.name for record in result] == ["early", "first_tie", "second_tie", "late"]
