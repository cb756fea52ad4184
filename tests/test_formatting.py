"""Tests for caller attribution, prefix formatting and message serialisation."""
from __future__ import annotations

import inspect
import traceback
from datetime import datetime

import pytest

from labellog.caller import CALLER_STACK_DEPTH, UNKNOWN_CALLER, current_caller
from labellog.formatting import (
    UNSERIALIZABLE_PLACEHOLDER,
    FormatOptions,
    MessageFormatter,
    format_line,
    iso_timestamp,
    serialize_message,
)

TIMESTAMP = "2024-05-01T12:00:00+00:00"


def _format_layer() -> str:
    return current_caller()


def _emit_layer() -> str:
    return _format_layer()


def test_current_caller_skips_internal_frames() -> None:
    expected_line = inspect.currentframe().f_lineno + 1
    caller = _emit_layer()

    assert caller.startswith("test_current_caller_skips_internal_frames @ ")
    assert caller.endswith(f"test_formatting.py:{expected_line}")


def test_current_caller_with_shallow_stack() -> None:
    assert current_caller(depth=10_000) == UNKNOWN_CALLER


@pytest.mark.parametrize(
    "frame",
    [
        traceback.FrameSummary("app.py", 3, "", lookup_line=False),
        traceback.FrameSummary("", 3, "main", lookup_line=False),
        traceback.FrameSummary("app.py", None, "main", lookup_line=False),
    ],
)
def test_current_caller_without_name_or_location(
    frame: traceback.FrameSummary, monkeypatch: pytest.MonkeyPatch
) -> None:
    def extract_stack(f=None, limit=None):
        return [frame] * limit

    monkeypatch.setattr(traceback, "extract_stack", extract_stack)

    assert current_caller() == UNKNOWN_CALLER


def test_caller_depth_is_a_fixed_constant() -> None:
    assert CALLER_STACK_DEPTH == 4


@pytest.fixture()
def full_formatter() -> MessageFormatter:
    options = FormatOptions(
        print_timestamp=True,
        print_label_name=True,
        print_caller_function_location=True,
    )
    return MessageFormatter(options, clock=lambda: TIMESTAMP, caller=lambda: "main @ app.py:3")


def test_prefix_with_all_segments(full_formatter: MessageFormatter) -> None:
    assert full_formatter.format("info") == f"[{TIMESTAMP}] [INFO] [Function main @ app.py:3] : "


def test_prefix_order_ignores_option_declaration_order() -> None:
    options = FormatOptions(
        print_caller_function_location=True,
        print_label_name=True,
        print_timestamp=True,
    )
    formatter = MessageFormatter(options, clock=lambda: "T", caller=lambda: "fn @ f.py:1")
    assert formatter.format("warning") == "[T] [WARNING] [Function fn @ f.py:1] : "


@pytest.mark.parametrize(
    ("options", "expected"),
    [
        (FormatOptions(), ""),
        (FormatOptions(print_label_name=True), "[ERROR] : "),
        (FormatOptions(print_timestamp=True), f"[{TIMESTAMP}] : "),
        (FormatOptions(print_caller_function_location=True), "[Function main @ app.py:3] : "),
        (FormatOptions(print_timestamp=True, print_label_name=True), f"[{TIMESTAMP}] [ERROR] : "),
    ],
)
def test_prefix_includes_only_enabled_segments(options: FormatOptions, expected: str) -> None:
    formatter = MessageFormatter(options, clock=lambda: TIMESTAMP, caller=lambda: "main @ app.py:3")
    assert formatter.format("error") == expected


def test_disabled_segments_are_not_computed() -> None:
    def fail() -> str:
        raise AssertionError("should not be called")

    formatter = MessageFormatter(FormatOptions(print_label_name=True), clock=fail, caller=fail)
    assert formatter.format("log") == "[LOG] : "


def test_iso_timestamp_carries_offset() -> None:
    parsed = datetime.fromisoformat(iso_timestamp())
    assert parsed.tzinfo is not None
    assert parsed.microsecond == 0


def test_serialize_message() -> None:
    assert serialize_message("plain text") == "plain text"
    assert serialize_message({"user": "ada", "id": 7}) == '{"user": "ada", "id": 7}'
    assert serialize_message([1, 2]) == "[1, 2]"
    assert serialize_message(42) == "42"
    assert serialize_message(None) == "null"


def test_unserializable_messages_use_placeholder() -> None:
    circular: dict[str, object] = {}
    circular["self"] = circular

    assert serialize_message(circular) == UNSERIALIZABLE_PLACEHOLDER
    assert serialize_message(object()) == UNSERIALIZABLE_PLACEHOLDER


def test_format_line_with_empty_prefix() -> None:
    assert format_line("", "boom") == " boom\n"


def test_format_line_with_prefix() -> None:
    assert format_line("[INFO] : ", {"a": 1}) == '[INFO] :  {"a": 1}\n'
