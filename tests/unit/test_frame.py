"""Tests for Frame resolution and formatting."""

import sys
from typing import Any

import pytest

from stackcapture.core.code_table import CodeTable
from stackcapture.core.frame import (
    FormatSpec,
    Frame,
    Verb,
    format_frame,
    parse_format_spec,
    render_symbol,
)
from stackcapture.models.symbol import UNKNOWN_SYMBOL, Symbol

WORKER_NAME = "example.com/app/worker.(*Pool).run"


class TestParseFormatSpec:
    """Test format spec parsing."""

    def test_plain_verbs(self) -> None:
        """Test each verb letter maps to its Verb."""
        assert parse_format_spec("s") == FormatSpec(Verb.FILE)
        assert parse_format_spec("d") == FormatSpec(Verb.LINE)
        assert parse_format_spec("n") == FormatSpec(Verb.NAME)
        assert parse_format_spec("v") == FormatSpec(Verb.COMPOSITE)

    def test_empty_spec_is_composite(self) -> None:
        """Test an empty spec means v."""
        assert parse_format_spec("") == FormatSpec(Verb.COMPOSITE)

    def test_flags(self) -> None:
        """Test + and # flags are recognised."""
        assert parse_format_spec("+v") == FormatSpec(Verb.COMPOSITE, detailed=True)
        assert parse_format_spec("+") == FormatSpec(Verb.COMPOSITE, detailed=True)
        assert parse_format_spec("#v") == FormatSpec(Verb.COMPOSITE, alternate=True)
        assert parse_format_spec("+#s") == FormatSpec(Verb.FILE, detailed=True, alternate=True)

    def test_unknown_verb(self) -> None:
        """Test unknown verbs parse to None."""
        assert parse_format_spec("x").verb is None
        assert parse_format_spec("+q").verb is None
        assert parse_format_spec(">20").verb is None


class TestFrameResolution:
    """Test Frame lookups through the bound resolver."""

    def test_pc_removes_bias(self) -> None:
        """Test pc is one less than the stored value."""
        assert Frame(0x101).pc() == 0x100

    def test_lookup_uses_unbiased_address(self, worker_frame: Frame, fake_resolver: Any) -> None:
        """Test the resolver receives value - 1."""
        worker_frame.file()
        assert fake_resolver.lookups == [0x100]

    def test_known_frame(self, worker_frame: Frame) -> None:
        """Test file, line and name of a known frame."""
        assert worker_frame.file() == "/src/app/worker.py"
        assert worker_frame.line() == 42
        assert worker_frame.name() == WORKER_NAME

    def test_unknown_frame(self, unknown_frame: Frame) -> None:
        """Test unresolvable frames degrade to unknown values."""
        assert unknown_frame.file() == "unknown"
        assert unknown_frame.line() == 0
        assert unknown_frame.name() == "unknown"
        assert unknown_frame.symbol() == UNKNOWN_SYMBOL

    def test_zero_handle_against_process_table(self) -> None:
        """Test handle 0 is unknown to the real code table."""
        frame = Frame(0)
        assert frame.file() == "unknown"
        assert frame.line() == 0
        assert frame.marshal_text() == "unknown"

    def test_resolution_is_repeatable(self, worker_frame: Frame, fake_resolver: Any) -> None:
        """Test every call resolves afresh and yields the same result."""
        first = format(worker_frame, "+v")
        second = format(worker_frame, "+v")
        assert first == second
        assert fake_resolver.lookups == [0x100, 0x100]


class TestFrameIdentity:
    """Test Frame value semantics."""

    def test_equal_values_are_equal(self, fake_resolver: Any) -> None:
        """Test the resolver is not part of identity."""
        assert Frame(0x101, fake_resolver) == Frame(0x101, CodeTable())
        assert hash(Frame(0x101, fake_resolver)) == hash(Frame(0x101))

    def test_different_values_differ(self) -> None:
        """Test frames with different handles are not equal."""
        assert Frame(0x101) != Frame(0x102)

    def test_int_conversion(self) -> None:
        """Test frames convert to their stored value."""
        assert int(Frame(0x101)) == 0x101
        assert hex(Frame(0x101)) == "0x101"

    def test_repr(self) -> None:
        """Test repr shows the handle in hex."""
        assert repr(Frame(0x101)) == "Frame(0x101)"

    def test_frozen(self) -> None:
        """Test frames are immutable."""
        frame = Frame(0x101)
        with pytest.raises(AttributeError):
            frame.value = 5  # type: ignore[misc]


class TestFrameFormat:
    """Test per-frame verbs."""

    def test_file_verb(self, worker_frame: Frame) -> None:
        """Test s renders the base name."""
        assert f"{worker_frame:s}" == "worker.py"

    def test_detailed_file_verb(self, worker_frame: Frame) -> None:
        """Test +s renders name, newline-tab, full path."""
        assert f"{worker_frame:+s}" == f"{WORKER_NAME}\n\t/src/app/worker.py"

    def test_line_verb(self, worker_frame: Frame) -> None:
        """Test d renders the line number."""
        assert f"{worker_frame:d}" == "42"
        assert f"{worker_frame:+d}" == "42"

    def test_name_verb(self, worker_frame: Frame, main_frame: Frame) -> None:
        """Test n renders the short function name."""
        assert f"{worker_frame:n}" == "run"
        assert f"{main_frame:n}" == "main"

    def test_composite_verb(self, worker_frame: Frame) -> None:
        """Test v renders file:line."""
        assert f"{worker_frame:v}" == "worker.py:42"
        assert f"{worker_frame}" == "worker.py:42"
        assert str(worker_frame) == "worker.py:42"

    def test_detailed_composite_verb(self, worker_frame: Frame) -> None:
        """Test +v renders +s:d."""
        assert f"{worker_frame:+v}" == f"{WORKER_NAME}\n\t/src/app/worker.py:42"

    @pytest.mark.parametrize("flag", ["", "+"])
    def test_composite_matches_fields(self, worker_frame: Frame, flag: str) -> None:
        """Test v always equals s and d joined by a colon."""
        expected = f"{format(worker_frame, flag + 's')}:{format(worker_frame, 'd')}"
        assert format(worker_frame, flag + "v") == expected

    def test_unknown_verb_writes_nothing(self, worker_frame: Frame) -> None:
        """Test unrecognised verbs render as an empty string."""
        assert f"{worker_frame:x}" == ""
        assert f"{worker_frame:+x}" == ""

    def test_unknown_frame_formats(self, unknown_frame: Frame) -> None:
        """Test formatting never fails for unknown frames."""
        assert f"{unknown_frame}" == "unknown:0"
        assert f"{unknown_frame:n}" == "unknown"
        assert f"{unknown_frame:+v}" == "unknown\n\tunknown:0"

    def test_format_frame_function(self, worker_frame: Frame) -> None:
        """Test the dispatch function matches the format protocol."""
        assert format_frame(worker_frame, Verb.COMPOSITE, True) == f"{worker_frame:+v}"
        assert format_frame(worker_frame, Verb.NAME) == "run"


class TestRenderSymbol:
    """Test rendering of resolved symbols."""

    def test_python_symbol(self) -> None:
        """Test a symbol produced for Python code."""
        symbol = Symbol("/srv/app/jobs.py", 12, "app/jobs.Runner.step")
        assert render_symbol(symbol, Verb.NAME) == "Runner.step"
        assert render_symbol(symbol, Verb.COMPOSITE) == "jobs.py:12"


class TestMarshalText:
    """Test single-line text rendering."""

    def test_known_frame(self, worker_frame: Frame) -> None:
        """Test the full name, path and line on one line."""
        assert worker_frame.marshal_text() == f"{WORKER_NAME} /src/app/worker.py:42"

    def test_unknown_frame(self, unknown_frame: Frame) -> None:
        """Test unknown frames marshal to the literal unknown."""
        assert unknown_frame.marshal_text() == "unknown"

    def test_unknown_function_with_file(self, fake_resolver: Any) -> None:
        """Test an unknown function marshals to unknown even when a file is known."""
        fake_resolver.symbols[0x300] = Symbol("/src/app/gen.py", 9, "unknown")
        assert Frame(0x301, fake_resolver).marshal_text() == "unknown"

    def test_no_control_characters(self, worker_frame: Frame) -> None:
        """Test the output contains no newlines or tabs."""
        text = worker_frame.marshal_text()
        assert "\n" not in text
        assert "\t" not in text
        assert text.isprintable()

    def test_real_frame(self) -> None:
        """Test marshaling a frame captured from this test."""
        table = CodeTable()
        frame = sys._getframe()
        value = table.address_of(frame.f_code, frame.f_lasti, __name__) + 1

        text = Frame(value, table).marshal_text()

        assert text.isprintable()
        name, _, location = text.partition(" ")
        assert name.endswith(".TestMarshalText.test_real_frame")
        assert location.startswith(frame.f_code.co_filename + ":")
