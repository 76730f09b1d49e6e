# =============================================================================
# test_errors.py - Error Hierarchy and Diagnostic Rendering Tests
# =============================================================================

import pytest
from isa_utils.assembler.parser import parse_source
from isa_utils.errors import (
    AssemblerError,
    AssemblySyntaxError,
    DuplicateLabelError,
    EncodeError,
    ImmediateOutOfRangeError,
    InvalidOperandsError,
    InvalidRegisterError,
    IsaError,
    OperandCountMismatchError,
    OperandTypeMismatchError,
    ParseError,
    RegisterOutOfRangeError,
    Span,
    UndefinedLabelError,
    UnexpectedEndOfInputError,
    UnexpectedTokenError,
)


# =============================================================================
# Span Tests
# =============================================================================

class TestSpan:
    """Test source location helpers."""

    def test_width(self):
        assert Span(3, 7, 0).width == 4
        assert Span(5, 5, 0).width == 0

    def test_zero_width_span_is_truthy(self):
        assert Span(0, 0, 0)

    def test_merge(self):
        assert Span(0, 3, 1).merge(Span(8, 10, 1)) == Span(0, 10, 1)

    def test_column_is_one_based(self):
        source = "NOP\n  END"
        assert Span(6, 9, 1).column(source) == 3
        assert Span(0, 3, 0).column(source) == 1

    def test_source_line(self):
        source = "NOP\nLI R1, 5\nEND"
        assert Span(8, 10, 1).source_line(source) == "LI R1, 5"
        assert Span(13, 16, 2).source_line(source) == "END"

    def test_str(self):
        assert str(Span(4, 6, 2)) == "line 3, offset 4"


# =============================================================================
# Hierarchy Tests
# =============================================================================

class TestHierarchy:
    """Every error is catchable as IsaError."""

    @pytest.mark.parametrize("error_class,base", [
        (AssemblySyntaxError, AssemblerError),
        (UnexpectedTokenError, ParseError),
        (UnexpectedEndOfInputError, ParseError),
        (DuplicateLabelError, ParseError),
        (UndefinedLabelError, ParseError),
        (OperandCountMismatchError, ParseError),
        (OperandTypeMismatchError, ParseError),
        (InvalidRegisterError, ParseError),
        (RegisterOutOfRangeError, EncodeError),
        (ImmediateOutOfRangeError, EncodeError),
        (InvalidOperandsError, EncodeError),
        (ParseError, AssemblerError),
        (EncodeError, AssemblerError),
        (AssemblerError, IsaError),
    ])
    def test_subclass(self, error_class, base):
        assert issubclass(error_class, base)

    def test_structured_fields(self):
        err = ImmediateOutOfRangeError(22, 4194304)
        assert err.bits == 22
        assert err.value == 4194304
        assert "4194304" in err.message
        assert "4194303" in err.hint


# =============================================================================
# Rendering Tests
# =============================================================================

class TestRendering:
    """Test message formatting with and without source text."""

    def test_message_without_span(self):
        err = RegisterOutOfRangeError(40)
        assert str(err) == "error: register R40 is out of range (R0..R31)"

    def test_message_with_span_only(self):
        err = InvalidRegisterError(span=Span(3, 6, 0), register=32)
        assert str(err).startswith("line 1, offset 3: error:")

    def test_attach_source_renders_caret(self):
        source = "loop: NOP\nJR lop"
        with pytest.raises(UndefinedLabelError) as exc_info:
            parse_source(source)
        err = exc_info.value.attach_source(source, "prog.asm")

        assert err.filename == "prog.asm"
        assert err.column == 4
        assert str(err) == (
            "prog.asm:2:4: error: undefined label 'lop'\n"
            "    JR lop\n"
            "       ^^^\n"
            "hint: did you mean 'loop'?"
        )

    def test_attach_source_returns_self(self):
        err = UnexpectedTokenError("opcode", "register 'R1'", Span(0, 2, 0))
        assert err.attach_source("R1") is err

    def test_default_filename(self):
        source = "ADD R1, R2"
        with pytest.raises(OperandCountMismatchError) as exc_info:
            parse_source(source)
        rendered = str(exc_info.value.attach_source(source))
        assert rendered.startswith("<input>:1:1: error: 'ADD' expects 3 operands, found 2")
        assert "    ^^^^^^^^^^" in rendered

    def test_zero_width_span_gets_one_caret(self):
        err = AssemblerError("boom", span=Span(2, 2, 0))
        err.attach_source("NOP")
        assert str(err).splitlines()[-1] == "      ^"

    def test_duplicate_label_hint(self):
        err = DuplicateLabelError("A", span=Span(7, 9, 1), original_span=Span(0, 2, 0))
        assert err.hint == "'A' was first defined on line 1"

    def test_operand_count_singular(self):
        err = OperandCountMismatchError(1, 0, mnemonic="JR")
        assert err.message == "'JR' expects 1 operand, found 0"
