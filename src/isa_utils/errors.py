"""
ISA Utils Error Hierarchy
=========================

This module defines the exception hierarchy for the assembler and decoder.
All exceptions inherit from IsaError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
IsaError (base)
└── AssemblerError (assembler-related)
    ├── AssemblySyntaxError - unrecognized character (strict lexing only)
    ├── ParseError (parse-time)
    │   ├── UnexpectedTokenError - token where another was expected
    │   ├── UnexpectedEndOfInputError - token stream ended early
    │   ├── DuplicateLabelError - label defined more than once
    │   ├── UndefinedLabelError - reference to an unknown label
    │   ├── OperandCountMismatchError - wrong number of operands
    │   ├── OperandTypeMismatchError - register where immediate expected, etc.
    │   └── InvalidRegisterError - register number outside R0..R31
    └── EncodeError (encode-time)
        ├── RegisterOutOfRangeError - register does not fit its 5-bit field
        ├── ImmediateOutOfRangeError - immediate does not fit its field
        └── InvalidOperandsError - operand shape does not match the format

Source Locations
----------------
Every token carries a Span: start/end offsets into the source string plus
a zero-based line number. Errors keep the Span of the offending token so
that, once the source text is attached, they render as:

    prog.asm:3:8: error: undefined label 'lop'
        JR lop
           ^^^
    hint: did you mean 'loop'?
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class IsaError(Exception):
    """
    Base exception for all ISA toolchain errors.

        try:
            words = Assembler().assemble_string(source)
        except IsaError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class Span:
    """
    A location in source code, attached to tokens and errors.

    Attributes:
        start: Offset of the first character (inclusive)
        end: Offset one past the last character (exclusive)
        line: Line number (0-indexed)
    """
    start: int
    end: int
    line: int

    @property
    def width(self) -> int:
        """Number of characters covered by the span."""
        return max(self.end - self.start, 0)

    def merge(self, other: "Span") -> "Span":
        """Return a span covering both spans, keeping this span's line."""
        return Span(min(self.start, other.start), max(self.end, other.end), self.line)

    def column(self, source: str) -> int:
        """Return the 1-indexed column of the span start within ``source``."""
        line_start = source.rfind("\n", 0, self.start) + 1
        return self.start - line_start + 1

    def source_line(self, source: str) -> str:
        """Return the full text of the line the span starts on."""
        line_start = source.rfind("\n", 0, self.start) + 1
        line_end = source.find("\n", self.start)
        if line_end == -1:
            line_end = len(source)
        return source[line_start:line_end]

    def __str__(self) -> str:
        return f"line {self.line + 1}, offset {self.start}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(IsaError):
    """
    Base exception for all assembler-related errors.

    The span is known when the error is raised; the source text usually
    is not (the parser only sees tokens). ``attach_source`` fills in the
    filename, column and source line afterwards so the message can show
    the offending text with a caret underline.

    Attributes:
        message: The error description
        span: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text of the offending line (optional)
        filename: Name of the source file (optional)
    """

    def __init__(
        self,
        message: str,
        span: Optional[Span] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.span = span
        self.hint = hint
        self.source_line = source_line
        self.filename: Optional[str] = None
        self.column: Optional[int] = None
        super().__init__(self._format_message())

    def attach_source(self, source: str, filename: str = "<input>") -> "AssemblerError":
        """
        Attach the original source text so the error can render context.

        Returns self so callers can write ``raise err.attach_source(src)``.
        """
        self.filename = filename
        if self.span is not None and self.span.start <= len(source):
            self.column = self.span.column(source)
            self.source_line = self.span.source_line(source)
        self.args = (self._format_message(),)
        return self

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.asm:2:5: error: register R40 is out of range (R0..R31)
                LI R40, 7
                   ^^^
        """
        parts = []

        # Location prefix
        if self.span is not None and self.column is not None:
            where = f"{self.filename or '<input>'}:{self.span.line + 1}:{self.column}"
            parts.append(f"{where}: error: {self.message}")
        elif self.span is not None:
            parts.append(f"{self.span}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret underline
        if self.source_line is not None and self.column is not None:
            parts.append(f"    {self.source_line}")
            width = max(self.span.width, 1)
            # Never underline past the end of the line
            width = min(width, max(len(self.source_line) - self.column + 1, 1))
            padding = " " * (4 + self.column - 1)
            parts.append(f"{padding}{'^' * width}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Unrecognized character in assembly source.

    Only raised when the lexer runs in strict mode; the default lexer
    silently skips characters it does not recognize.
    """
    pass


# =============================================================================
# Parse-Time Exceptions
# =============================================================================

class ParseError(AssemblerError):
    """Base class for errors raised while turning tokens into instructions."""
    pass


class UnexpectedTokenError(ParseError):
    """A token appeared where a different kind of token was expected."""

    def __init__(self, expected: str, found: str, span: Optional[Span] = None):
        self.expected = expected
        self.found = found
        super().__init__(f"expected {expected}, found {found}", span=span)


class UnexpectedEndOfInputError(ParseError):
    """The token stream ended while more tokens were required."""

    def __init__(self, span: Optional[Span] = None):
        super().__init__("unexpected end of input", span=span)


class DuplicateLabelError(ParseError):
    """
    Label defined more than once.

    Raised by the label scan regardless of how many instructions lie
    between the two definitions.
    """

    def __init__(
        self,
        label: str,
        span: Optional[Span] = None,
        original_span: Optional[Span] = None,
    ):
        self.label = label
        self.original_span = original_span

        hint = None
        if original_span is not None:
            hint = f"'{label}' was first defined on line {original_span.line + 1}"

        super().__init__(f"duplicate label '{label}'", span=span, hint=hint)


class UndefinedLabelError(ParseError):
    """
    Reference to a label that is never defined.

    Similar label names are suggested in the hint to help catch typos.
    """

    def __init__(
        self,
        label: str,
        span: Optional[Span] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.label = label
        self.similar_labels = similar_labels or []

        hint = None
        if self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(f"undefined label '{label}'", span=span, hint=hint)


class OperandCountMismatchError(ParseError):
    """An instruction has the wrong number of operands for its format."""

    def __init__(
        self,
        expected: int,
        found: int,
        span: Optional[Span] = None,
        mnemonic: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        self.mnemonic = mnemonic

        subject = f"'{mnemonic}'" if mnemonic else "instruction"
        noun = "operand" if expected == 1 else "operands"
        super().__init__(
            f"{subject} expects {expected} {noun}, found {found}",
            span=span,
        )


class OperandTypeMismatchError(ParseError):
    """An operand has the wrong kind (register vs. immediate) for its slot."""

    def __init__(
        self,
        span: Optional[Span] = None,
        expected: Optional[str] = None,
        found: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found

        if expected and found:
            message = f"operand type mismatch: expected {expected}, found {found}"
        else:
            message = "operand type mismatch"
        super().__init__(message, span=span)


class InvalidRegisterError(ParseError):
    """A register number outside R0..R31 was written in the source."""

    def __init__(self, span: Optional[Span] = None, register: Optional[int] = None):
        self.register = register

        if register is not None:
            message = f"register R{register} is out of range (R0..R31)"
        else:
            message = "invalid register"
        super().__init__(message, span=span)


# =============================================================================
# Encode-Time Exceptions
# =============================================================================

class EncodeError(AssemblerError):
    """Base class for errors raised while packing instructions into words."""
    pass


class RegisterOutOfRangeError(EncodeError):
    """A register value does not fit its 5-bit field."""

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"register R{value} is out of range (R0..R31)")


class ImmediateOutOfRangeError(EncodeError):
    """
    An immediate value does not fit the width of its field.

    Negative immediates are always out of range: fields hold unsigned
    values only.
    """

    def __init__(self, bits: int, value: int):
        self.bits = bits
        self.value = value

        hint = None
        if value < 0:
            hint = "immediates are unsigned; negative values cannot be encoded"
        else:
            hint = f"largest {bits}-bit value is {(1 << bits) - 1}"

        super().__init__(
            f"immediate value {value} does not fit in {bits} bits",
            hint=hint,
        )


class InvalidOperandsError(EncodeError):
    """
    The operand list of an instruction does not match its format.

    The parser validates every instruction it produces, so this only
    happens for instructions constructed directly in Python.
    """

    def __init__(self, mnemonic: str, reason: str):
        self.mnemonic = mnemonic
        self.reason = reason
        super().__init__(f"cannot encode '{mnemonic}': {reason}")
