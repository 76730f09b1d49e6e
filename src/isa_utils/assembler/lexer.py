"""
Assembly Language Lexer
=======================

This module implements the lexer (tokenizer) for the assembly language.
It converts source text into a flat list of tokens that the parser
consumes left to right.

Token Types
-----------
- OPCODE: A known mnemonic (ADD, LI, JR, ...), matched case-sensitively
- REGISTER: R followed by digits (R0..R31; the bound is checked by the parser)
- IMMEDIATE: Decimal (42), hexadecimal (0x2A) or binary (0b101010) integer
- LABEL_DEF: An identifier ending with a colon (loop:)
- LABEL_REF: Any other identifier, used as an operand
- COMMA: ,
- COMMENT: # to end of line
- TERMINATOR: ; (optional instruction terminator)

Whitespace (including newlines) is not tokenized. Instructions are
delimited by the next opcode, so a program does not need terminators or
line breaks at all.

Unrecognized Characters
-----------------------
By default the lexer is permissive: characters it does not recognize are
skipped without error. Pass ``strict=True`` to raise AssemblySyntaxError
instead.

Example
-------
>>> from isa_utils.assembler.lexer import lex
>>> for token in lex("loop: ADDI R1, R1, 1  # count"):
...     print(token)
Token(LABEL_DEF, 'loop', 0:5)
Token(OPCODE, ADDI, 6:10)
Token(REGISTER, 1, 11:13)
Token(COMMA, 13:14)
Token(REGISTER, 1, 15:17)
Token(COMMA, 17:18)
Token(IMMEDIATE, 1, 19:20)
Token(COMMENT, ' count', 22:29)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Union
import string

from isa_utils.cpu.isa import Opcode, opcode_from_mnemonic
from isa_utils.errors import AssemblySyntaxError, Span


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for the assembly language."""

    OPCODE = auto()      # Known mnemonic
    REGISTER = auto()    # R<digits>
    IMMEDIATE = auto()   # Integer literal
    LABEL_DEF = auto()   # name:
    LABEL_REF = auto()   # name (operand)
    COMMA = auto()       # ,
    COMMENT = auto()     # # comment
    TERMINATOR = auto()  # ;


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from the source code.

    Attributes:
        type: The TokenType classification
        value: Opcode for OPCODE, int for REGISTER/IMMEDIATE, str for
            LABEL_DEF/LABEL_REF/COMMENT, None for COMMA/TERMINATOR
        span: Location of the token in the source
    """
    type: TokenType
    value: Union[Opcode, int, str, None]
    span: Span

    def __repr__(self) -> str:
        where = f"{self.span.start}:{self.span.end}"
        if self.value is None:
            return f"Token({self.type.name}, {where})"
        if isinstance(self.value, Opcode):
            return f"Token({self.type.name}, {self.value.value}, {where})"
        return f"Token({self.type.name}, {self.value!r}, {where})"

    def describe(self) -> str:
        """Describe the token the way it appears in error messages."""
        if self.type == TokenType.OPCODE:
            return f"opcode '{self.value}'"
        if self.type == TokenType.REGISTER:
            return f"register 'R{self.value}'"
        if self.type == TokenType.IMMEDIATE:
            return f"immediate '{self.value}'"
        if self.type == TokenType.LABEL_DEF:
            return f"label definition '{self.value}:'"
        if self.type == TokenType.LABEL_REF:
            return f"label reference '{self.value}'"
        if self.type == TokenType.COMMA:
            return "','"
        if self.type == TokenType.TERMINATOR:
            return "';'"
        return "comment"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes assembly source code.

    Rules are applied greedily at the current position:
    whitespace is skipped, ``#`` starts a comment, ``,`` and ``;`` are
    single-character tokens, a digit (or ``-`` directly followed by a
    digit) starts an immediate, ``R`` directly followed by a digit starts
    a register, and any other letter starts an identifier.

    Usage:
        lexer = Lexer(source_text)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        strict: Raise on unrecognized characters instead of skipping them
    """

    # Characters that can continue an identifier (besides alphanumerics)
    IDENT_EXTRA = "_:"

    def __init__(self, source: str, strict: bool = False):
        """
        Initialize the lexer with source code.

        Args:
            source: The assembly source code to tokenize
            strict: If True, unrecognized characters raise AssemblySyntaxError
        """
        self.source = source
        self.strict = strict

        self._pos = 0
        self._line = 0  # zero-based

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects in source order

        Raises:
            AssemblySyntaxError: Only in strict mode, on an unrecognized character
        """
        while not self._at_end():
            if self._skip_whitespace():
                continue

            token = self._scan_token()
            if token is not None:
                yield token

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Look at a character without consuming it ("" past the end)."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking lines."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1
        if char == "\n":
            self._line += 1
        return char

    @staticmethod
    def _is_digit(char: str) -> bool:
        # ASCII digits only
        return char != "" and char in string.digits

    def _make_token(
        self,
        token_type: TokenType,
        value: Union[Opcode, int, str, None],
        start: int,
        line: int,
    ) -> Token:
        """Create a token spanning from ``start`` to the current position."""
        return Token(token_type, value, Span(start, self._pos, line))

    # =========================================================================
    # Whitespace Handling
    # =========================================================================

    def _skip_whitespace(self) -> bool:
        """
        Skip a run of whitespace characters, including newlines.

        Returns:
            True if any whitespace was skipped
        """
        skipped = False
        # Note: '' is not whitespace, so this stops at end of input
        while self._peek().isspace():
            self._advance()
            skipped = True
        return skipped

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Optional[Token]:
        """
        Scan the next token from source.

        Returns:
            The next Token, or None if the character was skipped
        """
        start = self._pos
        line = self._line
        char = self._peek()

        if char == "#":
            return self._scan_comment(start, line)

        if char == ",":
            self._advance()
            return self._make_token(TokenType.COMMA, None, start, line)

        if char == ";":
            self._advance()
            return self._make_token(TokenType.TERMINATOR, None, start, line)

        if self._is_digit(char):
            return self._scan_number(start, line)

        if char == "-" and self._is_digit(self._peek(1)):
            self._advance()  # consume -
            token = self._scan_number(start, line)
            return self._make_token(TokenType.IMMEDIATE, -token.value, start, line)

        if char == "R" and self._is_digit(self._peek(1)):
            return self._scan_register(start, line)

        if char.isalpha():
            return self._scan_identifier(start, line)

        # Unknown character
        self._advance()
        if self.strict:
            raise AssemblySyntaxError(
                f"unexpected character {char!r}",
                span=Span(start, self._pos, line),
            )
        return None

    def _scan_comment(self, start: int, line: int) -> Token:
        """Scan a comment up to (not including) the end of the line."""
        self._advance()  # consume #
        chars = []
        while not self._at_end() and self._peek() != "\n":
            chars.append(self._advance())
        return self._make_token(TokenType.COMMENT, "".join(chars), start, line)

    def _scan_number(self, start: int, line: int) -> Token:
        """
        Scan an unsigned integer literal.

        Handles 0x (hex) and 0b (binary) prefixes; everything else is a
        maximal run of decimal digits.
        """
        if self._peek() == "0":
            prefix = self._peek(1).lower()
            if prefix == "x" and self._peek(2) and self._peek(2) in string.hexdigits:
                self._advance()  # consume 0
                self._advance()  # consume x
                return self._scan_digits(string.hexdigits, 16, start, line)
            if prefix == "b" and self._peek(2) and self._peek(2) in "01":
                self._advance()  # consume 0
                self._advance()  # consume b
                return self._scan_digits("01", 2, start, line)

        return self._scan_digits(string.digits, 10, start, line)

    def _scan_digits(self, alphabet: str, base: int, start: int, line: int) -> Token:
        """Scan a maximal run of digits from ``alphabet`` in the given base."""
        chars = []
        # Note: Must check for non-empty string first because '' in 'string' is True in Python
        while self._peek() and self._peek() in alphabet:
            chars.append(self._advance())

        value = int("".join(chars), base)
        return self._make_token(TokenType.IMMEDIATE, value, start, line)

    def _scan_register(self, start: int, line: int) -> Token:
        """Scan a register: R followed by a maximal run of digits."""
        self._advance()  # consume R
        chars = []
        while self._is_digit(self._peek()):
            chars.append(self._advance())

        return self._make_token(TokenType.REGISTER, int("".join(chars)), start, line)

    def _scan_identifier(self, start: int, line: int) -> Token:
        """
        Scan an identifier and classify it.

        A trailing colon makes a label definition; a known mnemonic makes
        an opcode; anything else is a label reference.
        """
        chars = []
        while self._peek() and (self._peek().isalnum() or self._peek() in self.IDENT_EXTRA):
            chars.append(self._advance())

        name = "".join(chars)

        if name.endswith(":"):
            return self._make_token(TokenType.LABEL_DEF, name.rstrip(":"), start, line)

        opcode = opcode_from_mnemonic(name)
        if opcode is not None:
            return self._make_token(TokenType.OPCODE, opcode, start, line)

        return self._make_token(TokenType.LABEL_REF, name, start, line)


# =============================================================================
# Convenience Functions
# =============================================================================

def lex(source: str, strict: bool = False) -> list[Token]:
    """
    Tokenize source text.

    In the default permissive mode this never fails: unrecognized
    characters are skipped.

    Args:
        source: Assembly source code
        strict: Raise AssemblySyntaxError on unrecognized characters

    Returns:
        List of tokens in source order
    """
    return list(Lexer(source, strict=strict).tokenize())
