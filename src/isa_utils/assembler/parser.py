"""
Assembly Language Parser
========================

This module converts the flat token stream produced by the lexer into a
list of resolved instructions ready for the encoder.

Passes
------
Parsing runs three ordered passes followed by validation:

1. **Label scan** (``build_label_map``): every label definition maps to the
   index of the next instruction. Indices count OPCODE tokens only, so
   labels, comments and blank lines never shift them.

2. **Instruction build** (``Parser._build_instructions``): each OPCODE
   starts an instruction; the registers, immediates and label references
   that follow become its operands. The next OPCODE or label definition
   ends the operand list.

3. **Label resolution** (``resolve_labels``): every label reference is
   replaced by an immediate holding the label's instruction index.

Finally each instruction is checked against its format
(``validate_instructions``) and projected to a ResolvedInstruction.

Example
-------
```asm
start:  LI   R1, 10      # R1 = 10
loop:   SUBI R1, R1, 1
        JEQ  R1, R0, done
        JR   loop
done:   END
```

Here ``start`` is 0, ``loop`` is 1 and ``done`` is 4, so ``JR loop``
becomes ``JR 1``.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Union
import difflib
import logging

from isa_utils.assembler.lexer import Token, TokenType, lex
from isa_utils.assembler.validator import validate
from isa_utils.cpu.isa import (
    Immediate,
    Opcode,
    Register,
    REGISTER_COUNT,
    ResolvedInstruction,
    format_of,
)
from isa_utils.errors import (
    DuplicateLabelError,
    InvalidRegisterError,
    Span,
    UndefinedLabelError,
    UnexpectedEndOfInputError,
    UnexpectedTokenError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Unresolved Operands and Instructions
# =============================================================================

@dataclass(frozen=True)
class LabelRef:
    """A reference to a label, replaced by an Immediate during resolution."""
    name: str

    def __str__(self) -> str:
        return self.name


UnresolvedOperand = Union[Register, Immediate, LabelRef]


@dataclass(frozen=True)
class SpannedOperand:
    """An operand together with the span of the token it came from."""
    operand: UnresolvedOperand
    span: Span

    @property
    def kind(self):
        # LabelRef has no kind; references are resolved before validation
        return getattr(self.operand, "kind", None)


@dataclass
class UnresolvedInstruction:
    """
    An instruction as written in the source.

    Operands may still contain label references.

    Attributes:
        opcode: The instruction's opcode
        opcode_span: Span of the opcode token
        operands: Operands in source order, each with its span
    """
    opcode: Opcode
    opcode_span: Span
    operands: list[SpannedOperand] = field(default_factory=list)

    @property
    def span(self) -> Span:
        """Span from the opcode through the last operand."""
        if not self.operands:
            return self.opcode_span
        return self.opcode_span.merge(self.operands[-1].span)

    def to_resolved(self) -> ResolvedInstruction:
        """
        Project to a ResolvedInstruction.

        Raises:
            ValueError: If a label reference is still present
        """
        operands = []
        for spanned in self.operands:
            if isinstance(spanned.operand, LabelRef):
                raise ValueError(f"unresolved label reference '{spanned.operand.name}'")
            operands.append(spanned.operand)
        return ResolvedInstruction(self.opcode, tuple(operands))


# =============================================================================
# Pass 1: Label Scan
# =============================================================================

def build_label_map(tokens: Iterable[Token]) -> dict[str, int]:
    """
    Map every label definition to the index of the next instruction.

    Args:
        tokens: The full token list

    Returns:
        Dictionary of label name to instruction index

    Raises:
        DuplicateLabelError: If a label is defined twice
    """
    labels: dict[str, int] = {}
    definitions: dict[str, Span] = {}
    count = 0

    for token in tokens:
        if token.type == TokenType.LABEL_DEF:
            name = token.value
            if name in labels:
                raise DuplicateLabelError(
                    name,
                    span=token.span,
                    original_span=definitions[name],
                )
            labels[name] = count
            definitions[name] = token.span
            logger.debug(f"Label '{name}' -> {count}")
        elif token.type == TokenType.OPCODE:
            count += 1

    return labels


# =============================================================================
# Pass 2: Instruction Build
# =============================================================================

class Parser:
    """
    Parses a token list into resolved instructions.

    Usage:
        tokens = lex(source)
        parser = Parser(tokens)
        instructions = parser.parse()
        parser.labels   # {'loop': 1, ...}

    Attributes:
        labels: The label map built by the last call to parse()
    """

    # Tokens that end an instruction's operand list without being consumed
    _OPERAND_STOP = (TokenType.OPCODE, TokenType.LABEL_DEF)

    # Tokens that may appear anywhere and carry no meaning for the parser
    _IGNORED = (TokenType.COMMENT, TokenType.TERMINATOR)

    def __init__(self, tokens: list[Token]):
        self._tokens = list(tokens)
        self._pos = 0
        self.labels: dict[str, int] = {}

    def parse(self) -> list[ResolvedInstruction]:
        """
        Run all passes and return the resolved program.

        Raises:
            ParseError: On the first error found (fail fast)
        """
        self._pos = 0
        self.labels = build_label_map(self._tokens)

        instructions = self._build_instructions()
        instructions = resolve_labels(instructions, self.labels)
        resolved = validate_instructions(instructions)

        logger.debug(
            f"Parsed {len(resolved)} instructions, {len(self.labels)} labels"
        )
        return resolved

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def _current(self) -> Token:
        if self._at_end():
            last = self._tokens[-1].span if self._tokens else None
            raise UnexpectedEndOfInputError(span=last)
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        self._pos += 1
        return token

    def _check(self, *types: TokenType) -> bool:
        """Check if current token is one of the given types."""
        return not self._at_end() and self._current().type in types

    # =========================================================================
    # Instruction Parsing
    # =========================================================================

    def _build_instructions(self) -> list[UnresolvedInstruction]:
        instructions: list[UnresolvedInstruction] = []

        while not self._at_end():
            if self._check(TokenType.OPCODE):
                instructions.append(self._parse_instruction())
            elif self._check(TokenType.LABEL_DEF, *self._IGNORED):
                self._advance()
            else:
                # An operand with no instruction to belong to
                token = self._current()
                raise UnexpectedTokenError(
                    expected="opcode",
                    found=token.describe(),
                    span=token.span,
                )

        return instructions

    def _parse_instruction(self) -> UnresolvedInstruction:
        """Parse an opcode and the operands that follow it."""
        opcode_token = self._advance()
        instruction = UnresolvedInstruction(opcode_token.value, opcode_token.span)

        while not self._at_end() and not self._check(*self._OPERAND_STOP):
            token = self._advance()
            operand = self._parse_operand(token)
            if operand is not None:
                instruction.operands.append(operand)

        return instruction

    def _parse_operand(self, token: Token) -> Optional[SpannedOperand]:
        """Turn an operand token into an operand; separators yield None."""
        if token.type == TokenType.REGISTER:
            if token.value >= REGISTER_COUNT:
                raise InvalidRegisterError(span=token.span, register=token.value)
            return SpannedOperand(Register(token.value), token.span)

        if token.type == TokenType.IMMEDIATE:
            return SpannedOperand(Immediate(token.value), token.span)

        if token.type == TokenType.LABEL_REF:
            return SpannedOperand(LabelRef(token.value), token.span)

        # Comma, comment, terminator
        return None


# =============================================================================
# Pass 3: Label Resolution
# =============================================================================

def resolve_labels(
    instructions: list[UnresolvedInstruction],
    labels: dict[str, int],
) -> list[UnresolvedInstruction]:
    """
    Replace every label reference with an immediate instruction index.

    Args:
        instructions: Instructions from the build pass
        labels: Label map from build_label_map

    Returns:
        New instructions with no LabelRef operands

    Raises:
        UndefinedLabelError: If a reference names an unknown label
    """
    resolved = []

    for instr in instructions:
        operands = []
        for spanned in instr.operands:
            if isinstance(spanned.operand, LabelRef):
                name = spanned.operand.name
                if name not in labels:
                    raise UndefinedLabelError(
                        name,
                        span=spanned.span,
                        similar_labels=difflib.get_close_matches(name, labels.keys()),
                    )
                spanned = SpannedOperand(Immediate(labels[name]), spanned.span)
            operands.append(spanned)

        resolved.append(UnresolvedInstruction(instr.opcode, instr.opcode_span, operands))

    return resolved


# =============================================================================
# Validation
# =============================================================================

def validate_instructions(
    instructions: list[UnresolvedInstruction],
) -> list[ResolvedInstruction]:
    """
    Validate every instruction against its format and resolve it.

    Raises:
        OperandCountMismatchError: Wrong number of operands
        OperandTypeMismatchError: Register where an immediate belongs, or vice versa
    """
    result = []
    for instr in instructions:
        validate(
            format_of(instr.opcode),
            instr.operands,
            instr.span,
            mnemonic=instr.opcode.mnemonic,
        )
        result.append(instr.to_resolved())
    return result


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(tokens: list[Token]) -> list[ResolvedInstruction]:
    """
    Parse a token list into resolved instructions.

    Args:
        tokens: Tokens from lex()

    Returns:
        Validated instructions in program order

    Raises:
        ParseError: On the first error found
    """
    return Parser(tokens).parse()


def parse_source(source: str, strict: bool = False) -> list[ResolvedInstruction]:
    """
    Lex and parse assembly source code.

    Args:
        source: Assembly source code
        strict: Raise on unrecognized characters instead of skipping them

    Returns:
        Validated instructions in program order
    """
    return parse(lex(source, strict=strict))
