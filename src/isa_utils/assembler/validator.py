"""
Operand validation.

Checks that an instruction's operands match the pattern its format
requires, reading the same layout table the encoder uses:

| Format | Arity | Pattern        |
|--------|-------|----------------|
| R3     | 3     | Reg, Reg, Reg  |
| R2     | 2     | Reg, Reg       |
| RI     | 2     | Reg, Imm       |
| RRI    | 3     | Reg, Reg, Imm  |
| RII    | 3     | Reg, Imm, Imm  |
| I      | 1     | Imm            |
| NoOP   | 0     | (none)         |
"""

from typing import Optional, Sequence

from isa_utils.cpu.isa import FieldKind, InstrFormat, operand_pattern
from isa_utils.errors import OperandCountMismatchError, OperandTypeMismatchError, Span


def validate(
    fmt: InstrFormat,
    operands: Sequence,
    span: Span,
    mnemonic: Optional[str] = None,
) -> None:
    """
    Validate operands against a format.

    Args:
        fmt: The instruction format
        operands: Operands in source order; each must expose ``kind`` and
            may expose ``span`` (parser operands do)
        span: Span of the whole instruction, used for arity errors
        mnemonic: Opcode mnemonic for the error message (optional)

    Raises:
        OperandCountMismatchError: Wrong number of operands
        OperandTypeMismatchError: First operand whose kind does not match
    """
    pattern = operand_pattern(fmt)

    if len(operands) != len(pattern):
        raise OperandCountMismatchError(
            expected=len(pattern),
            found=len(operands),
            span=span,
            mnemonic=mnemonic,
        )

    for operand, expected in zip(operands, pattern):
        if operand.kind != expected:
            raise OperandTypeMismatchError(
                span=getattr(operand, "span", None) or span,
                expected=_describe(expected),
                found=_describe(operand.kind),
            )


def _describe(kind: FieldKind) -> str:
    if kind == FieldKind.REGISTER:
        return "register"
    if kind == FieldKind.IMMEDIATE:
        return "immediate"
    return str(kind)
