"""
Instruction Encoder
===================

This module packs resolved instructions into 32-bit machine words and
serializes the resulting word stream.

Encoding
--------
Every word starts from zero. The 5-bit opcode code is placed in bits
[31:27], then each operand is placed in its format's field (see
``isa_utils.cpu.isa.FORMAT_LAYOUTS``). Fields are disjoint, so placement
is a plain OR and the order of writes does not matter.

Values are range-checked before placement:
- registers must be 0..31
- immediates must be non-negative and fit the field width

Output Formats
--------------
- hex:  one word per line, 8 uppercase hex digits (``08443000``)
- bin:  one word per line, 32 binary digits
- raw:  big-endian bytes, 4 per word
- listing: index, word and instruction text, with label annotations
"""

from typing import Iterable, Optional
import logging
import struct

from isa_utils.cpu.bits import fits_in_bits, set_bits
from isa_utils.cpu.isa import (
    FieldKind,
    Immediate,
    InstrFormat,
    OPCODE_FIELD,
    REGISTER_COUNT,
    ResolvedInstruction,
    machine_code,
    operand_layout,
)
from isa_utils.errors import (
    ImmediateOutOfRangeError,
    InvalidOperandsError,
    RegisterOutOfRangeError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Encoding
# =============================================================================

def encode(instr: ResolvedInstruction) -> int:
    """
    Encode one instruction into a 32-bit word.

    Args:
        instr: A resolved instruction

    Returns:
        The machine word

    Raises:
        RegisterOutOfRangeError: Register outside R0..R31
        ImmediateOutOfRangeError: Immediate negative or too wide for its field
        InvalidOperandsError: Operands do not match the instruction format
    """
    fmt = instr.format
    layout = operand_layout(fmt)
    operands = instr.operands

    # JR with no target jumps to instruction 0
    if fmt == InstrFormat.I and not operands:
        operands = (Immediate(0),)

    if len(operands) != len(layout):
        raise InvalidOperandsError(
            instr.opcode.mnemonic,
            f"format {fmt} takes {len(layout)} operands, got {len(operands)}",
        )

    word = set_bits(0, OPCODE_FIELD.hi, OPCODE_FIELD.lo, machine_code(instr.opcode))

    for position, (operand, bit_field) in enumerate(zip(operands, layout), start=1):
        kind = getattr(operand, "kind", None)
        if kind != bit_field.kind:
            raise InvalidOperandsError(
                instr.opcode.mnemonic,
                f"operand {position} must be a {bit_field.kind}, got {operand!r}",
            )

        value = operand.value
        if kind == FieldKind.REGISTER:
            if not 0 <= value < REGISTER_COUNT:
                raise RegisterOutOfRangeError(value)
        elif value < 0 or not fits_in_bits(value, bit_field.width):
            raise ImmediateOutOfRangeError(bit_field.width, value)

        word = set_bits(word, bit_field.hi, bit_field.lo, value)

    return word


def encode_program(instructions: Iterable[ResolvedInstruction]) -> list[int]:
    """
    Encode a program, stopping at the first instruction that fails.

    Returns:
        Words in program order
    """
    words = [encode(instr) for instr in instructions]
    logger.debug(f"Encoded {len(words)} words")
    return words


# =============================================================================
# Output Formats
# =============================================================================

def to_hex_lines(words: Iterable[int]) -> list[str]:
    """Format words as 8-digit uppercase hex strings."""
    return [f"{word:08X}" for word in words]


def to_binary_lines(words: Iterable[int]) -> list[str]:
    """Format words as 32-digit binary strings."""
    return [f"{word:032b}" for word in words]


def to_bytes(words: Iterable[int]) -> bytes:
    """Serialize words as big-endian bytes, 4 per word."""
    words = list(words)
    return struct.pack(f">{len(words)}I", *words)


def format_listing(
    instructions: list[ResolvedInstruction],
    words: list[int],
    labels: Optional[dict[str, int]] = None,
) -> str:
    """
    Build an assembly listing.

    Example:
        ISA Assembler Listing
        ============================================================

        Index  Word      Source
        ------------------------------------------------------------
        0000   40400008  LI R1, 8                 ; start
        0001   0B000000  JR 0

    Args:
        instructions: The resolved program
        words: The encoded words, one per instruction
        labels: Label map used to annotate instruction indices (optional)

    Returns:
        The listing text
    """
    labels = labels or {}
    names_at: dict[int, list[str]] = {}
    for name, index in labels.items():
        names_at.setdefault(index, []).append(name)

    lines = []
    lines.append("ISA Assembler Listing")
    lines.append("=" * 60)
    lines.append("")
    lines.append("Index  Word      Source")
    lines.append("-" * 60)

    for index, (instr, word) in enumerate(zip(instructions, words)):
        line = f"{index:04d}   {word:08X}  {str(instr):24s}"
        if index in names_at:
            line += " ; " + ", ".join(sorted(names_at[index]))
        lines.append(line.rstrip())

    # Labels past the last instruction
    for index in sorted(i for i in names_at if i >= len(instructions)):
        lines.append(f"{index:04d}   {'':8s}  ; " + ", ".join(sorted(names_at[index])))

    if labels:
        lines.append("")
        lines.append("Label Table")
        lines.append("-" * 30)
        for name, index in sorted(labels.items()):
            lines.append(f"{name:20s} = {index}")

    return "\n".join(lines) + "\n"
