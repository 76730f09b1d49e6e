"""
Instruction Decoder and Disassembler
====================================

Decodes 32-bit machine words back into instructions. This is the inverse
of the encoder in ``isa_utils.assembler.codegen``: both read the same
layout table, so for every valid instruction

    decode(encode(instr)) == instr

Decoding reads the opcode from bits [31:27]. Unknown codes decode to None;
otherwise exactly the operand fields of the opcode's format are
extracted, in layout order. No further validation is done.

Usage:
    disasm = Disassembler()

    # Disassemble a word list
    for line in disasm.disassemble(words):
        print(line)

    # Decode raw big-endian bytes first
    words = words_from_bytes(path.read_bytes())
"""

from dataclasses import dataclass
from typing import Iterable, Optional
import logging
import struct

from isa_utils.cpu.bits import get_bits
from isa_utils.cpu.isa import (
    FieldKind,
    Immediate,
    OPCODE_FIELD,
    Register,
    ResolvedInstruction,
    format_of,
    opcode_from_code,
    operand_layout,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Decoding
# =============================================================================

def decode(word: int) -> Optional[ResolvedInstruction]:
    """
    Decode one machine word.

    Args:
        word: A 32-bit instruction word

    Returns:
        The decoded instruction, or None if the opcode field holds an
        unassigned code
    """
    code = get_bits(word, OPCODE_FIELD.hi, OPCODE_FIELD.lo)
    opcode = opcode_from_code(code)
    if opcode is None:
        return None

    operands = []
    for bit_field in operand_layout(format_of(opcode)):
        value = get_bits(word, bit_field.hi, bit_field.lo)
        if bit_field.kind == FieldKind.REGISTER:
            operands.append(Register(value))
        else:
            operands.append(Immediate(value))

    return ResolvedInstruction(opcode, tuple(operands))


# =============================================================================
# Word Stream Readers
# =============================================================================

def words_from_bytes(data: bytes) -> list[int]:
    """
    Split raw big-endian bytes into 32-bit words.

    Raises:
        ValueError: If the length is not a multiple of 4
    """
    if len(data) % 4:
        raise ValueError(
            f"binary input is {len(data)} bytes, not a whole number of 4-byte words"
        )
    return list(struct.unpack(f">{len(data) // 4}I", data))


def words_from_hex_text(text: str) -> list[int]:
    """
    Parse hex text, one word per line.

    Blank lines and ``#`` comments are ignored; an optional ``0x`` prefix
    is accepted.

    Raises:
        ValueError: If a line is not a valid 32-bit hex word
    """
    words = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        try:
            word = int(line, 16)
        except ValueError:
            raise ValueError(f"line {line_no}: invalid hex word {line!r}") from None
        if not 0 <= word <= 0xFFFFFFFF:
            raise ValueError(f"line {line_no}: {line!r} does not fit in 32 bits")
        words.append(word)
    return words


# =============================================================================
# Disassembly
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    A single disassembled word.

    Attributes:
        index: Position of the word in the program (instruction index)
        word: The raw 32-bit word
        instruction: The decoded instruction, or None for unknown opcodes
        mnemonic: The instruction mnemonic, or ".WORD" for unknown opcodes
        operand_str: Formatted operands for display
        comment: Optional comment (label names, "unknown opcode")
    """
    index: int
    word: int
    instruction: Optional[ResolvedInstruction]
    mnemonic: str
    operand_str: str
    comment: str = ""

    @property
    def text(self) -> str:
        """The instruction as assembly text, without index or word columns."""
        if self.operand_str:
            return f"{self.mnemonic} {self.operand_str}"
        return self.mnemonic

    def __str__(self) -> str:
        """Format as listing line: INDEX: WORD  MNEMONIC OPERANDS"""
        if self.comment:
            return f"{self.index:04d}: {self.word:08X}  {self.text} ; {self.comment}"
        return f"{self.index:04d}: {self.word:08X}  {self.text}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "index": self.index,
            "word": f"0x{self.word:08X}",
            "word_int": self.word,
            "mnemonic": self.mnemonic,
            "format": str(self.instruction.format) if self.instruction else None,
            "operands": self.operand_str,
            "comment": self.comment,
        }


class Disassembler:
    """
    Turns machine words back into assembly listings.

    Attributes:
        _labels: Optional map of instruction index to label names, used
            to annotate the listing
    """

    def __init__(self, labels: Optional[dict[str, int]] = None):
        """
        Initialize the disassembler.

        Args:
            labels: Optional label map (name -> instruction index), as
                produced by the assembler
        """
        self._labels: dict[int, list[str]] = {}
        for name, index in (labels or {}).items():
            self._labels.setdefault(index, []).append(name)

    def disassemble_one(self, word: int, index: int = 0) -> DisassembledInstruction:
        """
        Disassemble a single word.

        Args:
            word: The 32-bit word
            index: Instruction index (for display and label lookup)

        Returns:
            DisassembledInstruction; unknown opcodes become a ``.WORD``
            entry holding the raw value
        """
        instr = decode(word)
        labels = ", ".join(sorted(self._labels.get(index, [])))

        if instr is None:
            logger.debug(f"Unknown opcode in word {index}: 0x{word:08X}")
            return DisassembledInstruction(
                index=index,
                word=word,
                instruction=None,
                mnemonic=".WORD",
                operand_str=f"0x{word:08X}",
                comment="unknown opcode",
            )

        return DisassembledInstruction(
            index=index,
            word=word,
            instruction=instr,
            mnemonic=instr.opcode.mnemonic,
            operand_str=", ".join(str(op) for op in instr.operands),
            comment=labels,
        )

    def disassemble(
        self,
        words: Iterable[int],
        count: Optional[int] = None,
    ) -> list[DisassembledInstruction]:
        """
        Disassemble multiple words.

        Args:
            words: Machine words in program order
            count: Maximum number of words to disassemble (None = all)

        Returns:
            List of DisassembledInstruction objects
        """
        result = []
        for index, word in enumerate(words):
            if count is not None and index >= count:
                break
            result.append(self.disassemble_one(word, index))
        return result

    def disassemble_to_text(self, words: Iterable[int], count: Optional[int] = None) -> str:
        """Disassemble and return a multi-line listing."""
        return "\n".join(str(instr) for instr in self.disassemble(words, count))
