"""
Instruction Set Definition
==========================

This module defines the complete instruction set: the 18 opcodes, their
5-bit machine codes, their instruction formats, and the bit layout of
every format. It is shared by the assembler (which encodes instructions)
and the disassembler (which decodes them).

Instruction Word
----------------
Every instruction is exactly one 32-bit word. The opcode always occupies
bits [31:27]; the remaining 27 bits hold the operands, laid out by format:

| Format | Operands            | Fields (after the opcode)                   |
|--------|---------------------|---------------------------------------------|
| R3     | reg, reg, reg       | reg[26:22], reg[21:17], reg[16:12]          |
| R2     | reg, reg            | reg[26:22], reg[21:17]                      |
| RI     | reg, imm            | reg[26:22], imm[21:0]  (22-bit immediate)   |
| RRI    | reg, reg, imm       | reg[26:22], reg[21:17], imm[16:0] (17-bit)  |
| RII    | reg, imm, imm       | reg[26:22], imm[21:11], imm[10:0] (11-bit)  |
| I      | imm                 | imm[26:0] (27-bit immediate)                |
| NoOP   | (none)              | (unused, zero)                              |

Unused bits are always zero. Registers are numbered R0..R31.

Adding an opcode means adding one row to OPCODE_TABLE; adding a format
means adding one entry to FORMAT_LAYOUTS. The validator, encoder and
decoder all read these two tables.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union


# =============================================================================
# Enumerations
# =============================================================================

class InstrFormat(Enum):
    """
    Instruction formats.

    The format determines how many operands an instruction takes, which
    kind each operand must be, and where each operand lives in the word.
    """
    R3 = auto()     # opcode + reg + reg + reg
    R2 = auto()     # opcode + reg + reg
    RI = auto()     # opcode + reg + imm
    RRI = auto()    # opcode + reg + reg + imm
    RII = auto()    # opcode + reg + imm + imm
    I = auto()      # opcode + imm
    NoOP = auto()   # opcode only

    def __str__(self) -> str:
        return self.name


class Opcode(Enum):
    """The 18 instructions. The enum value is the assembly mnemonic."""

    # ALU
    ADD = "ADD"
    SUB = "SUB"
    MULT = "MULT"
    ADDI = "ADDI"
    SUBI = "SUBI"
    OR = "OR"
    AND = "AND"
    NOT = "NOT"

    # Data transfer
    LI = "LI"
    LD = "LD"
    SD = "SD"

    # Control
    JR = "JR"
    JEQ = "JEQ"
    JLTV = "JLTV"
    JGT = "JGT"
    JETV = "JETV"
    NOP = "NOP"
    END = "END"

    @property
    def mnemonic(self) -> str:
        return self.value

    @property
    def code(self) -> int:
        """The 5-bit machine code."""
        return OPCODE_TABLE[self].code

    @property
    def format(self) -> InstrFormat:
        return OPCODE_TABLE[self].format

    def __str__(self) -> str:
        return self.value


class FieldKind(Enum):
    """What a bit field in the instruction word holds."""
    OPCODE = auto()
    REGISTER = auto()
    IMMEDIATE = auto()

    def __str__(self) -> str:
        return self.name.lower()


# =============================================================================
# Opcode Table
# =============================================================================

@dataclass(frozen=True)
class OpcodeInfo:
    """
    Static information about one opcode.

    Attributes:
        code: 5-bit machine code placed in bits [31:27]
        format: Instruction format (operand pattern and layout)
        description: Short human-readable summary
    """
    code: int
    format: InstrFormat
    description: str

    def __repr__(self) -> str:
        return f"OpcodeInfo(code=0b{self.code:05b}, format={self.format.name})"


OPCODE_TABLE: dict[Opcode, OpcodeInfo] = {
    # ALU
    Opcode.ADD: OpcodeInfo(0b00001, InstrFormat.R3, "rd = rs + rt"),
    Opcode.SUB: OpcodeInfo(0b00010, InstrFormat.R3, "rd = rs - rt"),
    Opcode.MULT: OpcodeInfo(0b00011, InstrFormat.R3, "rd = rs * rt"),
    Opcode.ADDI: OpcodeInfo(0b00100, InstrFormat.RRI, "rd = rs + imm"),
    Opcode.SUBI: OpcodeInfo(0b00101, InstrFormat.RRI, "rd = rs - imm"),
    Opcode.OR: OpcodeInfo(0b00110, InstrFormat.R3, "rd = rs | rt"),
    Opcode.NOT: OpcodeInfo(0b00111, InstrFormat.R2, "rd = ~rs"),
    Opcode.AND: OpcodeInfo(0b10000, InstrFormat.R3, "rd = rs & rt"),

    # Data transfer
    Opcode.LI: OpcodeInfo(0b01000, InstrFormat.RI, "rd = imm"),
    Opcode.LD: OpcodeInfo(0b01001, InstrFormat.R2, "rd = mem[rs]"),
    Opcode.SD: OpcodeInfo(0b01010, InstrFormat.R2, "mem[rt] = rs"),

    # Control
    Opcode.JR: OpcodeInfo(0b01011, InstrFormat.I, "jump to instruction imm"),
    Opcode.JEQ: OpcodeInfo(0b01100, InstrFormat.RRI, "jump to imm if rs == rt"),
    Opcode.JLTV: OpcodeInfo(0b01101, InstrFormat.RII, "jump to imm2 if rs < imm1"),
    Opcode.JGT: OpcodeInfo(0b01110, InstrFormat.RRI, "jump to imm if rs > rt"),
    Opcode.JETV: OpcodeInfo(0b01111, InstrFormat.RII, "jump to imm2 if rs == imm1"),
    Opcode.NOP: OpcodeInfo(0b00000, InstrFormat.NoOP, "no operation"),
    Opcode.END: OpcodeInfo(0b11111, InstrFormat.NoOP, "end of program"),
}

# Reverse lookup used by the decoder
CODE_TABLE: dict[int, Opcode] = {info.code: op for op, info in OPCODE_TABLE.items()}

# Set of all valid mnemonics (for the lexer)
MNEMONICS: frozenset[str] = frozenset(op.value for op in Opcode)


# =============================================================================
# Bit Layouts
# =============================================================================

@dataclass(frozen=True)
class BitField:
    """
    One field of an instruction word.

    Attributes:
        kind: What the field holds
        hi: Highest bit position (inclusive)
        lo: Lowest bit position (inclusive)
    """
    kind: FieldKind
    hi: int
    lo: int

    @property
    def width(self) -> int:
        return self.hi - self.lo + 1

    def __str__(self) -> str:
        return f"{self.kind}[{self.hi}:{self.lo}]"


OPCODE_FIELD = BitField(FieldKind.OPCODE, 31, 27)

_REG1 = BitField(FieldKind.REGISTER, 26, 22)
_REG2 = BitField(FieldKind.REGISTER, 21, 17)
_REG3 = BitField(FieldKind.REGISTER, 16, 12)

# Operand fields per format, most-significant operand first. Operand order
# in an instruction is the order of these fields.
FORMAT_LAYOUTS: dict[InstrFormat, tuple[BitField, ...]] = {
    InstrFormat.R3: (_REG1, _REG2, _REG3),
    InstrFormat.R2: (_REG1, _REG2),
    InstrFormat.RI: (_REG1, BitField(FieldKind.IMMEDIATE, 21, 0)),
    InstrFormat.RRI: (_REG1, _REG2, BitField(FieldKind.IMMEDIATE, 16, 0)),
    InstrFormat.RII: (
        _REG1,
        BitField(FieldKind.IMMEDIATE, 21, 11),
        BitField(FieldKind.IMMEDIATE, 10, 0),
    ),
    InstrFormat.I: (BitField(FieldKind.IMMEDIATE, 26, 0),),
    InstrFormat.NoOP: (),
}

REGISTER_COUNT = 32  # R0..R31, one 5-bit field


# =============================================================================
# Resolved Operands and Instructions
# =============================================================================

@dataclass(frozen=True)
class Register:
    """A register operand, R0..R31."""
    number: int

    @property
    def kind(self) -> FieldKind:
        return FieldKind.REGISTER

    @property
    def value(self) -> int:
        return self.number

    def __str__(self) -> str:
        return f"R{self.number}"


@dataclass(frozen=True)
class Immediate:
    """An immediate (constant) operand."""
    value: int

    @property
    def kind(self) -> FieldKind:
        return FieldKind.IMMEDIATE

    def __str__(self) -> str:
        return str(self.value)


Operand = Union[Register, Immediate]


@dataclass(frozen=True)
class ResolvedInstruction:
    """
    An instruction ready for the encoder.

    Operands contain no label references; their order is significant
    because it determines which bit field each operand lands in.
    """
    opcode: Opcode
    operands: tuple[Operand, ...] = ()

    def __post_init__(self):
        # Accept lists for convenience while keeping the instance hashable
        if not isinstance(self.operands, tuple):
            object.__setattr__(self, "operands", tuple(self.operands))

    @property
    def format(self) -> InstrFormat:
        return OPCODE_TABLE[self.opcode].format

    def __str__(self) -> str:
        if not self.operands:
            return self.opcode.value
        return f"{self.opcode.value} " + ", ".join(str(op) for op in self.operands)


# =============================================================================
# Lookup Functions
# =============================================================================

def opcode_from_mnemonic(mnemonic: str) -> Optional[Opcode]:
    """
    Look up an opcode by mnemonic.

    The match is exact and case-sensitive: "ADD" is an opcode, "add" is not.
    """
    if mnemonic in MNEMONICS:
        return Opcode(mnemonic)
    return None


def format_of(opcode: Opcode) -> InstrFormat:
    """Return the instruction format of an opcode."""
    return OPCODE_TABLE[opcode].format


def machine_code(opcode: Opcode) -> int:
    """Return the 5-bit machine code of an opcode."""
    return OPCODE_TABLE[opcode].code


def opcode_from_code(code: int) -> Optional[Opcode]:
    """
    Look up an opcode by its 5-bit machine code.

    Returns:
        The Opcode, or None if no opcode uses this code
    """
    return CODE_TABLE.get(code)


def operand_layout(fmt: InstrFormat) -> tuple[BitField, ...]:
    """Return the operand bit fields of a format, most significant first."""
    return FORMAT_LAYOUTS[fmt]


def operand_pattern(fmt: InstrFormat) -> tuple[FieldKind, ...]:
    """Return the required operand kinds of a format, in order."""
    return tuple(field.kind for field in FORMAT_LAYOUTS[fmt])
