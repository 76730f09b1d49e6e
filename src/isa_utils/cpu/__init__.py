"""
ISA Utils CPU Package
=====================

This package contains the instruction set definitions shared by the
assembler (which encodes instructions) and the disassembler (which
decodes them), so both always agree on opcodes and bit layouts.

Modules:
    isa: Opcodes, formats, bit layouts, operand and instruction types.
    bits: Bit-field get/set primitives for 32-bit words.

Usage:
    from isa_utils.cpu import (
        Opcode,
        InstrFormat,
        format_of,
        machine_code,
    )
"""

from isa_utils.cpu.bits import (
    WORD_BITS,
    WORD_MASK,
    fits_in_bits,
    get_bits,
    set_bits,
)
from isa_utils.cpu.isa import (
    # Core types
    BitField,
    FieldKind,
    Immediate,
    InstrFormat,
    Opcode,
    OpcodeInfo,
    Operand,
    Register,
    ResolvedInstruction,
    # Tables
    CODE_TABLE,
    FORMAT_LAYOUTS,
    MNEMONICS,
    OPCODE_FIELD,
    OPCODE_TABLE,
    REGISTER_COUNT,
    # Lookup functions
    format_of,
    machine_code,
    opcode_from_code,
    opcode_from_mnemonic,
    operand_layout,
    operand_pattern,
)

__all__ = [
    "WORD_BITS",
    "WORD_MASK",
    "fits_in_bits",
    "get_bits",
    "set_bits",
    "BitField",
    "FieldKind",
    "Immediate",
    "InstrFormat",
    "Opcode",
    "OpcodeInfo",
    "Operand",
    "Register",
    "ResolvedInstruction",
    "CODE_TABLE",
    "FORMAT_LAYOUTS",
    "MNEMONICS",
    "OPCODE_FIELD",
    "OPCODE_TABLE",
    "REGISTER_COUNT",
    "format_of",
    "machine_code",
    "opcode_from_code",
    "opcode_from_mnemonic",
    "operand_layout",
    "operand_pattern",
]
