"""
ISA Utils Disassembler Module
=============================

Decodes 32-bit machine words back into instructions and renders them as
assembly listings.

Usage:
    from isa_utils.disassembler import Disassembler, decode

    instr = decode(0x08443000)      # ADD R1, R2, R3
    listing = Disassembler().disassemble_to_text(words)
"""

from .decoder import (
    DisassembledInstruction,
    Disassembler,
    decode,
    words_from_bytes,
    words_from_hex_text,
)

__all__ = [
    "DisassembledInstruction",
    "Disassembler",
    "decode",
    "words_from_bytes",
    "words_from_hex_text",
]
