"""
ISA Utils - Assembler and Decoder for a 32-bit Fixed-Width ISA
==============================================================

This package provides a bit-exact toolchain for a small 32-bit
instruction set: 18 opcodes, 32 registers, one word per instruction.

Main Components
---------------
- **assembler**: Source text to machine words (isaasm)
    Lexer, two-pass parser with label resolution, validator, encoder

- **disassembler**: Machine words back to instructions (isadisasm)

- **cpu**: Instruction set tables and bit-field primitives shared by both

Quick Start
-----------
Assemble a program:
    >>> from isa_utils import Assembler
    >>> asm = Assembler()
    >>> words = asm.assemble_string("ADD R1, R2, R3")
    >>> f"{words[0]:08X}"
    '08443000'

Run the pipeline stage by stage:
    >>> from isa_utils import lex, parse, encode_program, decode
    >>> instructions = parse(lex("LI R1, 7\\nEND"))
    >>> words = encode_program(instructions)
    >>> [decode(w) for w in words] == instructions
    True

Or use the command-line tools:
    $ isaasm prog.asm -o prog.hex
    $ isadisasm prog.hex --hex-input
"""

__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from isa_utils.assembler import (
    Assembler,
    assemble,
    assemble_file,
    encode,
    encode_program,
    lex,
    parse,
    parse_source,
)
from isa_utils.config import AssemblerConfig
from isa_utils.cpu import (
    Immediate,
    InstrFormat,
    Opcode,
    Register,
    ResolvedInstruction,
)
from isa_utils.disassembler import Disassembler, decode
from isa_utils.errors import (
    IsaError,
    Span,
    AssemblerError,
    AssemblySyntaxError,
    ParseError,
    UnexpectedTokenError,
    UnexpectedEndOfInputError,
    DuplicateLabelError,
    UndefinedLabelError,
    OperandCountMismatchError,
    OperandTypeMismatchError,
    InvalidRegisterError,
    EncodeError,
    RegisterOutOfRangeError,
    ImmediateOutOfRangeError,
    InvalidOperandsError,
)

__all__ = [
    # Version info
    "__version__",
    # Pipeline
    "lex",
    "parse",
    "parse_source",
    "encode",
    "encode_program",
    "decode",
    # Assembler and disassembler
    "Assembler",
    "AssemblerConfig",
    "Disassembler",
    "assemble",
    "assemble_file",
    # Instruction types
    "Immediate",
    "InstrFormat",
    "Opcode",
    "Register",
    "ResolvedInstruction",
    # Exception hierarchy
    "IsaError",
    "Span",
    "AssemblerError",
    "AssemblySyntaxError",
    "ParseError",
    "UnexpectedTokenError",
    "UnexpectedEndOfInputError",
    "DuplicateLabelError",
    "UndefinedLabelError",
    "OperandCountMismatchError",
    "OperandTypeMismatchError",
    "InvalidRegisterError",
    "EncodeError",
    "RegisterOutOfRangeError",
    "ImmediateOutOfRangeError",
    "InvalidOperandsError",
]
