"""
Assembler for the 32-bit ISA
============================

This package converts assembly source into 32-bit machine words.

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates the pipeline
- **Lexer**: Tokenizes source into a flat token list
- **Parser**: Builds the label map and instructions, resolves labels
- **validate**: Checks operand count and kinds against the format
- **encode**: Packs a resolved instruction into a word

Assembly Process
----------------
1. **Lexing**: source text -> tokens. Unknown characters are skipped
   unless strict lexing is enabled.

2. **Parsing** (three passes):
   - Label scan: label name -> index of the next instruction
   - Instruction build: opcode plus following operands
   - Label resolution: label references -> immediate indices
   then validation of every instruction against its format.

3. **Encoding**: each instruction -> one 32-bit word.

Example Usage
-------------
>>> from isa_utils.assembler import Assembler
>>> asm = Assembler()
>>> [f"{w:08X}" for w in asm.assemble_string("ADD R1, R2, R3")]
['08443000']
"""

from isa_utils.assembler.assembler import Assembler, assemble, assemble_file
from isa_utils.assembler.codegen import (
    encode,
    encode_program,
    format_listing,
    to_binary_lines,
    to_bytes,
    to_hex_lines,
)
from isa_utils.assembler.lexer import Lexer, Token, TokenType, lex
from isa_utils.assembler.parser import (
    LabelRef,
    Parser,
    UnresolvedInstruction,
    build_label_map,
    parse,
    parse_source,
    resolve_labels,
)
from isa_utils.assembler.validator import validate

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "lex",
    # Parser
    "LabelRef",
    "Parser",
    "UnresolvedInstruction",
    "build_label_map",
    "parse",
    "parse_source",
    "resolve_labels",
    # Validation
    "validate",
    # Encoder
    "encode",
    "encode_program",
    "format_listing",
    "to_binary_lines",
    "to_bytes",
    "to_hex_lines",
]
