"""
ISA Utils Command-Line Interface
================================

This package provides command-line tools for the toolchain:

- **isaasm**: Assembler
- **isadisasm**: Disassembler

Each tool is implemented as a Click-based CLI application sharing the
exit codes and error formatting in ``isa_utils.cli.errors``.
"""

__all__ = ["isaasm", "isadisasm"]
