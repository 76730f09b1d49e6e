"""
ISA Assembler - Main Interface
==============================

This module provides the main Assembler class, which is the primary
interface for assembling source code. It coordinates the lexer, parser
and encoder, and writes the encoded program in any supported format.

Example Usage
-------------
>>> from isa_utils.assembler import Assembler
>>>
>>> asm = Assembler()
>>> asm.assemble_string('''
... start:  LI  R1, 10
...         JR  start
... ''')
[1077936138, 1476395008]
>>> asm.get_labels()
{'start': 0}
>>> asm.write_hex("prog.hex")

Command-Line Usage
------------------
The assembler can also be invoked from the command line:

    $ isaasm prog.asm -o prog.hex -l prog.lst

Options:
    -o, --output FILE      Output file
    -f, --format FORMAT    hex, bin, text or raw (default: hex)
    -l, --listing FILE     Generate listing file
    --strict/--no-strict   Reject unrecognized characters
    -v, --verbose          Verbose output
"""

from dataclasses import replace
from pathlib import Path
from typing import Optional
import logging

from isa_utils.assembler.codegen import (
    encode_program,
    format_listing,
    to_binary_lines,
    to_bytes,
    to_hex_lines,
)
from isa_utils.assembler.lexer import lex
from isa_utils.assembler.parser import Parser
from isa_utils.config import AssemblerConfig, OUTPUT_FORMATS
from isa_utils.cpu.isa import ResolvedInstruction
from isa_utils.errors import AssemblerError

logger = logging.getLogger(__name__)


class Assembler:
    """
    Main assembler class.

    Runs the full pipeline (lex, parse, resolve labels, validate, encode)
    and keeps the results of the last run for the output methods.

    Attributes:
        verbose: If True, log progress at INFO level
        config: The AssemblerConfig in effect
    """

    def __init__(
        self,
        verbose: bool = False,
        strict: Optional[bool] = None,
        config: Optional[AssemblerConfig] = None,
    ):
        """
        Initialize the assembler.

        Args:
            verbose: Log progress messages
            strict: Override config.strict_lexing (optional)
            config: Assembler configuration (default: AssemblerConfig())
        """
        self._verbose = verbose
        self.config = config or AssemblerConfig()
        if strict is not None:
            self.config = replace(self.config, strict_lexing=strict)

        self._instructions: list[ResolvedInstruction] = []
        self._words: list[int] = []
        self._labels: dict[str, int] = {}

    def _log(self, message: str) -> None:
        if self._verbose:
            logger.info(message)
        else:
            logger.debug(message)

    # =========================================================================
    # Assembly
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> list[int]:
        """
        Assemble source code from a string.

        The assembly pipeline is:
        1. Tokenize (lexer)
        2. Build labels, instructions, resolve and validate (parser)
        3. Encode (encoder)

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Encoded words in program order

        Raises:
            AssemblerError: If assembly fails; the error carries the
                source line and filename for display
        """
        self._log(f"Assembling {filename}...")

        try:
            tokens = lex(source, strict=self.config.strict_lexing)
            parser = Parser(tokens)
            instructions = parser.parse()
            self._log(f"Parsed {len(instructions)} instructions")

            words = encode_program(instructions)
        except AssemblerError as e:
            raise e.attach_source(source, filename)

        self._instructions = instructions
        self._words = words
        self._labels = dict(parser.labels)

        self._log(f"Generated {len(words)} words")
        return list(words)

    def assemble_file(self, filepath: str | Path) -> list[int]:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            Encoded words in program order

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_words(self) -> list[int]:
        """Get the encoded words from the last run."""
        return list(self._words)

    def get_instructions(self) -> list[ResolvedInstruction]:
        """Get the resolved instructions from the last run."""
        return list(self._instructions)

    def get_labels(self) -> dict[str, int]:
        """
        Get the label map.

        Returns:
            Dictionary mapping label names to instruction indices
        """
        return dict(self._labels)

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            Listing with indices, words, instructions and labels
        """
        return format_listing(self._instructions, self._words, self._labels)

    def get_text(self) -> str:
        """Get the resolved program as assembly text, one instruction per line."""
        return "".join(f"{instr}\n" for instr in self._instructions)

    def write_hex(self, filepath: str | Path) -> None:
        """Write one 8-digit hex word per line."""
        lines = to_hex_lines(self._words)
        Path(filepath).write_text("".join(f"{line}\n" for line in lines))
        self._log(f"Wrote {len(lines)} words to {filepath}")

    def write_bits(self, filepath: str | Path) -> None:
        """Write one 32-digit binary word per line."""
        lines = to_binary_lines(self._words)
        Path(filepath).write_text("".join(f"{line}\n" for line in lines))
        self._log(f"Wrote {len(lines)} words to {filepath}")

    def write_text(self, filepath: str | Path) -> None:
        """Write the resolved program as assembly text."""
        Path(filepath).write_text(self.get_text())
        self._log(f"Wrote {len(self._instructions)} instructions to {filepath}")

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write raw binary output.

        Each word is written as 4 big-endian bytes, in program order.

        Args:
            filepath: Output file path
        """
        code = to_bytes(self._words)
        Path(filepath).write_bytes(code)
        self._log(f"Wrote {len(code)} bytes to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing file."""
        Path(filepath).write_text(self.get_listing())
        self._log(f"Wrote listing to {filepath}")

    def write_output(self, filepath: str | Path, output_format: Optional[str] = None) -> None:
        """
        Write the program in the given format.

        Args:
            filepath: Output file path
            output_format: hex, bin, text or raw (default: config.output_format)

        Raises:
            ValueError: Unknown output format
        """
        output_format = output_format or self.config.output_format
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"unknown output format {output_format!r}")

        writers = {
            "hex": self.write_hex,
            "bin": self.write_bits,
            "text": self.write_text,
            "raw": self.write_binary,
        }
        writers[output_format](filepath)


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>", strict: bool = False) -> list[int]:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors
        strict: Raise on unrecognized characters

    Returns:
        Encoded words

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(strict=strict)
    return asm.assemble_string(source, filename)


def assemble_file(filepath: str | Path, strict: bool = False) -> list[int]:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(strict=strict)
    return asm.assemble_file(filepath)
