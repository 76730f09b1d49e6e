"""
isadisasm - Disassembler Command-Line Interface
===============================================

This module implements the command-line interface for the disassembler.

Usage Examples
--------------
Disassemble raw big-endian words:
    $ isadisasm prog.bin

Disassemble hex text (one word per line, as written by isaasm):
    $ isadisasm prog.hex --hex-input

Limit number of instructions:
    $ isadisasm prog.bin --count 20

Output to file:
    $ isadisasm prog.bin -o listing.asm
"""

from pathlib import Path
from typing import Optional

import click

from isa_utils import __version__
from isa_utils.cli.errors import handle_cli_exception, setup_logging
from isa_utils.disassembler import Disassembler, words_from_bytes, words_from_hex_text


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "--hex-input",
    is_flag=True,
    help="Read hex text (one word per line) instead of raw big-endian bytes",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="isadisasm")
def main(
    input_file: Path,
    output: Optional[Path],
    hex_input: bool,
    count: Optional[int],
    verbose: bool,
) -> None:
    """
    Disassemble 32-bit machine words.

    INPUT_FILE holds the words to disassemble: raw big-endian bytes, or
    hex text with --hex-input.

    \b
    Examples:
        isadisasm prog.bin --count 20
        isadisasm prog.hex --hex-input -o listing.asm
    """
    setup_logging(verbose)

    try:
        try:
            if hex_input:
                words = words_from_hex_text(input_file.read_text())
            else:
                words = words_from_bytes(input_file.read_bytes())
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="INPUT_FILE") from e

        if verbose:
            click.echo(f"Input file: {input_file} ({len(words)} words)", err=True)

        disasm = Disassembler()
        instructions = disasm.disassemble(words, count=count)

        output_lines = [f"# Disassembly of {input_file.name}", f"# Words: {len(words)}", ""]
        output_lines.extend(str(instr) for instr in instructions)
        result = "\n".join(output_lines) + "\n"

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            unknown = sum(1 for instr in instructions if instr.instruction is None)
            click.echo(f"Instructions disassembled: {len(instructions)} "
                       f"({unknown} unknown)", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Disassembly")


if __name__ == "__main__":
    main()
