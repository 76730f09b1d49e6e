"""
isaasm - Assembler Command-Line Interface
=========================================

This module implements the command-line interface for the assembler.

Usage Examples
--------------
Basic assembly (writes prog.hex):
    $ isaasm prog.asm

Raw big-endian binary:
    $ isaasm prog.asm -f raw -o prog.bin

With a listing file:
    $ isaasm prog.asm -l prog.lst

Reject unrecognized characters:
    $ isaasm --strict prog.asm

Environment defaults (overridden by flags):
    ISA_UTILS_STRICT, ISA_UTILS_FORMAT, ISA_UTILS_LISTING
"""

from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from isa_utils import __version__
from isa_utils.assembler import Assembler
from isa_utils.cli.errors import handle_cli_exception, setup_logging
from isa_utils.config import AssemblerConfig, OUTPUT_FORMATS


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
    help="Output file (default: input file with the format's suffix)",
)
@click.option(
    "-f", "--format", "output_format",
    type=click.Choice(list(OUTPUT_FORMATS), case_sensitive=False),
    default=None,
    help="Output format: hex, bin (binary digits), text (resolved assembly) "
         "or raw (big-endian bytes). Default: hex",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Reject unrecognized characters instead of skipping them. Default: disabled",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="isaasm")
def main(
    input_file: Path,
    output: Optional[Path],
    output_format: Optional[str],
    listing: Optional[Path],
    strict: Optional[bool],
    verbose: bool,
) -> None:
    """
    Assemble source code into 32-bit machine words.

    INPUT_FILE is the assembly source file to assemble.

    \b
    Examples:
        isaasm prog.asm              # Outputs prog.hex
        isaasm prog.asm -f raw       # Outputs prog.bin
        isaasm prog.asm -l prog.lst  # Also write a listing
    """
    setup_logging(verbose)

    try:
        try:
            config = AssemblerConfig.from_env()
        except ValueError as e:
            raise click.BadParameter(str(e)) from e

        # Command-line flags override the environment
        if output_format is not None:
            config = replace(config, output_format=output_format.lower())
        if strict is not None:
            config = replace(config, strict_lexing=strict)

        output_file = output if output is not None else input_file.with_suffix(config.output_suffix)
        if listing is None and config.emit_listing:
            listing = input_file.with_suffix(".lst")

        asm = Assembler(verbose=verbose, config=config)

        if verbose:
            click.echo(f"Assembling {input_file}...")

        words = asm.assemble_file(input_file)
        asm.write_output(output_file)

        if verbose:
            click.echo(f"Wrote {len(words)} words ({config.output_format}) to {output_file}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if verbose:
            click.echo(f"Assembly complete: {len(words)} instructions, "
                       f"{len(asm.get_labels())} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
