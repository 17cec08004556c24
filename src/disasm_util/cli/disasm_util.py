"""
disasm-util - Sorted Objdump Listing Command-Line Interface
===========================================================

Disassembles an object file with objdump and prints a normalized listing:
sections and symbols sorted by name, instructions in their original order,
addresses and raw bytes removed. Two builds of the same code can then be
compared with a plain diff.

Usage Examples
--------------
Disassemble an object file:
    $ disasm-util main.o

Use a specific objdump (e.g. a cross toolchain):
    $ disasm-util firmware.elf -e arm-none-eabi-objdump

Output to file:
    $ disasm-util main.o -o main.dis

Re-format a listing produced earlier:
    $ objdump -d --no-addresses --no-show-raw-insn main.o > raw.txt
    $ disasm-util --listing raw.txt

Exit Codes
----------
0 - Success
1 - The listing could not be parsed
2 - Invalid arguments, or a listing that is not UTF-8 text
3 - Internal error
4 - objdump not found or failed
"""

import logging
from pathlib import Path
from typing import Optional

import click

from disasm_util import __version__
from disasm_util.cli.errors import handle_cli_exception
from disasm_util.config import DisasmConfig
from disasm_util.listing import Listing, parse_listing, render_listing
from disasm_util.objdump import disassemble_file

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def describe_listing(listing: Listing) -> str:
    """One-line summary of a listing for verbose output."""
    summary = (
        f"{listing.section_count} sections, {listing.symbol_count} symbols, "
        f"{listing.instruction_count} instructions"
    )
    if listing.file_name is not None:
        summary = f"{listing.file_name} ({listing.file_format}): {summary}"
    return summary


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "obj_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-e", "--executable",
    type=str,
    default=None,
    help="Use the objdump executable FILE (default: objdump, or $DISASM_UTIL_OBJDUMP)",
    metavar="FILE",
)
@click.option(
    "-o", "--out",
    "output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Place the output into FILE (default: stdout)",
    metavar="FILE",
)
@click.option(
    "-l", "--listing",
    "from_listing",
    is_flag=True,
    help="Treat OBJ_FILE as an existing objdump text listing instead of running objdump",
)
@click.option(
    "--indent",
    type=click.IntRange(min=1),
    default=None,
    help="Spaces per indentation level (default: 4, or $DISASM_UTIL_INDENT)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="disasm-util")
def main(
    obj_file: Path,
    executable: Optional[str],
    output: Optional[Path],
    from_listing: bool,
    indent: Optional[int],
    verbose: bool,
) -> None:
    """
    Disassemble OBJ_FILE into a sorted, address-free listing.

    Runs 'objdump -d --no-addresses --no-show-raw-insn' on OBJ_FILE and
    prints every section and symbol in name order, with each symbol's
    instructions indented beneath it.

    \b
    Examples:
        disasm-util main.o
        disasm-util main.o -o main.dis
        disasm-util fw.elf -e arm-none-eabi-objdump
        disasm-util --listing raw.txt
    """
    setup_logging(verbose)

    config = DisasmConfig.from_env()
    if executable is not None:
        config.objdump_executable = executable
    if indent is not None:
        config.indent_width = indent

    try:
        if from_listing:
            logger.debug(f"Reading listing from {obj_file}")
            text = obj_file.read_text(encoding="utf-8")
            listing = parse_listing(
                text, indent=config.indent_width, source=str(obj_file)
            )
        else:
            listing = disassemble_file(obj_file, config)

        if verbose:
            click.echo(describe_listing(listing), err=True)

        result = render_listing(listing, indent=config.indent_width)

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

    except Exception as e:
        handle_cli_exception(e, verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
