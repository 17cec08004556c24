"""
Disasm-Util - Sorted Objdump Listings
=====================================

This package turns the output of

    objdump -d --no-addresses --no-show-raw-insn <OBJ-FILE>

into a normalized listing: sections sorted by name, symbols sorted by name
within each section, and every symbol's instructions in their original
order. Because addresses and raw bytes are dropped and the ordering is
fixed, listings of two builds can be compared with a plain diff.

Main Components
---------------
- **listing**: line classifier, parser, data model and renderer
- **objdump**: runs the external objdump and parses its output
- **cli**: the `disasm-util` command

Quick Start
-----------
Parse and re-render existing objdump output:
    >>> from disasm_util import parse_listing, render_listing
    >>> listing = parse_listing(text)
    >>> print(render_listing(listing), end="")

Disassemble an object file directly:
    >>> from disasm_util import disassemble_file
    >>> listing = disassemble_file("main.o")

Or use the command-line tool:
    $ disasm-util main.o -o main.dis
"""

__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from disasm_util.config import DisasmConfig
from disasm_util.errors import (
    DisasmError,
    SourceLocation,
    ListingError,
    ListingStructureError,
    SymbolWithoutSectionError,
    InstructionWithoutSymbolError,
    InstructionWithoutSectionError,
    MalformedHeaderError,
    UnsupportedInputError,
    ObjdumpError,
    ObjdumpNotFoundError,
)
from disasm_util.listing import (
    Instruction,
    Symbol,
    Section,
    Listing,
    Dialect,
    LineKind,
    ClassifiedLine,
    classify_line,
    detect_dialect,
    ListingParser,
    parse_lines,
    parse_listing,
    iter_render,
    render_listing,
)
from disasm_util.objdump import (
    OBJDUMP_FLAGS,
    disassemble_file,
    resolve_objdump,
    run_objdump,
)

__all__ = [
    "__version__",
    # Configuration
    "DisasmConfig",
    # Model
    "Instruction",
    "Symbol",
    "Section",
    "Listing",
    # Classifier
    "Dialect",
    "LineKind",
    "ClassifiedLine",
    "classify_line",
    "detect_dialect",
    # Parser and renderer
    "ListingParser",
    "parse_lines",
    "parse_listing",
    "iter_render",
    "render_listing",
    # Driver
    "OBJDUMP_FLAGS",
    "disassemble_file",
    "resolve_objdump",
    "run_objdump",
    # Exception hierarchy
    "DisasmError",
    "SourceLocation",
    "ListingError",
    "ListingStructureError",
    "SymbolWithoutSectionError",
    "InstructionWithoutSymbolError",
    "InstructionWithoutSectionError",
    "MalformedHeaderError",
    "UnsupportedInputError",
    "ObjdumpError",
    "ObjdumpNotFoundError",
]
