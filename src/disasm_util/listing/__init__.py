"""
Disasm-Util Listing Module
==========================

Parsing and rendering of objdump disassembly listings.

Usage:
    from disasm_util.listing import parse_listing, render_listing

    listing = parse_listing(objdump_output)
    print(render_listing(listing), end="")
"""

from .model import Instruction, Symbol, Section, Listing
from .classifier import (
    ClassifiedLine,
    Dialect,
    LineKind,
    classify_line,
    detect_dialect,
    is_bare_header,
    settle_dialect,
    sniff_dialect,
)
from .parser import ListingParser, parse_lines, parse_listing
from .renderer import DEFAULT_INDENT, iter_render, render_listing

__all__ = [
    "Instruction",
    "Symbol",
    "Section",
    "Listing",
    "ClassifiedLine",
    "Dialect",
    "LineKind",
    "classify_line",
    "detect_dialect",
    "is_bare_header",
    "settle_dialect",
    "sniff_dialect",
    "ListingParser",
    "parse_lines",
    "parse_listing",
    "DEFAULT_INDENT",
    "iter_render",
    "render_listing",
]
