"""
Listing Renderer
================

Produces the canonical text form of a Listing:

    .data:
        <table>:
            ...
    .text:
        <helper>:
            push   %rbp
            ret
        <main>:
            endbr64
            ret

Sections and symbols are sorted by name using ordinal (code-point)
comparison; instructions keep their original order. Every line ends with a
newline and no blank lines are emitted, so an empty Listing renders as "".
"""

from typing import Iterator

from disasm_util.listing.model import Listing

DEFAULT_INDENT = 4


def iter_render(listing: Listing, indent: int = DEFAULT_INDENT) -> Iterator[str]:
    """
    Yield the rendered listing one line at a time.

    Args:
        listing: The Listing to render
        indent: Number of spaces per indentation level

    Yields:
        Output lines, each terminated by "\\n"
    """
    if indent < 1:
        raise ValueError(f"indent must be at least 1, got {indent}")

    symbol_pad = " " * indent
    instruction_pad = " " * (2 * indent)

    for section in listing.sorted_sections():
        yield f"{section.name}:\n"
        for symbol in section.sorted_symbols():
            yield f"{symbol_pad}{symbol.name}:\n"
            for instruction in symbol.instructions:
                yield f"{instruction_pad}{instruction}\n"


def render_listing(listing: Listing, indent: int = DEFAULT_INDENT) -> str:
    """Render a Listing to its canonical sorted text form."""
    return "".join(iter_render(listing, indent))
