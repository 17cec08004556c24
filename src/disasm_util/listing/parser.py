"""
Listing Parser
==============

Builds a Listing from the lines of a disassembly listing in a single linear
scan. The parser is a small state machine carrying the current section and
current symbol:

    SECTION      -> get or create the section, make it current, clear symbol
    SYMBOL       -> needs a current section; get or create the symbol
    INSTRUCTION  -> needs a current symbol; append to it
    BANNER       -> record file name and format (first banner only)
    IGNORE       -> nothing

Repeated section names merge into the existing section, and a repeated
symbol name within a section continues the existing symbol. Empty input
produces an empty Listing.

Parsing stops at the first invalid line; every error carries the line
number and text.

Usage:
    >>> from disasm_util.listing import parse_listing
    >>> listing = parse_listing(text)
    >>> for section in listing.sorted_sections():
    ...     print(section.name, len(section.symbols))

Large inputs can be fed lazily:
    >>> with open("a.dis") as f:
    ...     listing = parse_lines(line.rstrip("\\n") for line in f)
"""

import logging
from typing import Iterable, List, Optional, Tuple

from disasm_util.errors import (
    InstructionWithoutSectionError,
    InstructionWithoutSymbolError,
    ListingError,
    SourceLocation,
    SymbolWithoutSectionError,
)
from disasm_util.listing.classifier import (
    ClassifiedLine,
    Dialect,
    LineKind,
    classify_line,
    is_bare_header,
    settle_dialect,
    sniff_dialect,
)
from disasm_util.listing.model import Listing, Section, Symbol

logger = logging.getLogger(__name__)


class ListingParser:
    """
    Stateful builder for a single parse.

    Create a new parser for every listing; feed() it lines in order and
    call finish() to obtain the Listing.

    Attributes:
        dialect: Line grammar in use (None while auto-detecting, until a
            line other than a bare `name:` header settles it)
        indent: Indent width of the canonical dialect
        source: Name used in error locations
    """

    def __init__(
        self,
        dialect: Optional[Dialect] = None,
        indent: int = 4,
        source: str = "<input>",
    ):
        if indent < 1:
            raise ValueError(f"indent must be at least 1, got {indent}")
        self.dialect = dialect
        self.indent = indent
        self.source = source

        self._listing = Listing()
        self._section: Optional[Section] = None
        self._symbol: Optional[Symbol] = None
        self._line_number = 0
        self._pending: List[Tuple[int, str]] = []
        self._finished = False

    # -------------------------------------------------------------------------
    # Feeding
    # -------------------------------------------------------------------------

    def feed(self, line: str) -> None:
        """
        Process the next line of the listing.

        Raises:
            ListingError: If the line is malformed or out of place
            RuntimeError: If called after finish()
        """
        if self._finished:
            raise RuntimeError("parser already finished")

        self._line_number += 1

        if self.dialect is None and line.strip():
            # `name:` is a section in a rendered listing but a symbol in
            # objdump output; hold such lines until a later line decides
            if is_bare_header(line):
                self._pending.append((self._line_number, line))
                return
            if self._pending:
                self._set_dialect(settle_dialect(line, self.indent))
            else:
                self._set_dialect(sniff_dialect(line))

        self._process(line)

    def feed_all(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.feed(line)

    def finish(self) -> Listing:
        """Finish parsing and return the completed Listing."""
        if self._pending:
            # Only bare headers: a rendered listing of empty sections
            self._set_dialect(Dialect.CANONICAL)
        self._finished = True
        listing = self._listing
        logger.debug(
            f"{self.source}: parsed {listing.section_count} sections, "
            f"{listing.symbol_count} symbols, "
            f"{listing.instruction_count} instructions "
            f"from {self._line_number} lines"
        )
        return listing

    def _set_dialect(self, dialect: Dialect) -> None:
        """Fix the dialect and replay any lines held back while deciding."""
        self.dialect = dialect
        logger.debug(f"{self.source}: detected {dialect.name} dialect")

        pending, self._pending = self._pending, []
        current = self._line_number
        try:
            for number, line in pending:
                self._line_number = number
                self._process(line)
        finally:
            self._line_number = current

    def _process(self, line: str) -> None:
        try:
            classified = classify_line(
                line, self.dialect or Dialect.OBJDUMP, self.indent
            )
            self._apply(classified, line)
        except ListingError as e:
            if e.location is None:
                e.with_context(self._location(line), line)
            raise

    # -------------------------------------------------------------------------
    # State Transitions
    # -------------------------------------------------------------------------

    def _apply(self, classified: ClassifiedLine, line: str) -> None:
        kind = classified.kind

        if kind is LineKind.SECTION:
            if classified.value in self._listing.sections:
                logger.debug(f"{self.source}:{self._line_number}: "
                             f"section '{classified.value}' reopened, merging")
            self._section = self._listing.get_or_add_section(classified.value)
            self._symbol = None

        elif kind is LineKind.SYMBOL:
            if self._section is None:
                raise SymbolWithoutSectionError(
                    f"symbol '{classified.value}' appears before any section header",
                    location=self._location(line),
                    hint="a section header line must come first",
                    source_line=line,
                )
            if classified.value in self._section.symbols:
                logger.debug(f"{self.source}:{self._line_number}: "
                             f"symbol '{classified.value}' reopened, merging")
            self._symbol = self._section.get_or_add_symbol(classified.value)

        elif kind is LineKind.INSTRUCTION:
            if self._section is None:
                raise InstructionWithoutSectionError(
                    f"instruction '{classified.value}' appears before any section header",
                    location=self._location(line),
                    hint="a section header line must come first",
                    source_line=line,
                )
            if self._symbol is None:
                raise InstructionWithoutSymbolError(
                    f"instruction '{classified.value}' appears before any symbol "
                    f"header in section '{self._section.name}'",
                    location=self._location(line),
                    hint="instructions must follow a symbol header line",
                    source_line=line,
                )
            self._symbol.add_instruction(classified.value)

        elif kind is LineKind.BANNER:
            if self._listing.file_name is None:
                self._listing.file_name = classified.value
                self._listing.file_format = classified.extra
            else:
                logger.debug(f"{self.source}:{self._line_number}: "
                             f"ignoring repeated banner for '{classified.value}'")

    def _location(self, line: str) -> SourceLocation:
        column = len(line) - len(line.lstrip()) + 1
        return SourceLocation(self.source, self._line_number, column)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_lines(
    lines: Iterable[str],
    dialect: Optional[Dialect] = None,
    indent: int = 4,
    source: str = "<input>",
) -> Listing:
    """
    Parse an iterable of lines (without line terminators) into a Listing.

    Args:
        lines: Listing lines; may be a lazily produced iterator
        dialect: Line grammar, or None to detect it from the first line
        indent: Indent width of the canonical dialect
        source: Name used in error locations

    Returns:
        The parsed Listing

    Raises:
        ListingError: On the first malformed or misplaced line
    """
    parser = ListingParser(dialect=dialect, indent=indent, source=source)
    parser.feed_all(lines)
    return parser.finish()


def parse_listing(
    text: str,
    dialect: Optional[Dialect] = None,
    indent: int = 4,
    source: str = "<input>",
) -> Listing:
    """Parse the full text of a listing into a Listing."""
    return parse_lines(text.splitlines(), dialect=dialect, indent=indent, source=source)
