"""
Disasm-Util Error Hierarchy
===========================

This module defines the exception hierarchy for disasm-util. All exceptions
inherit from DisasmError, allowing callers to catch every tool-related error
with a single except clause.

Exception Hierarchy
-------------------
DisasmError (base)
├── ListingError (listing text could not be parsed)
│   ├── ListingStructureError - line is valid but out of place
│   │   ├── SymbolWithoutSectionError - symbol header before any section
│   │   ├── InstructionWithoutSymbolError - instruction before any symbol
│   │   └── InstructionWithoutSectionError - instruction before any section
│   ├── MalformedHeaderError - line resembles a header but is not one
│   └── UnsupportedInputError - output of a different objdump invocation
└── ObjdumpError (running the external disassembler)
    └── ObjdumpNotFoundError - executable not found

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# Indent placed before the quoted listing line and its caret
SOURCE_GUTTER = "    "


# =============================================================================
# Base Exception Class
# =============================================================================

class DisasmError(Exception):
    """
    Base exception for all disasm-util errors.

        try:
            listing = parse_listing(text)
        except DisasmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in the listing text, used for error reporting.

    Attributes:
        filename: Name of the listing source (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int = 1

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Listing Exceptions
# =============================================================================

class ListingError(DisasmError):
    """
    Base exception for errors found while reading a disassembly listing.

    Attributes:
        message: The error description
        location: Where in the listing the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The offending line of text (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def with_context(
        self,
        location: SourceLocation,
        source_line: str,
    ) -> "ListingError":
        """
        Attach location and source text to an error raised without them.

        The line classifier is a pure function of the line text and does not
        know where the line came from; the parser fills that in here.
        """
        self.location = location
        self.source_line = source_line
        self.args = (self._format_message(),)
        return self

    def _format_message(self) -> str:
        """
        Render the error as a located message plus the offending listing line.

        Example output:
            prog.dis:9:2: error: instruction 'ret' appears before ...
                        ret
                        ^
            hint: instructions must follow a symbol header line

        The quoted line is `\\tret` with its tab expanded.
        """
        if self.location is None:
            lines = [f"error: {self.message}"]
        else:
            lines = [f"{self.location}: error: {self.message}"]

        if self.source_line is not None and self.location is not None:
            # objdump indents instructions with tabs; expand them so the
            # caret sits under the first character of the text
            shown = self.source_line.expandtabs()
            lead = len(self.source_line[:self.location.column - 1].expandtabs())
            lines.append(SOURCE_GUTTER + shown)
            lines.append(SOURCE_GUTTER + " " * lead + "^")

        if self.hint:
            lines.append(f"hint: {self.hint}")

        return "\n".join(lines)


class ListingStructureError(ListingError):
    """
    A well-formed line appeared where the listing structure forbids it.

    Sections contain symbols and symbols contain instructions; a line that
    would have no parent to attach to is a structure error.
    """
    pass


class SymbolWithoutSectionError(ListingStructureError):
    """Symbol header encountered before any section header."""
    pass


class InstructionWithoutSymbolError(ListingStructureError):
    """Instruction line encountered before any symbol header in its section."""
    pass


class InstructionWithoutSectionError(
    InstructionWithoutSymbolError, SymbolWithoutSectionError
):
    """
    Instruction line encountered before any section header.

    Such an instruction has neither a symbol nor a section to belong to, so
    the error is catchable as either of the two parent kinds.
    """
    pass


class MalformedHeaderError(ListingError):
    """
    A line resembles a section or symbol header but matches neither form.

    Examples:
        sym1>:                          (missing '<')
        <sym1                           (missing '>:')
        Disassembly of section sec%1:   (invalid section name)
    """
    pass


class UnsupportedInputError(ListingError):
    """
    The input does not follow the supported line grammar at all.

    Only `objdump -d --no-addresses --no-show-raw-insn` output (and this
    tool's own rendered output) is understood. Output with addresses, raw
    instruction bytes, or archive member headers is rejected rather than
    silently mis-parsed.
    """
    pass


# =============================================================================
# Objdump Exceptions
# =============================================================================

class ObjdumpError(DisasmError):
    """
    Running the external disassembler failed.

    Attributes:
        command: The command line that was executed (optional)
        stderr: Captured standard error output (optional)
        return_code: Process exit status (optional)
    """

    def __init__(
        self,
        message: str,
        command: Optional[list[str]] = None,
        stderr: Optional[str] = None,
        return_code: Optional[int] = None,
    ):
        self.message = message
        self.command = command
        self.stderr = stderr
        self.return_code = return_code

        parts = [message]
        if stderr:
            parts.append(stderr.rstrip())
        super().__init__("\n".join(parts))


class ObjdumpNotFoundError(ObjdumpError):
    """The objdump executable could not be located."""

    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(
            f"'{executable}' was not found! Check your PATH or explicitly "
            f"provide an executable"
        )
