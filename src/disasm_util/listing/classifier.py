"""
Listing Line Classifier
=======================

Classifies one line of listing text as a section header, a symbol header,
an instruction, the objdump banner, or ignorable noise.

Two line grammars ("dialects") are understood:

OBJDUMP
    Output of `objdump -d --no-addresses --no-show-raw-insn`:

        a.out:     file format elf64-x86-64        <- banner

        Disassembly of section .text:               <- section

        <main>:                                     <- symbol
        \tendbr64                                   <- instruction
        \tmov    $0x1,%eax
        \tret

    The short section form `foo.o: section .text:` and bare symbol headers
    such as `main:` are accepted as well.

CANONICAL
    The indented form produced by the renderer, so that a rendered listing
    can be parsed again:

        .text:
            <main>:
                endbr64

classify_line() is a pure function of its arguments. Errors it raises carry
no location; the parser attaches one.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional

from disasm_util.errors import MalformedHeaderError, UnsupportedInputError


# =============================================================================
# Line Kinds and Dialects
# =============================================================================

class LineKind(Enum):
    """Category of a single listing line."""
    SECTION = auto()      # Opens a section; value is the section name
    SYMBOL = auto()       # Opens a symbol; value is the symbol name
    INSTRUCTION = auto()  # value is the trimmed instruction text
    BANNER = auto()       # value is the file name, extra the file format
    IGNORE = auto()       # Blank line


class Dialect(Enum):
    """Line grammar of a listing."""
    OBJDUMP = auto()
    CANONICAL = auto()


@dataclass(frozen=True)
class ClassifiedLine:
    kind: LineKind
    value: str = ""
    extra: Optional[str] = None


IGNORED = ClassifiedLine(LineKind.IGNORE)


# =============================================================================
# Objdump Line Patterns
# =============================================================================

SECTION_NAME = r"[A-Za-z0-9_.$,-]+"

BANNER_RE = re.compile(r"^(?P<file>\S.*?):\s+file format (?P<format>\S+)$")
SECTION_RE = re.compile(rf"^Disassembly of section (?P<name>{SECTION_NAME}):$")
SHORT_SECTION_RE = re.compile(rf"^(?P<file>\S+): section (?P<name>{SECTION_NAME}):$")
SYMBOL_RE = re.compile(r"^(?P<name><.+>):$")
BARE_SYMBOL_RE = re.compile(r"^(?P<name>[A-Za-z_.$][\w.$@]*):$")

# Lines only produced by other objdump invocations
ADDRESS_HEADER_RE = re.compile(r"^[0-9A-Fa-f]+ <.*>:$")
ADDRESS_INSTRUCTION_RE = re.compile(r"^\s+[0-9A-Fa-f]+:\s")
RAW_BYTES_RE = re.compile(r"^\s+(?:[0-9a-f]{2} )+\s*\t")
ARCHIVE_RE = re.compile(r"^In archive .*:$")

SECTION_PREFIX = "Disassembly of section"


def _classify_objdump(line: str) -> ClassifiedLine:
    text = line.rstrip()

    if match := BANNER_RE.match(text):
        return ClassifiedLine(LineKind.BANNER, match["file"], match["format"])

    if match := SECTION_RE.match(text) or SHORT_SECTION_RE.match(text):
        return ClassifiedLine(LineKind.SECTION, match["name"])

    if ADDRESS_HEADER_RE.match(text):
        raise UnsupportedInputError(
            "symbol header with an address prefix",
            hint="run objdump with --no-addresses",
        )

    if ARCHIVE_RE.match(text):
        raise UnsupportedInputError(
            "archive member listings are not supported",
            hint="extract the object files and disassemble them one at a time",
        )

    if match := SYMBOL_RE.match(text) or BARE_SYMBOL_RE.match(text):
        return ClassifiedLine(LineKind.SYMBOL, match["name"])

    if text[0].isspace():
        if ADDRESS_INSTRUCTION_RE.match(text):
            raise UnsupportedInputError(
                "instruction with an address prefix",
                hint="run objdump with --no-addresses",
            )
        if RAW_BYTES_RE.match(text):
            raise UnsupportedInputError(
                "instruction with raw instruction bytes",
                hint="run objdump with --no-show-raw-insn",
            )
        return ClassifiedLine(LineKind.INSTRUCTION, text.strip())

    # Unindented and not a recognized header
    if text.endswith(":") or text.startswith("<") or text.startswith(SECTION_PREFIX):
        raise MalformedHeaderError(
            f"malformed header '{text}'",
            hint="expected 'Disassembly of section <name>:' or '<symbol>:'",
        )
    raise UnsupportedInputError(
        f"unrecognized line '{text}'",
        hint="input must be 'objdump -d --no-addresses --no-show-raw-insn' output",
    )


def _classify_canonical(line: str, indent: int) -> ClassifiedLine:
    text = line.rstrip()
    stripped = text.lstrip()
    leading = text[:len(text) - len(stripped)]

    if "\t" in leading:
        raise UnsupportedInputError("tab indentation in canonical listing")

    depth = len(leading)
    if depth == 0 or depth == indent:
        kind = LineKind.SECTION if depth == 0 else LineKind.SYMBOL
        name = stripped[:-1]
        if not stripped.endswith(":") or not name:
            raise MalformedHeaderError(
                f"malformed {kind.name.lower()} header '{stripped}'",
                hint="header lines end with ':'",
            )
        return ClassifiedLine(kind, name)

    if depth >= 2 * indent:
        return ClassifiedLine(LineKind.INSTRUCTION, stripped)

    raise UnsupportedInputError(
        f"unexpected indentation of {depth} spaces",
        hint=f"canonical listings indent in steps of {indent} spaces",
    )


# =============================================================================
# Public Interface
# =============================================================================

def classify_line(
    line: str,
    dialect: Dialect = Dialect.OBJDUMP,
    indent: int = 4,
) -> ClassifiedLine:
    """
    Classify a single line of listing text.

    Args:
        line: One line, without its line terminator
        dialect: Grammar to classify against
        indent: Indent width of the canonical dialect

    Returns:
        The ClassifiedLine for this line

    Raises:
        MalformedHeaderError: If the line looks like a header but is not one
        UnsupportedInputError: If the line does not belong to the grammar
    """
    if not line.strip():
        return IGNORED
    if dialect is Dialect.CANONICAL:
        return _classify_canonical(line, indent)
    return _classify_objdump(line)


def sniff_dialect(line: str) -> Dialect:
    """
    Guess the dialect from the first non-blank line of a listing.

    Objdump output starts with the banner or a section header, and a
    canonical listing always starts with an unindented section header. An
    indented first line or a `<symbol>:` header can only be (broken)
    objdump output.

    A bare `name:` line is guessed as canonical here, but it is also a
    valid objdump symbol header; see is_bare_header() and settle_dialect().
    """
    text = line.rstrip()
    if (
        text[:1].isspace()
        or SYMBOL_RE.match(text)
        or BANNER_RE.match(text)
        or SECTION_RE.match(text)
        or SHORT_SECTION_RE.match(text)
        or ADDRESS_HEADER_RE.match(text)
        or ARCHIVE_RE.match(text)
    ):
        return Dialect.OBJDUMP
    return Dialect.CANONICAL


def is_bare_header(line: str) -> bool:
    """True for an unindented `name:` line, which either dialect accepts."""
    return bool(BARE_SYMBOL_RE.match(line.rstrip()))


def settle_dialect(line: str, indent: int = 4) -> Dialect:
    """
    Decide the dialect of a listing that started with bare `name:` headers.

    Args:
        line: The first non-blank line after those headers
        indent: Indent width of the canonical dialect

    Returns:
        CANONICAL if the line is a symbol header one indent level deep,
        otherwise OBJDUMP
    """
    text = line.rstrip()
    depth = len(text) - len(text.lstrip(" "))
    if depth == indent and text.endswith(":") and len(text) > indent + 1:
        return Dialect.CANONICAL
    return Dialect.OBJDUMP


def detect_dialect(lines: Iterable[str], indent: int = 4) -> Dialect:
    """Return the dialect of a listing, judged by its leading lines."""
    seen_bare_header = False
    for line in lines:
        if not line.strip():
            continue
        if is_bare_header(line):
            seen_bare_header = True
        elif seen_bare_header:
            return settle_dialect(line, indent)
        else:
            return sniff_dialect(line)
    return Dialect.CANONICAL if seen_bare_header else Dialect.OBJDUMP
