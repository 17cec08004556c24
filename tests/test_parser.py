"""
Unit Tests for the Listing Parser
=================================

Test coverage includes:
- Complete objdump listings (banner, sections, symbols, instructions)
- Structural errors (symbol/instruction with no parent)
- Error locations and message formatting
- Duplicate section/symbol merge policy
- Empty input policy
- Canonical dialect input and explicit dialect selection
"""

import pytest

from disasm_util.errors import (
    InstructionWithoutSectionError,
    InstructionWithoutSymbolError,
    ListingStructureError,
    MalformedHeaderError,
    SymbolWithoutSectionError,
    UnsupportedInputError,
)
from disasm_util.listing import (
    Dialect,
    Instruction,
    ListingParser,
    parse_lines,
    parse_listing,
)


HELLO_OBJDUMP = (
    "\n"
    "hello.o:     file format elf64-x86-64\n"
    "\n"
    "\n"
    "Disassembly of section .text:\n"
    "\n"
    "<main>:\n"
    "\tendbr64\n"
    "\tpush   %rbp\n"
    "\tmov    %rsp,%rbp\n"
    "\tcall   <helper>\n"
    "\tmov    $0x0,%eax\n"
    "\tpop    %rbp\n"
    "\tret\n"
    "\n"
    "<helper>:\n"
    "\tpush   %rbp\n"
    "\tmov    %rsp,%rbp\n"
    "\tmov    $0x2a,%eax\n"
    "\tpop    %rbp\n"
    "\tret\n"
    "\n"
    "Disassembly of section .init:\n"
    "\n"
    "<_init>:\n"
    "\tendbr64\n"
    "\tsub    $0x8,%rsp\n"
    "\tret\n"
)


def texts(symbol):
    return [instruction.text for instruction in symbol.instructions]


# =============================================================================
# Well-Formed Listings
# =============================================================================

class TestParseObjdump:
    """Tests for parsing complete objdump listings."""

    def test_scenario_single_section(self):
        """Short section header, bare symbol and two instructions."""
        listing = parse_listing("foo.o: section .text:\nmain:\n    mov eax, 1\n    ret\n")

        assert list(listing.sections) == [".text"]
        section = listing.sections[".text"]
        assert list(section.symbols) == ["main"]
        assert texts(section.symbols["main"]) == ["mov eax, 1", "ret"]

    def test_full_listing_structure(self):
        """Every section, symbol and instruction is captured."""
        listing = parse_listing(HELLO_OBJDUMP)

        assert list(listing.sections) == [".text", ".init"]
        text = listing.sections[".text"]
        assert list(text.symbols) == ["<main>", "<helper>"]
        assert texts(text.symbols["<helper>"]) == [
            "push   %rbp",
            "mov    %rsp,%rbp",
            "mov    $0x2a,%eax",
            "pop    %rbp",
            "ret",
        ]
        assert texts(listing.sections[".init"].symbols["<_init>"]) == [
            "endbr64", "sub    $0x8,%rsp", "ret",
        ]

    def test_counts(self):
        """Summary counts match the listing."""
        listing = parse_listing(HELLO_OBJDUMP)
        assert listing.section_count == 2
        assert listing.symbol_count == 3
        assert listing.instruction_count == 15

    def test_banner_recorded(self):
        """File name and format come from the banner."""
        listing = parse_listing(HELLO_OBJDUMP)
        assert listing.file_name == "hello.o"
        assert listing.file_format == "elf64-x86-64"

    def test_repeated_banner_ignored(self):
        """Only the first banner is recorded."""
        listing = parse_listing(
            "a.o:     file format elf64-x86-64\n"
            "b.o:     file format elf32-i386\n"
            "Disassembly of section .text:\n"
        )
        assert listing.file_name == "a.o"
        assert listing.file_format == "elf64-x86-64"

    def test_empty_section_and_symbol(self):
        """Sections without symbols and symbols without instructions are kept."""
        listing = parse_listing(
            "x.o:     file format elf64-x86-64\n"
            "Disassembly of section sec1:\n"
            "<sym3>:\n"
            "Disassembly of section sec2:\n"
        )
        assert listing.sections["sec1"].symbols["<sym3>"].instructions == []
        assert listing.sections["sec2"].symbols == {}

    def test_instructions_stored_verbatim(self):
        """Operands and trailing comments are not split off."""
        listing = parse_listing(
            "Disassembly of section sec1:\n"
            "<sym1>:\n"
            "\topc3    %opr3                   # comment1\n"
        )
        symbol = listing.sections["sec1"].symbols["<sym1>"]
        assert symbol.instructions == [
            Instruction("opc3    %opr3                   # comment1")
        ]

    def test_no_sorting_during_parse(self):
        """The parser keeps insertion order; sorting is the renderer's job."""
        listing = parse_listing(
            "Disassembly of section abb:\n"
            "<zsym1>:\n"
            "<asym2>:\n"
            "Disassembly of section aaa:\n"
        )
        assert list(listing.sections) == ["abb", "aaa"]
        assert list(listing.sections["abb"].symbols) == ["<zsym1>", "<asym2>"]


# =============================================================================
# Structural Errors
# =============================================================================

class TestStructureErrors:
    """Tests for lines without a parent to attach to."""

    def test_instruction_without_symbol(self):
        """An instruction directly after a section header fails."""
        with pytest.raises(InstructionWithoutSymbolError) as excinfo:
            parse_listing("foo.o: section .text:\n    mov eax, 1\n")

        error = excinfo.value
        assert not isinstance(error, InstructionWithoutSectionError)
        assert error.location.line == 2
        assert error.source_line == "    mov eax, 1"

    def test_instruction_after_new_section_needs_symbol(self):
        """A new section clears the current symbol."""
        with pytest.raises(InstructionWithoutSymbolError):
            parse_listing(
                "Disassembly of section .text:\n"
                "<main>:\n"
                "\tret\n"
                "Disassembly of section .init:\n"
                "\tret\n"
            )

    def test_symbol_without_section(self):
        """A symbol header before any section header fails."""
        with pytest.raises(SymbolWithoutSectionError) as excinfo:
            parse_listing("folder\\file:     file format some_format\n\n<sym1>:\n")

        assert excinfo.value.location.line == 3
        assert "before any section header" in str(excinfo.value)

    def test_instruction_without_section(self):
        """An instruction before any header is both kinds of error."""
        with pytest.raises(InstructionWithoutSectionError) as excinfo:
            parse_listing("folder\\file:     file format some_format\n\n\topc1\n")

        error = excinfo.value
        assert isinstance(error, InstructionWithoutSymbolError)
        assert isinstance(error, SymbolWithoutSectionError)
        assert isinstance(error, ListingStructureError)
        assert error.location.line == 3
        assert error.location.column == 2

    def test_instruction_as_first_line(self):
        """An indented first line is treated as objdump output."""
        with pytest.raises(InstructionWithoutSectionError):
            parse_listing("    mov eax, 1\n")

    @pytest.mark.parametrize("text", [
        "main:\n    mov eax, 1\n",
        "main:\n    mov eax, 1\n    ret\n",
        "main:\n        ret\n",
        "main:\n\tret\n",
        "\nmain:\n\n    mov eax, 1\n",
    ])
    def test_bare_symbol_as_first_line(self, text):
        """A leading `name:` followed by an instruction is an objdump symbol."""
        with pytest.raises(SymbolWithoutSectionError) as excinfo:
            parse_listing(text)

        error = excinfo.value
        assert not isinstance(error, InstructionWithoutSymbolError)
        assert error.source_line == "main:"
        assert "symbol 'main'" in str(error)

    def test_bare_symbol_error_line_number(self):
        """The held-back header line keeps its own line number."""
        with pytest.raises(SymbolWithoutSectionError) as excinfo:
            parse_listing("\n\nstart:\n\n\tnop\n")
        assert excinfo.value.location.line == 3

    def test_bare_symbol_then_section(self):
        """A leading `name:` followed by a section header is still an objdump symbol."""
        with pytest.raises(SymbolWithoutSectionError):
            parse_listing("main:\nDisassembly of section .text:\n")


# =============================================================================
# Error Reporting
# =============================================================================

class TestErrorReporting:
    """Tests for error locations and formatting."""

    def test_classifier_error_gets_location(self):
        """Errors from the classifier are given the line number."""
        with pytest.raises(MalformedHeaderError) as excinfo:
            parse_listing(
                "folder\\file:     file format some_format\n"
                "Disassembly of section sec%1:\n"
            )

        error = excinfo.value
        assert error.location.line == 2
        assert error.source_line == "Disassembly of section sec%1:"
        assert str(error).startswith(
            "<input>:2:1: error: malformed header 'Disassembly of section sec%1:'"
        )

    def test_message_format(self):
        """Messages show the line, a caret and the hint."""
        with pytest.raises(MalformedHeaderError) as excinfo:
            parse_listing("Disassembly of section sec1:\nsym1>:\n")

        lines = str(excinfo.value).split("\n")
        assert lines[0] == "<input>:2:1: error: malformed header 'sym1>:'"
        assert lines[1] == "    sym1>:"
        assert lines[2] == "    ^"
        assert lines[3].startswith("hint: ")

    def test_caret_under_tab_indented_line(self):
        """Tabs are expanded so the caret lines up with the instruction."""
        with pytest.raises(InstructionWithoutSymbolError) as excinfo:
            parse_listing("Disassembly of section .init:\n\tret\n")

        lines = str(excinfo.value).split("\n")
        assert lines[0].startswith("<input>:2:2: error: instruction 'ret'")
        assert lines[1] == " " * 12 + "ret"
        assert lines[2] == " " * 12 + "^"

    def test_message_without_location(self):
        """An error raised outside the parser has no source context."""
        error = MalformedHeaderError("malformed header 'x:'", hint="check it")
        assert str(error) == "error: malformed header 'x:'\nhint: check it"

    def test_source_name(self):
        """The source name appears in error locations."""
        with pytest.raises(UnsupportedInputError) as excinfo:
            parse_listing(
                "a.out:     file format elf64-x86-64\n"
                "0000000000001000 <_init>:\n",
                source="a.dis",
            )
        assert excinfo.value.location.filename == "a.dis"
        assert str(excinfo.value).startswith("a.dis:2:1: error:")

    def test_stops_at_first_error(self):
        """Parsing stops at the first bad line."""
        with pytest.raises(MalformedHeaderError) as excinfo:
            parse_listing(
                "Disassembly of section sec1:\n"
                "<sym1>:\n"
                "<sym2\n"
                "\tnop\n"
                "sym3>:\n"
            )
        assert excinfo.value.location.line == 3


# =============================================================================
# Duplicate and Empty Input Policies
# =============================================================================

class TestPolicies:
    """Tests for the duplicate-name and empty-input policies."""

    def test_duplicate_section_merges(self):
        """A repeated section header reopens the existing section."""
        listing = parse_listing(
            "Disassembly of section .text:\n"
            "<b>:\n"
            "\tnop\n"
            "Disassembly of section .init:\n"
            "<_init>:\n"
            "\tret\n"
            "Disassembly of section .text:\n"
            "<a>:\n"
            "\tret\n"
        )
        assert list(listing.sections) == [".text", ".init"]
        assert list(listing.sections[".text"].symbols) == ["<b>", "<a>"]

    def test_duplicate_symbol_appends(self):
        """A repeated symbol header continues the existing symbol."""
        listing = parse_listing(
            "Disassembly of section .text:\n"
            "<f>:\n"
            "\tpush   %rbp\n"
            "<g>:\n"
            "\tnop\n"
            "<f>:\n"
            "\tret\n"
        )
        section = listing.sections[".text"]
        assert list(section.symbols) == ["<f>", "<g>"]
        assert texts(section.symbols["<f>"]) == ["push   %rbp", "ret"]

    @pytest.mark.parametrize("text", ["", "\n", "\n   \n\t\n"])
    def test_empty_input_gives_empty_listing(self, text):
        """Empty or blank input is not an error."""
        listing = parse_listing(text)
        assert listing.is_empty
        assert listing.file_name is None

    def test_banner_only(self):
        """A listing with only a banner is empty but keeps the banner."""
        listing = parse_listing("empty.o:     file format elf64-x86-64\n\n")
        assert listing.is_empty
        assert listing.file_name == "empty.o"


# =============================================================================
# Dialects and the Parser Object
# =============================================================================

class TestDialects:
    """Tests for canonical input and explicit dialect selection."""

    def test_canonical_input(self):
        """Rendered output is parsed back by indentation."""
        listing = parse_listing(
            ".text:\n"
            "    <main>:\n"
            "        endbr64\n"
            "        ret\n"
        )
        assert texts(listing.sections[".text"].symbols["<main>"]) == ["endbr64", "ret"]
        assert listing.file_name is None

    def test_canonical_custom_indent(self):
        """The canonical indent width can be changed."""
        listing = parse_listing(".text:\n  main:\n    ret\n", indent=2)
        assert texts(listing.sections[".text"].symbols["main"]) == ["ret"]

    def test_canonical_structure_error(self):
        """Structure rules apply to canonical input too."""
        with pytest.raises(InstructionWithoutSymbolError) as excinfo:
            parse_listing(
                ".init:\n"
                "    _init:\n"
                "        ret\n"
                ".text:\n"
                "        ret\n"
            )
        assert excinfo.value.location.line == 5

    def test_canonical_empty_sections(self):
        """A rendered listing of empty sections is read back as sections."""
        parser = ListingParser()
        parser.feed_all([".data:", ".text:"])
        listing = parser.finish()

        assert parser.dialect == Dialect.CANONICAL
        assert list(listing.sections) == [".data", ".text"]

    def test_canonical_detected_after_bare_headers(self):
        """Leading empty sections do not hide the canonical dialect."""
        parser = ListingParser()
        parser.feed_all([".bss:", ".text:", "    main:", "        ret"])
        listing = parser.finish()

        assert parser.dialect == Dialect.CANONICAL
        assert not listing.sections[".bss"].symbols
        assert texts(listing.sections[".text"].symbols["main"]) == ["ret"]

    def test_dialect_pending_on_bare_header(self):
        """The dialect stays open while only bare headers have been seen."""
        parser = ListingParser()
        parser.feed("main:")
        assert parser.dialect is None
        with pytest.raises(SymbolWithoutSectionError):
            parser.feed("\tret")
        assert parser.dialect == Dialect.OBJDUMP

    def test_explicit_dialect_wins(self):
        """Forcing the objdump dialect reads '.text:' as a bare symbol."""
        with pytest.raises(SymbolWithoutSectionError):
            parse_listing(".text:\n    <main>:\n", dialect=Dialect.OBJDUMP)

    def test_invalid_indent(self):
        """Indent width must be positive."""
        with pytest.raises(ValueError):
            ListingParser(indent=0)


class TestListingParser:
    """Tests for the incremental parser interface."""

    def test_feed_and_finish(self):
        """Lines can be fed one at a time."""
        parser = ListingParser()
        for line in HELLO_OBJDUMP.splitlines():
            parser.feed(line)
        listing = parser.finish()

        assert parser.dialect == Dialect.OBJDUMP
        assert listing.symbol_count == 3

    def test_feed_after_finish(self):
        """A finished parser cannot be reused."""
        parser = ListingParser()
        parser.finish()
        with pytest.raises(RuntimeError):
            parser.feed("<main>:")

    def test_parse_lines_accepts_generator(self):
        """parse_lines() consumes any iterable lazily."""
        def generate():
            yield "Disassembly of section .text:"
            yield "<main>:"
            for i in range(3):
                yield f"\tnop{i}"

        listing = parse_lines(generate())
        assert texts(listing.sections[".text"].symbols["<main>"]) == [
            "nop0", "nop1", "nop2",
        ]

    def test_separate_parses_do_not_share_state(self):
        """Each parse starts from a fresh state."""
        parse_listing("Disassembly of section .text:\n<main>:\n")
        with pytest.raises(InstructionWithoutSectionError):
            parse_listing("\tret\n")
