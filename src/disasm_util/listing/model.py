"""
Listing Data Model
==================

In-memory representation of a disassembly listing:

    Listing
    └── Section (keyed by name)
        └── Symbol (keyed by name)
            └── Instruction (in encounter order)

Containers preserve insertion order only. Sorting is applied when the
listing is rendered (see sorted_sections() / sorted_symbols()), using plain
str ordering: code-point comparison, which for UTF-8 text is the same as
byte-wise comparison and does not depend on the locale.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Instruction:
    """
    A single disassembled instruction.

    The text is the mnemonic-plus-operands string exactly as objdump printed
    it, with surrounding whitespace removed. It is never parsed further.
    """
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass
class Symbol:
    """
    A named entry point within a section (usually a function).

    Attributes:
        name: Symbol name as it appears in the listing (e.g. "<main>")
        instructions: Instructions in the order they were encountered
    """
    name: str
    instructions: list[Instruction] = field(default_factory=list)

    def add_instruction(self, text: str) -> Instruction:
        instruction = Instruction(text.strip())
        self.instructions.append(instruction)
        return instruction


@dataclass
class Section:
    """
    A named grouping of symbols in the object file (e.g. ".text").

    Attributes:
        name: Section name
        symbols: Symbols keyed by name, in insertion order
    """
    name: str
    symbols: dict[str, Symbol] = field(default_factory=dict)

    def get_or_add_symbol(self, name: str) -> Symbol:
        """Return the symbol called `name`, creating it if needed."""
        symbol = self.symbols.get(name)
        if symbol is None:
            symbol = Symbol(name)
            self.symbols[name] = symbol
        return symbol

    def sorted_symbols(self) -> list[Symbol]:
        return sorted(self.symbols.values(), key=lambda s: s.name)

    @property
    def instruction_count(self) -> int:
        return sum(len(s.instructions) for s in self.symbols.values())


@dataclass
class Listing:
    """
    Root of the model: every section found in one disassembly listing.

    Attributes:
        sections: Sections keyed by name, in insertion order
        file_name: Object file named in the objdump banner (None if absent)
        file_format: BFD format named in the banner, e.g. "elf64-x86-64"
    """
    sections: dict[str, Section] = field(default_factory=dict)
    file_name: Optional[str] = None
    file_format: Optional[str] = None

    def get_or_add_section(self, name: str) -> Section:
        """Return the section called `name`, creating it if needed."""
        section = self.sections.get(name)
        if section is None:
            section = Section(name)
            self.sections[name] = section
        return section

    def sorted_sections(self) -> list[Section]:
        return sorted(self.sections.values(), key=lambda s: s.name)

    @property
    def section_count(self) -> int:
        return len(self.sections)

    @property
    def symbol_count(self) -> int:
        return sum(len(s.symbols) for s in self.sections.values())

    @property
    def instruction_count(self) -> int:
        return sum(s.instruction_count for s in self.sections.values())

    @property
    def is_empty(self) -> bool:
        return not self.sections
