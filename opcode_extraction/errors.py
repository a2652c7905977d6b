"""
Opcode Extraction Error Hierarchy

Every failure in the pipeline is fatal: a wrong or missing opcode silently
corrupts the emulator fed by the generated table, so no stage skips a row and
continues. All exceptions inherit from OpcodeExtractionError so the CLI can
report any of them with a single except clause.

Exception Hierarchy
-------------------
OpcodeExtractionError (base)
├── FetchError             - network/HTTP failure or timeout on a source document
├── ShapeMismatchError     - document structure differs from the expected layout
├── UnrecognizedLabelError - addressing-mode or cycle text outside the known vocabulary
├── KeyCollisionError      - two variants claim the same opcode byte
├── UnmappedMnemonicError  - a variant's mnemonic has no dispatch registry entry
└── WriteError             - the generated module could not be written

Messages carry a DocumentLocation when one is known:
    undocumented:LAX (LAX):row 3: unrecognized addressing mode 'Zero Page,Z'
"""

from dataclasses import dataclass
from typing import Optional


# ============================================================================
# Source Location Tracking
# ============================================================================

@dataclass(frozen=True)
class DocumentLocation:
    """
    Where in a source document an error was found.

    Attributes:
        document: Source label ("official", "undocumented") or a URL
        section: Mnemonic anchor or section title, if known
        row: 1-indexed row within the section's table, if known
    """
    document: str
    section: Optional[str] = None
    row: Optional[int] = None

    def at_row(self, row: int) -> "DocumentLocation":
        return DocumentLocation(self.document, self.section, row)

    def __str__(self) -> str:
        parts = [self.document]
        if self.section is not None:
            parts.append(self.section)
        if self.row is not None:
            parts.append(f"row {self.row}")
        return ":".join(parts)


# ============================================================================
# Exceptions
# ============================================================================

class OpcodeExtractionError(Exception):
    """Base exception for every pipeline failure."""

    def __init__(self, message: str, location: Optional[DocumentLocation] = None):
        self.message = message
        self.location = location
        super().__init__(self.format_message())

    def format_message(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.location}: {self.message}"


class FetchError(OpcodeExtractionError):
    """A source document could not be downloaded."""
    pass


class ShapeMismatchError(OpcodeExtractionError):
    """The document does not follow the table/section layout the extractor relies on."""
    pass


class UnrecognizedLabelError(OpcodeExtractionError):
    """Free text that does not map onto the closed addressing-mode or cycle vocabulary."""
    pass


class KeyCollisionError(OpcodeExtractionError):
    """
    Two variants claim one opcode byte.

    Attributes:
        opcode: The contested byte
        first: Description of the variant that claimed it first
        second: Description of the variant that tried to claim it again
    """

    def __init__(self, opcode: int, first: str, second: str):
        self.opcode = opcode
        self.first = first
        self.second = second
        super().__init__(
            f"opcode ${opcode:02X} claimed by both {first} and {second}"
        )


class UnmappedMnemonicError(OpcodeExtractionError):
    """A variant's mnemonic is absent from the dispatch registry."""
    pass


class WriteError(OpcodeExtractionError):
    """The generated module could not be persisted."""
    pass
