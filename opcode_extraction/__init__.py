"""
6502 opcode table extraction.

Scrapes the official and undocumented 6502 opcode documentation, reconciles
them into one table keyed by opcode byte, and emits the emulator's Rust
opcode module.
"""

from opcode_extraction.errors import (
    DocumentLocation,
    FetchError,
    KeyCollisionError,
    OpcodeExtractionError,
    ShapeMismatchError,
    UnmappedMnemonicError,
    UnrecognizedLabelError,
    WriteError,
)
from opcode_extraction.models import (
    INSTRUCTION_SIZES,
    UNOFFICIAL_MARKER,
    AddressingMode,
    CycleCostMode,
    ExtractedSource,
    InstructionRecord,
    OpcodeTable,
    OpcodeVariant,
)

__version__ = "0.1.0"
