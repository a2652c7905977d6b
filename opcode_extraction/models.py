#!/usr/bin/env python3
"""
6502 Opcode Data Model

Shared types produced by the extractors and consumed by the merger and the
Rust emitter. Every stage returns new frozen objects; nothing is mutated after
construction.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple


# Prefix carried by undocumented opcodes in the emitted table ("*LAX").
UNOFFICIAL_MARKER = "*"


# ============================================================================
# Enumerations
# ============================================================================

class AddressingMode(Enum):
    """Canonical addressing-mode identifiers, spelled as the emulator's Rust enum."""

    ACCUMULATOR = "Accumulator"
    IMMEDIATE = "Immediate"
    ZERO_PAGE = "ZeroPage"
    ZERO_PAGE_X = "ZeroPage_X"
    ZERO_PAGE_Y = "ZeroPage_Y"
    ABSOLUTE = "Absolute"
    ABSOLUTE_X = "Absolute_X"
    ABSOLUTE_Y = "Absolute_Y"
    INDIRECT = "Indirect"
    INDIRECT_X = "Indirect_X"
    INDIRECT_Y = "Indirect_Y"
    RELATIVE = "Relative"
    IMPLIED = "Implied"


class CycleCostMode(Enum):
    """How a variant's cycle count grows beyond its base cost."""

    FIXED = "Fixed"
    PAGE_CROSS_PENALTY = "PageCrossPenalty"
    BRANCH_TAKEN_PENALTY = "BranchTakenPenalty"


# Instruction length in bytes (opcode + operand) implied by each mode
INSTRUCTION_SIZES: Dict[AddressingMode, int] = {
    AddressingMode.ACCUMULATOR: 1,
    AddressingMode.IMPLIED: 1,
    AddressingMode.IMMEDIATE: 2,
    AddressingMode.ZERO_PAGE: 2,
    AddressingMode.ZERO_PAGE_X: 2,
    AddressingMode.ZERO_PAGE_Y: 2,
    AddressingMode.INDIRECT_X: 2,
    AddressingMode.INDIRECT_Y: 2,
    AddressingMode.RELATIVE: 2,
    AddressingMode.ABSOLUTE: 3,
    AddressingMode.ABSOLUTE_X: 3,
    AddressingMode.ABSOLUTE_Y: 3,
    AddressingMode.INDIRECT: 3,
}


# ============================================================================
# Records
# ============================================================================

@dataclass(frozen=True)
class OpcodeVariant:
    """
    One (mnemonic, addressing mode) encoding of an instruction.

    Attributes:
        opcode: Opcode byte, unique across the merged table
        mnemonic: Bare upper-case mnemonic, without the unofficial marker
        size: Instruction length in bytes
        cycles: Base cycle cost
        cycle_mode: How the cost grows beyond `cycles`
        mode: Canonical addressing mode
        official: False for undocumented opcodes
        cycle_note: Penalty annotation as printed in the official reference
    """
    opcode: int
    mnemonic: str
    size: int
    cycles: int
    cycle_mode: CycleCostMode
    mode: AddressingMode
    official: bool = True
    cycle_note: str = ""

    @property
    def name(self) -> str:
        """Name as emitted into the table; undocumented opcodes carry the marker."""
        if self.official:
            return self.mnemonic
        return f"{UNOFFICIAL_MARKER}{self.mnemonic}"

    @property
    def handler(self) -> str:
        """Emulator method invoked by the dispatch function."""
        return self.mnemonic.lower()

    def describe(self) -> str:
        origin = "official" if self.official else "undocumented"
        return f"{origin} {self.mnemonic} {self.mode.value}"

    def __repr__(self) -> str:
        return f"OpcodeVariant(${self.opcode:02X}, {self.name}, {self.mode.value})"


@dataclass(frozen=True)
class InstructionRecord:
    """An official-reference entry: one mnemonic, its flag effects and its variants."""
    mnemonic: str
    flag_effects: Tuple[Tuple[str, str], ...]
    variants: Tuple[OpcodeVariant, ...]


@dataclass(frozen=True)
class ExtractedSource:
    """
    Output of one extractor adapter.

    Attributes:
        name: Document label used in errors and the report
        mnemonics: Mnemonics in order of discovery within this document
        variants: Opcode variants in document order
        records: Per-mnemonic detail, when the document provides it
    """
    name: str
    mnemonics: Tuple[str, ...]
    variants: Tuple[OpcodeVariant, ...]
    records: Tuple[InstructionRecord, ...] = ()


@dataclass(frozen=True)
class OpcodeTable:
    """
    Merged opcode table.

    `opcodes` preserves insertion order (official source first) and `registry`
    lists each bare mnemonic once, in order of first discovery.
    """
    opcodes: Mapping[int, OpcodeVariant]
    registry: Tuple[str, ...]
    sources: Tuple[str, ...] = field(default=())

    def lookup(self, opcode: int) -> Optional[OpcodeVariant]:
        return self.opcodes.get(opcode)

    def variants_for(self, mnemonic: str) -> Tuple[OpcodeVariant, ...]:
        return tuple(v for v in self.opcodes.values() if v.mnemonic == mnemonic)

    def __len__(self) -> int:
        return len(self.opcodes)
