#!/usr/bin/env python3
"""
6502 Opcode Table Merger

Unions the variants of every extracted source into one table keyed by opcode
byte and derives the mnemonic registry that drives dispatch generation.

The sources are expected to partition the byte space: a byte claimed twice is
reported, never overwritten. Sources are merged in the order given, so the
official reference comes first and each additional document is just another
ExtractedSource.
"""

from types import MappingProxyType
from typing import Dict, List, Sequence

from opcode_extraction.errors import DocumentLocation, KeyCollisionError, ShapeMismatchError
from opcode_extraction.models import INSTRUCTION_SIZES, ExtractedSource, OpcodeTable, OpcodeVariant


def check_instruction_size(variant: OpcodeVariant, source: str) -> None:
    """Reject a variant whose byte count disagrees with its addressing mode."""
    expected = INSTRUCTION_SIZES[variant.mode]
    if variant.size != expected:
        raise ShapeMismatchError(
            f"${variant.opcode:02X} is {variant.size} bytes but "
            f"{variant.mode.value} instructions are {expected}",
            DocumentLocation(source, variant.mnemonic),
        )


def build_registry(sources: Sequence[ExtractedSource]) -> List[str]:
    """
    Ordered, case-sensitive set of bare mnemonics.

    Each source's discovered mnemonics are taken first, then any variant
    mnemonic the source did not list, so no extracted mnemonic can be missed.
    """
    registry: List[str] = []
    seen = set()
    for source in sources:
        names = list(source.mnemonics) + [v.mnemonic for v in source.variants]
        for name in names:
            if name not in seen:
                seen.add(name)
                registry.append(name)
    return registry


def merge_sources(sources: Sequence[ExtractedSource]) -> OpcodeTable:
    """
    Merge extracted sources into one OpcodeTable.

    Raises:
        KeyCollisionError: two variants claim the same opcode byte
        ShapeMismatchError: a variant's size contradicts its mode, or a
            registry mnemonic has no variant
    """
    print("\n" + "=" * 70)
    print("MERGING OPCODE TABLES")
    print("=" * 70)

    opcodes: Dict[int, OpcodeVariant] = {}
    for source in sources:
        for variant in source.variants:
            check_instruction_size(variant, source.name)

            existing = opcodes.get(variant.opcode)
            if existing is not None:
                raise KeyCollisionError(variant.opcode, existing.describe(), variant.describe())
            opcodes[variant.opcode] = variant

        print(f"  {source.name}: {len(source.variants)} opcodes")

    registry = build_registry(sources)

    used = {v.mnemonic for v in opcodes.values()}
    orphans = [name for name in registry if name not in used]
    if orphans:
        raise ShapeMismatchError(
            f"mnemonics without any opcode: {', '.join(orphans)}",
            DocumentLocation("merge"),
        )

    print(f"✓ Merged {len(opcodes)} opcodes, {len(registry)} mnemonics")
    return OpcodeTable(
        opcodes=MappingProxyType(opcodes),
        registry=tuple(registry),
        sources=tuple(source.name for source in sources),
    )
