#!/usr/bin/env python3
"""
6502 Addressing-Mode Normalizer

Collapses the free-text addressing-mode labels used by both documentation
sources into the canonical AddressingMode identifiers.

Usage:
    from opcode_extraction.addressing_modes import normalize_addressing_mode

    normalize_addressing_mode("Zero Page,X")    # AddressingMode.ZERO_PAGE_X
    normalize_addressing_mode("(Indirect),Y")   # AddressingMode.INDIRECT_Y
    normalize_addressing_mode("ZeroPage_X")     # AddressingMode.ZERO_PAGE_X
"""

from typing import Optional

from opcode_extraction.errors import DocumentLocation, UnrecognizedLabelError
from opcode_extraction.models import AddressingMode


def canonicalize_label(label: str) -> str:
    """
    Rewrite a raw label into identifier form.

    Examples:
        "Zero Page,X"       → "ZeroPage_X"
        "(Indirect,X)"      → "Indirect_X"
        "(Indirect),Y"      → "Indirect_Y"
        "Zero\\n   Page"    → "ZeroPage"
    """
    text = label.replace("(", "").replace(")", "")
    # Whitespace (including HTML line breaks) never separates meaningful tokens
    parts = ["".join(part.split()) for part in text.split(",")]
    return "_".join(parts)


def normalize_addressing_mode(label: str, location: Optional[DocumentLocation] = None) -> AddressingMode:
    """Map a raw label onto AddressingMode, failing on anything outside the vocabulary."""
    canonical = canonicalize_label(label)
    try:
        return AddressingMode(canonical)
    except ValueError:
        raise UnrecognizedLabelError(
            f"unrecognized addressing mode {label.strip()!r} (normalized to {canonical!r})",
            location,
        ) from None
