#!/usr/bin/env python3
"""
6502 Cycle-Cost Classifier

Maps the cycle annotations of both sources onto CycleCostMode.

The official reference appends prose to the base count:
    "4 (+1 if page crossed)"
    "2 (+1 if branch succeeds +2 if to a new page)"

The undocumented text marks page-dependent costs with an asterisk: "4*".
"""

from typing import Optional, Tuple

from opcode_extraction.errors import DocumentLocation, UnrecognizedLabelError
from opcode_extraction.models import CycleCostMode


# Checked in order; the first substring found decides the mode
ANNOTATION_PATTERNS: Tuple[Tuple[str, CycleCostMode], ...] = (
    ("page crossed", CycleCostMode.PAGE_CROSS_PENALTY),
    ("branch succeeds", CycleCostMode.BRANCH_TAKEN_PENALTY),
)

PAGE_CROSS_MARKER = "*"


def classify_cycle_annotation(annotation: str, location: Optional[DocumentLocation] = None) -> CycleCostMode:
    """
    Classify the prose that follows an official cycle count.

    An empty annotation is a fixed cost. Text matching no known pattern is an
    error rather than a guess.
    """
    text = " ".join(annotation.split()).lower()
    if not text:
        return CycleCostMode.FIXED

    for pattern, mode in ANNOTATION_PATTERNS:
        if pattern in text:
            return mode

    raise UnrecognizedLabelError(f"unrecognized cycle annotation {annotation.strip()!r}", location)


def classify_cycle_marker(text: str) -> CycleCostMode:
    """Classify an undocumented-table cycle cell such as "4*" or "2"."""
    if PAGE_CROSS_MARKER in text:
        return CycleCostMode.PAGE_CROSS_PENALTY
    return CycleCostMode.FIXED
