#!/usr/bin/env python3
"""
6502 Undocumented Opcode Extractor

Extracts the undocumented ("illegal") 6502 opcodes from the NESdev plain-text
document. Sections look like:

    AAC (ANC) [ANC]
    ===============
    AND byte with accumulator. If result is negative then carry is set.
    Status flags: N,Z,C

    Addressing  |Mnemonics  |Opc|Sz | n
    ------------|-----------|---|---|---
    Immediate   |AAC #arg   |$0B| 2 | 2
    Immediate   |AAC #arg   |$2B| 2 | 2

The title line sits immediately above its "=" delimiter, so a section only
becomes known once the next delimiter (or the end of the text) is reached.
The mnemonic is the name in parentheses; "*" in the cycle column marks a
page-crossing penalty and "-" means no cycle count is given.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from opcode_extraction.addressing_modes import normalize_addressing_mode
from opcode_extraction.cycle_modes import PAGE_CROSS_MARKER, classify_cycle_marker
from opcode_extraction.errors import DocumentLocation, ShapeMismatchError
from opcode_extraction.models import ExtractedSource, OpcodeVariant


SOURCE_NAME = "undocumented"

DELIMITER_PATTERN = re.compile(r"^={3,}$")
RULE_PATTERN = re.compile(r"^-[-|]{2,}$")
MNEMONIC_PATTERN = re.compile(r"\(([^)]*)\)")

ROW_COLUMNS = 5


# ============================================================================
# Section Scanning
# ============================================================================

class ScanState(Enum):
    SEEKING = "seeking"
    BUFFERING = "buffering"


@dataclass(frozen=True)
class TextSection:
    """Lines between a title/delimiter pair and the next title (or end of text)."""
    title: str
    lines: Tuple[str, ...]


def is_delimiter(line: str) -> bool:
    return bool(DELIMITER_PATTERN.match(line.strip()))


def is_table_rule(line: str) -> bool:
    return bool(RULE_PATTERN.match("".join(line.split())))


class SectionScanner:
    """
    Splits the document into titled sections.

    SEEKING: before the first delimiter; only the most recent line is kept
    as a title candidate, the rest is preamble.
    BUFFERING: lines accumulate until the next delimiter, whose preceding
    line is detached as the following section's title.
    End of input flushes the section being buffered.
    """

    def __init__(self):
        self.state = ScanState.SEEKING
        self.title: Optional[str] = None
        self.buffer: List[str] = []
        self.sections: List[TextSection] = []
        self._candidate: Optional[str] = None

    def feed(self, line: str) -> None:
        if self.state is ScanState.SEEKING:
            if not is_delimiter(line):
                self._candidate = line.strip()
            elif self._candidate:
                self._open(self._candidate)
            return

        if is_delimiter(line):
            if not self.buffer or not self.buffer[-1].strip():
                raise ShapeMismatchError(
                    "section delimiter is not preceded by a title line",
                    DocumentLocation(SOURCE_NAME, self.title),
                )
            next_title = self.buffer.pop().strip()
            self._flush()
            self._open(next_title)
        else:
            self.buffer.append(line)

    def finish(self) -> List[TextSection]:
        if self.state is ScanState.BUFFERING:
            self._flush()
            self.state = ScanState.SEEKING
        return self.sections

    def _open(self, title: str) -> None:
        self.title = title
        self.buffer = []
        self.state = ScanState.BUFFERING

    def _flush(self) -> None:
        self.sections.append(TextSection(self.title, tuple(self.buffer)))
        self.buffer = []


def split_sections(lines: Iterable[str]) -> List[TextSection]:
    scanner = SectionScanner()
    for line in lines:
        scanner.feed(line)
    return scanner.finish()


# ============================================================================
# Section Parsing
# ============================================================================

def extract_mnemonic(title: str) -> str:
    """
    Read the mnemonic from a section title.

    Examples:
        "AAC (ANC) [ANC]" → "ANC"
        "LAX (LAX) [LAX]" → "LAX"
    """
    match = MNEMONIC_PATTERN.search(title)
    mnemonic = match.group(1).strip().upper() if match else ""
    if not mnemonic.isalpha():
        raise ShapeMismatchError(
            "section title has no parenthesized mnemonic",
            DocumentLocation(SOURCE_NAME, title),
        )
    return mnemonic


def find_table_rows(section: TextSection) -> List[str]:
    """Rows between the dashed rule and the first blank line."""
    rows = []
    in_table = False

    for line in section.lines:
        if not in_table:
            in_table = is_table_rule(line)
            continue
        if not line.strip():
            break
        rows.append(line)

    location = DocumentLocation(SOURCE_NAME, section.title)
    if not in_table:
        raise ShapeMismatchError("section has no opcode table", location)
    if not rows:
        raise ShapeMismatchError("opcode table has no rows", location)
    return rows


def parse_cycles(text: str, location: DocumentLocation) -> int:
    """
    Parse a cycle cell with markers removed.

    Examples:
        "4"  → 4
        "4*" → 4
        "-"  → 0
    """
    value = text.replace(PAGE_CROSS_MARKER, "").strip()
    if value == "-":
        return 0
    try:
        return int(value)
    except ValueError:
        raise ShapeMismatchError(f"malformed cycle count {text!r}", location) from None


def parse_table_row(line: str, mnemonic: str, location: DocumentLocation) -> OpcodeVariant:
    """Parse "Zero Page,X |DOP arg,X  |$34| 2 | 4" into an OpcodeVariant."""
    cells = [cell.strip() for cell in line.split("|")]
    if len(cells) != ROW_COLUMNS:
        raise ShapeMismatchError(
            f"row has {len(cells)} columns, expected {ROW_COLUMNS}: {line.strip()!r}",
            location,
        )
    mode_label, _placeholder, opcode_text, size_text, cycles_text = cells

    if not opcode_text.startswith("$"):
        raise ShapeMismatchError(f"malformed opcode {opcode_text!r}", location)
    try:
        opcode = int(opcode_text[1:], 16)
    except ValueError:
        raise ShapeMismatchError(f"malformed opcode {opcode_text!r}", location) from None
    if not 0 <= opcode <= 0xFF:
        raise ShapeMismatchError(f"opcode {opcode_text!r} does not fit in one byte", location)

    try:
        size = int(size_text)
    except ValueError:
        raise ShapeMismatchError(f"malformed byte count {size_text!r}", location) from None

    return OpcodeVariant(
        opcode=opcode,
        mnemonic=mnemonic,
        size=size,
        cycles=parse_cycles(cycles_text, location),
        cycle_mode=classify_cycle_marker(cycles_text),
        mode=normalize_addressing_mode(mode_label, location),
        official=False,
    )


def parse_section(section: TextSection) -> Tuple[str, Tuple[OpcodeVariant, ...]]:
    mnemonic = extract_mnemonic(section.title)
    location = DocumentLocation(SOURCE_NAME, section.title)
    variants = tuple(
        parse_table_row(row, mnemonic, location.at_row(row_idx))
        for row_idx, row in enumerate(find_table_rows(section), 1)
    )
    return mnemonic, variants


# ============================================================================
# Document Extraction
# ============================================================================

def extract_undocumented(text: str) -> ExtractedSource:
    """Extract every undocumented opcode from the plain-text document."""
    print("\n" + "=" * 70)
    print("EXTRACTING UNDOCUMENTED OPCODES")
    print("=" * 70)

    sections = split_sections(text.splitlines())
    if not sections:
        raise ShapeMismatchError("no delimited sections found", DocumentLocation(SOURCE_NAME))
    print(f"Found {len(sections)} sections")

    mnemonics: List[str] = []
    variants: List[OpcodeVariant] = []
    for section in sections:
        mnemonic, section_variants = parse_section(section)
        if mnemonic not in mnemonics:
            mnemonics.append(mnemonic)
        variants.extend(section_variants)

    print(f"✓ Extracted {len(variants)} undocumented opcodes for {len(mnemonics)} mnemonics")

    return ExtractedSource(
        name=SOURCE_NAME,
        mnemonics=tuple(mnemonics),
        variants=tuple(variants),
    )
