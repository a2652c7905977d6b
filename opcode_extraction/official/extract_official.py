#!/usr/bin/env python3
"""
6502 Official Instruction Extractor

Extracts the documented 6502 instruction set from the Obelisk 6502 guide
instruction reference page.

Based on the page structure:
    <h3><a name="ADC"></a>ADC - Add with Carry</h3>
    <table> ... processor status effects (flag, name, effect) ... </table>
    <table>
        <tr><th>Addressing Mode</th><th>Opcode</th><th>Bytes</th><th>Cycles</th></tr>
        <tr><td><a href="addressing.html#IMM">Immediate</a></td><td>$69</td><td>2</td><td>2</td></tr>
        <tr><td><a href="addressing.html#ABX">Absolute,X</a></td><td>$7D</td><td>3</td>
            <td>4 (+1 if page crossed)</td></tr>
    </table>

Each mnemonic anchor owns exactly two tables, in that order. Pairing is
positional, so any count mismatch aborts the extraction.

Requirements: pip install requests beautifulsoup4 lxml
"""

from typing import List, Tuple

from bs4 import BeautifulSoup, Tag

from opcode_extraction.addressing_modes import normalize_addressing_mode
from opcode_extraction.cycle_modes import classify_cycle_annotation
from opcode_extraction.errors import DocumentLocation, ShapeMismatchError
from opcode_extraction.models import ExtractedSource, InstructionRecord, OpcodeVariant


SOURCE_NAME = "official"


# ============================================================================
# Cell Parsing Utilities
# ============================================================================

def cell_text(cell: Tag) -> str:
    """Text of a cell with internal whitespace and line breaks collapsed."""
    return " ".join(cell.get_text().split())


def parse_hex_opcode(text: str, location: DocumentLocation) -> int:
    """
    Parse a "$"-prefixed opcode cell.

    Examples:
        $69 → 0x69
        $0A → 0x0A
    """
    digits = text.strip().lstrip("$")
    try:
        opcode = int(digits, 16)
    except ValueError:
        raise ShapeMismatchError(f"malformed opcode {text!r}", location) from None
    if not 0 <= opcode <= 0xFF:
        raise ShapeMismatchError(f"opcode {text!r} does not fit in one byte", location)
    return opcode


def parse_count(text: str, what: str, location: DocumentLocation) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise ShapeMismatchError(f"malformed {what} {text!r}", location) from None


def split_cycles(text: str) -> Tuple[str, str]:
    """
    Split a cycle cell into base count and annotation.

    Examples:
        "2"                                              → ("2", "")
        "4 (+1 if page crossed)"                         → ("4", "(+1 if page crossed)")
        "2 (+1 if branch succeeds +2 if to a new page)"  → ("2", "(+1 if branch ...)")
    """
    base, _, annotation = text.partition(" ")
    return base, annotation.strip()


# ============================================================================
# Table Parsing
# ============================================================================

def parse_status_table(table: Tag, location: DocumentLocation) -> Tuple[Tuple[str, str], ...]:
    """Parse a processor-status table into (flag, effect) pairs."""
    effects = []
    for row_idx, row in enumerate(table.find_all("tr"), 1):
        cells = row.find_all("td")
        if len(cells) < 3:
            raise ShapeMismatchError(
                f"status row has {len(cells)} cells, expected 3",
                location.at_row(row_idx),
            )
        effects.append((cell_text(cells[0]), cell_text(cells[2])))
    return tuple(effects)


def parse_variant_row(row: Tag, mnemonic: str, location: DocumentLocation) -> OpcodeVariant:
    """Parse one addressing-mode row of a variant table."""
    cells = row.find_all("td")
    if len(cells) < 4:
        raise ShapeMismatchError(f"variant row has {len(cells)} cells, expected 4", location)

    mode = normalize_addressing_mode(cells[0].get_text(), location)
    opcode = parse_hex_opcode(cell_text(cells[1]), location)
    size = parse_count(cell_text(cells[2]), "byte count", location)

    base, annotation = split_cycles(cell_text(cells[3]))
    cycles = parse_count(base, "cycle count", location)
    cycle_mode = classify_cycle_annotation(annotation, location)

    return OpcodeVariant(
        opcode=opcode,
        mnemonic=mnemonic,
        size=size,
        cycles=cycles,
        cycle_mode=cycle_mode,
        mode=mode,
        official=True,
        cycle_note=annotation,
    )


def parse_variant_table(table: Tag, mnemonic: str, location: DocumentLocation) -> Tuple[OpcodeVariant, ...]:
    """Parse an addressing-mode table; the first row is always the column header."""
    rows = table.find_all("tr")[1:]
    if not rows:
        raise ShapeMismatchError("variant table has no rows", location)

    return tuple(
        parse_variant_row(row, mnemonic, location.at_row(row_idx))
        for row_idx, row in enumerate(rows, 1)
    )


# ============================================================================
# Document Extraction
# ============================================================================

def find_mnemonics(soup: BeautifulSoup) -> Tuple[List[str], List[Tag]]:
    """Return mnemonic names and their anchors, in document order."""
    anchors = soup.select("h3 > a")
    names = []
    for idx, anchor in enumerate(anchors, 1):
        name = anchor.get("name")
        if not name or not name.strip():
            raise ShapeMismatchError(
                f"mnemonic anchor #{idx} has no name attribute",
                DocumentLocation(SOURCE_NAME),
            )
        names.append(name.strip())
    return names, anchors


def extract_official(html_content: str) -> ExtractedSource:
    """
    Extract every documented instruction from the reference page HTML.

    Returns:
        ExtractedSource with one InstructionRecord per mnemonic and the
        flattened variants in document order.
    """
    print("\n" + "=" * 70)
    print("EXTRACTING OFFICIAL INSTRUCTIONS")
    print("=" * 70)

    soup = BeautifulSoup(html_content, "lxml")

    mnemonics, anchors = find_mnemonics(soup)
    if not mnemonics:
        raise ShapeMismatchError("no mnemonic anchors found", DocumentLocation(SOURCE_NAME))

    # Tables ahead of the first anchor (the page index) are not instruction tables
    tables = anchors[0].find_all_next("table")
    print(f"Found {len(mnemonics)} mnemonics and {len(tables)} tables")

    if len(tables) != 2 * len(mnemonics):
        raise ShapeMismatchError(
            f"{len(mnemonics)} mnemonics need {2 * len(mnemonics)} tables, found {len(tables)}",
            DocumentLocation(SOURCE_NAME),
        )

    status_tables = tables[0::2]
    variant_tables = tables[1::2]

    records = []
    for mnemonic, status_table, variant_table in zip(mnemonics, status_tables, variant_tables):
        location = DocumentLocation(SOURCE_NAME, mnemonic)
        records.append(InstructionRecord(
            mnemonic=mnemonic,
            flag_effects=parse_status_table(status_table, location),
            variants=parse_variant_table(variant_table, mnemonic, location),
        ))

    variants = tuple(v for record in records for v in record.variants)
    print(f"✓ Extracted {len(variants)} official opcodes for {len(records)} mnemonics")

    return ExtractedSource(
        name=SOURCE_NAME,
        mnemonics=tuple(mnemonics),
        variants=variants,
        records=tuple(records),
    )
