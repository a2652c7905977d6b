#!/usr/bin/env python3
"""
Extraction report: statistics gathered over the extracted sources and the
merged table, formatted for the console at the end of a run.
"""

from datetime import datetime
from typing import Dict, List, Sequence

from opcode_extraction.models import ExtractedSource, OpcodeTable


class ExtractionStats:
    """Tracks extraction statistics."""

    def __init__(self):
        self.by_source: Dict[str, int] = {}
        self.mnemonics_by_source: Dict[str, List[str]] = {}
        self.by_cycle_mode: Dict[str, int] = {}
        self.by_addressing_mode: Dict[str, int] = {}
        self.flags_documented = 0
        self.total_opcodes = 0

    def record_source(self, source: ExtractedSource):
        """Record one extractor's output."""
        self.by_source[source.name] = len(source.variants)
        self.mnemonics_by_source[source.name] = list(source.mnemonics)
        self.flags_documented += sum(len(r.flag_effects) for r in source.records)

    def record_table(self, table: OpcodeTable):
        """Record the merged table."""
        self.total_opcodes = len(table)
        for variant in table.opcodes.values():
            cycle_key = variant.cycle_mode.value
            mode_key = variant.mode.value
            self.by_cycle_mode[cycle_key] = self.by_cycle_mode.get(cycle_key, 0) + 1
            self.by_addressing_mode[mode_key] = self.by_addressing_mode.get(mode_key, 0) + 1

    @classmethod
    def collect(cls, sources: Sequence[ExtractedSource], table: OpcodeTable) -> "ExtractionStats":
        stats = cls()
        for source in sources:
            stats.record_source(source)
        stats.record_table(table)
        return stats


def generate_report(stats: ExtractionStats, table: OpcodeTable) -> str:
    """Generate the end-of-run extraction report."""
    lines = []
    lines.append("=" * 70)
    lines.append("6502 OPCODE EXTRACTION REPORT")
    lines.append("=" * 70)
    lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("")

    lines.append("OVERALL STATISTICS")
    lines.append("-" * 70)
    lines.append(f"Total opcodes: {stats.total_opcodes}/256")
    lines.append(f"Dispatch mnemonics: {len(table.registry)}")
    lines.append(f"Documented flag effects: {stats.flags_documented}")
    unassigned = [b for b in range(256) if table.lookup(b) is None]
    lines.append(f"Unassigned opcode bytes: {len(unassigned)}")
    for i in range(0, len(unassigned), 16):
        chunk = unassigned[i:i + 16]
        lines.append("  " + " ".join(f"${b:02X}" for b in chunk))
    lines.append("")

    lines.append("\nOPCODES BY SOURCE")
    lines.append("-" * 70)
    for source, count in stats.by_source.items():
        mnemonics = stats.mnemonics_by_source.get(source, [])
        lines.append(f"\n{source}: {count} opcodes ({len(mnemonics)} mnemonics)")
        # Show mnemonics in rows of 12
        for i in range(0, len(mnemonics), 12):
            lines.append(f"  {', '.join(mnemonics[i:i + 12])}")
    lines.append("")

    total = stats.total_opcodes
    lines.append("\nCYCLE COST MODES")
    lines.append("-" * 70)
    for mode, count in sorted(stats.by_cycle_mode.items()):
        pct = (count / total * 100) if total > 0 else 0
        lines.append(f"{mode:20s}: {count}/{total} ({pct:.1f}%)")
    lines.append("")

    lines.append("\nADDRESSING MODES")
    lines.append("-" * 70)
    for mode, count in sorted(stats.by_addressing_mode.items()):
        lines.append(f"{mode:12s}: {count}")

    lines.append("")
    lines.append("=" * 70)
    lines.append("END REPORT")
    lines.append("=" * 70)

    return "\n".join(lines)
