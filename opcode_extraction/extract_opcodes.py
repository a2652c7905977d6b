#!/usr/bin/env python3
"""
6502 Opcode Table Generator

Builds the emulator's opcode table from two public documentation sources and
writes it out as a Rust module.

Data sources:
- Official opcodes: https://www.nesdev.org/obelisk-6502-guide/reference.html
- Undocumented opcodes: https://www.nesdev.org/undocumented_opcodes.txt

Pipeline: fetch both documents → extract → merge → render → write.
Any failure aborts the run; nothing is written unless every stage succeeds.

Usage:
    extract-opcodes
    python -m opcode_extraction.extract_opcodes

Requirements: pip install requests beautifulsoup4 lxml
"""

import sys
from pathlib import Path
from typing import Tuple

import requests

from opcode_extraction.errors import DocumentLocation, FetchError, OpcodeExtractionError
from opcode_extraction.merge import merge_sources
from opcode_extraction.models import OpcodeTable
from opcode_extraction.official.extract_official import extract_official
from opcode_extraction.report import ExtractionStats, generate_report
from opcode_extraction.rust_emitter import render_module, write_module
from opcode_extraction.undocumented.extract_undocumented import extract_undocumented


# ============================================================================
# Configuration
# ============================================================================

OFFICIAL_REFERENCE_URL = "https://www.nesdev.org/obelisk-6502-guide/reference.html"
UNDOCUMENTED_OPCODES_URL = "https://www.nesdev.org/undocumented_opcodes.txt"

# Seconds before a download is abandoned
FETCH_TIMEOUT = 60

# Generated module, relative to the emulator checkout the command runs in
OUTPUT_MODULE = Path("src") / "opscodes.rs"


def output_path() -> Path:
    """Resolve OUTPUT_MODULE against the current working directory."""
    return Path.cwd() / OUTPUT_MODULE


# ============================================================================
# Fetching
# ============================================================================

def fetch_document(url: str, timeout: float = FETCH_TIMEOUT) -> str:
    """Fetch a source document, turning any transport failure into FetchError."""
    print(f"Fetching {url}...")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout as e:
        raise FetchError(f"timed out after {timeout}s: {e}", DocumentLocation(url)) from e
    except requests.RequestException as e:
        raise FetchError(f"download failed: {e}", DocumentLocation(url)) from e

    print(f"✓ Downloaded {len(response.content):,} bytes")
    return response.text


# ============================================================================
# Pipeline
# ============================================================================

def build_table(official_html: str, undocumented_text: str) -> Tuple[OpcodeTable, ExtractionStats]:
    """Extract both documents and merge them, official opcodes first."""
    sources = [
        extract_official(official_html),
        extract_undocumented(undocumented_text),
    ]
    table = merge_sources(sources)
    return table, ExtractionStats.collect(sources, table)


def run_pipeline(official_html: str, undocumented_text: str) -> Tuple[OpcodeTable, str]:
    """Build the table and render the Rust module, without touching the network or disk."""
    table, _ = build_table(official_html, undocumented_text)
    return table, render_module(table)


def main():
    """Main extraction pipeline."""
    print("=" * 70)
    print("6502 OPCODE TABLE GENERATOR")
    print("=" * 70)
    print()

    try:
        official_html = fetch_document(OFFICIAL_REFERENCE_URL)
        undocumented_text = fetch_document(UNDOCUMENTED_OPCODES_URL)

        table, stats = build_table(official_html, undocumented_text)

        print("\n" + "=" * 70)
        print("GENERATING OUTPUTS")
        print("=" * 70)

        output = output_path()
        write_module(output, render_module(table))
        print(f"✓ Wrote {len(table)} opcodes to {output}")
    except OpcodeExtractionError as e:
        print(f"✗ {e}")
        sys.exit(1)

    print()
    print(generate_report(stats, table))

    print("\n" + "=" * 70)
    print("EXTRACTION COMPLETE")
    print("=" * 70)
    print(f"Output file: {output}")


if __name__ == "__main__":
    main()
