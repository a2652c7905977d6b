"""
Unit tests for merging extracted sources into one opcode table.
"""

import pytest

from opcode_extraction.errors import KeyCollisionError, ShapeMismatchError
from opcode_extraction.merge import build_registry, merge_sources
from opcode_extraction.models import (
    INSTRUCTION_SIZES,
    AddressingMode,
    CycleCostMode,
    ExtractedSource,
    OpcodeVariant,
)
from opcode_extraction.official.extract_official import extract_official
from opcode_extraction.undocumented.extract_undocumented import extract_undocumented

from tests.documents import OFFICIAL_HTML, UNDOCUMENTED_TEXT


def variant(opcode, mnemonic, mode=AddressingMode.IMPLIED, official=True, size=None):
    return OpcodeVariant(
        opcode=opcode,
        mnemonic=mnemonic,
        size=INSTRUCTION_SIZES[mode] if size is None else size,
        cycles=2,
        cycle_mode=CycleCostMode.FIXED,
        mode=mode,
        official=official,
    )


def source(name, variants, mnemonics=None):
    if mnemonics is None:
        mnemonics = []
        for v in variants:
            if v.mnemonic not in mnemonics:
                mnemonics.append(v.mnemonic)
    return ExtractedSource(name=name, mnemonics=tuple(mnemonics), variants=tuple(variants))


class TestMergeDocuments:
    """Merging the fixture documents end to end."""

    def setup_method(self):
        self.official = extract_official(OFFICIAL_HTML)
        self.undocumented = extract_undocumented(UNDOCUMENTED_TEXT)
        self.table = merge_sources([self.official, self.undocumented])

    def test_every_variant_present(self):
        assert len(self.table) == len(self.official.variants) + len(self.undocumented.variants)

    def test_each_byte_claimed_once(self):
        claimed = [v.opcode for v in self.table.opcodes.values()]
        assert len(claimed) == len(set(claimed))
        assert all(opcode == v.opcode for opcode, v in self.table.opcodes.items())

    def test_official_first(self):
        order = [v.official for v in self.table.opcodes.values()]
        first_unofficial = order.index(False)
        assert all(order[:first_unofficial])
        assert not any(order[first_unofficial:])

    def test_sizes_match_modes(self):
        for v in self.table.opcodes.values():
            assert v.size == INSTRUCTION_SIZES[v.mode]

    def test_registry_order_and_dedup(self):
        assert self.table.registry == (
            "ADC", "ASL", "BCC", "JMP", "LDX", "NOP", "STA",
            "ANC", "JAM", "LAX",
        )

    def test_registry_matches_variants(self):
        assert set(self.table.registry) == {v.mnemonic for v in self.table.opcodes.values()}

    def test_undocumented_nop_shares_dispatch(self):
        nops = self.table.variants_for("NOP")
        assert {v.official for v in nops} == {True, False}
        assert self.table.registry.count("NOP") == 1

    def test_lookup(self):
        assert self.table.lookup(0xB3).name == "*LAX"
        assert self.table.lookup(0xFF) is None

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            self.table.opcodes[0xFF] = variant(0xFF, "ISC")

    def test_sources_recorded(self):
        assert self.table.sources == ("official", "undocumented")


class TestCollisions:

    def test_official_and_undocumented_claim_same_byte(self):
        official = source("official", [variant(0xA3, "LDA", AddressingMode.INDIRECT_X)])
        undocumented = source("undocumented", [variant(0xA3, "LAX", AddressingMode.INDIRECT_X, official=False)])
        with pytest.raises(KeyCollisionError) as exc_info:
            merge_sources([official, undocumented])
        error = exc_info.value
        assert error.opcode == 0xA3
        assert "official LDA" in error.first
        assert "undocumented LAX" in error.second
        assert "$A3" in str(error)

    def test_collision_within_one_source(self):
        undocumented = source("undocumented", [
            variant(0x1A, "NOP", official=False),
            variant(0x1A, "NOP", official=False),
        ])
        with pytest.raises(KeyCollisionError):
            merge_sources([undocumented])


class TestValidation:

    def test_size_mismatch(self):
        bad = source("undocumented", [variant(0x0C, "NOP", AddressingMode.ABSOLUTE, official=False, size=2)])
        with pytest.raises(ShapeMismatchError) as exc_info:
            merge_sources([bad])
        assert "undocumented:NOP" in str(exc_info.value)

    def test_orphan_mnemonic(self):
        official = source("official", [variant(0xEA, "NOP")], mnemonics=["NOP", "XYZ"])
        with pytest.raises(ShapeMismatchError) as exc_info:
            merge_sources([official])
        assert "XYZ" in str(exc_info.value)


class TestBuildRegistry:

    def test_variant_mnemonics_added_when_unlisted(self):
        undocumented = source("undocumented", [variant(0xA7, "LAX", AddressingMode.ZERO_PAGE, official=False)],
                              mnemonics=[])
        assert build_registry([undocumented]) == ["LAX"]

    def test_case_sensitive(self):
        sources = [source("a", [variant(0x01, "lax")]), source("b", [variant(0x02, "LAX")])]
        assert build_registry(sources) == ["lax", "LAX"]
