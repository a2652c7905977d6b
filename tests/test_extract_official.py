"""
Unit tests for the official instruction reference extractor.
"""

import pytest

from opcode_extraction.errors import ShapeMismatchError, UnrecognizedLabelError
from opcode_extraction.models import AddressingMode, CycleCostMode
from opcode_extraction.official.extract_official import extract_official, split_cycles

from tests.documents import OFFICIAL_HTML, OFFICIAL_SECTIONS, official_page, official_section


class TestExtractOfficial:
    """Extraction from a well-formed reference page."""

    def setup_method(self):
        self.source = extract_official(OFFICIAL_HTML)
        self.by_opcode = {v.opcode: v for v in self.source.variants}

    def test_source_name(self):
        assert self.source.name == "official"

    def test_mnemonics_in_document_order(self):
        assert self.source.mnemonics == ("ADC", "ASL", "BCC", "JMP", "LDX", "NOP", "STA")

    def test_variant_count(self):
        assert len(self.source.variants) == 13

    def test_variants_in_document_order(self):
        assert [v.opcode for v in self.source.variants[:4]] == [0x69, 0x65, 0x7D, 0x71]

    def test_all_variants_official(self):
        assert all(v.official for v in self.source.variants)

    def test_immediate_row(self):
        adc = self.by_opcode[0x69]
        assert adc.mnemonic == "ADC"
        assert adc.size == 2
        assert adc.cycles == 2
        assert adc.cycle_mode is CycleCostMode.FIXED
        assert adc.mode is AddressingMode.IMMEDIATE
        assert adc.cycle_note == ""

    def test_page_crossed_row(self):
        adc = self.by_opcode[0x7D]
        assert adc.cycles == 4
        assert adc.cycle_mode is CycleCostMode.PAGE_CROSS_PENALTY
        assert adc.mode is AddressingMode.ABSOLUTE_X
        assert adc.cycle_note == "(+1 if page crossed)"

    def test_annotation_across_lines(self):
        adc = self.by_opcode[0x71]
        assert adc.cycles == 5
        assert adc.cycle_mode is CycleCostMode.PAGE_CROSS_PENALTY
        assert adc.mode is AddressingMode.INDIRECT_Y
        assert adc.cycle_note == "(+1 if page crossed)"

    def test_branch_row(self):
        bcc = self.by_opcode[0x90]
        assert bcc.cycles == 2
        assert bcc.cycle_mode is CycleCostMode.BRANCH_TAKEN_PENALTY
        assert bcc.mode is AddressingMode.RELATIVE

    def test_multiline_mode_label(self):
        assert self.by_opcode[0xB6].mode is AddressingMode.ZERO_PAGE_Y

    def test_accumulator_and_indirect(self):
        assert self.by_opcode[0x0A].mode is AddressingMode.ACCUMULATOR
        assert self.by_opcode[0x6C].mode is AddressingMode.INDIRECT
        assert self.by_opcode[0x81].mode is AddressingMode.INDIRECT_X

    def test_flag_effects(self):
        adc = self.source.records[0]
        assert adc.mnemonic == "ADC"
        assert adc.flag_effects[0] == ("C", "Set if overflow in bit 7")
        assert len(adc.flag_effects) == 3

    def test_records_cover_variants(self):
        flattened = tuple(v for r in self.source.records for v in r.variants)
        assert flattened == self.source.variants


class TestSplitCycles:

    def test_plain(self):
        assert split_cycles("7") == ("7", "")

    def test_annotated(self):
        assert split_cycles("4 (+1 if page crossed)") == ("4", "(+1 if page crossed)")


class TestMalformedReference:
    """Every structural deviation aborts the extraction."""

    def test_missing_variant_table(self):
        orphan = (
            '<h3><a name="ZZZ"></a>ZZZ</h3>\n'
            "<table><tr><td>C</td><td>Carry Flag</td><td>Not affected</td></tr></table>\n"
        )
        page = official_page(*OFFICIAL_SECTIONS, orphan)
        with pytest.raises(ShapeMismatchError) as exc_info:
            extract_official(page)
        assert "tables" in str(exc_info.value)

    def test_no_anchors(self):
        with pytest.raises(ShapeMismatchError):
            extract_official("<html><body><table></table></body></html>")

    def test_anchor_without_name(self):
        page = official_page(OFFICIAL_SECTIONS[0]).replace('<a name="ADC">', "<a>")
        with pytest.raises(ShapeMismatchError):
            extract_official(page)

    def test_short_variant_row(self):
        section = official_section("LDA", [("Immediate", "$A9", "2", "2")])
        section = section.replace("<td><center>2</center></td></tr>", "</tr>", 1)
        with pytest.raises(ShapeMismatchError) as exc_info:
            extract_official(official_page(section))
        assert "official:LDA:row 1" in str(exc_info.value)

    def test_empty_variant_table(self):
        section = official_section("LDA", [])
        with pytest.raises(ShapeMismatchError):
            extract_official(official_page(section))

    def test_bad_opcode(self):
        section = official_section("LDA", [("Immediate", "$G9", "2", "2")])
        with pytest.raises(ShapeMismatchError):
            extract_official(official_page(section))

    def test_short_status_row(self):
        section = official_section("LDA", [("Immediate", "$A9", "2", "2")],
                                   status_rows=[("Z", "Zero Flag", "Set if A = 0")])
        section = section.replace("<td>Set if A = 0</td>", "")
        with pytest.raises(ShapeMismatchError):
            extract_official(official_page(section))

    def test_unknown_mode(self):
        section = official_section("LDA", [("Absolute,Z", "$A9", "3", "4")])
        with pytest.raises(UnrecognizedLabelError) as exc_info:
            extract_official(official_page(section))
        assert "official:LDA:row 1" in str(exc_info.value)

    def test_unknown_cycle_annotation(self):
        section = official_section("LDA", [("Immediate", "$A9", "2", "2 (+1 on Tuesdays)")])
        with pytest.raises(UnrecognizedLabelError):
            extract_official(official_page(section))
