#!/usr/bin/env python3
"""
Rust Opcode Module Emitter

Renders a merged OpcodeTable as the emulator's `opscodes.rs`:
- `use` declarations for the emulator types the module references
- CPU_OPS_CODES, a HashMap literal keyed by opcode byte
- call(), dispatching each mnemonic to the same-named CPU method and
  advancing the program counter past the operand bytes

Emission is plain text templating. The output depends only on the table, so
the same documents always produce the same bytes. A handler the emulator does
not implement becomes a compile error in the emulator, not a runtime one.
"""

from pathlib import Path
from typing import List, Union

from opcode_extraction.errors import UnmappedMnemonicError, WriteError
from opcode_extraction.models import UNOFFICIAL_MARKER, OpcodeTable, OpcodeVariant


HEADER = """\
// Generated by opcode_extraction from the Obelisk 6502 instruction reference
// and the NESdev undocumented opcodes document. Do not edit by hand.
"""

USE_DECLARATIONS = """\
use std::collections::HashMap;

use crate::cpu::AddressingMode;
use crate::cpu::CycleCalcMode;
use crate::cpu::OpCode;
use crate::cpu::CPU;
"""

INDENT = "  "


def indent(code: str, levels: int) -> str:
    prefix = INDENT * levels
    return "\n".join(f"{prefix}{line}" if line else line for line in code.split("\n"))


# ============================================================================
# Table Literal
# ============================================================================

def render_cycles(variant: OpcodeVariant) -> str:
    """Cycle count, followed by the reference's penalty note as a comment."""
    if not variant.cycle_note:
        return str(variant.cycles)
    note = variant.cycle_note.replace("*/", "* /")
    return f"{variant.cycles} /* {note} */"


def render_opcode(variant: OpcodeVariant) -> str:
    return (
        f'OpCode::new(0x{variant.opcode:02X}, "{variant.name}", {variant.size}, '
        f"{render_cycles(variant)}, CycleCalcMode::{variant.cycle_mode.value}, "
        f"AddressingMode::{variant.mode.value})"
    )


def render_opcode_table(table: OpcodeTable) -> str:
    inserts = "\n".join(
        f"map.insert(0x{opcode:02X}, {render_opcode(variant)});"
        for opcode, variant in table.opcodes.items()
    )
    body = "\n".join([
        "let mut map = HashMap::new();",
        inserts,
        "map",
    ])
    return "\n".join([
        "lazy_static! {",
        indent("pub static ref CPU_OPS_CODES: HashMap<u8, OpCode> = {", 1),
        indent(body, 2),
        indent("};", 1),
        "}",
    ])


# ============================================================================
# Dispatch Function
# ============================================================================

def render_dispatch_arm(mnemonic: str) -> str:
    return "\n".join([
        f'"{mnemonic}" => {{',
        indent(f"cpu.{mnemonic.lower()}(&op.addressing_mode);", 1),
        indent("cpu.program_counter += op.bytes - 1", 1),
        "}",
    ])


def render_dispatch(table: OpcodeTable) -> str:
    arms: List[str] = [render_dispatch_arm(name) for name in table.registry]
    arms.append('_ => panic!("no handler for opcode {}", op.name),')
    return "\n".join([
        "pub fn call(cpu: &mut CPU, op: &OpCode) {",
        indent(f"match op.name.trim_start_matches('{UNOFFICIAL_MARKER}') {{", 1),
        indent("\n\n".join(arms), 2),
        indent("}", 1),
        "}",
    ])


# ============================================================================
# Module
# ============================================================================

def check_dispatch_coverage(table: OpcodeTable) -> None:
    """Every opcode must reach a dispatch arm."""
    registered = set(table.registry)
    for variant in table.opcodes.values():
        if variant.mnemonic not in registered:
            raise UnmappedMnemonicError(
                f"opcode ${variant.opcode:02X} ({variant.name}) has no dispatch entry"
            )


def render_module(table: OpcodeTable) -> str:
    check_dispatch_coverage(table)
    return "\n".join([
        HEADER,
        USE_DECLARATIONS,
        render_opcode_table(table),
        "",
        render_dispatch(table),
        "",
    ])


def write_module(path: Union[str, Path], text: str) -> None:
    """Write the generated module, creating parent directories."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise WriteError(f"cannot write {path}: {e}") from e
