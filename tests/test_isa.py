# =============================================================================
# test_isa.py - Instruction Set Table Tests
# =============================================================================
# Tests for the opcode table, format layouts and lookup functions.
# =============================================================================

import pytest
from isa_utils.cpu import (
    FORMAT_LAYOUTS,
    OPCODE_FIELD,
    OPCODE_TABLE,
    FieldKind,
    Immediate,
    InstrFormat,
    Opcode,
    Register,
    ResolvedInstruction,
    format_of,
    machine_code,
    opcode_from_code,
    opcode_from_mnemonic,
    operand_layout,
    operand_pattern,
)


# =============================================================================
# Opcode Table Tests
# =============================================================================

class TestOpcodeTable:
    """Test opcode codes and formats."""

    def test_eighteen_opcodes(self):
        assert len(Opcode) == 18
        assert set(OPCODE_TABLE) == set(Opcode)

    def test_codes_are_distinct(self):
        codes = [machine_code(op) for op in Opcode]
        assert len(set(codes)) == len(codes)

    def test_codes_fit_opcode_field(self):
        for op in Opcode:
            assert 0 <= machine_code(op) < 32

    def test_bijection(self):
        """opcode_from_code is the exact inverse of machine_code."""
        for op in Opcode:
            assert opcode_from_code(machine_code(op)) is op

    def test_unassigned_codes(self):
        assigned = {machine_code(op) for op in Opcode}
        for code in range(32):
            if code not in assigned:
                assert opcode_from_code(code) is None

    @pytest.mark.parametrize("op,code,fmt", [
        (Opcode.NOP, 0, InstrFormat.NoOP),
        (Opcode.ADD, 1, InstrFormat.R3),
        (Opcode.SUB, 2, InstrFormat.R3),
        (Opcode.MULT, 3, InstrFormat.R3),
        (Opcode.ADDI, 4, InstrFormat.RRI),
        (Opcode.SUBI, 5, InstrFormat.RRI),
        (Opcode.OR, 6, InstrFormat.R3),
        (Opcode.NOT, 7, InstrFormat.R2),
        (Opcode.LI, 8, InstrFormat.RI),
        (Opcode.LD, 9, InstrFormat.R2),
        (Opcode.SD, 10, InstrFormat.R2),
        (Opcode.JR, 11, InstrFormat.I),
        (Opcode.JEQ, 12, InstrFormat.RRI),
        (Opcode.JLTV, 13, InstrFormat.RII),
        (Opcode.JGT, 14, InstrFormat.RRI),
        (Opcode.JETV, 15, InstrFormat.RII),
        (Opcode.AND, 16, InstrFormat.R3),
        (Opcode.END, 31, InstrFormat.NoOP),
    ])
    def test_table_entries(self, op, code, fmt):
        assert machine_code(op) == code
        assert op.code == code
        assert format_of(op) == fmt
        assert op.format == fmt

    def test_mnemonic_lookup(self):
        assert opcode_from_mnemonic("JLTV") is Opcode.JLTV
        assert opcode_from_mnemonic("jltv") is None
        assert opcode_from_mnemonic("HALT") is None


# =============================================================================
# Layout Tests
# =============================================================================

class TestLayouts:
    """Test the per-format bit layouts."""

    def test_every_format_has_layout(self):
        assert set(FORMAT_LAYOUTS) == set(InstrFormat)

    def test_operand_patterns(self):
        R, I = FieldKind.REGISTER, FieldKind.IMMEDIATE
        assert operand_pattern(InstrFormat.R3) == (R, R, R)
        assert operand_pattern(InstrFormat.R2) == (R, R)
        assert operand_pattern(InstrFormat.RI) == (R, I)
        assert operand_pattern(InstrFormat.RRI) == (R, R, I)
        assert operand_pattern(InstrFormat.RII) == (R, I, I)
        assert operand_pattern(InstrFormat.I) == (I,)
        assert operand_pattern(InstrFormat.NoOP) == ()

    def test_immediate_widths(self):
        assert operand_layout(InstrFormat.RI)[1].width == 22
        assert operand_layout(InstrFormat.RRI)[2].width == 17
        assert operand_layout(InstrFormat.RII)[1].width == 11
        assert operand_layout(InstrFormat.RII)[2].width == 11
        assert operand_layout(InstrFormat.I)[0].width == 27

    def test_registers_are_five_bits(self):
        for layout in FORMAT_LAYOUTS.values():
            for bit_field in layout:
                if bit_field.kind == FieldKind.REGISTER:
                    assert bit_field.width == 5

    def test_fields_are_disjoint(self):
        """No two fields of a format, opcode included, share a bit."""
        for fmt, layout in FORMAT_LAYOUTS.items():
            used = set(range(OPCODE_FIELD.lo, OPCODE_FIELD.hi + 1))
            for bit_field in layout:
                bits = set(range(bit_field.lo, bit_field.hi + 1))
                assert not (used & bits), f"overlap in {fmt}"
                used |= bits


# =============================================================================
# Instruction Type Tests
# =============================================================================

class TestResolvedInstruction:
    """Test the resolved instruction value type."""

    def test_str(self):
        instr = ResolvedInstruction(Opcode.ADD, (Register(1), Register(2), Register(3)))
        assert str(instr) == "ADD R1, R2, R3"

    def test_str_without_operands(self):
        assert str(ResolvedInstruction(Opcode.END)) == "END"

    def test_list_operands_become_tuple(self):
        instr = ResolvedInstruction(Opcode.LI, [Register(1), Immediate(5)])
        assert instr.operands == (Register(1), Immediate(5))
        assert hash(instr) == hash(ResolvedInstruction(Opcode.LI, (Register(1), Immediate(5))))

    def test_equality(self):
        a = ResolvedInstruction(Opcode.JR, (Immediate(3),))
        b = ResolvedInstruction(Opcode.JR, (Immediate(3),))
        assert a == b
        assert a != ResolvedInstruction(Opcode.JR, (Immediate(4),))

    def test_format(self):
        assert ResolvedInstruction(Opcode.JETV).format == InstrFormat.RII

    def test_operand_kinds(self):
        assert Register(4).kind == FieldKind.REGISTER
        assert Register(4).value == 4
        assert Immediate(9).kind == FieldKind.IMMEDIATE
