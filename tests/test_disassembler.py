"""
Unit Tests for the Disassembler Module
======================================

Tests for word decoding, word stream readers, the Disassembler listing
renderer and the isadisasm command-line tool.

Test coverage includes:
- Decoding of every instruction format
- Unknown opcodes
- Label annotations
- Raw and hex-text input, including malformed input
"""

import pytest
from click.testing import CliRunner

from isa_utils import __version__
from isa_utils.assembler import Assembler
from isa_utils.assembler.codegen import to_bytes
from isa_utils.cli.errors import ExitCode
from isa_utils.cli.isadisasm import main
from isa_utils.cpu import Immediate, Opcode, Register, ResolvedInstruction
from isa_utils.disassembler import (
    DisassembledInstruction,
    Disassembler,
    decode,
    words_from_bytes,
    words_from_hex_text,
)


# =============================================================================
# Decode Tests
# =============================================================================

class TestDecode:
    """Tests for decode()."""

    def test_add(self):
        assert decode(0x08443000) == ResolvedInstruction(
            Opcode.ADD, (Register(1), Register(2), Register(3))
        )

    def test_noop_formats(self):
        assert decode(0x00000000) == ResolvedInstruction(Opcode.NOP)
        assert decode(0xF8000000) == ResolvedInstruction(Opcode.END)

    def test_rii(self):
        assert decode(0x68402803) == ResolvedInstruction(
            Opcode.JLTV, (Register(1), Immediate(5), Immediate(3))
        )

    def test_jump(self):
        assert decode(0x5FFFFFFF) == ResolvedInstruction(Opcode.JR, (Immediate(2**27 - 1),))

    @pytest.mark.parametrize("code", range(17, 31))
    def test_unknown_opcode(self, code):
        assert decode(code << 27) is None

    def test_unused_bits_ignored(self):
        """Only the format's fields are read; stray low bits are not validated."""
        assert decode(0x38440FFF) == ResolvedInstruction(Opcode.NOT, (Register(1), Register(2)))


# =============================================================================
# Word Stream Reader Tests
# =============================================================================

class TestWordReaders:
    """Tests for raw and hex-text input."""

    def test_words_from_bytes(self):
        data = b"\x08\x44\x30\x00\xf8\x00\x00\x00"
        assert words_from_bytes(data) == [0x08443000, 0xF8000000]

    def test_words_from_bytes_empty(self):
        assert words_from_bytes(b"") == []

    def test_words_from_bytes_partial_word(self):
        with pytest.raises(ValueError, match="4-byte"):
            words_from_bytes(b"\x00\x00\x00")

    def test_words_from_hex_text(self):
        text = "# program\n08443000\n\n0xF8000000  # end\n"
        assert words_from_hex_text(text) == [0x08443000, 0xF8000000]

    def test_invalid_hex_word(self):
        with pytest.raises(ValueError, match="line 2"):
            words_from_hex_text("00000000\nZZZ\n")

    def test_hex_word_too_wide(self):
        with pytest.raises(ValueError, match="32 bits"):
            words_from_hex_text("100000000")


# =============================================================================
# Disassembler Tests
# =============================================================================

class TestDisassembler:
    """Tests for the listing renderer."""

    def setup_method(self):
        self.disasm = Disassembler()

    def test_disassemble_one(self):
        instr = self.disasm.disassemble_one(0x08443000, index=3)
        assert instr.index == 3
        assert instr.mnemonic == "ADD"
        assert instr.operand_str == "R1, R2, R3"
        assert instr.text == "ADD R1, R2, R3"
        assert str(instr) == "0003: 08443000  ADD R1, R2, R3"

    def test_no_operands(self):
        instr = self.disasm.disassemble_one(0xF8000000)
        assert instr.operand_str == ""
        assert str(instr) == "0000: F8000000  END"

    def test_unknown_opcode(self):
        instr = self.disasm.disassemble_one(0x88000001)
        assert instr.instruction is None
        assert instr.text == ".WORD 0x88000001"
        assert instr.comment == "unknown opcode"
        assert str(instr) == "0000: 88000001  .WORD 0x88000001 ; unknown opcode"

    def test_disassemble_with_count(self):
        result = self.disasm.disassemble([0, 0, 0, 0], count=2)
        assert [instr.index for instr in result] == [0, 1]

    def test_label_annotations(self):
        disasm = Disassembler(labels={"start": 0, "done": 1})
        result = disasm.disassemble([0x4040000A, 0xF8000000])
        assert result[0].comment == "start"
        assert str(result[1]).endswith("END ; done")

    def test_to_dict(self):
        data = self.disasm.disassemble_one(0x08443000).to_dict()
        assert data["word"] == "0x08443000"
        assert data["mnemonic"] == "ADD"
        assert data["format"] == "R3"

    def test_to_dict_unknown(self):
        data = self.disasm.disassemble_one(0x88000000).to_dict()
        assert data["format"] is None

    def test_assembler_round_trip(self):
        asm = Assembler()
        words = asm.assemble_string("start: LI R1, 3\nloop: SUBI R1, R1, 1\nJR loop\nEND")
        text = "\n".join(instr.text for instr in self.disasm.disassemble(words))
        assert Assembler().assemble_string(text) == words

    def test_disassemble_to_text(self):
        text = self.disasm.disassemble_to_text([0x08443000, 0xF8000000])
        assert text.splitlines() == [
            "0000: 08443000  ADD R1, R2, R3",
            "0001: F8000000  END",
        ]

    def test_dataclass_fields(self):
        instr = DisassembledInstruction(0, 0, None, ".WORD", "0x00000000")
        assert instr.comment == ""


# =============================================================================
# isadisasm CLI Tests
# =============================================================================

class TestIsadisasmCLI:
    """Tests for the isadisasm command-line tool."""

    def test_cli_help(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Disassemble" in result.output

    def test_cli_version(self):
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_cli_raw_input(self, tmp_path):
        path = tmp_path / "prog.bin"
        path.write_bytes(to_bytes([0x08443000, 0xF8000000]))
        result = CliRunner().invoke(main, [str(path)])
        assert result.exit_code == 0, result.output
        assert "0000: 08443000  ADD R1, R2, R3" in result.output
        assert "0001: F8000000  END" in result.output

    def test_cli_hex_input(self, tmp_path):
        path = tmp_path / "prog.hex"
        path.write_text("4040000A\n58000000\n")
        result = CliRunner().invoke(main, [str(path), "--hex-input"])
        assert result.exit_code == 0, result.output
        assert "LI R1, 10" in result.output
        assert "JR 0" in result.output

    def test_cli_unknown_opcode(self, tmp_path):
        path = tmp_path / "prog.hex"
        path.write_text("88000000\n")
        result = CliRunner().invoke(main, [str(path), "--hex-input"])
        assert result.exit_code == 0, result.output
        assert ".WORD 0x88000000 ; unknown opcode" in result.output

    def test_cli_count(self, tmp_path):
        path = tmp_path / "prog.bin"
        path.write_bytes(to_bytes([0, 0, 0]))
        result = CliRunner().invoke(main, [str(path), "-c", "1"])
        assert result.exit_code == 0, result.output
        assert "0000:" in result.output
        assert "0001:" not in result.output

    def test_cli_output_file(self, tmp_path):
        path = tmp_path / "prog.bin"
        path.write_bytes(to_bytes([0xF8000000]))
        out = tmp_path / "listing.asm"
        result = CliRunner().invoke(main, [str(path), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "0000: F8000000  END" in out.read_text()

    def test_cli_partial_word(self, tmp_path):
        path = tmp_path / "prog.bin"
        path.write_bytes(b"\x00\x00\x00\x00\x01")
        result = CliRunner().invoke(main, [str(path)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "4-byte" in result.output

    def test_cli_bad_hex(self, tmp_path):
        path = tmp_path / "prog.hex"
        path.write_text("hello\n")
        result = CliRunner().invoke(main, [str(path), "--hex-input"])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_cli_round_trip_with_isaasm(self, tmp_path):
        from isa_utils.cli.isaasm import main as isaasm_main

        source = tmp_path / "prog.asm"
        source.write_text("LI R2, 7\nNOT R3, R2\nEND\n")
        result = CliRunner().invoke(isaasm_main, [str(source), "-f", "raw"])
        assert result.exit_code == 0, result.output

        result = CliRunner().invoke(main, [str(source.with_suffix(".bin"))])
        assert result.exit_code == 0, result.output
        assert "NOT R3, R2" in result.output
