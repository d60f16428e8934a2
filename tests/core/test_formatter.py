# tests/core/test_formatter.py
"""
retro_insn_decoder.core.formatterモジュールの単体テスト。
"""
import pytest

from retro_insn_decoder.core.formatter import (
    OperandKind, OperandToken, InstructionBuilder, parse_template, operand_tokens, render_template,
    sign_extend, read_u16le, read_u16be, read_s16be, signed_displacement, resolve_target,
    resolved_suffix,
)

U16 = OperandToken("nnnn", OperandKind.U16, 2)
U8 = OperandToken("nn", OperandKind.U8, 1)

class TestTemplate:
    # @intent:test_case 長いプレースホルダが優先して一致することを検証します。
    def test_parse_prefers_longer_token(self):
        assert parse_template("LDA $nnnn,X", [U16, U8]) == ["LDA $", U16, ",X"]
        assert parse_template("LDA ($nn),Y", [U16, U8]) == ["LDA ($", U8, "),Y"]
        assert parse_template("NOP", [U16, U8]) == ["NOP"]

    def test_operand_tokens_in_order(self):
        segments = parse_template("MVN nn,nnnn", [U16, U8])
        assert operand_tokens(segments) == [U8, U16]

    # @intent:test_case 置換後の文字数が異なっても正しく描画されることを検証します。
    def test_render(self):
        segments = parse_template("JMP ($nnnn)", [U16, U8])
        assert render_template(segments, lambda token: "C000") == "JMP ($C000)"
        assert render_template(segments, lambda token: "1") == "JMP ($1)"

class TestInstructionBuilder:
    def test_without_operands(self):
        assert InstructionBuilder("RTS").build() == "RTS"

    def test_operands_joined_with_comma(self):
        assert InstructionBuilder("PSHS").operand("A").operand("B").operand("U").build() == "PSHS A,B,U"

class TestNumericHelpers:
    @pytest.mark.parametrize("value, bits, expected", [
        (0x7F, 8, 127),
        (0x80, 8, -128),
        (0xFF, 8, -1),
        (0x10, 5, -16),
        (0x0F, 5, 15),
        (0x8000, 16, -32768),
    ])
    def test_sign_extend(self, value, bits, expected):
        assert sign_extend(value, bits) == expected

    def test_endian_readers(self):
        buf = bytes([0x00, 0x34, 0x12, 0xFF, 0xFE])
        assert read_u16le(buf, 1) == 0x1234
        assert read_u16be(buf, 1) == 0x3412
        assert read_s16be(buf, 3) == -2

    def test_display_helpers(self):
        assert signed_displacement(5) == "+5"
        assert signed_displacement(0) == "+0"
        assert signed_displacement(-10) == "-10"
        assert resolve_target(0xFFFE, 4) == 0x0002
        assert resolve_target(0x0001, -2) == 0xFFFF
        assert resolved_suffix(0x0FFD) == " <0FFD>"
