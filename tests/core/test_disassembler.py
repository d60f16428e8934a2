# tests/core/test_disassembler.py
"""
retro_insn_decoder.core.disassemblerモジュールの単体テスト。
"""
from retro_insn_decoder.common.types import Architecture
from retro_insn_decoder.core.disassembler import disassemble

# @intent:test_suite メモリイメージの線形逆アセンブルを検証します。

class TestDisassemble:
    # @intent:test_case 命令長に従ってアドレスが進むことを検証します。
    def test_mos6502_program(self):
        data = bytes([0xA9, 0x01, 0x8D, 0x00, 0x02, 0xD0, 0xF9, 0x60])
        rows = disassemble(data, 0x0600, Architecture.MOS6502)
        assert rows == [
            (0x0600, "A9 01", "LDA #$01"),
            (0x0602, "8D 00 02", "STA $0200"),
            (0x0605, "D0 F9", "BNE -7 <0600>"),
            (0x0607, "60", "RTS"),
        ]

    def test_mc6809_program(self):
        data = bytes([0x10, 0xAE, 0x81, 0x34, 0x46, 0x39])
        rows = disassemble(data, 0x4000, Architecture.MC6809)
        assert [(addr, text) for addr, _, text in rows] == [
            (0x4000, "LDY ,X++"),
            (0x4003, "PSHS A,B,U"),
            (0x4005, "RTS"),
        ]

    # @intent:test_case 末尾の不完全な命令のバイトは "DB" として出力されることを検証します。
    def test_trailing_bytes(self):
        rows = disassemble(bytes([0x00, 0xC3, 0x00]), 0x0000, Architecture.Z80)
        assert rows == [
            (0x0000, "00", "NOP"),
            (0x0001, "C3", "DB $C3"),
            (0x0002, "00", "DB $00"),
        ]

    # @intent:test_case アドレスが16ビットで折り返すことを検証します。
    def test_address_wraps(self):
        rows = disassemble(bytes([0xEA, 0xEA]), 0xFFFF, Architecture.MOS6502)
        assert [addr for addr, _, _ in rows] == [0xFFFF, 0x0000]

    def test_empty(self):
        assert disassemble(b"", 0x1000, Architecture.MC6800) == []
