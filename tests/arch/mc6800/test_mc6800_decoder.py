# tests/arch/mc6800/test_mc6800_decoder.py
"""
retro_insn_decoder.arch.mc6800.decoderモジュールの単体テスト。
"""
import pytest

from retro_insn_decoder.common.types import Architecture, DecodeState
from retro_insn_decoder.core.decoder import InstructionDecoder
from retro_insn_decoder.arch.mc6800.decoder import (
    Mc6800AddressingMode, INSTRUCTION_LENGTH, addressing_mode,
)

# @intent:test_suite MC6800のアドレッシングモード判定とフォーマットを検証します。

class TestMc6800AddressingMode:
    # @intent:test_case オペコード範囲と例外オペコードからモードが決まることを検証します。
    @pytest.mark.parametrize("opc, mode", [
        (0x01, Mc6800AddressingMode.INHERENT),
        (0x39, Mc6800AddressingMode.INHERENT),
        (0x20, Mc6800AddressingMode.RELATIVE),
        (0x8D, Mc6800AddressingMode.RELATIVE),   # BSR
        (0x8E, Mc6800AddressingMode.IMMEDIATE16),  # LDS #
        (0xCE, Mc6800AddressingMode.IMMEDIATE16),  # LDX #
        (0x86, Mc6800AddressingMode.IMMEDIATE8),
        (0x96, Mc6800AddressingMode.DIRECT),
        (0xA6, Mc6800AddressingMode.INDEXED),
        (0xB6, Mc6800AddressingMode.EXTENDED),
        (0xFF, Mc6800AddressingMode.EXTENDED),
    ])
    def test_mode_from_opcode(self, opc, mode):
        assert addressing_mode(opc) is mode

    # @intent:test_case 全オペコードが長さの定義されたモードに割り当てられることを検証します。
    def test_every_opcode_has_length(self):
        for opc in range(0x100):
            assert addressing_mode(opc) in INSTRUCTION_LENGTH

class TestMc6800Decode:
    @pytest.fixture
    def decoder(self):
        return InstructionDecoder(Architecture.MC6800)

    def _feed(self, decoder, address, data):
        decoder.begin(address, data[0])
        for b in data[1:]:
            decoder.continue_(b)
        return decoder.complete()

    # @intent:test_case 各アドレッシングモードの表示形式を検証します。
    @pytest.mark.parametrize("data, expected", [
        ([0x01], "NOP"),
        ([0x39], "RTS"),
        ([0x86, 0x5A], "LDAA #$5A"),
        ([0xCE, 0x12, 0x34], "LDX #$1234"),
        ([0x8E, 0x01, 0xFF], "LDS #$01FF"),
        ([0x96, 0x40], "LDAA $40"),
        ([0xB7, 0xC0, 0x00], "STAA $C000"),
        ([0xA6, 0x10], "LDAA 16,X"),
        ([0xEE, 0xFF], "LDX 255,X"),
    ])
    def test_instruction_text(self, decoder, data, expected):
        assert self._feed(decoder, 0x0100, data) == expected

    # @intent:test_case 相対分岐の分岐先は命令アドレス + 2 + オフセットになることを検証します。
    def test_relative(self, decoder):
        assert self._feed(decoder, 0x0100, [0x20, 0xFE]) == "BRA -2 <0100>"
        assert self._feed(decoder, 0x0000, [0x8D, 0x10]) == "BSR 16 <0012>"

    # @intent:test_case 命令長が1バイト目で確定し、完了前は空文字列であることを検証します。
    def test_incremental(self, decoder):
        decoder.begin(0x0000, 0xB6)
        assert decoder.record.bytes_required == 3
        assert decoder.record.addrmode is Mc6800AddressingMode.EXTENDED
        decoder.continue_(0x12)
        assert decoder.state is DecodeState.FETCHING
        assert decoder.complete() == ""
        decoder.continue_(0x34)
        assert decoder.complete() == "LDAA $1234"
