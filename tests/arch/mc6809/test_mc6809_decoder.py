# tests/arch/mc6809/test_mc6809_decoder.py
"""
retro_insn_decoder.arch.mc6809 パッケージの単体テスト。
"""
import pytest

from retro_insn_decoder.common.types import Architecture, DecodeState, UNKNOWN_ADDRMODE
from retro_insn_decoder.core.decoder import InstructionDecoder
from retro_insn_decoder.arch.mc6809.addressing import (
    Mc6809AddressingMode as M, addressing_mode, indexed_mode, instruction_length,
)
from retro_insn_decoder.arch.mc6809.decoder import push_pull_registers

# @intent:test_suite MC6809のアドレッシングモード判定（インデックスポストバイトを含む）とフォーマットを検証します。

@pytest.fixture(params=[Architecture.MC6809, Architecture.MC6809E])
def decoder(request):
    return InstructionDecoder(request.param)

def _feed(decoder, address, data):
    decoder.begin(address, data[0])
    for b in data[1:]:
        decoder.continue_(b)
    return decoder.complete()

class TestIndexedPostbyte:
    # @intent:test_case ポストバイトの判定順と間接フラグの扱いを検証します。
    @pytest.mark.parametrize("pb, mode", [
        (0x84, M.ZERO_OFFSET),
        (0x94, M.ZERO_OFFSET_IND),
        (0x21, M.CONST_OFFSET5),
        (0x1F, M.CONST_OFFSET5),   # -1,X (bit4 は符号ビット)
        (0x88, M.CONST_OFFSET8),
        (0x99, M.CONST_OFFSET16_IND),
        (0xC6, M.ACC_OFFSET),
        (0xD6, M.ACC_OFFSET_IND),
        (0x80, M.POST_INC1),
        (0x81, M.POST_INC2),
        (0x91, M.POST_INC2_IND),
        (0x82, M.PRE_DEC1),
        (0x93, M.PRE_DEC2_IND),
        (0x8C, M.PCREL8),
        (0x9D, M.PCREL16_IND),
        (0x9F, M.EXTENDED_IND),
        (0x90, M.INVALID),  # [,X+] は存在しない
        (0x92, M.INVALID),  # [,-X] は存在しない
        (0x87, M.INVALID),
        (0x8F, M.INVALID),
    ])
    def test_indexed_mode(self, pb, mode):
        assert indexed_mode(pb) is mode

class TestAddressingMode:
    # @intent:test_case 判定に必要なバイトが揃うまで None を返すことを検証します。
    def test_needs_more_bytes(self):
        assert addressing_mode(bytes([0xA6]), 1) is None
        assert addressing_mode(bytes([0x10]), 1) is None
        assert addressing_mode(bytes([0x10, 0xAE]), 2) is None
        assert addressing_mode(bytes([0x10, 0xAE, 0x81]), 3) is M.POST_INC2

    @pytest.mark.parametrize("data, mode, length", [
        ([0x12], M.INHERENT, 1),
        ([0x0C], M.DIRECT, 2),
        ([0x20], M.REL8, 2),
        ([0x16], M.REL16, 3),
        ([0x8D], M.REL8, 2),
        ([0x83], M.IMM16, 3),
        ([0x86], M.IMM8, 2),
        ([0x1E], M.EXG_TFR, 2),
        ([0x34], M.PSH_PUL, 2),
        ([0xB6], M.EXTENDED, 3),
        ([0x10, 0x26], M.REL16, 4),
        ([0x10, 0x3F], M.INHERENT, 2),
        ([0x10, 0x8E], M.IMM16, 4),
        ([0x11, 0x93], M.DIRECT, 3),
        ([0x10, 0xBE], M.EXTENDED, 4),
    ])
    def test_mode_and_length(self, data, mode, length):
        assert addressing_mode(bytes(data), len(data)) is mode
        assert instruction_length(data[0], mode) == length

    @pytest.mark.parametrize("data", [[0x38], [0x15], [0x10, 0x40], [0x11, 0x20]])
    def test_invalid(self, data):
        assert addressing_mode(bytes(data), len(data)) is M.INVALID

class TestPushPull:
    # @intent:test_case スタックポインタのビットは命令によって U または S と表示されることを検証します。
    def test_stack_pointer_name(self):
        assert push_pull_registers(0x34, 0x46) == ["A", "B", "U"]
        assert push_pull_registers(0x35, 0xFF) == ["CCR", "A", "B", "DPR", "X", "Y", "U", "PC"]
        assert push_pull_registers(0x36, 0x40) == ["S"]
        assert push_pull_registers(0x37, 0x00) == []

class TestMc6809Decode:
    # @intent:test_case 非インデックスモードの表示形式を検証します。
    @pytest.mark.parametrize("data, expected", [
        ([0x12], "NOP"),
        ([0x0C, 0x10], "INC < $10"),
        ([0x77, 0xCA, 0xFE], "ASR $CAFE"),
        ([0x8A, 0x5A], "ORA #$5A"),
        ([0xCC, 0x12, 0x34], "LDD #$1234"),
        ([0x1F, 0x03], "TFR D,U"),
        ([0x1E, 0x1B], "EXG X,DPR"),
        ([0x34, 0x46], "PSHS A,B,U"),
        ([0x37, 0x40], "PULU S"),
        ([0x10, 0x3F], "SWI2"),
        ([0x11, 0x3F], "SWI3"),
        ([0x11, 0x83, 0x12, 0x34], "CMPU #$1234"),
        ([0x10, 0xCE, 0x01, 0x00], "LDS #$0100"),
        ([0x10, 0x9F, 0x20], "STY < $20"),
    ])
    def test_instruction_text(self, decoder, data, expected):
        assert _feed(decoder, 0x1000, data) == expected

    # @intent:test_case インデックスモード各種の表示形式を検証します。
    @pytest.mark.parametrize("data, expected", [
        ([0x30, 0x84], "LEAX ,X"),
        ([0x30, 0x94], "LEAX [,X]"),
        ([0x31, 0x21], "LEAY 1,Y"),
        ([0x32, 0xE8, 0xC0], "LEAS -64,S"),
        ([0x33, 0xD8, 0xC0], "LEAU [-64,U]"),
        ([0xA0, 0xA9, 0x01, 0x80], "SUBA 384,Y"),
        ([0xA6, 0x99, 0x04, 0x00], "LDA [1024,X]"),
        ([0xA7, 0xC6], "STA A,U"),
        ([0xA7, 0xD6], "STA [A,U]"),
        ([0xAA, 0xA5], "ORA B,Y"),
        ([0xAC, 0xEB], "CMPX D,S"),
        ([0xA6, 0x80], "LDA ,X+"),
        ([0x10, 0xAE, 0x81], "LDY ,X++"),
        ([0x10, 0xAE, 0x91], "LDY [,X++]"),
        ([0xA6, 0x82], "LDA ,-X"),
        ([0x10, 0xAE, 0x83], "LDY ,--X"),
        ([0xA5, 0x9F, 0xCA, 0xFE], "BITA [$CAFE]"),
    ])
    def test_indexed_text(self, decoder, data, expected):
        assert _feed(decoder, 0x1000, data) == expected

    # @intent:test_case 相対分岐およびPC相対インデックスに解決アドレスが付加されることを検証します。
    @pytest.mark.parametrize("data, expected", [
        ([0x20, 0xFD], "BRA -3 <0FFD>"),
        ([0x16, 0x00, 0x10], "LBRA 16 <1010>"),
        ([0x10, 0x26, 0xFF, 0xFE], "LBNE -2 <0FFE>"),
        ([0xE6, 0x8C, 0x0A], "LDB 10,PCR <100A>"),
        ([0xE6, 0x9C, 0x0A], "LDB [10,PCR] <100A>"),
        ([0xE6, 0x8D, 0x7F, 0xFF], "LDB 32767,PCR <8FFF>"),
    ])
    def test_relative_text(self, decoder, data, expected):
        assert _feed(decoder, 0x1000, data) == expected

    # @intent:test_case 無効なアドレッシングモードは追加バイトを待たずに完了することを検証します。
    @pytest.mark.parametrize("data", [[0x38], [0xA6, 0x90], [0x10, 0x40]])
    def test_invalid_completes_immediately(self, decoder, data):
        assert _feed(decoder, 0x1000, data) == UNKNOWN_ADDRMODE
        assert decoder.record.bytes_fetched == len(data)

    # @intent:test_case Page 2 インデックス命令は3バイト目で命令長が確定することを検証します。
    def test_incremental_page2_indexed(self, decoder):
        decoder.begin(0x4000, 0x10)
        assert decoder.record.bytes_required == 0
        decoder.continue_(0xAE)
        assert decoder.record.bytes_required == 0
        decoder.continue_(0x89)
        assert decoder.record.bytes_required == 5
        assert decoder.state is DecodeState.FETCHING
        decoder.continue_(0x01)
        decoder.continue_(0x00)
        assert decoder.complete() == "LDY 256,X"
