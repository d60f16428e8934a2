# src/retro_insn_decoder/arch/mc6809/addressing.py
"""
MC6809 アドレッシングモード解決ロジック。

データシートの "TABLE 9 - HEXADECIMAL VALUES OF MACHINE CODES" および
"TABLE 2 - INDEXED ADDRESSING MODE" に基づきます。
Page 2/3 プレフィックスやインデックスポストバイトがある場合、1バイト目だけでは
モードが決まらないため、判定に必要なバイトが揃うまで None（未確定）を返します。
"""
from enum import Enum
from typing import Optional, Sequence

# @intent:data_structure MC6809のアドレッシングモード。
# Immediate/Relative の8/16ビット版、およびインデックスのサイズ別モードは
# オペコード後のバイト数を区別するためだけに存在します（データシート上は区別されません）。
class Mc6809AddressingMode(Enum):
    INHERENT = "inherent"
    DIRECT = "direct"
    EXTENDED = "extended"
    REL8 = "rel8"
    REL16 = "rel16"
    IMM8 = "imm8"
    IMM16 = "imm16"

    ZERO_OFFSET = "zero_off"
    ZERO_OFFSET_IND = "zero_off_ind"
    CONST_OFFSET5 = "const_off5"
    CONST_OFFSET8 = "const_off8"
    CONST_OFFSET8_IND = "const_off8_ind"
    CONST_OFFSET16 = "const_off16"
    CONST_OFFSET16_IND = "const_off16_ind"
    ACC_OFFSET = "acc_off"
    ACC_OFFSET_IND = "acc_off_ind"
    POST_INC1 = "post_inc1"
    POST_INC2 = "post_inc2"
    POST_INC2_IND = "post_inc2_ind"
    PRE_DEC1 = "pre_dec1"
    PRE_DEC2 = "pre_dec2"
    PRE_DEC2_IND = "pre_dec2_ind"
    PCREL8 = "pcrel8"
    PCREL8_IND = "pcrel8_ind"
    PCREL16 = "pcrel16"
    PCREL16_IND = "pcrel16_ind"
    EXTENDED_IND = "extended_ind"

    # 疑似モード（実際は Immediate）
    EXG_TFR = "exg_tfr"
    PSH_PUL = "psh_pul"

    INVALID = "invalid"

M = Mc6809AddressingMode

# @intent:map オペコードの後に続くバイト数。命令長 = 1 + この値 (+ Page 2/3 プレフィックス分 1)。
POSTBYTE_COUNT = {
    M.INHERENT: 0,
    M.DIRECT: 1,
    M.EXTENDED: 2,
    M.REL8: 1,
    M.REL16: 2,
    M.IMM8: 1,
    M.IMM16: 2,
    M.ZERO_OFFSET: 1,
    M.ZERO_OFFSET_IND: 1,
    M.CONST_OFFSET5: 1,
    M.CONST_OFFSET8: 2,
    M.CONST_OFFSET8_IND: 2,
    M.CONST_OFFSET16: 3,
    M.CONST_OFFSET16_IND: 3,
    M.ACC_OFFSET: 1,
    M.ACC_OFFSET_IND: 1,
    M.POST_INC1: 1,
    M.POST_INC2: 1,
    M.POST_INC2_IND: 1,
    M.PRE_DEC1: 1,
    M.PRE_DEC2: 1,
    M.PRE_DEC2_IND: 1,
    M.PCREL8: 2,
    M.PCREL8_IND: 2,
    M.PCREL16: 3,
    M.PCREL16_IND: 3,
    M.EXTENDED_IND: 3,
    M.EXG_TFR: 1,
    M.PSH_PUL: 1,
}

# @intent:map 間接フラグ(ビット4)が立っている場合の対応モード。
# POST_INC1 / PRE_DEC1 は間接を持たないため含めません。
INDIRECT_VARIANT = {
    M.ZERO_OFFSET: M.ZERO_OFFSET_IND,
    M.CONST_OFFSET8: M.CONST_OFFSET8_IND,
    M.CONST_OFFSET16: M.CONST_OFFSET16_IND,
    M.ACC_OFFSET: M.ACC_OFFSET_IND,
    M.POST_INC2: M.POST_INC2_IND,
    M.PRE_DEC2: M.PRE_DEC2_IND,
    M.PCREL8: M.PCREL8_IND,
    M.PCREL16: M.PCREL16_IND,
}

INDIRECT_MODES = frozenset(INDIRECT_VARIANT.values()) | {M.EXTENDED_IND}

# 表示用の解決アドレスを持つモード
RELATIVE_MODES = frozenset({
    M.REL8, M.REL16, M.PCREL8, M.PCREL8_IND, M.PCREL16, M.PCREL16_IND,
})

# @intent:map ポストバイト & 0b10001111 による基本インデックスモードの判定表。
_INDEXED_BASE_MODES = {
    0b10000100: M.ZERO_OFFSET,
    0b10001000: M.CONST_OFFSET8,
    0b10001001: M.CONST_OFFSET16,
    0b10000110: M.ACC_OFFSET,   # A,R
    0b10000101: M.ACC_OFFSET,   # B,R
    0b10001011: M.ACC_OFFSET,   # D,R
    0b10000000: M.POST_INC1,
    0b10000001: M.POST_INC2,
    0b10000010: M.PRE_DEC1,
    0b10000011: M.PRE_DEC2,
    0b10001100: M.PCREL8,
    0b10001101: M.PCREL16,
}

PAGE_PREFIXES = (0x10, 0x11)

# @intent:map 0x10-0x1F の Page 1 命令は範囲で決まらないため個別に定義します。
_PAGE1_SPECIAL = {
    0x12: M.INHERENT,   # NOP
    0x13: M.INHERENT,   # SYNC
    0x19: M.INHERENT,   # DAA
    0x1D: M.INHERENT,   # SEX
    0x16: M.REL16,      # LBRA
    0x17: M.REL16,      # LBSR
    0x1A: M.IMM8,       # ORCC
    0x1C: M.IMM8,       # ANDCC
    0x1E: M.EXG_TFR,    # EXG
    0x1F: M.EXG_TFR,    # TFR
}

# @intent:responsibility インデックスポストバイトからアドレッシングモードを決定します。
# @intent:rationale ビットパターンは重なっているため、判定順（拡張間接 -> 5ビットオフセット -> マスク判定）を変えてはいけません。
def indexed_mode(pb: int) -> Mc6809AddressingMode:
    if (pb & 0b10011111) == 0b10011111:
        return M.EXTENDED_IND

    if (pb & 0b10000000) == 0:
        return M.CONST_OFFSET5

    mode = _INDEXED_BASE_MODES.get(pb & 0b10001111)
    if mode is None:
        return M.INVALID

    if pb & 0b00010000:
        # ,R+ と ,-R は間接指定できない
        return INDIRECT_VARIANT.get(mode, M.INVALID)
    return mode

def _page23_mode(buf: Sequence[int], bytes_fetched: int) -> Optional[Mc6809AddressingMode]:
    if bytes_fetched < 2:
        return None

    group = ((buf[0] << 8) | buf[1]) & 0xFFF0
    if group == 0x1020:
        return M.REL16
    if group in (0x1030, 0x1130):
        return M.INHERENT
    if group in (0x1080, 0x1180, 0x10C0):
        return M.IMM16
    if group in (0x1090, 0x1190, 0x10D0):
        return M.DIRECT
    if group in (0x10A0, 0x11A0, 0x10E0):
        # インデックス: ポストバイトは3バイト目
        if bytes_fetched < 3:
            return None
        return indexed_mode(buf[2])
    if group in (0x10B0, 0x11B0, 0x10F0):
        return M.EXTENDED
    return M.INVALID

# @intent:responsibility フェッチ済みのバイト列からアドレッシングモードを決定します。
# @intent:post-condition 判定にさらにバイトが必要な場合は None を返します。
def addressing_mode(buf: Sequence[int], bytes_fetched: int) -> Optional[Mc6809AddressingMode]:
    if bytes_fetched == 0:
        return None

    opc = buf[0]

    if opc in PAGE_PREFIXES:
        return _page23_mode(buf, bytes_fetched)

    if 0x00 <= opc <= 0x0F or 0x90 <= opc <= 0x9F or 0xD0 <= opc <= 0xDF:
        return M.DIRECT

    if 0x10 <= opc <= 0x1F:
        return _PAGE1_SPECIAL.get(opc, M.INVALID)

    if 0x20 <= opc <= 0x2F:
        return M.REL8

    if 0x30 <= opc <= 0x3F:
        if opc <= 0x33:
            # LEAX/LEAY/LEAS/LEAU
            return indexed_mode(buf[1]) if bytes_fetched >= 2 else None
        if opc <= 0x37:
            return M.PSH_PUL
        if opc >= 0x39:
            return M.INHERENT
        return M.INVALID

    if 0x40 <= opc <= 0x5F:
        return M.INHERENT

    if 0x60 <= opc <= 0x6F or 0xA0 <= opc <= 0xAF or 0xE0 <= opc <= 0xEF:
        return indexed_mode(buf[1]) if bytes_fetched >= 2 else None

    if 0x70 <= opc <= 0x7F or 0xB0 <= opc <= 0xBF or 0xF0 <= opc <= 0xFF:
        return M.EXTENDED

    if 0x80 <= opc <= 0x8F or 0xC0 <= opc <= 0xCF:
        # BSR
        if opc == 0x8D:
            return M.REL8
        # SUBD/ADDD, CMPX/LDD, LDX/LDU
        if (opc & 0x0F) in (0x03, 0x0C, 0x0E):
            return M.IMM16
        return M.IMM8

    return M.INVALID

# @intent:utility_function 命令長（プレフィックスを含む）を返します。
def instruction_length(opcode: int, mode: Mc6809AddressingMode) -> int:
    length = 1 + POSTBYTE_COUNT[mode]
    if opcode in PAGE_PREFIXES:
        length += 1
    return length
