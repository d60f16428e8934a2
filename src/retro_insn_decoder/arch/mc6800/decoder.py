# src/retro_insn_decoder/arch/mc6800/decoder.py
"""
MC6800 命令デコーダ

アドレッシングモードはデータシートの "TABLE 1 - HEXADECIMAL VALUES OF MACHINE CODES" に
従ってオペコード値の範囲から決定します。範囲内の不規則な命令（BSR, LDS, LDX）は
オペコード値を直接比較して例外扱いします。
不完全なデコードを行うため、未定義オペコードでも有効なアドレッシングモードが返ることがあります。
"""
from enum import Enum

from retro_insn_decoder.common.types import DecodeState, UNKNOWN_ADDRMODE
from retro_insn_decoder.core.state import InstructionDecode
from retro_insn_decoder.core.formatter import (
    InstructionBuilder, hex8, hex16, read_u16be, sign_extend, resolve_target,
)
from .maps import OPCODES_6800

# @intent:data_structure MC6800のアドレッシングモード。
class Mc6800AddressingMode(Enum):
    INHERENT = "inherent"
    RELATIVE = "relative"
    INDEXED = "indexed"
    IMMEDIATE8 = "imm8"
    IMMEDIATE16 = "imm16"
    DIRECT = "direct"
    EXTENDED = "extended"
    INVALID = "invalid"

# @intent:map アドレッシングモードごとの命令長（オペコードを含む）。
INSTRUCTION_LENGTH = {
    Mc6800AddressingMode.INHERENT: 1,
    Mc6800AddressingMode.RELATIVE: 2,
    Mc6800AddressingMode.INDEXED: 2,
    Mc6800AddressingMode.IMMEDIATE8: 2,
    Mc6800AddressingMode.DIRECT: 2,
    Mc6800AddressingMode.EXTENDED: 3,
    Mc6800AddressingMode.IMMEDIATE16: 3,
}

# @intent:responsibility オペコード値からアドレッシングモードを決定します。
def addressing_mode(opc: int) -> Mc6800AddressingMode:
    if 0x00 <= opc <= 0x1F or 0x30 <= opc <= 0x5F:
        return Mc6800AddressingMode.INHERENT

    if 0x20 <= opc <= 0x2F:
        return Mc6800AddressingMode.RELATIVE

    if 0x60 <= opc <= 0x6F or 0xA0 <= opc <= 0xAF or 0xE0 <= opc <= 0xEF:
        return Mc6800AddressingMode.INDEXED

    if 0x70 <= opc <= 0x7F or 0xB0 <= opc <= 0xBF or 0xF0 <= opc <= 0xFF:
        return Mc6800AddressingMode.EXTENDED

    if 0x80 <= opc <= 0x8F or 0xC0 <= opc <= 0xCF:
        # BSR
        if opc == 0x8D:
            return Mc6800AddressingMode.RELATIVE
        # LDS, LDX
        if opc == 0x8E or opc == 0xCE:
            return Mc6800AddressingMode.IMMEDIATE16
        return Mc6800AddressingMode.IMMEDIATE8

    if 0x90 <= opc <= 0x9F or 0xD0 <= opc <= 0xDF:
        return Mc6800AddressingMode.DIRECT

    return Mc6800AddressingMode.INVALID

# @intent:responsibility 必要バイト数が揃った命令をフォーマットします。
def format_instruction(decode: InstructionDecode) -> str:
    buf = decode.buffer
    mode = decode.addrmode
    insn = InstructionBuilder(OPCODES_6800[decode.opcode])

    if mode is Mc6800AddressingMode.INHERENT:
        pass
    elif mode is Mc6800AddressingMode.RELATIVE:
        offset = sign_extend(buf[1], 8)
        insn.operand(str(offset))
        decode.set_resolved_address(resolve_target(decode.insn_address, 2 + offset))
    elif mode is Mc6800AddressingMode.INDEXED:
        insn.operand(str(buf[1])).operand("X")
    elif mode is Mc6800AddressingMode.EXTENDED:
        insn.operand(f"${hex16(read_u16be(buf, 1))}")
    elif mode is Mc6800AddressingMode.DIRECT:
        insn.operand(f"${hex8(buf[1])}")
    elif mode is Mc6800AddressingMode.IMMEDIATE8:
        insn.operand(f"#${hex8(buf[1])}")
    elif mode is Mc6800AddressingMode.IMMEDIATE16:
        insn.operand(f"#${hex16(read_u16be(buf, 1))}")
    else:
        return UNKNOWN_ADDRMODE
    return insn.build()

# @intent:responsibility デコードを1ステップ進めます。6800はオペコード1バイトで命令長が確定します。
def advance(decode: InstructionDecode) -> None:
    if decode.state is not DecodeState.FETCHING or decode.bytes_fetched == 0:
        return

    if decode.bytes_required == 0:
        decode.addrmode = addressing_mode(decode.opcode)
        # 無効なモードはそれ以上バイトを待たずに完了させる
        decode.bytes_required = INSTRUCTION_LENGTH.get(decode.addrmode, decode.bytes_fetched)

    if decode.bytes_fetched == decode.bytes_required:
        decode.finish(format_instruction(decode))
