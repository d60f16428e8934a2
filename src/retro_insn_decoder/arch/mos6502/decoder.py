# src/retro_insn_decoder/arch/mos6502/decoder.py
"""
MOS 6502 / 65C02 命令デコーダ。

6502のアドレッシングモードは単純なため、オペコードごとのテンプレートに含まれる
プレースホルダからオペランドのバイト数と表示形式を決定します。
各命令のオペランドフィールドは高々1つなので、オペコード1バイトで命令長が確定します。
"""
from enum import Enum
from typing import List

from retro_insn_decoder.common.types import Architecture, DecodeState
from retro_insn_decoder.core.state import InstructionDecode
from retro_insn_decoder.core.formatter import (
    OperandKind, OperandToken, parse_template, operand_tokens, render_template,
    hex8, hex16, read_u16le, sign_extend, resolve_target,
)
from .maps import OPCODES_6502, OPCODES_65C02

# @intent:data_structure 6502の疑似アドレッシングモード。オペコード後のバイト数と表示方法だけを表します。
class Mos6502AddressingMode(Enum):
    IMPLIED = "implied"
    U8 = "u8"      # nn
    U16 = "u16"    # nnnn
    REL8 = "rel8"  # rrrr

# 長いプレースホルダを先に判定する
OPERAND_TOKENS = (
    OperandToken("nnnn", OperandKind.U16, 2),
    OperandToken("nn", OperandKind.U8, 1),
    OperandToken("rrrr", OperandKind.REL8, 1),
)

_MODE_BY_KIND = {
    OperandKind.U16: Mos6502AddressingMode.U16,
    OperandKind.U8: Mos6502AddressingMode.U8,
    OperandKind.REL8: Mos6502AddressingMode.REL8,
}

# @intent:utility_function アーキテクチャに応じたオペコード表を返します。
def opcode_table(architecture: Architecture) -> List[str]:
    return OPCODES_65C02 if architecture is Architecture.MOS65C02 else OPCODES_6502

# @intent:responsibility テンプレート文字列からアドレッシングモードを決定します。
def addressing_mode(template: str) -> Mos6502AddressingMode:
    tokens = operand_tokens(parse_template(template, OPERAND_TOKENS))
    if not tokens:
        return Mos6502AddressingMode.IMPLIED
    return _MODE_BY_KIND[tokens[0].kind]

def instruction_length(mode: Mos6502AddressingMode) -> int:
    if mode is Mos6502AddressingMode.U16:
        return 3
    if mode in (Mos6502AddressingMode.U8, Mos6502AddressingMode.REL8):
        return 2
    return 1

# @intent:responsibility 必要バイト数が揃った命令をフォーマットし、分岐先アドレスを解決します。
def format_instruction(decode: InstructionDecode) -> str:
    template = opcode_table(decode.architecture)[decode.opcode]
    buf = decode.buffer

    def render(token: OperandToken) -> str:
        if token.kind is OperandKind.U16:
            return hex16(read_u16le(buf, 1))
        if token.kind is OperandKind.U8:
            return hex8(buf[1])
        offset = sign_extend(buf[1], 8)
        decode.set_resolved_address(resolve_target(decode.insn_address, decode.bytes_required + offset))
        return str(offset)

    return render_template(parse_template(template, OPERAND_TOKENS), render)

# @intent:responsibility デコードを1ステップ進めます。命令長が揃っていれば完了状態にします。
def advance(decode: InstructionDecode) -> None:
    if decode.state is not DecodeState.FETCHING or decode.bytes_fetched == 0:
        return

    if decode.bytes_required == 0:
        template = opcode_table(decode.architecture)[decode.opcode]
        decode.addrmode = addressing_mode(template)
        decode.bytes_required = instruction_length(decode.addrmode)

    if decode.bytes_fetched == decode.bytes_required:
        decode.finish(format_instruction(decode))
