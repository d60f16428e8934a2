"""
Z80命令デコーダ。

まず命令テンプレート（プレースホルダ付きニーモニック）を求め、テンプレート中の
プレースホルダを左から列挙して命令長を算出します。
プレフィックス(CB/ED/DD/FD)付きの命令はテンプレートを得るまでに追加のバイトが必要で、
DD/FD + CB の場合は4バイト目（変位の後ろにあるオペコード）まで待つ必要があります。
"""
from enum import Enum
from typing import Optional, Sequence

from retro_insn_decoder.common.types import DecodeState
from retro_insn_decoder.core.state import InstructionDecode
from retro_insn_decoder.core.formatter import (
    OperandKind, OperandToken, parse_template, operand_tokens, render_template,
    hex8, hex16, read_u16le, sign_extend, signed_displacement, resolve_target,
)
from .maps import OPCODES_Z80, OPCODES_CB, OPCODES_ED, LD_REGS, IO_REGS, LD_REGS16

# @intent:data_structure Z80の疑似アドレッシングモード。オペランドのバイト数と表示方法を表します。
class Z80AddressingMode(Enum):
    IMPLIED = "implied"
    U8 = "u8"          # XXh
    U16 = "u16"        # XXXXh
    DISP8 = "disp8"    # +ddd
    PCREL8 = "pcrel8"  # rrrr

OPERAND_TOKENS = (
    OperandToken("XXXXh", OperandKind.U16, 2),
    OperandToken("XXh", OperandKind.U8, 1),
    OperandToken("+ddd", OperandKind.DISP8, 1),
    OperandToken("rrrr", OperandKind.PCREL8, 1),
)

_MODE_BY_KIND = {
    OperandKind.U16: Z80AddressingMode.U16,
    OperandKind.U8: Z80AddressingMode.U8,
    OperandKind.DISP8: Z80AddressingMode.DISP8,
    OperandKind.PCREL8: Z80AddressingMode.PCREL8,
}

INDEX_PREFIXES = (0xDD, 0xFD)
PREFIXES = (0xCB, 0xED, 0xDD, 0xFD)

JP_HL = 0xE9

def index_register(prefix: int) -> str:
    return "IX" if prefix == 0xDD else "IY"

# @intent:responsibility テンプレート中の最初の HL を IX/IY に置き換えます。
# @intent:rationale (HL) のメモリ参照は (IX+d) になるため変位プレースホルダを挿入します。
#                   ただし JP (HL) は "PC <- HL" であり、メモリ参照ではないので変位を持ちません。
def hl_to_index(template: str, prefix: int, register_transfer: bool = False) -> str:
    pos = template.find("HL")
    if pos < 0:
        # 置換対象がなければ基本命令としてそのままデコードする
        return template
    need_disp = pos > 0 and template[pos - 1] == "(" and not register_transfer
    replacement = index_register(prefix) + ("+ddd" if need_disp else "")
    return template[:pos] + replacement + template[pos + 2:]

# @intent:responsibility ED グループのテンプレートを返します。ビットパターンのグループを先に判定します。
def ed_template(opc: int) -> str:
    reg16 = LD_REGS16[(opc >> 4) & 3]
    ioreg = (opc >> 3) & 7

    if (opc & 0b11001111) == 0b01001011:
        return f"LD {reg16},(XXXXh)"
    if (opc & 0b11001111) == 0b01000011:
        return f"LD (XXXXh),{reg16}"
    if (opc & 0b11001111) == 0b01001010:
        return f"ADC HL,{reg16}"
    if (opc & 0b11001111) == 0b01000010:
        return f"SBC HL,{reg16}"
    if (opc & 0b11000111) == 0b01000000:
        return f"IN {'Flags' if ioreg == 6 else IO_REGS[ioreg]},(C)"
    if (opc & 0b11000111) == 0b01000001:
        return f"OUT (C),{IO_REGS[ioreg]}"
    return OPCODES_ED.get(opc, "?")

# @intent:responsibility CB グループ（および DD/FD + CB）のテンプレートを返します。
def cb_template(opc: int, prefix: Optional[int] = None) -> str:
    head = OPCODES_CB[(opc >> 3) & 0x1F]
    reg = opc & 7
    if prefix is None:
        return head + LD_REGS[reg]

    # DD/FD + CB は常に (IX+d) を操作する。レジスタ指定が (HL) 以外の場合、
    # BIT 以外は結果をそのレジスタにも書き戻す（非公式動作）。
    template = hl_to_index(head + LD_REGS[6], prefix)
    if reg != 6 and (opc & 0b11000000) != 0b01000000:
        template += "," + LD_REGS[reg]
    return template

# @intent:responsibility フェッチ済みバイト列から命令テンプレートを求めます。
# @intent:post-condition テンプレートの決定にさらにバイトが必要な場合は None を返します。
def instruction_template(buf: Sequence[int], bytes_fetched: int) -> Optional[str]:
    opc = buf[0]

    if opc in INDEX_PREFIXES:
        if bytes_fetched < 2:
            return None
        if buf[1] == 0xCB:
            # DD CB d op: オペコードは変位の後ろ
            if bytes_fetched < 4:
                return None
            return cb_template(buf[3], opc)
        sub = buf[1]
        if (sub & 0b11001111) == 0b00001001:
            template = f"ADD {index_register(opc)},{LD_REGS16[(sub >> 4) & 3]}"
        else:
            template = OPCODES_Z80[sub]
        return hl_to_index(template, opc, register_transfer=(sub == JP_HL))

    if opc == 0xED:
        if bytes_fetched < 2:
            return None
        return ed_template(buf[1])

    if opc == 0xCB:
        if bytes_fetched < 2:
            return None
        return cb_template(buf[1])

    return OPCODES_Z80[opc]

# @intent:utility_function プレフィックスを含むオペコード部分のバイト数を返します。
def opcode_length(buf: Sequence[int]) -> int:
    length = 1
    if buf[0] in PREFIXES:
        length += 1
        if buf[0] in INDEX_PREFIXES and buf[1] == 0xCB:
            length += 1
    return length

# @intent:utility_function 最初のオペランドバイトの位置を返します。
# DD/FD + CB では変位がオペコードより前にあるため、CB の分は進めません。
def operand_offset(buf: Sequence[int]) -> int:
    return 2 if buf[0] in PREFIXES else 1

# @intent:responsibility テンプレートにオペランド値を埋め込み、PC相対の分岐先を解決します。
def format_instruction(decode: InstructionDecode) -> str:
    buf = decode.buffer
    template = instruction_template(buf, decode.bytes_fetched)
    cursor = operand_offset(buf)

    def render(token: OperandToken) -> str:
        nonlocal cursor
        pos = cursor
        cursor += token.size
        if token.kind is OperandKind.U16:
            return f"{hex16(read_u16le(buf, pos))}h"
        if token.kind is OperandKind.U8:
            return f"{hex8(buf[pos])}h"
        if token.kind is OperandKind.DISP8:
            return signed_displacement(sign_extend(buf[pos], 8))
        # 命令ストリームの値は "ターゲット - 2" なので表示時に戻す
        offset = sign_extend(buf[pos], 8) + 2
        decode.set_resolved_address(resolve_target(decode.insn_address, offset))
        return str(offset)

    return render_template(parse_template(template, OPERAND_TOKENS), render)

# @intent:responsibility デコードを1ステップ進めます。テンプレートが得られるまで命令長は未確定です。
def advance(decode: InstructionDecode) -> None:
    if decode.state is not DecodeState.FETCHING or decode.bytes_fetched == 0:
        return

    if decode.bytes_required == 0:
        template = instruction_template(decode.buffer, decode.bytes_fetched)
        if template is None:
            return
        tokens = operand_tokens(parse_template(template, OPERAND_TOKENS))
        decode.addrmode = _MODE_BY_KIND[tokens[0].kind] if tokens else Z80AddressingMode.IMPLIED
        decode.bytes_required = opcode_length(decode.buffer) + sum(t.size for t in tokens)

    if decode.bytes_fetched == decode.bytes_required:
        decode.finish(format_instruction(decode))
