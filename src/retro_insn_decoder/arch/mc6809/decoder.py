# src/retro_insn_decoder/arch/mc6809/decoder.py
"""
MC6809 / MC6809E 命令デコーダ

アドレッシングモードの判定は複数回の呼び出しにまたがることがあります。
Page 2/3 命令はプレフィックスの次のバイトを、さらにインデックスモードであれば
ポストバイトを待ってから命令長を確定します（最大3バイト目まで）。
"""
from typing import List, Optional

from retro_insn_decoder.common.types import DecodeState, UNKNOWN_ADDRMODE, UNKNOWN_OPCODE
from retro_insn_decoder.core.state import InstructionDecode
from retro_insn_decoder.core.formatter import (
    InstructionBuilder, hex8, hex16, read_u16be, read_s16be, sign_extend, resolve_target,
)
from .addressing import (
    Mc6809AddressingMode, INDIRECT_MODES, RELATIVE_MODES, PAGE_PREFIXES,
    addressing_mode, instruction_length,
)
from .maps import (
    OPCODES_6809, OPCODES_LONG_COND_BRANCHES, EXG_TFR_REGISTERS, INDEX_REGISTERS,
    PSH_PUL_REGISTERS,
)

M = Mc6809AddressingMode

# アキュムレータオフセットのレジスタ（ポストバイト下位4ビット）
_ACC_OFFSET_REGISTERS = {0b0110: "A", 0b0101: "B", 0b1011: "D"}

# PSHS/PULS は U を、PSHU/PULU は S をスタックする
_SYSTEM_STACK_OPCODES = (0x34, 0x35)

# @intent:responsibility Page 2/3 命令のニーモニックを解決します。
# @intent:rationale Page 2/3 は規則的な表にならないため、値とマスクの比較で個別に判定します。
def _extended_mnemonic(extopc: int) -> str:
    group = extopc & 0xFFF0
    low = extopc & 0x000F

    if 0x1020 <= extopc <= 0x102F:
        return OPCODES_LONG_COND_BRANCHES[low]
    if extopc == 0x103F:
        return "SWI2"
    if extopc == 0x113F:
        return "SWI3"
    if group in (0x1080, 0x1090, 0x10A0, 0x10B0):
        if extopc == 0x108F:
            # STY #imm は存在しない
            return UNKNOWN_OPCODE
        return {0x3: "CMPD", 0xC: "CMPY", 0xE: "LDY", 0xF: "STY"}.get(low, UNKNOWN_OPCODE)
    if group in (0x10C0, 0x10D0, 0x10E0, 0x10F0):
        if extopc == 0x10CF:
            # STS #imm は存在しない
            return UNKNOWN_OPCODE
        return {0xE: "LDS", 0xF: "STS"}.get(low, UNKNOWN_OPCODE)
    if group in (0x1180, 0x1190, 0x11A0, 0x11B0):
        return {0x3: "CMPU", 0xC: "CMPS"}.get(low, UNKNOWN_OPCODE)
    return UNKNOWN_OPCODE

def mnemonic(buf) -> str:
    """フェッチ済みバイト列からニーモニックを返します。"""
    if buf[0] in PAGE_PREFIXES:
        return _extended_mnemonic((buf[0] << 8) | buf[1])
    return OPCODES_6809[buf[0]]

def _indirect(text: str, indirect: bool) -> str:
    return f"[{text}]" if indirect else text

# @intent:utility_function PSH/PUL のレジスタマスクをビット順のレジスタ名リストに展開します。
def push_pull_registers(opcode: int, mask: int) -> List[str]:
    names = []
    for bit, name in PSH_PUL_REGISTERS:
        if mask & bit:
            if name is None:
                name = "U" if opcode in _SYSTEM_STACK_OPCODES else "S"
            names.append(name)
    return names

# @intent:responsibility 必要バイト数が揃った命令をフォーマットし、相対アドレスを解決します。
def format_instruction(decode: InstructionDecode) -> str:
    mode = decode.addrmode
    if mode is None or mode is M.INVALID:
        return UNKNOWN_ADDRMODE

    buf = decode.buffer
    # i はオペコードの次（最初のオペランドバイト）を指す
    i = 2 if buf[0] in PAGE_PREFIXES else 1
    pb = buf[i]
    index_reg = INDEX_REGISTERS[(pb >> 5) & 3]
    indirect = mode in INDIRECT_MODES
    insn = InstructionBuilder(mnemonic(buf))
    reloff: Optional[int] = None

    if mode is M.INHERENT:
        pass
    elif mode is M.DIRECT:
        insn.operand(f"< ${hex8(pb)}")
    elif mode is M.EXTENDED:
        insn.operand(f"${hex16(read_u16be(buf, i))}")
    elif mode is M.EXTENDED_IND:
        # インデックスポストバイトの後にアドレスが続く
        insn.operand(_indirect(f"${hex16(read_u16be(buf, i + 1))}", True))
    elif mode is M.REL8:
        reloff = sign_extend(pb, 8)
        insn.operand(str(reloff))
    elif mode is M.REL16:
        reloff = read_s16be(buf, i)
        insn.operand(str(reloff))
    elif mode is M.IMM8:
        insn.operand(f"#${hex8(pb)}")
    elif mode is M.IMM16:
        insn.operand(f"#${hex16(read_u16be(buf, i))}")
    elif mode in (M.ZERO_OFFSET, M.ZERO_OFFSET_IND):
        insn.operand(_indirect(f",{index_reg}", indirect))
    elif mode is M.CONST_OFFSET5:
        insn.operand(f"{sign_extend(pb, 5)},{index_reg}")
    elif mode in (M.CONST_OFFSET8, M.CONST_OFFSET8_IND):
        insn.operand(_indirect(f"{sign_extend(buf[i + 1], 8)},{index_reg}", indirect))
    elif mode in (M.CONST_OFFSET16, M.CONST_OFFSET16_IND):
        insn.operand(_indirect(f"{read_s16be(buf, i + 1)},{index_reg}", indirect))
    elif mode in (M.ACC_OFFSET, M.ACC_OFFSET_IND):
        acc = _ACC_OFFSET_REGISTERS.get(pb & 0b1111, UNKNOWN_OPCODE)
        insn.operand(_indirect(f"{acc},{index_reg}", indirect))
    elif mode is M.POST_INC1:
        insn.operand(f",{index_reg}+")
    elif mode in (M.POST_INC2, M.POST_INC2_IND):
        insn.operand(_indirect(f",{index_reg}++", indirect))
    elif mode is M.PRE_DEC1:
        insn.operand(f",-{index_reg}")
    elif mode in (M.PRE_DEC2, M.PRE_DEC2_IND):
        insn.operand(_indirect(f",--{index_reg}", indirect))
    elif mode in (M.PCREL8, M.PCREL8_IND):
        reloff = sign_extend(buf[i + 1], 8)
        insn.operand(_indirect(f"{reloff},PCR", indirect))
    elif mode in (M.PCREL16, M.PCREL16_IND):
        reloff = read_s16be(buf, i + 1)
        insn.operand(_indirect(f"{reloff},PCR", indirect))
    elif mode is M.EXG_TFR:
        insn.operand(EXG_TFR_REGISTERS[pb >> 4]).operand(EXG_TFR_REGISTERS[pb & 0xF])
    elif mode is M.PSH_PUL:
        for name in push_pull_registers(buf[0], pb):
            insn.operand(name)
    else:
        return UNKNOWN_ADDRMODE

    if mode in RELATIVE_MODES and reloff is not None:
        decode.set_resolved_address(resolve_target(decode.insn_address, reloff))
    return insn.build()

# @intent:responsibility デコードを1ステップ進めます。
# @intent:rationale 命令長が未確定(bytes_required == 0)のまま複数回呼ばれることを前提とします。
def advance(decode: InstructionDecode) -> None:
    if decode.state is not DecodeState.FETCHING or decode.bytes_fetched == 0:
        return

    if decode.bytes_required == 0:
        mode = addressing_mode(decode.buffer, decode.bytes_fetched)
        if mode is None:
            # 次のバイトを待つ
            return
        decode.addrmode = mode
        if mode is M.INVALID:
            decode.bytes_required = decode.bytes_fetched
        else:
            decode.bytes_required = instruction_length(decode.opcode, mode)

    if decode.bytes_fetched == decode.bytes_required:
        decode.finish(format_instruction(decode))
