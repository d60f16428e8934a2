# retro_insn_decoder/core/disassembler.py
"""
Linear Disassembler

メモリイメージの先頭から順にバイトをデコードドライバへ流し込み、表示用の行データを生成します。
逆アセンブル専用のデコード処理は持たず、バス観測時と同じ`InstructionDecoder`を再利用します。
"""
from typing import List, Tuple

from retro_insn_decoder.common.types import Architecture, DecodeState
from retro_insn_decoder.core.decoder import InstructionDecoder

def _hex_bytes(data: bytes) -> str:
    return " ".join(f"{b:02X}" for b in data)

# @intent:responsibility 指定されたバイト列を逆アセンブルし、表示用データを生成します。
def disassemble(data: bytes, start_addr: int, architecture: Architecture) -> List[Tuple[int, str, str]]:
    """
    バイト列を先頭から逆アセンブルします。

    イメージ末尾で命令が完成しなかったバイトは "DB $XX" として1バイトずつ出力します。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    decoder = InstructionDecoder(architecture)
    result = []
    pos = 0

    while pos < len(data):
        address = (start_addr + pos) & 0xFFFF
        decoder.begin(address, data[pos])
        consumed = 1
        while decoder.state is DecodeState.FETCHING and pos + consumed < len(data):
            if not decoder.continue_(data[pos + consumed]):
                # オーバーフロー: 最後のバイトは取り込まれていない
                break
            consumed += 1

        if decoder.state is not DecodeState.COMPLETE:
            # イメージ末尾で命令が途切れた
            break

        consumed = decoder.record.bytes_fetched
        result.append((address, _hex_bytes(decoder.record.fetched), decoder.complete()))
        pos += consumed

    for offset in range(pos, len(data)):
        address = (start_addr + offset) & 0xFFFF
        result.append((address, f"{data[offset]:02X}", f"DB ${data[offset]:02X}"))

    return result
