# retro_insn_decoder/core/state.py
"""
Core Layer (デコード状態)

このモジュールは、1つのデコードストリームに対応する命令デコードレコードを定義します。
レコードはストリームの所有者が長期間保持し、命令ごとに`reset`で再利用されます。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from retro_insn_decoder.common.types import (
    Architecture,
    DecodeState,
    INSN_DECODE_MAXBYTES,
)

# @intent:responsibility デコード中の1命令分の状態（バイトバッファ、必要バイト数、出力文字列など）を保持します。
@dataclass
class InstructionDecode:
    """
    命令デコードの中心となるレコード。

    bytes_required が 0 の場合は「必要バイト数が未確定」を意味し、長さ0の命令ではありません。
    bytes_fetched は常に INSN_DECODE_MAXBYTES 以下です。
    """
    architecture: Architecture
    state: DecodeState = DecodeState.IDLE
    insn_address: int = 0x0000
    resolved_address: int = 0x0000
    resolved_address_valid: bool = False
    bytes_required: int = 0
    bytes_fetched: int = 0
    addrmode: Optional[Enum] = None
    buffer: bytearray = field(default_factory=lambda: bytearray(INSN_DECODE_MAXBYTES))
    insn_string: str = ""

    # @intent:responsibility 新しい命令のためにレコードを初期化し、先頭バイトを格納します。
    def reset(self, address: int, first_byte: int) -> None:
        self.state = DecodeState.FETCHING
        self.insn_address = address
        self.resolved_address = 0x0000
        self.resolved_address_valid = False
        self.addrmode = None
        self.bytes_required = 0
        self.bytes_fetched = 0
        self.insn_string = ""
        self.append(first_byte)

    # @intent:pre-condition 呼び出し側で容量チェック済みであること。
    def append(self, byte: int) -> None:
        self.buffer[self.bytes_fetched] = byte
        self.bytes_fetched += 1

    @property
    def is_full(self) -> bool:
        return self.bytes_fetched >= INSN_DECODE_MAXBYTES

    @property
    def fetched(self) -> bytes:
        """これまでにフェッチしたバイト列。"""
        return bytes(self.buffer[:self.bytes_fetched])

    @property
    def opcode(self) -> int:
        return self.buffer[0]

    # @intent:utility_function 表示用の解決アドレス（分岐先など）を設定します。
    def set_resolved_address(self, address: int) -> None:
        self.resolved_address = address & 0xFFFF
        self.resolved_address_valid = True

    # @intent:responsibility フォーマット済み文字列を格納し、デコードを完了させます。
    def finish(self, text: str) -> None:
        self.insn_string = text
        self.state = DecodeState.COMPLETE
