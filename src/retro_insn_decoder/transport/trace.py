# retro_insn_decoder/transport/trace.py
"""
Transport Layer (バストレース再生)

ロジックアナライザ等で取得したバスサイクルの記録を順に再生し、命令フェッチの開始位置に
デコード結果を付けたリスティングを生成します。
フェッチ修飾信号（6809 の LIC、Z80 の M1、6502 の SYNC など）が立っているサンプルを
命令の開始候補として扱います。
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional

from retro_insn_decoder.common.types import Architecture, DecodeState
from retro_insn_decoder.core.decoder import InstructionDecoder

# @intent:data_structure 1バスサイクル分の観測値。
@dataclass(frozen=True)
class BusSample:
    address: int
    data: int  # 8bit value
    fetch: bool = False  # 命令フェッチサイクルかどうか

# @intent:data_structure リスティングの1行。命令の先頭サイクルにのみ`text`が入ります。
@dataclass
class ListingRow:
    address: int
    data: int
    fetch: bool = False
    text: str = ""

    def format(self) -> str:
        """アドレス、データ、フェッチ印、デコード結果の順に並べた1行を返します。"""
        line = f"{self.address:04X}  {self.data:02X}  {'F' if self.fetch else ' '}"
        if self.text:
            line += f"  {self.text}"
        return line

# @intent:responsibility バストレースを再生し、命令デコード結果付きのリスティングを生成します。
# @intent:rationale Z80 のプレフィックスのようにフェッチサイクルが命令途中で現れることがあるため、
#                   デコード中のサンプルはフェッチ修飾の有無に関わらず継続バイトとして扱います。
def replay_trace(samples: Iterable[BusSample], architecture: Architecture) -> List[ListingRow]:
    decoder = InstructionDecoder(architecture)
    rows: List[ListingRow] = []
    start_row: Optional[ListingRow] = None

    for sample in samples:
        row = ListingRow(sample.address, sample.data, sample.fetch)
        rows.append(row)

        if decoder.state is DecodeState.FETCHING:
            decoder.continue_(sample.data)
        elif sample.fetch:
            decoder.begin(sample.address, sample.data)
            start_row = row
        else:
            # 命令に属さないデータサイクル
            continue

        if decoder.state is DecodeState.COMPLETE and start_row is not None:
            start_row.text = decoder.complete()
            start_row = None

    return rows
