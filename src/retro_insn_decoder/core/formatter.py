# retro_insn_decoder/core/formatter.py
"""
Core Layer (フォーマット/置換エンジン)

ニーモニックテンプレートとオペランドバイト列から表示用文字列を組み立てます。
テンプレート文字列を直接書き換えるのではなく、リテラル部分とプレースホルダを
セグメント列に分解してから描画するため、置換前後で文字数が異なっても問題ありません。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Sequence, Union

# @intent:data_structure プレースホルダが表すオペランドの種類。
class OperandKind(Enum):
    U8 = "u8"          # 8ビット値（16進）
    U16 = "u16"        # 16ビット値（16進）
    REL8 = "rel8"      # 符号付き8ビット相対分岐（10進）
    DISP8 = "disp8"    # 符号付き8ビットのインデックス変位
    PCREL8 = "pcrel8"  # 符号付き8ビットPC相対（表示時に+2）

# @intent:data_structure テンプレート中のプレースホルダ1つ分の定義。
@dataclass(frozen=True)
class OperandToken:
    text: str
    kind: OperandKind
    size: int  # 命令ストリーム上で消費するバイト数

# テンプレートを分解した結果の要素（リテラル文字列またはプレースホルダ）
Segment = Union[str, OperandToken]

# @intent:responsibility テンプレートを左から走査し、リテラルとプレースホルダのセグメント列に分解します。
# @intent:pre-condition `tokens`は同じ位置で一致しうる場合に長いものが先に並んでいる必要があります（例: "nnnn" は "nn" より前）。
def parse_template(template: str, tokens: Sequence[OperandToken]) -> List[Segment]:
    segments: List[Segment] = []
    literal_start = 0
    pos = 0
    while pos < len(template):
        for token in tokens:
            if template.startswith(token.text, pos):
                if literal_start < pos:
                    segments.append(template[literal_start:pos])
                segments.append(token)
                pos += len(token.text)
                literal_start = pos
                break
        else:
            pos += 1
    if literal_start < len(template):
        segments.append(template[literal_start:])
    return segments

def operand_tokens(segments: Sequence[Segment]) -> List[OperandToken]:
    """セグメント列に含まれるプレースホルダを出現順に返します。"""
    return [s for s in segments if isinstance(s, OperandToken)]

# @intent:responsibility セグメント列を描画します。プレースホルダは出現順に`render`へ渡されます。
def render_template(segments: Sequence[Segment], render: Callable[[OperandToken], str]) -> str:
    parts = []
    for segment in segments:
        if isinstance(segment, OperandToken):
            parts.append(render(segment))
        else:
            parts.append(segment)
    return "".join(parts)

# @intent:responsibility ニーモニックと列挙されたオペランドから命令文字列を組み立てます。
class InstructionBuilder:
    """
    "MNEMONIC op1,op2,..." 形式の文字列を組み立てるビルダー。
    オペランドが無い場合はニーモニックのみを返します。
    """
    def __init__(self, mnemonic: str):
        self._mnemonic = mnemonic
        self._operands: List[str] = []

    def operand(self, text: str) -> "InstructionBuilder":
        self._operands.append(text)
        return self

    def build(self) -> str:
        if not self._operands:
            return self._mnemonic
        return f"{self._mnemonic} {','.join(self._operands)}"

# --- 数値ヘルパー ---

# @intent:utility_function 下位`bits`ビットを2の補数として符号拡張します。
def sign_extend(value: int, bits: int) -> int:
    mask = (1 << bits) - 1
    value &= mask
    if value & (1 << (bits - 1)):
        value -= 1 << bits
    return value

def read_u16le(buf: Sequence[int], i: int) -> int:
    """Little-endian 16-bit read."""
    return buf[i] | (buf[i + 1] << 8)

def read_u16be(buf: Sequence[int], i: int) -> int:
    """Big-endian 16-bit read."""
    return (buf[i] << 8) | buf[i + 1]

def read_s16be(buf: Sequence[int], i: int) -> int:
    return sign_extend(read_u16be(buf, i), 16)

def hex8(value: int) -> str:
    return f"{value & 0xFF:02X}"

def hex16(value: int) -> str:
    return f"{value & 0xFFFF:04X}"

# @intent:utility_function インデックス変位を "+N" / "-N" 形式で表示します。
def signed_displacement(value: int) -> str:
    return f"{value:+d}"

# @intent:utility_function 基準アドレスにオフセットを加えた16ビットの表示用アドレスを返します。
def resolve_target(base: int, offset: int) -> int:
    return (base + offset) & 0xFFFF

def resolved_suffix(address: int) -> str:
    return f" <{address & 0xFFFF:04X}>"
