"""
共通の型定義を提供するモジュール。
アーキテクチャの選択子、デコード状態、および全アーキテクチャ共通の定数を定義します。
"""
from enum import Enum

# @intent:data_structure デコード対象のCPUアーキテクチャ。ストリーム生成時に一度だけ選択されます。
class Architecture(Enum):
    MOS6502 = "MOS6502"
    MOS65C02 = "MOS65C02"
    MC6800 = "MC6800"
    MC6809 = "MC6809"
    MC6809E = "MC6809E"
    Z80 = "Z80"

    @property
    def family(self) -> "ArchitectureFamily":
        return _FAMILIES[self]

    # @intent:utility_function 設定ファイル等の文字列表現からアーキテクチャを解決します。
    # @intent:pre-condition "6502", "MOS6502", "mc6809e" のような表記を受け付けます（大文字小文字は区別しない）。
    @classmethod
    def from_name(cls, name: str) -> "Architecture":
        key = str(name).strip().upper()
        for arch in cls:
            if key == arch.value:
                return arch
        alias = _ALIASES.get(key)
        if alias is None:
            raise ValueError(f"Unsupported architecture: {name}")
        return alias

# @intent:data_structure デコードモジュールの選択単位。6502/65C02、6809/6809Eは同じモジュールを共有します。
class ArchitectureFamily(Enum):
    MOS6502 = "MOS6502"
    MC6800 = "MC6800"
    MC6809 = "MC6809"
    Z80 = "Z80"

_FAMILIES = {
    Architecture.MOS6502: ArchitectureFamily.MOS6502,
    Architecture.MOS65C02: ArchitectureFamily.MOS6502,
    Architecture.MC6800: ArchitectureFamily.MC6800,
    Architecture.MC6809: ArchitectureFamily.MC6809,
    Architecture.MC6809E: ArchitectureFamily.MC6809,
    Architecture.Z80: ArchitectureFamily.Z80,
}

_ALIASES = {
    "6502": Architecture.MOS6502,
    "65C02": Architecture.MOS65C02,
    "6800": Architecture.MC6800,
    "6809": Architecture.MC6809,
    "6809E": Architecture.MC6809E,
    "ZILOGZ80": Architecture.Z80,
}

# @intent:data_structure 命令デコードの状態。Idle/Complete -> Fetching -> Complete の順にのみ遷移します。
class DecodeState(Enum):
    IDLE = "IDLE"
    FETCHING = "FETCHING"
    COMPLETE = "COMPLETE"

# 1命令あたりに蓄積できる最大バイト数
INSN_DECODE_MAXBYTES = 8
# 出力文字列の最大長（解決アドレスのサフィックスを含む）
INSN_DECODE_MAXSTRING = 32

# 未定義オペコードのニーモニック
UNKNOWN_OPCODE = "?"
# アドレッシングモードを解決できなかった場合の出力
UNKNOWN_ADDRMODE = "<?ADDRMODE?>"
# 最大バイト数を超えても命令が完成しなかった場合の出力
DECODE_OVERFLOW = "<decode overflow>"
