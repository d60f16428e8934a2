# retro_insn_decoder/core/decoder.py
"""
Core Layer (デコードドライバ)

バスを観測する側から1バイトずつ渡される命令バイト列を、アーキテクチャ別のデコードモジュールへ
振り分けます。アーキテクチャ固有の処理は各モジュールの`advance`に委譲し、ドライバは
状態遷移、バッファ容量、解決アドレスのサフィックス付与だけを担当します。
"""
import logging

from retro_insn_decoder.common.types import (
    Architecture,
    ArchitectureFamily,
    DecodeState,
    DECODE_OVERFLOW,
    INSN_DECODE_MAXSTRING,
)
from retro_insn_decoder.core.state import InstructionDecode
from retro_insn_decoder.core.formatter import resolved_suffix
from retro_insn_decoder.arch.mos6502 import decoder as mos6502
from retro_insn_decoder.arch.mc6800 import decoder as mc6800
from retro_insn_decoder.arch.mc6809 import decoder as mc6809
from retro_insn_decoder.arch.z80 import decoder as z80

logger = logging.getLogger(__name__)

def _check_byte(value: int) -> int:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"Byte value out of range: {value}")
    return value

def _check_address(value: int) -> int:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"Address out of range: {value}")
    return value

# @intent:responsibility 1つのデコードストリームを駆動します。
class InstructionDecoder:
    """
    インクリメンタル命令デコーダ。

    使い方:
        decoder = InstructionDecoder(Architecture.MC6809)
        decoder.begin(0x1000, 0x86)
        decoder.continue_(0x5A)
        decoder.complete()  # -> "LDA #$5A"

    アーキテクチャは生成時に一度だけ選択されます。レコードは命令ごとに再利用されるため、
    1つのストリームにつき1つのインスタンスを使用してください（スレッドセーフではありません）。
    """
    def __init__(self, architecture: Architecture):
        if not isinstance(architecture, Architecture):
            architecture = Architecture.from_name(architecture)
        self._architecture = architecture
        self._decode = InstructionDecode(architecture=architecture)

    @property
    def architecture(self) -> Architecture:
        return self._architecture

    @property
    def record(self) -> InstructionDecode:
        """現在のデコードレコード（読み取り専用として扱ってください）。"""
        return self._decode

    @property
    def state(self) -> DecodeState:
        return self._decode.state

    # @intent:responsibility アーキテクチャファミリーに対応するデコードステップを1回実行します。
    def _advance(self) -> None:
        family = self._architecture.family
        if family is ArchitectureFamily.MOS6502:
            mos6502.advance(self._decode)
        elif family is ArchitectureFamily.MC6800:
            mc6800.advance(self._decode)
        elif family is ArchitectureFamily.MC6809:
            mc6809.advance(self._decode)
        elif family is ArchitectureFamily.Z80:
            z80.advance(self._decode)
        else:
            raise ValueError(f"Unsupported architecture: {self._architecture}")

    # @intent:responsibility デコードを進め、この呼び出しで完了した場合は解決アドレスを付加します。
    # @intent:post-condition サフィックスは Fetching -> Complete の遷移時に一度だけ付加されます。
    def _next_state(self) -> bool:
        ostate = self._decode.state
        self._advance()

        if ostate is not DecodeState.FETCHING:
            return False

        if self._decode.state is DecodeState.COMPLETE:
            text = self._decode.insn_string
            if self._decode.resolved_address_valid:
                text += resolved_suffix(self._decode.resolved_address)
            self._decode.insn_string = self._bounded(text)
        return True

    def _bounded(self, text: str) -> str:
        if len(text) > INSN_DECODE_MAXSTRING:
            logger.warning("Decoded text truncated to %d characters: %r", INSN_DECODE_MAXSTRING, text)
            return text[:INSN_DECODE_MAXSTRING]
        return text

    # @intent:responsibility 新しい命令のデコードを開始します。
    # @intent:pre-condition デコーダは Idle または Complete 状態であること。Fetching 中の呼び出しは無視されます。
    def begin(self, address: int, byte: int) -> bool:
        _check_address(address)
        _check_byte(byte)

        if self._decode.state is DecodeState.FETCHING:
            logger.debug("begin(%04X, %02X) ignored while fetching", address, byte)
            return False

        self._decode.reset(address, byte)
        return self._next_state()

    # @intent:responsibility 命令の次のバイトを追加し、デコードを進めます。
    # @intent:post-condition バッファが満杯で命令が完成しない場合は "<decode overflow>" で完了します。
    def continue_(self, byte: int) -> bool:
        _check_byte(byte)

        if self._decode.state is not DecodeState.FETCHING:
            logger.debug("continue_(%02X) ignored in state %s", byte, self._decode.state.value)
            return False

        if self._decode.is_full:
            logger.warning(
                "Decode overflow at %04X: %s",
                self._decode.insn_address, self._decode.fetched.hex(" ").upper(),
            )
            self._decode.finish(DECODE_OVERFLOW)
            return False

        self._decode.append(byte)
        return self._next_state()

    # @intent:responsibility 完了した命令文字列を返します。未完了の場合は空文字列です。
    def complete(self) -> str:
        if self._decode.state is DecodeState.COMPLETE:
            return self._decode.insn_string
        return ""
