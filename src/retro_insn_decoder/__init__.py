"""
8ビットマイクロプロセッサのバスキャプチャを逆アセンブル表示するための命令デコーダ。
"""
from retro_insn_decoder.common.types import Architecture, DecodeState
from retro_insn_decoder.core.decoder import InstructionDecoder
from retro_insn_decoder.core.disassembler import disassemble
from retro_insn_decoder.transport.trace import BusSample, ListingRow, replay_trace
