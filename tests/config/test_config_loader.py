# tests/config/test_config_loader.py
"""
retro_insn_decoder.config.loaderモジュールの単体テスト。
"""
import pytest

from retro_insn_decoder.common.types import Architecture
from retro_insn_decoder.config.loader import ConfigLoader
from retro_insn_decoder.core.disassembler import disassemble
from retro_insn_decoder.transport.trace import BusSample, replay_trace

FIXTURE = """
architecture: 6809
samples:
  - {address: "0x1000", data: "0x86", fetch: true}
  - {address: "0x1001", data: 90}
program:
  origin: "0x4000"
  bytes: [0x12, "0x39"]
"""

# @intent:test_suite YAML のトレースフィクスチャ読み込みを検証します。

class TestConfigLoader:
    @pytest.fixture
    def loader(self):
        return ConfigLoader()

    # @intent:test_case 文字列の16進表記を含むフィクスチャが正しく解釈されることを検証します。
    def test_load_from_string(self, loader):
        config = loader.load_from_string(FIXTURE)
        assert config.architecture is Architecture.MC6809
        assert config.samples == [
            BusSample(0x1000, 0x86, True),
            BusSample(0x1001, 90, False),
        ]
        assert config.program.origin == 0x4000
        assert config.program.data == bytes([0x12, 0x39])

        rows = replay_trace(config.samples, config.architecture)
        assert rows[0].text == "LDA #$5A"

    def test_load_from_file(self, loader, tmp_path):
        path = tmp_path / "trace.yaml"
        path.write_text("architecture: Z80\nprogram:\n  origin: 0x100\n  bytes: \"18 00\"\n")
        config = loader.load_from_file(str(path))
        assert config.architecture is Architecture.Z80
        assert config.samples == []
        rows = disassemble(config.program.data, config.program.origin, config.architecture)
        assert rows == [(0x0100, "18 00", "JR 2 <0102>")]

    def test_program_is_optional(self, loader):
        config = loader.load_from_string("architecture: 65C02\n")
        assert config.architecture is Architecture.MOS65C02
        assert config.program is None

    # @intent:test_case 不正なフィクスチャで ValueError が発生することを検証します。
    @pytest.mark.parametrize("text", [
        "architecture: 8086\n",
        "samples: []\n",
        "- 1\n- 2\n",
        "architecture: 6502\nsamples:\n  - {address: 0x10000, data: 0}\n",
        "architecture: 6502\nsamples:\n  - {address: 0, data: 256}\n",
        "architecture: 6502\nsamples:\n  - {address: 0, data: [1]}\n",
        "architecture: 6502\nprogram:\n  bytes: \"GG\"\n",
    ])
    def test_invalid(self, loader, text):
        with pytest.raises(ValueError):
            loader.load_from_string(text)
