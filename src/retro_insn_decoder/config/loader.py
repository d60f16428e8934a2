import yaml
from typing import Dict, Any, List, Optional

from retro_insn_decoder.common.types import Architecture
from retro_insn_decoder.transport.trace import BusSample
from .models import TraceConfig, ProgramImage

class ConfigLoader:
    def load_from_file(self, path: str) -> TraceConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data)

    def load_from_string(self, text: str) -> TraceConfig:
        return self._parse_config(yaml.safe_load(text))

    def _parse_config(self, data: Dict[str, Any]) -> TraceConfig:
        if not isinstance(data, dict):
            raise ValueError("Trace fixture must be a mapping")
        if "architecture" not in data:
            raise ValueError("Trace fixture requires 'architecture'")

        arch = Architecture.from_name(data["architecture"])

        samples = []
        for sample_data in data.get("samples") or []:
            samples.append(BusSample(
                address=self._parse_address(sample_data.get("address")),
                data=self._parse_byte(sample_data.get("data")),
                fetch=bool(sample_data.get("fetch", False))
            ))

        return TraceConfig(
            architecture=arch,
            samples=samples,
            program=self._parse_program(data.get("program"))
        )

    def _parse_program(self, program_data: Optional[Dict[str, Any]]) -> Optional[ProgramImage]:
        if program_data is None:
            return None
        origin = self._parse_address(program_data.get("origin", 0))
        raw = program_data.get("bytes", [])
        # "A9 01 8D" のような空白区切りの16進文字列も受け付ける
        if isinstance(raw, str):
            values: List[int] = [int(token, 16) for token in raw.split()]
        else:
            values = [self._parse_byte(value) for value in raw]
        return ProgramImage(origin=origin, data=bytes(values))

    def _parse_address(self, value: Any) -> int:
        address = self._parse_int(value)
        if not 0 <= address <= 0xFFFF:
            raise ValueError(f"Address out of range: {value}")
        return address

    def _parse_byte(self, value: Any) -> int:
        byte = self._parse_int(value)
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"Byte value out of range: {value}")
        return byte

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
