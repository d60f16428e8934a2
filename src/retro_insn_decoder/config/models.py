from dataclasses import dataclass, field
from typing import List, Optional

from retro_insn_decoder.common.types import Architecture
from retro_insn_decoder.transport.trace import BusSample

@dataclass
class ProgramImage:
    origin: int = 0x0000
    data: bytes = b""

@dataclass
class TraceConfig:
    architecture: Architecture
    samples: List[BusSample] = field(default_factory=list)
    program: Optional[ProgramImage] = None
