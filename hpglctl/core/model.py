"""Core data models used across encoder, loaders, service, and CLI."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import ClassVar


def _as_bytes(value: bytes | Iterable[int]) -> bytes:
    if isinstance(value, int):
        raise TypeError(f"expected a byte string or an iterable of ints, got int {value!r}")
    return bytes(value)


@dataclass(frozen=True)
class Coordinate:
    """Raw coordinate, absolute or relative, in plotter or user units.

    In plotter units the addressable area is x in [0, MAX_X] for A4 paper
    ([0, MAX_X_US] for US letter) and y in [0, MAX_Y]. Nothing checks this.
    """

    MAX_X: ClassVar[int] = 10900
    MAX_X_US: ClassVar[int] = 10300
    MAX_Y: ClassVar[int] = 7650

    x: float
    y: float


@dataclass(frozen=True)
class CoordinateChain:
    points: tuple[Coordinate, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))

    @classmethod
    def of(cls, *points: Coordinate) -> CoordinateChain:
        return cls(points)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[float, float]]) -> CoordinateChain:
        return cls(tuple(Coordinate(x, y) for x, y in pairs))

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)


class PlotterConfig(enum.Flag):
    """Option bits carried by the ``ESC.@`` plotter configuration frame."""

    NONE = 0
    HW_HANDSHAKE = 1 << 0
    # monitor mode 1 if set, monitor mode 0 if cleared
    MON_MODE_CTL = 1 << 2
    MON_MODE_ENA = 1 << 3


class HandshakeMode(enum.Enum):
    MODE1 = "H"
    MODE2 = "I"

    @property
    def letter(self) -> str:
        return self.value


@dataclass(frozen=True)
class EnqAck:
    """ENQ/ACK block handshake parameters."""

    block_size: int
    enq_char: int
    ack_string: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "ack_string", _as_bytes(self.ack_string))


@dataclass(frozen=True)
class XonXoff:
    """XON/XOFF threshold handshake parameters."""

    xoff_threshold: int
    xon_trigger_chars: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "xon_trigger_chars", _as_bytes(self.xon_trigger_chars))


HandshakeConfig = EnqAck | XonXoff


@dataclass(frozen=True)
class SetPlotterConfig:
    config: PlotterConfig = PlotterConfig.NONE


@dataclass(frozen=True)
class SetHandshakeMode:
    mode: HandshakeMode
    handshake: HandshakeConfig


@dataclass(frozen=True)
class SetExtHandshakeOptions:
    interchar_delay: int | None = None
    xoff_trigger_chars: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "xoff_trigger_chars", _as_bytes(self.xoff_trigger_chars))


DeviceControlInstruction = SetPlotterConfig | SetHandshakeMode | SetExtHandshakeOptions


@dataclass(frozen=True)
class DefaultSettings:
    pass


@dataclass(frozen=True)
class InitializePlotter:
    pass


@dataclass(frozen=True)
class SelectPen:
    pen: int


@dataclass(frozen=True)
class VelocitySelect:
    velocity: float


@dataclass(frozen=True)
class PenUp:
    """Raises the pen. Deliberately carries no movement."""


@dataclass(frozen=True)
class PenDown:
    """Lowers the pen. Deliberately carries no movement."""


@dataclass(frozen=True)
class PlotAbsolute:
    chain: CoordinateChain

    def __post_init__(self) -> None:
        chain = self.chain
        if isinstance(chain, Coordinate):
            chain = CoordinateChain((chain,))
        elif not isinstance(chain, CoordinateChain):
            chain = CoordinateChain(tuple(chain))
        object.__setattr__(self, "chain", chain)


HpglCommand = (
    DefaultSettings
    | InitializePlotter
    | SelectPen
    | VelocitySelect
    | PenUp
    | PenDown
    | PlotAbsolute
)


@dataclass(frozen=True)
class HpglProgram:
    """Ordered, immutable sequence of HP-GL commands."""

    commands: tuple[HpglCommand, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "commands", tuple(self.commands))

    def __iter__(self) -> Iterator[HpglCommand]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    def appended(self, *commands: HpglCommand) -> HpglProgram:
        return HpglProgram(self.commands + commands)

    def __add__(self, other: object) -> HpglProgram:
        if isinstance(other, HpglProgram):
            return HpglProgram(self.commands + other.commands)
        if isinstance(other, HpglCommand):
            return self.appended(other)
        return NotImplemented


@dataclass(frozen=True)
class SerialSettings:
    baudrate: int = 9600
    bytesize: int = 8
    parity: str = "none"
    stopbits: float = 1
    flow_control: str = "software"
    timeout_s: float = 1.0
    write_timeout_s: float | None = None


@dataclass(frozen=True)
class PlotterProfile:
    id: str
    name: str
    serial: SerialSettings
    plotter_config: PlotterConfig = PlotterConfig.NONE
    handshake: SetHandshakeMode | None = None
    ext_handshake: SetExtHandshakeOptions | None = None

    def setup_instructions(self) -> tuple[DeviceControlInstruction, ...]:
        """Device-control frames to send before any HP-GL, in wire order."""
        instructions: list[DeviceControlInstruction] = [SetPlotterConfig(self.plotter_config)]
        if self.handshake is not None:
            instructions.append(self.handshake)
        if self.ext_handshake is not None:
            instructions.append(self.ext_handshake)
        return tuple(instructions)


@dataclass(frozen=True)
class SendResult:
    profile: PlotterProfile
    port: str
    frames_sent: int
    bytes_sent: int
