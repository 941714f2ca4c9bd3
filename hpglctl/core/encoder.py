"""Wire encoding for HP-GL commands and HP 7470A device-control frames.

Every writer renders one frame or command into ``bytes`` and hands it to the
sink, repeating ``write`` while the sink reports a short count. Sink errors are
not caught: a failing write stops the encoding and reaches the caller
unchanged.

Device-control frames::

    ESC.@;<config>:
    ESC.H<params>:          handshake mode 1
    ESC.I<params>:          handshake mode 2
    ESC.N[<delay>];<chars>:  extended handshake options

HP-GL commands are a two-letter mnemonic, parameters and ``;``.
"""

from __future__ import annotations

import io
import math
import numbers
from collections.abc import Iterable
from decimal import Decimal

from hpglctl.core.model import (
    Coordinate,
    CoordinateChain,
    DefaultSettings,
    DeviceControlInstruction,
    EnqAck,
    HpglCommand,
    HpglProgram,
    InitializePlotter,
    PenDown,
    PenUp,
    PlotAbsolute,
    PlotterConfig,
    SelectPen,
    SetExtHandshakeOptions,
    SetHandshakeMode,
    SetPlotterConfig,
    VelocitySelect,
    XonXoff,
)
from hpglctl.transports.base import ByteSink

ESC = b"\x1b"
DEVICE_CONTROL_PREFIX = ESC + b"."
FRAME_TERMINATOR = b":"
COMMAND_TERMINATOR = b";"


def format_number(value: float) -> str:
    """Render a number in its minimal decimal form.

    Integral values drop the fractional part (``420.0`` -> ``420``), other
    values use the shortest round-trip digits in positional notation, never
    an exponent.
    """
    if isinstance(value, numbers.Integral):
        return str(int(value))
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Cannot encode non-finite number {value!r}")
    if number.is_integer():
        return str(int(number))
    return format(Decimal(repr(number)), "f")


def encode_plotter_config(config: PlotterConfig) -> str:
    """Decimal sum of the bit weights set in ``config``; ``"0"`` when empty."""
    return str(config.value)


def _join_decimal(chars: bytes) -> str:
    return ";".join(str(char) for char in chars)


def _coordinate_chain_text(chain: CoordinateChain) -> str:
    return ",".join(f"{format_number(point.x)},{format_number(point.y)}" for point in chain)


def _handshake_params(config: EnqAck | XonXoff) -> str:
    if isinstance(config, EnqAck):
        return f"{config.block_size};{config.enq_char};{_join_decimal(config.ack_string)}"
    if isinstance(config, XonXoff):
        # second positional parameter stays empty for XON/XOFF
        return f"{config.xoff_threshold};;{_join_decimal(config.xon_trigger_chars)}"
    raise TypeError(f"Unsupported handshake configuration {config!r}")


def _instruction_bytes(instruction: DeviceControlInstruction) -> bytes:
    if isinstance(instruction, SetPlotterConfig):
        body = f"@;{encode_plotter_config(instruction.config)}"
    elif isinstance(instruction, SetHandshakeMode):
        body = instruction.mode.letter + _handshake_params(instruction.handshake)
    elif isinstance(instruction, SetExtHandshakeOptions):
        delay = "" if instruction.interchar_delay is None else str(instruction.interchar_delay)
        body = f"N{delay};{_join_decimal(instruction.xoff_trigger_chars)}"
    else:
        raise TypeError(f"Not a device-control instruction: {instruction!r}")
    return DEVICE_CONTROL_PREFIX + body.encode("ascii") + FRAME_TERMINATOR


def _command_bytes(command: HpglCommand) -> bytes:
    if isinstance(command, DefaultSettings):
        text = "DF"
    elif isinstance(command, InitializePlotter):
        text = "IN"
    elif isinstance(command, SelectPen):
        # shares the IN mnemonic on the wire
        text = f"IN{format_number(command.pen)}"
    elif isinstance(command, VelocitySelect):
        text = f"VS{format_number(command.velocity)}"
    elif isinstance(command, PenUp):
        text = "PU"
    elif isinstance(command, PenDown):
        text = "PD"
    elif isinstance(command, PlotAbsolute):
        text = f"PA{_coordinate_chain_text(command.chain)}"
    else:
        raise TypeError(f"Not an HP-GL command: {command!r}")
    return text.encode("ascii") + COMMAND_TERMINATOR


def _write_all(sink: ByteSink, data: bytes) -> None:
    while data:
        written = sink.write(data)
        if written is None:
            return
        if written <= 0:
            raise OSError(f"Sink accepted no bytes with {len(data)} bytes pending")
        data = data[written:]


def write_coordinate_chain(chain: CoordinateChain, sink: ByteSink) -> None:
    _write_all(sink, _coordinate_chain_text(chain).encode("ascii"))


def write_instruction(instruction: DeviceControlInstruction, sink: ByteSink) -> None:
    _write_all(sink, _instruction_bytes(instruction))


def write_instructions(instructions: Iterable[DeviceControlInstruction], sink: ByteSink) -> None:
    for instruction in instructions:
        write_instruction(instruction, sink)


def write_command(command: HpglCommand, sink: ByteSink) -> None:
    _write_all(sink, _command_bytes(command))


def write_program(program: HpglProgram | Iterable[HpglCommand], sink: ByteSink) -> None:
    """Write every command in order. No bytes are added before, between or after."""
    for command in program:
        write_command(command, sink)


def encode(
    item: HpglCommand | HpglProgram | DeviceControlInstruction | CoordinateChain | Coordinate,
) -> bytes:
    """Render a single item to bytes through an in-memory sink."""
    buffer = io.BytesIO()
    if isinstance(item, HpglProgram):
        write_program(item, buffer)
    elif isinstance(item, HpglCommand):
        write_command(item, buffer)
    elif isinstance(item, DeviceControlInstruction):
        write_instruction(item, buffer)
    elif isinstance(item, CoordinateChain):
        write_coordinate_chain(item, buffer)
    elif isinstance(item, Coordinate):
        write_coordinate_chain(CoordinateChain((item,)), buffer)
    else:
        raise TypeError(f"Cannot encode {type(item).__name__}")
    return buffer.getvalue()
