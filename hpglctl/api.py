"""Stable public API for building plotting tools on top of hpglctl.

This module is the supported integration surface for third-party callers.
Geometry generators build an `HpglProgram` from the model types exported here
and either render it to bytes or send it through a `Client`.
"""

from __future__ import annotations

from pathlib import Path

from hpglctl.core.encoder import (
    encode,
    encode_plotter_config,
    format_number,
    write_command,
    write_coordinate_chain,
    write_instruction,
    write_program,
)
from hpglctl.core.errors import (
    HpglctlError,
    JobValidationError,
    ProfileLoadError,
    ProfileSelectionError,
    ProfileValidationError,
    TransportConnectError,
    TransportError,
    TransportSendError,
    TransportTimeoutError,
)
from hpglctl.core.job_loader import load_job
from hpglctl.core.model import (
    Coordinate,
    CoordinateChain,
    DefaultSettings,
    DeviceControlInstruction,
    EnqAck,
    HandshakeConfig,
    HandshakeMode,
    HpglCommand,
    HpglProgram,
    InitializePlotter,
    PenDown,
    PenUp,
    PlotAbsolute,
    PlotterConfig,
    PlotterProfile,
    SelectPen,
    SendResult,
    SerialSettings,
    SetExtHandshakeOptions,
    SetHandshakeMode,
    SetPlotterConfig,
    VelocitySelect,
    XonXoff,
)
from hpglctl.core.service import PlotterService
from hpglctl.transports.base import ByteSink, Transport
from hpglctl.transports.serial_port import SerialTransport

__all__ = [
    "HpglctlError",
    "JobValidationError",
    "ProfileLoadError",
    "ProfileSelectionError",
    "ProfileValidationError",
    "TransportError",
    "TransportConnectError",
    "TransportSendError",
    "TransportTimeoutError",
    "Coordinate",
    "CoordinateChain",
    "DefaultSettings",
    "DeviceControlInstruction",
    "EnqAck",
    "HandshakeConfig",
    "HandshakeMode",
    "HpglCommand",
    "HpglProgram",
    "InitializePlotter",
    "PenDown",
    "PenUp",
    "PlotAbsolute",
    "PlotterConfig",
    "PlotterProfile",
    "SelectPen",
    "SendResult",
    "SerialSettings",
    "SetExtHandshakeOptions",
    "SetHandshakeMode",
    "SetPlotterConfig",
    "VelocitySelect",
    "XonXoff",
    "ByteSink",
    "Transport",
    "SerialTransport",
    "encode",
    "encode_plotter_config",
    "format_number",
    "write_command",
    "write_coordinate_chain",
    "write_instruction",
    "write_program",
    "load_job",
    "Client",
]


class Client:
    """Public client for rendering and sending plotter jobs.

    A `Client` wraps profile loading, device-control setup and serial
    delivery behind a stable API intended for scripts and generators.
    """

    def __init__(self, *, transport: Transport | None = None) -> None:
        self._service = PlotterService(transport=transport)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_profiles(self) -> list[PlotterProfile]:
        return self._service.list_profiles()

    def get_profile(self, profile_id: str | None = None) -> PlotterProfile:
        return self._service.resolve_profile(profile_id)

    def render(
        self,
        program: HpglProgram,
        *,
        profile_id: str | None = None,
        include_setup: bool = True,
    ) -> bytes:
        return self._service.render(program, profile_id=profile_id, include_setup=include_setup)

    def render_job_file(
        self,
        path: Path,
        *,
        profile_id: str | None = None,
        include_setup: bool = True,
    ) -> bytes:
        return self.render(load_job(path), profile_id=profile_id, include_setup=include_setup)

    def send(
        self,
        program: HpglProgram,
        port: str,
        *,
        profile_id: str | None = None,
        include_setup: bool = True,
    ) -> SendResult:
        return self._service.send_program(
            program,
            port,
            profile_id=profile_id,
            include_setup=include_setup,
        )
