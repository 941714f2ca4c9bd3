"""Service layer used by CLI and the public API."""

from __future__ import annotations

import io
import logging

from hpglctl.core.encoder import write_instructions, write_program
from hpglctl.core.errors import ProfileSelectionError
from hpglctl.core.model import HpglProgram, PlotterProfile, SendResult
from hpglctl.core.profile_loader import load_profiles
from hpglctl.transports.base import ByteSink, Transport
from hpglctl.transports.serial_port import SerialTransport

DEFAULT_PROFILE_ID = "hp7470a"
LOGGER = logging.getLogger(__name__)


class _CountingSink:
    def __init__(self, inner: ByteSink) -> None:
        self._inner = inner
        self.frames = 0
        self.bytes = 0

    def write(self, data: bytes) -> int | None:
        written = self._inner.write(data)
        self.frames += 1
        self.bytes += len(data)
        return written


class PlotterService:
    def __init__(self, *, transport: Transport | None = None) -> None:
        loaded = load_profiles()
        self.profiles = loaded.profiles
        self.load_warnings = loaded.warnings
        self.transport = transport or SerialTransport()

    def list_profiles(self) -> list[PlotterProfile]:
        return sorted(self.profiles.values(), key=lambda p: p.id)

    def resolve_profile(self, profile_id: str | None = None) -> PlotterProfile:
        wanted = profile_id or DEFAULT_PROFILE_ID
        profile = self.profiles.get(wanted)
        if profile is None:
            available = ", ".join(sorted(self.profiles)) or "<none>"
            raise ProfileSelectionError(f"Unknown profile '{wanted}'. Available: {available}")
        return profile

    def write_job(
        self,
        program: HpglProgram,
        sink: ByteSink,
        profile_id: str | None = None,
        include_setup: bool = True,
    ) -> PlotterProfile:
        """Write the profile's setup frames (optionally) followed by the program."""
        profile = self.resolve_profile(profile_id)
        if include_setup:
            write_instructions(profile.setup_instructions(), sink)
        write_program(program, sink)
        return profile

    def render(
        self,
        program: HpglProgram,
        profile_id: str | None = None,
        include_setup: bool = True,
    ) -> bytes:
        buffer = io.BytesIO()
        self.write_job(program, buffer, profile_id=profile_id, include_setup=include_setup)
        return buffer.getvalue()

    def send_program(
        self,
        program: HpglProgram,
        port: str,
        profile_id: str | None = None,
        include_setup: bool = True,
    ) -> SendResult:
        profile = self.resolve_profile(profile_id)
        LOGGER.info("Sending %d commands to %s using profile '%s'", len(program), port, profile.id)
        with self.transport.open(port, profile.serial) as sink:
            counter = _CountingSink(sink)
            self.write_job(program, counter, profile_id=profile.id, include_setup=include_setup)

        LOGGER.debug("Sent %d frames, %d bytes to %s", counter.frames, counter.bytes, port)
        return SendResult(
            profile=profile,
            port=port,
            frames_sent=counter.frames,
            bytes_sent=counter.bytes,
        )
