from __future__ import annotations

from contextlib import contextmanager

import pytest

from hpglctl.core.errors import ProfileSelectionError, TransportSendError
from hpglctl.core.model import (
    Coordinate,
    HpglProgram,
    InitializePlotter,
    PenDown,
    PenUp,
    PlotAbsolute,
    SelectPen,
    SerialSettings,
)
from hpglctl.core.service import PlotterService

SETUP = b"\x1b.@;0:\x1b.I80;;17:\x1b.N;19:"


class RecordingSink:
    def __init__(self, fail_after: int | None = None) -> None:
        self.chunks: list[bytes] = []
        self.fail_after = fail_after

    def write(self, data: bytes) -> int:
        if self.fail_after is not None and len(self.chunks) >= self.fail_after:
            raise TransportSendError("Serial write to /dev/ttyUSB0 failed: device disconnected")
        self.chunks.append(data)
        return len(data)


class FakeTransport:
    def __init__(self, fail_after: int | None = None) -> None:
        self.opened: list[tuple[str, SerialSettings]] = []
        self.closed = 0
        self.sink = RecordingSink(fail_after)

    @contextmanager
    def open(self, port: str, settings: SerialSettings):
        self.opened.append((port, settings))
        try:
            yield self.sink
        finally:
            self.closed += 1


@pytest.fixture(autouse=True)
def _isolated_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))


def _program() -> HpglProgram:
    return HpglProgram(
        (
            InitializePlotter(),
            SelectPen(pen=1),
            PlotAbsolute(Coordinate(Coordinate.MAX_X / 2, Coordinate.MAX_Y / 2)),
            PenDown(),
            PenUp(),
        )
    )


def test_render_prepends_default_profile_setup() -> None:
    service = PlotterService(transport=FakeTransport())
    data = service.render(_program())
    assert data == SETUP + b"IN;IN1;PA5450,3825;PD;PU;"


def test_render_without_setup_is_program_only() -> None:
    service = PlotterService(transport=FakeTransport())
    assert service.render(_program(), include_setup=False) == b"IN;IN1;PA5450,3825;PD;PU;"


def test_render_with_mode1_profile() -> None:
    service = PlotterService(transport=FakeTransport())
    data = service.render(HpglProgram(), profile_id="hp7470a_mode1")
    assert data == b"\x1b.@;0:\x1b.H80;;17:\x1b.N;19:"


def test_unknown_profile_lists_available() -> None:
    service = PlotterService(transport=FakeTransport())
    with pytest.raises(ProfileSelectionError) as exc:
        service.render(_program(), profile_id="hp7475a")
    assert "Available:" in str(exc.value)
    assert "hp7470a" in str(exc.value)


def test_send_program_streams_frames_in_order() -> None:
    transport = FakeTransport()
    service = PlotterService(transport=transport)

    result = service.send_program(_program(), "/dev/ttyUSB0")

    assert transport.opened[0][0] == "/dev/ttyUSB0"
    assert transport.opened[0][1] == service.profiles["hp7470a"].serial
    assert transport.closed == 1
    assert transport.sink.chunks[:3] == [b"\x1b.@;0:", b"\x1b.I80;;17:", b"\x1b.N;19:"]
    assert b"".join(transport.sink.chunks) == service.render(_program())
    assert result.profile.id == "hp7470a"
    assert result.port == "/dev/ttyUSB0"
    assert result.frames_sent == 8
    assert result.bytes_sent == len(service.render(_program()))


def test_send_failure_propagates_and_stops() -> None:
    transport = FakeTransport(fail_after=4)
    service = PlotterService(transport=transport)

    with pytest.raises(TransportSendError):
        service.send_program(_program(), "/dev/ttyUSB0")

    assert transport.sink.chunks == [b"\x1b.@;0:", b"\x1b.I80;;17:", b"\x1b.N;19:", b"IN;"]
    assert transport.closed == 1


def test_list_profiles_sorted() -> None:
    service = PlotterService(transport=FakeTransport())
    ids = [profile.id for profile in service.list_profiles()]
    assert ids == sorted(ids)
