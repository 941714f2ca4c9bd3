"""Serial transport implementation using pyserial."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import serial

from hpglctl.core.errors import (
    TransportConnectError,
    TransportSendError,
    TransportTimeoutError,
)
from hpglctl.core.model import SerialSettings

LOGGER = logging.getLogger(__name__)

_PARITIES = {
    "none": serial.PARITY_NONE,
    "odd": serial.PARITY_ODD,
    "even": serial.PARITY_EVEN,
    "mark": serial.PARITY_MARK,
    "space": serial.PARITY_SPACE,
}
_STOPBITS = {
    1: serial.STOPBITS_ONE,
    1.5: serial.STOPBITS_ONE_POINT_FIVE,
    2: serial.STOPBITS_TWO,
}


class SerialSink:
    """Byte sink over an open serial port, translating pyserial failures."""

    def __init__(self, port: serial.Serial) -> None:
        self._port = port
        self.bytes_written = 0

    def write(self, data: bytes) -> int:
        try:
            written = self._port.write(data)
        except serial.SerialTimeoutException as exc:
            raise TransportTimeoutError(
                f"Write to {self._port.port} timed out after {self.bytes_written} bytes"
            ) from exc
        except (serial.SerialException, OSError) as exc:
            raise TransportSendError(f"Serial write to {self._port.port} failed: {exc}") from exc
        self.bytes_written += len(data)
        return written if written is not None else len(data)


def _port_kwargs(settings: SerialSettings) -> dict[str, object]:
    try:
        parity = _PARITIES[settings.parity]
        stopbits = _STOPBITS[settings.stopbits]
    except KeyError as exc:
        raise TransportConnectError(f"Unsupported serial setting: {exc.args[0]!r}") from exc
    if settings.flow_control not in {"none", "software", "hardware"}:
        raise TransportConnectError(f"Unsupported flow control '{settings.flow_control}'")
    return {
        "baudrate": settings.baudrate,
        "bytesize": settings.bytesize,
        "parity": parity,
        "stopbits": stopbits,
        "xonxoff": settings.flow_control == "software",
        "rtscts": settings.flow_control == "hardware",
        "timeout": settings.timeout_s,
        "write_timeout": settings.write_timeout_s,
    }


class SerialTransport:
    @contextmanager
    def open(self, port: str, settings: SerialSettings) -> Iterator[SerialSink]:
        kwargs = _port_kwargs(settings)
        try:
            connection = serial.Serial(port, **kwargs)
        except (serial.SerialException, ValueError, OSError) as exc:
            raise TransportConnectError(f"Could not open serial port {port}: {exc}") from exc

        LOGGER.debug("Opened %s at %s baud", port, settings.baudrate)
        try:
            sink = SerialSink(connection)
            yield sink
            try:
                connection.flush()
            except serial.SerialTimeoutException as exc:
                raise TransportTimeoutError(f"Flushing {port} timed out") from exc
            except (serial.SerialException, OSError) as exc:
                raise TransportSendError(f"Flushing {port} failed: {exc}") from exc
        finally:
            connection.close()
            LOGGER.debug("Closed %s", port)
