"""Load HP-GL programs from YAML job files.

A job file lists commands in plotting order::

    commands:
      - initialize
      - select_pen: 1
      - velocity: 10
      - plot_absolute: [[1000, 1000]]
      - pen_down
      - plot_absolute: [[2000, 1000], [2000, 2000]]
      - pen_up

Bare names take no parameters; the others are one-key mappings. Numbers must
be finite: YAML `.nan`, `.inf` and overflowing literals such as `1.0e+400` are
rejected with the path of the offending value.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

from hpglctl.core.documents import read_yaml, validate_document
from hpglctl.core.errors import JobValidationError
from hpglctl.core.model import (
    CoordinateChain,
    DefaultSettings,
    HpglCommand,
    HpglProgram,
    InitializePlotter,
    PenDown,
    PenUp,
    PlotAbsolute,
    SelectPen,
    VelocitySelect,
)

_SCHEMA = "job.schema.json"

_BARE_COMMANDS: dict[str, HpglCommand] = {
    "default_settings": DefaultSettings(),
    "initialize": InitializePlotter(),
    "pen_up": PenUp(),
    "pen_down": PenDown(),
}


def _finite(value: float, source: Path | str, where: str) -> float:
    if isinstance(value, float) and not math.isfinite(value):
        raise JobValidationError(f"Non-finite number in {source} ({where}): {value!r}")
    return value


def _build_command(item: str | dict[str, Any], source: Path | str, where: str) -> HpglCommand:
    if isinstance(item, str):
        return _BARE_COMMANDS[item]

    ((name, value),) = item.items()
    if name == "select_pen":
        return SelectPen(pen=int(value))
    if name == "velocity":
        return VelocitySelect(velocity=_finite(value, source, f"{where}.velocity"))
    return PlotAbsolute(
        CoordinateChain.from_pairs(
            (
                _finite(x, source, f"{where}.plot_absolute.{index}.0"),
                _finite(y, source, f"{where}.plot_absolute.{index}.1"),
            )
            for index, (x, y) in enumerate(value)
        )
    )


def build_program(doc: dict[str, Any], source: Path | str = "<job>") -> HpglProgram:
    validate_document(doc, _SCHEMA, source, error=JobValidationError)
    return HpglProgram(
        tuple(
            _build_command(item, source, f"commands.{index}")
            for index, item in enumerate(doc["commands"])
        )
    )



def load_job(path: Path) -> HpglProgram:
    doc = read_yaml(path, load_error=JobValidationError, validation_error=JobValidationError)
    return build_program(doc, path)
