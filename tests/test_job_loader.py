from __future__ import annotations

from pathlib import Path

import pytest

from hpglctl.core.encoder import encode
from hpglctl.core.errors import JobValidationError
from hpglctl.core.job_loader import build_program, load_job
from hpglctl.core.model import (
    Coordinate,
    CoordinateChain,
    DefaultSettings,
    InitializePlotter,
    PenDown,
    PenUp,
    PlotAbsolute,
    SelectPen,
    VelocitySelect,
)


def test_load_job_builds_program_in_order(tmp_path: Path) -> None:
    job = tmp_path / "square.yaml"
    job.write_text(
        """
commands:
  - initialize
  - select_pen: 1
  - velocity: 10.5
  - plot_absolute: [[1000, 1000]]
  - pen_down
  - plot_absolute: [[2000, 1000], [2000, 2000]]
  - pen_up
  - default_settings
""",
        encoding="utf-8",
    )

    program = load_job(job)
    assert list(program) == [
        InitializePlotter(),
        SelectPen(pen=1),
        VelocitySelect(velocity=10.5),
        PlotAbsolute(Coordinate(1000, 1000)),
        PenDown(),
        PlotAbsolute(CoordinateChain.from_pairs([(2000, 1000), (2000, 2000)])),
        PenUp(),
        DefaultSettings(),
    ]
    assert encode(program) == b"IN;IN1;VS10.5;PA1000,1000;PD;PA2000,1000,2000,2000;PU;DF;"


def test_unknown_command_rejected() -> None:
    with pytest.raises(JobValidationError):
        build_program({"commands": ["pen_sideways"]})


def test_mapping_with_two_commands_rejected() -> None:
    with pytest.raises(JobValidationError):
        build_program({"commands": [{"select_pen": 1, "velocity": 3}]})


def test_malformed_point_rejected() -> None:
    with pytest.raises(JobValidationError) as exc:
        build_program({"commands": [{"plot_absolute": [[1, 2, 3]]}]})
    assert "commands.0" in str(exc.value)


def test_missing_file_raises_job_error(tmp_path: Path) -> None:
    with pytest.raises(JobValidationError):
        load_job(tmp_path / "missing.yaml")


def test_non_mapping_root_rejected(tmp_path: Path) -> None:
    job = tmp_path / "list.yaml"
    job.write_text("- initialize\n", encoding="utf-8")
    with pytest.raises(JobValidationError):
        load_job(job)


def test_nan_velocity_rejected(tmp_path: Path) -> None:
    job = tmp_path / "nan.yaml"
    job.write_text(
        "commands:\n  - initialize\n  - pen_down\n  - velocity: .nan\n  - pen_up\n",
        encoding="utf-8",
    )
    with pytest.raises(JobValidationError) as exc:
        load_job(job)
    assert "commands.2.velocity" in str(exc.value)


@pytest.mark.parametrize("literal", [".inf", "-.inf", "1.0e+400"])
def test_infinite_coordinate_rejected(tmp_path: Path, literal: str) -> None:
    job = tmp_path / "inf.yaml"
    job.write_text(
        f"commands:\n  - plot_absolute: [[0, 0], [{literal}, 0]]\n",
        encoding="utf-8",
    )
    with pytest.raises(JobValidationError) as exc:
        load_job(job)
    assert "commands.0.plot_absolute.1.0" in str(exc.value)


def test_large_integer_coordinates_are_accepted() -> None:
    program = build_program({"commands": [{"plot_absolute": [[10**30, 0]]}]})
    assert encode(program) == b"PA1000000000000000000000000000000,0;"
