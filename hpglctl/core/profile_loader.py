"""Profile loading and validation for YAML plotter profiles."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

from hpglctl.core.documents import read_yaml, validate_document
from hpglctl.core.errors import ProfileLoadError, ProfileValidationError
from hpglctl.core.model import (
    EnqAck,
    HandshakeMode,
    PlotterConfig,
    PlotterProfile,
    SerialSettings,
    SetExtHandshakeOptions,
    SetHandshakeMode,
    XonXoff,
)

_SCHEMA = "profile.schema.json"
_MODES = {1: HandshakeMode.MODE1, 2: HandshakeMode.MODE2}
LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedProfiles:
    profiles: dict[str, PlotterProfile]
    warnings: tuple[str, ...]


def _profile_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "hpglctl/profiles", xdg_data / "hpglctl/profiles"


def _build_serial(spec: dict[str, Any]) -> SerialSettings:
    defaults = SerialSettings()
    write_timeout = spec.get("write_timeout_s", defaults.write_timeout_s)
    return SerialSettings(
        baudrate=int(spec.get("baudrate", defaults.baudrate)),
        bytesize=int(spec.get("bytesize", defaults.bytesize)),
        parity=spec.get("parity", defaults.parity),
        stopbits=spec.get("stopbits", defaults.stopbits),
        flow_control=spec.get("flow_control", defaults.flow_control),
        timeout_s=float(spec.get("timeout_s", defaults.timeout_s)),
        write_timeout_s=float(write_timeout) if write_timeout is not None else None,
    )


def _build_plotter_config(names: list[str]) -> PlotterConfig:
    config = PlotterConfig.NONE
    for name in names:
        config |= PlotterConfig[name.upper()]
    return config


def _build_handshake(spec: dict[str, Any]) -> SetHandshakeMode:
    mode = _MODES[spec["mode"]]
    if spec["type"] == "enq_ack":
        config: EnqAck | XonXoff = EnqAck(
            block_size=int(spec["block_size"]),
            enq_char=int(spec["enq_char"]),
            ack_string=bytes(spec.get("ack_string", [])),
        )
    else:
        config = XonXoff(
            xoff_threshold=int(spec["xoff_threshold"]),
            xon_trigger_chars=bytes(spec.get("xon_trigger_chars", [])),
        )
    return SetHandshakeMode(mode, config)


def _build_ext_handshake(spec: dict[str, Any]) -> SetExtHandshakeOptions:
    delay = spec.get("interchar_delay")
    return SetExtHandshakeOptions(
        interchar_delay=int(delay) if delay is not None else None,
        xoff_trigger_chars=bytes(spec.get("xoff_trigger_chars", [])),
    )


def _build_profile(doc: dict[str, Any], source: Path | Traversable) -> PlotterProfile:
    validate_document(doc, _SCHEMA, source, error=ProfileValidationError)

    setup = doc.get("setup", {})
    return PlotterProfile(
        id=doc["id"],
        name=doc["name"],
        serial=_build_serial(doc["serial"]),
        plotter_config=_build_plotter_config(setup.get("plotter_config", [])),
        handshake=_build_handshake(setup["handshake"]) if "handshake" in setup else None,
        ext_handshake=_build_ext_handshake(setup["ext_handshake"])
        if "ext_handshake" in setup
        else None,
    )


def _read_profile(path: Path | Traversable) -> PlotterProfile:
    doc = read_yaml(path, load_error=ProfileLoadError, validation_error=ProfileValidationError)
    return _build_profile(doc, path)


def _iter_packaged_profile_paths() -> list[Traversable]:
    profile_root = resources.files("hpglctl.profiles")
    return [item for item in profile_root.iterdir() if item.name.endswith((".yml", ".yaml"))]


def _iter_user_profile_paths() -> list[Path]:
    paths: list[Path] = []
    for directory in _profile_dirs():
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def load_profiles() -> LoadedProfiles:
    profiles: dict[str, PlotterProfile] = {}
    warnings: list[str] = []

    for path in sorted(_iter_packaged_profile_paths(), key=lambda p: p.name):
        profile = _read_profile(path)
        profiles[profile.id] = profile

    for path in _iter_user_profile_paths():
        profile = _read_profile(path)
        if profile.id in profiles:
            warning = f"User profile '{profile.id}' overrides packaged profile"
            LOGGER.warning(warning)
            warnings.append(warning)
        profiles[profile.id] = profile

    return LoadedProfiles(profiles=profiles, warnings=tuple(warnings))
