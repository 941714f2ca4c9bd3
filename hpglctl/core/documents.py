"""YAML reading and JSON Schema validation shared by profile and job loaders."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from hpglctl.core.errors import HpglctlError


class DuplicateKeyError(yaml.YAMLError):
    pass


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[Any, Any]:
    mapping: dict[Any, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise DuplicateKeyError(f"Duplicate key '{key}' at {key_node.start_mark}")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@lru_cache(maxsize=None)
def load_schema_validator(name: str) -> Any:
    schema_text = resources.files("hpglctl.schemas").joinpath(name).read_text(encoding="utf-8")
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def read_yaml(
    path: Path | Traversable,
    *,
    load_error: type[HpglctlError],
    validation_error: type[HpglctlError],
) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise load_error(f"Could not read {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise validation_error(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise validation_error(f"{path} must contain a mapping at root")
    return loaded


def validate_document(
    doc: dict[str, Any],
    schema_name: str,
    source: Path | Traversable | str,
    *,
    error: type[HpglctlError],
) -> None:
    validator = load_schema_validator(schema_name)
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.absolute_path)
        where = f" ({path})" if path else ""
        raise error(f"Schema validation failed for {source}{where}: {exc.message}") from exc
