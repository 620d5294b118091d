"""
firewall-config — layered configuration source reader.

File: src/firewall_config/config/sources.py
Last updated: 2026-10-19

Purpose
- Produce one merged document from built-in defaults, the primary document
  and environment overrides.

What should be included in this file
- Precedence logic: env (``FIREWALL_``) > file > defaults.
- TOML loading via ``tomllib``; YAML loading via PyYAML ``safe_load``.
- ``${path.to.key}`` / ``${ENV_NAME:-default}`` substitution in string values.
- Deterministic environment variable mapping over the closed schema key set.

Functional requirements
- A missing or unparseable primary document is fatal (``SourceUnreadableError``).

Non-functional requirements
- Pure transform apart from the single file read.
"""

from __future__ import annotations

import copy
import os
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, cast

import yaml

from firewall_config.config.errors import SourceUnreadableError
from firewall_config.config.schema import iter_leaf_paths
from firewall_config.constants import (
    DEFAULT_KEYSTORE_PASSWORD,
    DEFAULT_TRUSTSTORE_PASSWORD,
    ENV_PREFIX,
)

DEFAULT_DOCUMENT: Final[dict[str, Any]] = {
    "keyStorePassword": DEFAULT_KEYSTORE_PASSWORD,
    "trustStorePassword": DEFAULT_TRUSTSTORE_PASSWORD,
    "useProxyForCrls": False,
}

_TOML_SUFFIXES: Final[frozenset[str]] = frozenset({".toml", ".conf"})
_YAML_SUFFIXES: Final[frozenset[str]] = frozenset({".yaml", ".yml"})
_REFERENCE_RE: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_.]*)(?::-(.*?))?\}")
_MAX_SUBSTITUTION_DEPTH: Final[int] = 16


def default_document() -> dict[str, Any]:
    """Return a deep copy of the built-in defaults layer."""

    return copy.deepcopy(DEFAULT_DOCUMENT)


def read_layers(
    config_path: str | Path,
    *,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Merge defaults < primary document < environment overrides."""

    env_map = dict(os.environ if environ is None else environ)
    document = load_document(Path(config_path))

    merged = merge_documents(default_document(), document)
    merged = merge_documents(merged, collect_env_overrides(env_map))
    return substitute_references(merged, env_map)


def load_document(path: Path) -> dict[str, Any]:
    """Parse one TOML or YAML document from disk."""

    if not path.is_file():
        raise SourceUnreadableError.single(str(path), f"config file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix in _YAML_SUFFIXES:
            with path.open("r", encoding="utf-8") as handle:
                parsed = yaml.safe_load(handle) or {}
        else:
            with path.open("rb") as handle:
                parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise SourceUnreadableError.single(str(path), f"invalid TOML in {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise SourceUnreadableError.single(str(path), f"invalid YAML in {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise SourceUnreadableError.single(
            str(path), f"config file {path} is not valid UTF-8: {exc}"
        ) from exc
    except OSError as exc:
        raise SourceUnreadableError.single(
            str(path), f"unable to read config file {path}: {exc}"
        ) from exc

    if not isinstance(parsed, dict):
        raise SourceUnreadableError.single(str(path), f"config root must be an object: {path}")
    return parsed


def merge_documents(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deep-merge ``overlay`` onto ``base``; leaves in ``overlay`` win."""

    merged = copy.deepcopy(dict(base))
    _merge_into(merged, overlay)
    return merged


def collect_env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Map ``FIREWALL_*`` variables onto recognized key paths."""

    overrides: dict[str, Any] = {}
    for path, declared in iter_leaf_paths():
        raw = environ.get(env_name_for_path(path))
        if raw is None:
            continue
        value: object = raw.strip()
        if declared.kind == "address_list":
            value = [item.strip() for item in raw.split(",") if item.strip()]
        _set_nested(overrides, path, value)
    return overrides


def env_name_for_path(path: tuple[str, ...]) -> str:
    return ENV_PREFIX + "_".join(part.upper() for part in path)


def substitute_references(
    document: Mapping[str, object], environ: Mapping[str, str]
) -> dict[str, Any]:
    """Resolve ``${...}`` references against the document, then the environment."""

    def _resolve(value: object, depth: int) -> object:
        if isinstance(value, Mapping):
            return {key: _resolve(item, depth) for key, item in value.items()}
        if isinstance(value, list):
            return [_resolve(item, depth) for item in value]
        if isinstance(value, str) and "${" in value:
            return _interpolate(value, depth)
        return value

    def _interpolate(text: str, depth: int) -> str:
        if depth > _MAX_SUBSTITUTION_DEPTH:
            raise SourceUnreadableError.single(text, f"substitution cycle detected in {text!r}")

        def _replace(match: re.Match[str]) -> str:
            name = match.group(1)
            fallback = match.group(2)
            found = _lookup(document, tuple(name.split(".")))
            if found is not None:
                if isinstance(found, (Mapping, list)):
                    raise SourceUnreadableError.single(
                        name, f"substitution ${{{name}}} must reference a scalar value"
                    )
                resolved = _resolve(found, depth + 1)
                return _scalar_text(resolved)
            if name in environ:
                return environ[name]
            if fallback is not None:
                return fallback
            raise SourceUnreadableError.single(
                name,
                f"unresolved substitution ${{{name}}} (not a config key or environment variable)",
            )

        return _REFERENCE_RE.sub(_replace, text)

    return cast(dict[str, Any], _resolve(document, 0))


def _scalar_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _lookup(payload: Mapping[str, object], path: tuple[str, ...]) -> object | None:
    cursor: object = payload
    for part in path:
        if not isinstance(cursor, Mapping) or part not in cursor:
            return None
        cursor = cursor[part]
    return cursor


def _merge_into(target: dict[str, Any], overlay: Mapping[str, object]) -> None:
    for key in overlay:
        value = overlay[key]
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            _merge_into(existing, value)
        else:
            target[key] = copy.deepcopy(value)


def _set_nested(target: dict[str, Any], path: tuple[str, ...], value: object) -> None:
    cursor = target
    for part in path[:-1]:
        next_node = cursor.get(part)
        if not isinstance(next_node, dict):
            next_node = {}
            cursor[part] = next_node
        cursor = next_node
    cursor[path[-1]] = value


__all__ = [
    "DEFAULT_DOCUMENT",
    "collect_env_overrides",
    "default_document",
    "env_name_for_path",
    "load_document",
    "merge_documents",
    "read_layers",
    "substitute_references",
]
