"""
firewall-config — filesystem path resolution.

File: src/firewall_config/config/paths.py
Last updated: 2026-10-19

Purpose
- Turn every path-valued key into an absolute, normalized ``Path``.

Functional requirements
- Absolute values are kept verbatim; relative values resolve against the base
  directory.
- Omitted keystore/truststore paths default under the certificates
  directory, which itself defaults to ``<base>/certificates``.
- Never touches the filesystem (no existence checks).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from firewall_config.constants import (
    CERTIFICATES_DIR,
    DEFAULT_SSL_KEYSTORE_NAME,
    DEFAULT_TRUSTSTORE_NAME,
)


class PathResolver:
    """Resolve document paths for one base directory."""

    __slots__ = ("_base_directory", "_certificates_directory")

    def __init__(
        self, base_directory: str | Path, certificates_directory: str | None = None
    ) -> None:
        self._base_directory = _normalize(Path(base_directory).expanduser().absolute())
        if certificates_directory is None:
            self._certificates_directory = self._base_directory / CERTIFICATES_DIR
        else:
            self._certificates_directory = self.resolve(certificates_directory)

    @property
    def base_directory(self) -> Path:
        return self._base_directory

    @property
    def certificates_directory(self) -> Path:
        return self._certificates_directory

    def resolve(self, raw: str | Path) -> Path:
        candidate = Path(raw).expanduser()
        if not candidate.is_absolute():
            candidate = self._base_directory / candidate
        return _normalize(candidate)

    def resolve_optional(self, raw: str | None) -> Path | None:
        if raw is None:
            return None
        return self.resolve(raw)

    def keystore(self, section: Mapping[str, Any]) -> Path:
        raw = section.get("sslKeystore")
        if raw is None:
            return self._certificates_directory / DEFAULT_SSL_KEYSTORE_NAME
        return self.resolve(raw)

    def truststore(self, section: Mapping[str, Any]) -> Path:
        raw = section.get("trustStoreFile")
        if raw is None:
            return self._certificates_directory / DEFAULT_TRUSTSTORE_NAME
        return self.resolve(raw)


def _normalize(path: Path) -> Path:
    return Path(os.path.normpath(str(path)))


__all__ = ["PathResolver"]
