"""
firewall-config — secret redaction for diagnostic output.

File: src/firewall_config/config/redaction.py
Last updated: 2026-10-19

Purpose
- Render a resolved configuration for logs and audit trails without any
  password material.

Functional requirements
- Secret fields are masked at any nesting depth.
- No literal secret value may survive as a substring of the rendering.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from typing import Final, cast

from firewall_config.config.errors import ValueConstraintError
from firewall_config.config.model import ResolvedConfiguration, SSLConfiguration
from firewall_config.constants import REDACTED_VALUE

SECRET_KEYS: Final[frozenset[str]] = frozenset(
    {
        "keyStorePassword",
        "keyStorePrivateKeyPassword",
        "trustStorePassword",
        "password",
    }
)

_MASK_CHARACTERS: Final[str] = "*#~%^"
_MASK_WIDTH: Final[int] = 3


def redact_document(document: Mapping[str, object]) -> dict[str, object]:
    """Return a copy of ``document`` with every secret field masked."""

    return cast(dict[str, object], _redact_value(document, omit=False))


def render_redacted(config: ResolvedConfiguration) -> str:
    """Deterministic JSON rendering of ``config`` that is safe to log.

    Secret fields are left out entirely. Any other text that coincides with a
    secret value is overwritten with a run of one mask character that occurs
    in none of the secrets.
    """

    rendered = json.dumps(
        _redact_value(config.to_document(), omit=True),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    secrets = sorted(
        {secret for secret in iter_secret_values(config) if secret},
        key=lambda secret: (-len(secret), secret),
    )
    if not any(secret in rendered for secret in secrets):
        return rendered

    mask = _mask_for(secrets)
    for secret in secrets:
        rendered = rendered.replace(secret, mask)
    if any(secret in rendered for secret in secrets):
        raise _unmaskable()
    return rendered


def iter_secret_values(config: ResolvedConfiguration) -> Iterator[str]:
    ssl_sections: list[SSLConfiguration] = [config.public_ssl_configuration]
    outbound = config.outbound_config
    if outbound is not None:
        if outbound.artemis_ssl_configuration is not None:
            ssl_sections.append(outbound.artemis_ssl_configuration)
        if outbound.proxy_config is not None and outbound.proxy_config.password is not None:
            yield outbound.proxy_config.password
    for holder in (config.bridge_inner_config, config.float_outer_config):
        if holder is not None and holder.tunnel_ssl_configuration is not None:
            ssl_sections.append(holder.tunnel_ssl_configuration)
    for ssl in ssl_sections:
        yield ssl.key_store.store_password
        yield ssl.key_store.entry_password
        yield ssl.trust_store.store_password


def _mask_for(secrets: list[str]) -> str:
    for character in _MASK_CHARACTERS:
        if not any(character in secret for secret in secrets):
            return character * _MASK_WIDTH
    raise _unmaskable()


def _unmaskable() -> ValueConstraintError:
    return cast(
        ValueConstraintError,
        ValueConstraintError.single("", "configured secrets cannot be masked in diagnostic output"),
    )


def _redact_value(value: object, *, omit: bool) -> object:
    if isinstance(value, Mapping):
        out: dict[str, object] = {}
        for key in sorted(value):
            item = value[key]
            if key in SECRET_KEYS and item is not None:
                if not omit:
                    out[key] = REDACTED_VALUE
            else:
                out[key] = _redact_value(item, omit=omit)
        return out
    if isinstance(value, (list, tuple)):
        return [_redact_value(item, omit=omit) for item in value]
    return value


__all__ = [
    "SECRET_KEYS",
    "iter_secret_values",
    "redact_document",
    "render_redacted",
]
