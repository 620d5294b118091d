"""
firewall-config — package root

File: src/firewall_config/__init__.py
Last updated: 2026-10-19

Purpose
- Configuration resolution and validation engine for the firewall/bridge
  perimeter component (bridge inner / float outer / single process).

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).

Key interfaces / contracts
- ``firewall_config.config.load_config`` resolves a document into an immutable
  ``ResolvedConfiguration``.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
