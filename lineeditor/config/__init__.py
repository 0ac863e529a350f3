#!/usr/bin/env python3
# lineeditor/config/__init__.py
from __future__ import annotations

"""
Editor configuration.

Exports:
- load_config: merge defaults, an optional file and LINEEDITOR_* env vars.
- EditorConfig: validated, frozen settings.
- ConfigError: validation failure naming the offending key.
"""

from .config import BACKENDS, DEFAULTS, ConfigError, EditorConfig, load_config

__all__ = ["BACKENDS", "DEFAULTS", "ConfigError", "EditorConfig", "load_config"]
