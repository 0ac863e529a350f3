#!/usr/bin/env python3
# lineeditor/config/config.py
from __future__ import annotations

"""
Configuration loader (stdlib-only).

Precedence (low → high):
  1) Built-in defaults
  2) An explicit file: .env, .ini, .json or .toml (chosen by suffix)
  3) Environment variables prefixed with LINEEDITOR_

Validation:
  - BACKEND: one of {'auto','keys','callbacks','stream'}
  - HISTORY_SIZE: None or int >= 1 (None = backend default)
  - MAX_LINE_SIZE / MAX_HINT_ROWS: int >= 1
  - PROMPT_COLOR: None or an ANSI color name
  - ENABLE_HIGHLIGHT / ENABLE_HINTS: bool
  - LOG_LEVEL: None or one of {'DEBUG','INFO','WARNING','ERROR','CRITICAL'}
  - LOG_FILE_PATH: None or normalized path
"""

import configparser
import json
import os
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from lineeditor.ui.utils import ANSI

ENV_PREFIX = "LINEEDITOR_"

BACKENDS = ("auto", "keys", "callbacks", "stream")

DEFAULTS: dict[str, Any] = {
    "BACKEND": "auto",
    "HISTORY_SIZE": None,           # per-backend default when unset
    "MAX_LINE_SIZE": 9999,
    "MAX_HINT_ROWS": 8,
    "PROMPT_COLOR": "green",
    "ENABLE_HIGHLIGHT": True,
    "ENABLE_HINTS": True,
    "LOG_LEVEL": None,
    "LOG_FILE_PATH": None,
}


class ConfigError(ValueError):
    """Raised when a configuration value fails validation."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key


# ---------- data model ----------

@dataclass(frozen=True)
class EditorConfig:
    backend: str = "auto"
    history_size: int | None = None
    max_line_size: int = 9999
    max_hint_rows: int = 8
    prompt_color: str | None = "green"
    enable_highlight: bool = True
    enable_hints: bool = True
    log_level: str | None = None
    log_file_path: Path | None = None

    # Unrecognized keys preserved for debugging/forward-compat
    extra: dict[str, Any] = field(default_factory=dict)


# ---------- file loaders (stdlib) ----------

def _load_env_file(path: Path) -> dict[str, str]:
    """Very small .env parser: KEY=VALUE, supports quotes; ignores comments/blank lines."""
    out: dict[str, str] = {}
    line_re = re.compile(r"""^\s*([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*$""")
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = line_re.match(line)
        if not m:
            continue
        k, v = m.group(1), m.group(2)
        if len(v) >= 2 and v[0] == v[-1] and v[0] in {"'", '"'}:
            v = v[1:-1]
        out[k] = v
    return out


def _load_ini_file(path: Path) -> dict[str, str]:
    cfg = configparser.ConfigParser()
    try:
        cfg.read_string(path.read_text(encoding="utf-8"), source=str(path))
    except configparser.Error as exc:
        raise ConfigError(str(path), f"invalid INI ({exc})") from exc
    flat: dict[str, str] = {}
    for sec in cfg.sections():
        for k, v in cfg.items(sec):
            flat[k.upper()] = v
    return flat


def _load_json_file(path: Path) -> dict[str, Any]:
    try:
        return _flatten_mapping(json.loads(path.read_text(encoding="utf-8")))
    except json.JSONDecodeError as exc:
        raise ConfigError(str(path), f"invalid JSON ({exc})") from exc


def _load_toml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return _flatten_mapping(tomllib.load(f))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(str(path), f"invalid TOML ({exc})") from exc


_LOADERS = {
    ".env": _load_env_file,
    ".ini": _load_ini_file,
    ".json": _load_json_file,
    ".toml": _load_toml_file,
}


def _flatten_mapping(obj: Any, prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested dicts to UPPER_SNAKE keys.
    Example: {'lineeditor': {'backend': 'keys'}} -> {'LINEEDITOR_BACKEND': 'keys'}
    """
    flat: dict[str, Any] = {}
    if isinstance(obj, Mapping):
        for k, v in obj.items():
            key = f"{prefix}_{k}" if prefix else str(k)
            if isinstance(v, Mapping):
                flat.update(_flatten_mapping(v, key))
            else:
                flat[str(key).upper()] = v
    return flat


def _strip_prefix(d: Mapping[str, Any]) -> dict[str, Any]:
    """Accept both BACKEND and LINEEDITOR_BACKEND spellings in files."""
    out: dict[str, Any] = {}
    for k, v in d.items():
        key = str(k).upper()
        out[key[len(ENV_PREFIX):] if key.startswith(ENV_PREFIX) else key] = v
    return out


# ---------- normalization & coercion ----------

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}


def _as_bool(key: str, val: Any) -> bool:
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in _BOOL_TRUE:
        return True
    if s in _BOOL_FALSE:
        return False
    raise ConfigError(key, f"expected boolean, got {val!r}")


def _as_int(key: str, val: Any, *, minimum: int) -> int:
    if isinstance(val, int) and not isinstance(val, bool):
        out = val
    else:
        try:
            out = int(str(val).strip())
        except ValueError as exc:
            raise ConfigError(key, f"expected integer, got {val!r}") from exc
    if out < minimum:
        raise ConfigError(key, f"must be >= {minimum}, got {out}")
    return out


def _as_opt_str(val: Any) -> str | None:
    return None if val is None or str(val).strip().lower() in {"", "none"} else str(val)


def _as_log_level(val: Any) -> str | None:
    lv = _as_opt_str(val)
    if lv is None:
        return None
    up = lv.upper()
    allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if up not in allowed:
        raise ConfigError("LOG_LEVEL", f"must be one of {sorted(allowed)}, got {lv!r}")
    return up


def _as_opt_path(val: Any) -> Path | None:
    v = _as_opt_str(val)
    if v is None:
        return None
    return Path(os.path.expandvars(os.path.expanduser(v))).resolve()


# ---------- merge & load ----------

def _merge_sources(path: Path | None, environ: Mapping[str, str]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(DEFAULTS)

    if path is not None:
        # A bare ".env" has no suffix, only a name.
        loader = _LOADERS.get(path.suffix.lower() or path.name.lower())
        if loader is None:
            raise ConfigError(str(path), f"unsupported config file type {path.suffix!r}")
        merged.update(_strip_prefix(loader(path)))

    # Environment variables override all; only take LINEEDITOR_* keys
    merged.update({
        k[len(ENV_PREFIX):]: v for k, v in environ.items()
        if k.startswith(ENV_PREFIX) and re.fullmatch(r"[A-Z0-9_]+", k)
    })
    return merged


def _validate_and_build(config: dict[str, Any]) -> EditorConfig:
    backend = str(config.get("BACKEND", DEFAULTS["BACKEND"])).strip().lower()
    if backend not in BACKENDS:
        raise ConfigError("BACKEND", f"must be one of {list(BACKENDS)}, got {backend!r}")

    history_raw = _as_opt_str(config.get("HISTORY_SIZE"))
    history_size = None if history_raw is None else _as_int(
        "HISTORY_SIZE", history_raw, minimum=1)

    prompt_color = _as_opt_str(config.get("PROMPT_COLOR", DEFAULTS["PROMPT_COLOR"]))
    if prompt_color is not None:
        prompt_color = prompt_color.strip().lower()
        if prompt_color not in ANSI:
            raise ConfigError("PROMPT_COLOR", f"unknown color {prompt_color!r}")

    recognized = set(DEFAULTS.keys())
    extra = {k: v for k, v in config.items() if k not in recognized}

    return EditorConfig(
        backend=backend,
        history_size=history_size,
        max_line_size=_as_int(
            "MAX_LINE_SIZE", config.get("MAX_LINE_SIZE", DEFAULTS["MAX_LINE_SIZE"]), minimum=1),
        max_hint_rows=_as_int(
            "MAX_HINT_ROWS", config.get("MAX_HINT_ROWS", DEFAULTS["MAX_HINT_ROWS"]), minimum=1),
        prompt_color=prompt_color,
        enable_highlight=_as_bool(
            "ENABLE_HIGHLIGHT", config.get("ENABLE_HIGHLIGHT", DEFAULTS["ENABLE_HIGHLIGHT"])),
        enable_hints=_as_bool(
            "ENABLE_HINTS", config.get("ENABLE_HINTS", DEFAULTS["ENABLE_HINTS"])),
        log_level=_as_log_level(config.get("LOG_LEVEL", DEFAULTS["LOG_LEVEL"])),
        log_file_path=_as_opt_path(config.get("LOG_FILE_PATH", DEFAULTS["LOG_FILE_PATH"])),
        extra=extra,
    )


# ---------- public API ----------

def load_config(
    path: str | os.PathLike[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> EditorConfig:
    """
    Load, merge, normalize, and validate configuration.
    No filesystem side-effects. A missing `path` raises FileNotFoundError.
    """
    raw = _merge_sources(
        Path(path) if path is not None else None,
        os.environ if environ is None else environ,
    )
    return _validate_and_build(raw)
