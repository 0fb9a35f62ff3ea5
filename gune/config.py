from __future__ import annotations
import math
import os
import re
import warnings
from typing import Dict


_DEFAULT_CONSTANTS: Dict[str, float] = {"pi": math.pi}
_NAME_RE = re.compile(r"^[^\W\d_][^\W_]*$")

DEFAULT_PROMPT = "# "
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_REPL_HOST = "127.0.0.1"
DEFAULT_REPL_PORT = 8765


def parse_constants(raw: str) -> Dict[str, float]:
    """Parse 'name=value;name=value' (',' also separates) into a dict."""
    constants: Dict[str, float] = {}
    for item in re.split(r"[;,]", raw):
        item = item.strip()
        if not item:
            continue
        name, sep, value = item.partition("=")
        name = name.strip()
        if not sep or not _NAME_RE.match(name):
            raise ValueError(f"Invalid constant definition: {item!r}")
        try:
            constants[name] = float(value)
        except ValueError:
            raise ValueError(f"Invalid value for constant {name!r}: {value.strip()!r}") from None
    return constants


def get_constants() -> Dict[str, float]:
    raw = os.environ.get('GUNE_CONSTANTS')
    if raw is None:
        return dict(_DEFAULT_CONSTANTS)
    return parse_constants(raw)


def get_prompt() -> str:
    return os.environ.get('GUNE_PROMPT', DEFAULT_PROMPT)


def get_log_level() -> str:
    level = os.environ.get('GUNE_LOG_LEVEL', DEFAULT_LOG_LEVEL).strip().upper()
    if level not in LOG_LEVELS:
        warnings.warn(f"Ignoring GUNE_LOG_LEVEL={level!r}, expected one of {', '.join(LOG_LEVELS)}")
        return DEFAULT_LOG_LEVEL
    return level


def get_repl_address() -> tuple[str, int]:
    host = os.environ.get('GUNE_REPL_HOST', DEFAULT_REPL_HOST)
    port = int(os.environ.get('GUNE_REPL_PORT', DEFAULT_REPL_PORT))
    return host, port
