from __future__ import annotations
import os
from pathlib import Path

VERSION = "0.0.5"

_DEFAULT_PROMPT = "qlisp> "
_DEFAULT_HISTORY_FILE = Path.home() / ".qlisp_history"
_DEFAULT_LOG_LEVEL = "WARNING"
_DEFAULT_REPL_HOST = "127.0.0.1"
_DEFAULT_REPL_PORT = 8765


def get_prompt() -> str:
    return os.environ.get("QLISP_PROMPT", _DEFAULT_PROMPT)


def get_history_file() -> Path:
    raw = os.environ.get("QLISP_HISTORY_FILE")
    return Path(raw).expanduser() if raw else _DEFAULT_HISTORY_FILE


def get_log_level() -> str:
    return os.environ.get("QLISP_LOG_LEVEL", _DEFAULT_LOG_LEVEL).upper()


def get_log_file() -> Path | None:
    raw = os.environ.get("QLISP_LOG_FILE")
    return Path(raw).expanduser() if raw else None


def get_repl_address() -> tuple[str, int]:
    host = os.environ.get("QLISP_REPL_HOST", _DEFAULT_REPL_HOST)
    port = os.environ.get("QLISP_REPL_PORT")
    return host, int(port) if port else _DEFAULT_REPL_PORT
