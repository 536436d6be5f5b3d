# skull_king_score/paths.py
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from a .env file if present.
load_dotenv()

DEFAULT_DATA_DIR = Path.home() / ".skull_king_score"
DEFAULT_STORAGE_KEY = "skull-king-scorekeeper"

_FALSEY = {"0", "false", "no", "off"}


def data_dir() -> Path:
    """Directory holding saved games (``SKULL_KING_DATA_DIR`` overrides)."""
    override = os.getenv("SKULL_KING_DATA_DIR")
    return Path(override).expanduser() if override else DEFAULT_DATA_DIR


def ensure_data_dir(path: str | Path | None = None) -> Path:
    """Create the data directory if it does not exist and return it."""
    directory = Path(path) if path is not None else data_dir()
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def storage_key() -> str:
    return os.getenv("SKULL_KING_STORAGE_KEY") or DEFAULT_STORAGE_KEY


def phase_gate_enabled() -> bool:
    """
    Whether bids/results editing is gated by the round phase.

    On by default; set ``SKULL_KING_PHASE_GATE=0`` to keep every field
    editable at all times.
    """
    raw = os.getenv("SKULL_KING_PHASE_GATE")
    if raw is None:
        return True
    return raw.strip().lower() not in _FALSEY


def resolve_data_path(path_like: str | Path, base: str | Path | None = None) -> Path:
    """
    Resolve a user-specified path into the data directory.

    Absolute paths are returned unchanged. Relative paths are anchored inside
    the data directory so exports land next to the saved game.
    """
    path = Path(path_like)
    if path.is_absolute():
        return path
    return ensure_data_dir(base) / path
