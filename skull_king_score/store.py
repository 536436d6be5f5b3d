# skull_king_score/store.py
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from .actions import new_game
from .paths import ensure_data_dir, storage_key
from .snapshot import SnapshotError, dumps, loads
from .state import GameState

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@runtime_checkable
class KeyValueBackend(Protocol):
    """
    Where snapshots live. Values are opaque text blobs.

    `get` returns None for a missing key; both methods may raise OSError.
    """

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryBackend:
    """In-process backend, mostly for tests and dry runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFileBackend:
    """One ``<key>.json`` file per key inside a directory."""

    def __init__(self, directory: Optional[Path] = None) -> None:
        self.directory = Path(directory) if directory is not None else None

    def path_for(self, key: str) -> Path:
        safe = _UNSAFE_KEY_CHARS.sub("_", key).strip("._") or "state"
        return ensure_data_dir(self.directory) / f"{safe}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)


class StateStore:
    """
    Load and save the whole game as a single snapshot under one key.

    - load() never raises for bad data: missing -> None, corrupt -> None
      plus a warning.
    - save() writes the full snapshot every time and does not raise when
      the backend fails; the failure is logged instead.
    """

    def __init__(
        self,
        backend: Optional[KeyValueBackend] = None,
        key: Optional[str] = None,
    ) -> None:
        self.backend: KeyValueBackend = backend or JsonFileBackend()
        self.key = key or storage_key()

    def load(self) -> Optional[GameState]:
        try:
            raw = self.backend.get(self.key)
        except OSError as exc:
            logger.warning("Failed to read saved game %r: %s", self.key, exc)
            return None
        except ValueError as exc:
            logger.warning(
                "Ignoring malformed saved game %r: %s; starting fresh",
                self.key,
                exc,
            )
            return None
        if not raw:
            return None
        try:
            return loads(raw)
        except SnapshotError as exc:
            logger.warning(
                "Ignoring malformed saved game %r: %s; starting fresh",
                self.key,
                exc,
            )
            return None

    def load_or_default(self) -> GameState:
        state = self.load()
        return state if state is not None else new_game()

    def save(self, state: GameState) -> None:
        try:
            self.backend.set(self.key, dumps(state))
        except OSError as exc:
            logger.warning("Failed to save game %r: %s", self.key, exc)
            return
        logger.debug("Saved game %r", self.key)
