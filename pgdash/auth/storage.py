"""Durable key-value storage for client-side login state.

The lockout must survive restarts, so the controller writes its serialized
state through one of these stores. Tests use ``MemoryStateStore``.
"""

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    def load(self) -> str | None: ...

    def save(self, raw: str) -> None: ...

    def clear(self) -> None: ...


class MemoryStateStore:
    """In-process store. Survives controller re-creation, not process exit."""

    def __init__(self, raw: str | None = None) -> None:
        self.raw = raw

    def load(self) -> str | None:
        return self.raw

    def save(self, raw: str) -> None:
        self.raw = raw

    def clear(self) -> None:
        self.raw = None


class FileStateStore:
    """JSON file on disk; the parent directory is created on first save."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> str | None:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError:
            logger.warning("Could not read login state from %s", self.path, exc_info=True)
            return None

    def save(self, raw: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(raw, encoding="utf-8")
        tmp.replace(self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
