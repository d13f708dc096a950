# storage.py
# Key-value persistence for whole JSON documents.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)


class Store(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, text: str) -> None: ...

    def remove(self, key: str) -> None: ...


class JsonFileStore:
    """
    One `<key>.json` file per key under `data_dir`.

    Reads of a missing key return None. Write errors (full disk, read-only
    directory) propagate as OSError; callers decide how to report them.
    """

    def __init__(self, data_dir: Union[str, Path]) -> None:
        self.data_dir = Path(data_dir)

    def _ensure_data_dir(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, text: str) -> None:
        self._ensure_data_dir()
        path = self.path_for(key)
        # Old file stays in place if the write fails halfway
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(text, encoding="utf-8")
            tmp.replace(path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug(f"Wrote {len(text)} chars to {path}")

    def remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


class MemoryStore:
    """Dict-backed store; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set(self, key: str, text: str) -> None:
        self.items[key] = text

    def remove(self, key: str) -> None:
        self.items.pop(key, None)
