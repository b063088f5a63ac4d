"""Local Media — KeyValueMedium implementations backing the local draft store.

Invariants:
    - Keys and values are plain strings; (de)serialization belongs to the store
    - InMemoryMedium raises OSError when a write would exceed max_bytes
    - JsonFileMedium rewrites the whole file atomically (temp file + os.replace)
    - A missing file reads as an empty medium; a corrupt file raises ValueError
    - Single writer assumed
"""

import json
import os
import tempfile
from pathlib import Path


class InMemoryMedium:
    """Dict-backed medium. Optional byte capacity simulates a full medium."""

    def __init__(self, max_bytes: int | None = None):
        self._data: dict[str, str] = {}
        self.max_bytes = max_bytes

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.max_bytes is not None:
            used = self._used_bytes() - self._entry_bytes(key, self._data.get(key))
            if used + self._entry_bytes(key, value) > self.max_bytes:
                raise OSError(f"Local medium full ({self.max_bytes} bytes)")
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def _used_bytes(self) -> int:
        return sum(self._entry_bytes(k, v) for k, v in self._data.items())

    @staticmethod
    def _entry_bytes(key: str, value: str | None) -> int:
        if value is None:
            return 0
        return len(key.encode("utf-8")) + len(value.encode("utf-8"))


class JsonFileMedium:
    """Medium persisted as one JSON object on disk."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load_for_write()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._load_for_write()
        if data.pop(key, None) is not None:
            self._write(data)

    def keys(self) -> list[str]:
        return list(self._load())

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _load_for_write(self) -> dict[str, str]:
        # A corrupt file is replaced rather than blocking every write
        try:
            return self._load()
        except ValueError:
            return {}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            dir=self.path.parent, prefix=".drafts-", suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except OSError:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
