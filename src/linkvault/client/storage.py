"""Durable client-side key/value storage.

Mirrors the browser's localStorage contract: string keys, string values,
``get_item`` returns None for missing keys. FileStorage keeps everything
in one JSON object on disk and rewrites it atomically on every change.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol

import structlog

logger = structlog.get_logger()


class ClientStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage. Handy for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage:
    """Storage backed by a JSON file, e.g. ~/.linkvault/session.json."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def _read(self) -> Optional[dict[str, str]]:
        """Parsed file contents; None when the file exists but is unusable."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError):
            logger.warning("storage.unreadable", path=str(self.path))
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("storage.unreadable", path=str(self.path))
            return None
        if not isinstance(data, dict):
            logger.warning("storage.unreadable", path=str(self.path))
            return None
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _load(self) -> dict[str, str]:
        data = self._read()
        return {} if data is None else data

    def _save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".session-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.chmod(tmp, 0o600)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if data is None:
            # Nothing in an unreadable file can be kept, so drop the whole file.
            self.path.unlink(missing_ok=True)
            return
        if key in data:
            del data[key]
            self._save(data)
