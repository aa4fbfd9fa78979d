"""Keyed storage abstraction for rooms, profiles and match history.

Values are JSON-compatible (dicts, lists, strings, numbers). Both
implementations hand out fresh copies, so a caller mutating a value it
read never changes what is stored until it calls ``set``.

The file-backed store keeps one JSON document per key. Documents contain
players' secret numbers and are written with owner-only permissions (0o600)
inside an owner-only directory (0o700).
"""

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

import structlog

logger = structlog.get_logger()

PUBLIC_ROOMS_KEY = "public_rooms"
ROOM_INDEX_KEY = "room_index"

# Owner-only directory permissions for the store root.
_STORE_DIR_MODE = 0o700

# Owner-only file permissions for stored documents.
_STORE_FILE_MODE = 0o600


def room_key(room_id: str) -> str:
    return f"room:{room_id}"


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def history_key(user_id: str) -> str:
    return f"history:{user_id}"


class KeyValueStore(Protocol):
    """Protocol for a get/set/delete store over JSON-like values."""

    def get(self, key: str) -> Any | None: ...  # noqa: ANN401

    def set(self, key: str, value: Any) -> None: ...  # noqa: ANN401

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store. Values are kept JSON-encoded to avoid aliasing."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:  # noqa: ANN401
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:  # noqa: ANN401
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileKeyValueStore:
    """Stores each key as a JSON file under a directory with restricted permissions."""

    def __init__(self, store_dir: str) -> None:
        self._store_dir = Path(store_dir).resolve()

    def _path_for(self, key: str) -> Path:
        # ':' separates key namespaces and is not portable in file names
        target = (self._store_dir / f"{key.replace(':', '__')}.json").resolve()
        if not target.is_relative_to(self._store_dir):
            raise ValueError(f"Path traversal rejected: '{key}' resolves outside store directory")
        return target

    def get(self, key: str) -> Any | None:  # noqa: ANN401
        target = self._path_for(key)
        try:
            content = target.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return json.loads(content)

    def set(self, key: str, value: Any) -> None:  # noqa: ANN401
        """Write the value atomically via temp-file-then-rename.

        Creates the directory lazily on first write with owner-only
        permissions.
        """
        target = self._path_for(key)
        content = json.dumps(value)

        os.makedirs(str(self._store_dir), mode=_STORE_DIR_MODE, exist_ok=True)  # noqa: PTH103
        self._store_dir.chmod(_STORE_DIR_MODE)

        fd, tmp_path = tempfile.mkstemp(dir=str(self._store_dir), suffix=".tmp", prefix=".kv_")
        fd_owned = True
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _STORE_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(target)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.debug("document stored", key=key, path=str(target))

    def delete(self, key: str) -> None:
        target = self._path_for(key)
        with contextlib.suppress(FileNotFoundError):
            target.unlink()
