"""
JSON file key-value store.

The whole store is one JSON object on disk. Writes go to a temp file in the
same directory and are moved into place with os.replace, so readers never
see a half-written file.
"""

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from noor.core.errors import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)


class JsonFileStore:
    def __init__(self, path: Union[str, Path], *, indent: Optional[int] = 2):
        self._path = Path(path).expanduser()
        self._indent = indent
        self._cache: Optional[Dict[str, Any]] = None

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        data = self._load()
        if key not in data:
            return default
        return copy.deepcopy(data[key])

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, Any]) -> None:
        data = dict(self._load_for_write())
        data.update(copy.deepcopy(dict(values)))
        self._write(data)

    def delete(self, key: str) -> None:
        data = dict(self._load_for_write())
        if key not in data:
            return
        del data[key]
        self._write(data)

    def keys(self) -> Iterable[str]:
        return list(self._load())

    def reload(self) -> None:
        """Drop the cached copy; the next read goes to disk."""
        self._cache = None

    # Internal helpers -------------------------------------------------
    def _load(self) -> Dict[str, Any]:
        if self._cache is not None:
            return self._cache

        if not self._path.exists():
            self._cache = {}
            return self._cache

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageReadError(f"Cannot read {self._path}: {exc}") from exc

        if not raw.strip():
            self._cache = {}
            return self._cache

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageReadError(f"Corrupt state file {self._path}: {exc}") from exc

        if not isinstance(data, dict):
            raise StorageReadError(f"State file {self._path} does not hold a JSON object")

        self._cache = data
        return self._cache

    def _load_for_write(self) -> Dict[str, Any]:
        # A corrupt file must not block new writes; start over from empty.
        try:
            return self._load()
        except StorageReadError:
            logger.warning(
                "[storage] overwriting unreadable state file",
                extra={"path": str(self._path)},
            )
            return {}

    def _write(self, data: Dict[str, Any]) -> None:
        tmp_path = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=str(self._path.parent),
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = tmp.name
                json.dump(data, tmp, indent=self._indent, sort_keys=True)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, str(self._path))
        except (OSError, TypeError, ValueError) as exc:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageWriteError(f"Cannot write {self._path}: {exc}") from exc

        self._cache = data
