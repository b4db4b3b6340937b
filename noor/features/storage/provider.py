"""
Key-value storage protocol.

Defines the interface the streak tracker persists through, so the backing
store (memory, JSON file, SQL) can be swapped without touching streak logic.
Values are JSON-compatible (str, int, float, bool, None, list, dict).
Reads and writes copy values, so callers never share state with the store.
"""
import copy
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol


class KeyValueStore(Protocol):
    """
    Protocol for durable key-value stores.

    Implementations must raise StorageError or its read/write subclasses
    (noor.core.errors) instead of backend-specific exceptions, including
    when the backend cannot be opened.
    """

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Return the stored value, or `default` when the key is missing."""
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def set_many(self, values: Mapping[str, Any]) -> None:
        """Write several keys as one unit."""
        ...

    def delete(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""
        ...

    def keys(self) -> Iterable[str]:
        ...


class InMemoryStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(dict(initial or {}))

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def set_many(self, values: Mapping[str, Any]) -> None:
        self._data.update(copy.deepcopy(dict(values)))

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> Iterable[str]:
        return list(self._data)
