"""Store of object keys and their last seen resource versions."""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Mapping, Optional


class KeyError_(Exception):
    """No key could be made for an object."""

    def __init__(self, obj: Any, err: Exception) -> None:
        super().__init__(f"couldn't create key for object {obj!r}: {err}")
        self.obj = obj
        self.err = err


def _metadata(obj: Any) -> Mapping[str, Any]:
    meta = obj.get("metadata") if isinstance(obj, Mapping) else None
    if not isinstance(meta, Mapping):
        raise TypeError("object does not implement the Object interfaces")
    return meta


def _resource_version(obj: Any) -> str:
    return _metadata(obj).get("resourceVersion", "")


def object_key(obj: Any) -> str:
    """Return ``namespace/name`` for an object, ``name`` if it has no namespace.

    A string is taken to be a key already and returned as it is.
    """
    if isinstance(obj, str):
        return obj
    try:
        meta = _metadata(obj)
    except TypeError as err:
        raise KeyError_(obj, err) from None
    name = meta.get("name", "")
    namespace = meta.get("namespace", "")
    return f"{namespace}/{name}" if namespace else name


class ResourceVersionStorage:
    """Thread-safe map from object key to resource version."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._versions: Dict[str, Any] = {}

    def add(self, obj: Any) -> None:
        key = object_key(obj)
        version = _resource_version(obj)
        with self._lock:
            self._versions[key] = version

    def update(self, obj: Any) -> None:
        self.add(obj)

    def delete(self, obj: Any) -> None:
        key = object_key(obj)
        with self._lock:
            self._versions.pop(key, None)

    def get(self, obj: Any) -> Optional[str]:
        """Return the stored version of ``obj``, or None if it is not stored."""
        key = object_key(obj)
        with self._lock:
            return self._versions.get(key)

    def list_keys(self) -> List[str]:
        with self._lock:
            return list(self._versions)

    def get_by_key(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._versions.get(key)

    def replace(self, versions: Mapping[str, Any]) -> None:
        """Replace all contents with ``versions``."""
        with self._lock:
            self._versions = dict(versions)