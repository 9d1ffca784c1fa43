"""Apply informer deltas to a store and notify a handler."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from .versionstorage import _resource_version

_MAX_UINT64 = 2**64 - 1


class DeltaType(str, enum.Enum):
    ADDED = "Added"
    UPDATED = "Updated"
    DELETED = "Deleted"
    REPLACED = "Replaced"
    SYNC = "Sync"


@dataclass
class Delta:
    type: DeltaType
    object: Any


def _parse_resource_version(version: Any) -> int:
    if not isinstance(version, str):
        raise ValueError(f"invalid resource version: {version!r}")
    if version in ("", "0"):
        return 0
    if not (version.isascii() and version.isdigit()):
        raise ValueError(f"invalid resource version: {version!r}")
    value = int(version)
    if value > _MAX_UINT64:
        raise ValueError(f"resource version out of range: {version!r}")
    return value


def compare_resource_version(obj: Any, rv: Any) -> int:
    """Compare the object's resource version with ``rv``: -1, 0 or 1.

    Anything that cannot be parsed compares as older (-1).
    """
    try:
        obj_version = _parse_resource_version(_resource_version(obj))
        version = _parse_resource_version(rv)
    except (TypeError, ValueError):
        return -1
    if obj_version == version:
        return 0
    return -1 if obj_version < version else 1


def handle_deltas(deltas: Iterable[Delta], storage: Any, handler: Any, is_in_initial_list: bool) -> None:
    """Apply deltas to a resource version storage and notify ``handler``.

    A replaced object whose version is not newer than the stored one is not
    updated; if the versions are equal the handler sees a sync.
    """
    for delta in deltas:
        if delta.type in (DeltaType.REPLACED, DeltaType.ADDED, DeltaType.UPDATED):
            version = storage.get(delta.object)
            if version is None:
                storage.add(delta.object)
                handler.on_add(delta.object, is_in_initial_list)
                continue

            if delta.type is DeltaType.REPLACED:
                order = compare_resource_version(delta.object, version)
                if order <= 0:
                    if order == 0:
                        handler.on_sync(delta.object)
                    continue

            storage.update(delta.object)
            handler.on_update(None, delta.object)
        elif delta.type is DeltaType.DELETED:
            storage.delete(delta.object)
            handler.on_delete(delta.object)


def process_deltas(
    handler: Any,
    client_state: Any,
    transformer: Optional[Callable[[Any], Any]],
    deltas: Iterable[Delta],
    is_in_initial_list: bool,
) -> None:
    """Apply deltas, oldest first, to a store and notify ``handler``.

    ``client_state.get`` returns the stored item or None.
    """
    for delta in deltas:
        obj = delta.object
        if transformer is not None:
            obj = transformer(obj)

        if delta.type is DeltaType.DELETED:
            client_state.delete(obj)
            handler.on_delete(obj)
            continue

        try:
            old = client_state.get(obj)
        except Exception:
            # A failed lookup is handled as a missing object.
            old = None
        if old is not None:
            client_state.update(obj)
            handler.on_update(old, obj)
        else:
            client_state.add(obj)
            handler.on_add(obj, is_in_initial_list)