"""Resource event handlers built from functions, and a filtering wrapper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

Callback = Optional[Callable[[Any], None]]


@dataclass
class ResourceEventHandlerFuncs:
    """Handler that calls whichever functions are set and ignores the rest."""

    add_func: Callback = None
    update_func: Optional[Callable[[Any, Any], None]] = None
    delete_func: Callback = None
    sync_func: Callback = None

    def on_add(self, obj: Any, is_in_initial_list: bool = False) -> None:
        if self.add_func is not None:
            self.add_func(obj)

    def on_update(self, old_obj: Any, new_obj: Any) -> None:
        if self.update_func is not None:
            self.update_func(old_obj, new_obj)

    def on_delete(self, obj: Any) -> None:
        if self.delete_func is not None:
            self.delete_func(obj)

    def on_sync(self, obj: Any) -> None:
        if self.sync_func is not None:
            self.sync_func(obj)


@dataclass
class FilteringResourceEventHandler:
    """Pass events on to ``handler`` only for objects that ``filter_func`` accepts.

    An update that moves an object into or out of the filter is passed on as
    an addition or a deletion.
    """

    filter_func: Callable[[Any], bool]
    handler: Any

    def on_add(self, obj: Any, is_in_initial_list: bool = False) -> None:
        if self.filter_func(obj):
            self.handler.on_add(obj, is_in_initial_list)

    def on_update(self, old_obj: Any, new_obj: Any, is_in_initial_list: bool = False) -> None:
        newer = self.filter_func(new_obj)
        older = self.filter_func(old_obj)
        if newer and older:
            self.handler.on_update(old_obj, new_obj)
        elif newer:
            self.handler.on_add(new_obj, is_in_initial_list)
        elif older:
            self.handler.on_delete(old_obj)

    def on_delete(self, obj: Any) -> None:
        if self.filter_func(obj):
            self.handler.on_delete(obj)

    def on_sync(self, obj: Any) -> None:
        if self.filter_func(obj):
            self.handler.on_sync(obj)