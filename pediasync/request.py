"""Immutable request-scoped values: cluster name, Accept header and query."""

from __future__ import annotations

import enum
from typing import Any, Dict, Hashable, List, Optional

Query = Dict[str, List[str]]

_NO_KEY = object()


class RequestContext:
    """An immutable chain of key/value pairs; each ``with_value`` adds a link."""

    __slots__ = ("_parent", "_key", "_value")

    def __init__(self) -> None:
        self._parent: Optional[RequestContext] = None
        self._key: Any = _NO_KEY
        self._value: Any = None

    def with_value(self, key: Hashable, value: Any) -> "RequestContext":
        child = RequestContext()
        child._parent = self
        child._key = key
        child._value = value
        return child

    def value(self, key: Hashable) -> Any:
        """Return the value most recently bound to ``key``, or None."""
        ctx: Optional[RequestContext] = self
        while ctx is not None:
            if ctx._key is not _NO_KEY and ctx._key == key:
                return ctx._value
            ctx = ctx._parent
        return None


class _Key(enum.Enum):
    CLUSTER_NAME = enum.auto()
    ACCEPT_HEADER = enum.auto()
    QUERY = enum.auto()


def with_cluster_name(parent: RequestContext, name: str) -> RequestContext:
    if not name:
        return parent
    return parent.with_value(_Key.CLUSTER_NAME, name)


def cluster_name_from(ctx: RequestContext) -> Optional[str]:
    """Return the cluster name stored in ``ctx``, or None if there is none."""
    name = ctx.value(_Key.CLUSTER_NAME)
    return name if isinstance(name, str) else None


def cluster_name_value(ctx: RequestContext) -> str:
    return cluster_name_from(ctx) or ""


def with_accept_header(parent: RequestContext, accept: str) -> RequestContext:
    if not accept:
        return parent
    return parent.with_value(_Key.ACCEPT_HEADER, accept)


def accept_header_from(ctx: RequestContext) -> str:
    accept = ctx.value(_Key.ACCEPT_HEADER)
    return accept if isinstance(accept, str) else ""


def with_request_query(parent: RequestContext, query: Optional[Query]) -> RequestContext:
    if query is None:
        return parent
    return parent.with_value(_Key.QUERY, query)


def request_query_from(ctx: RequestContext) -> Optional[Query]:
    return ctx.value(_Key.QUERY)


def has_request_query(ctx: RequestContext) -> bool:
    return ctx.value(_Key.QUERY) is not None