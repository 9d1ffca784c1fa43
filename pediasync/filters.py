"""WSGI middleware that records request details in a RequestContext."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable
from urllib.parse import parse_qs, urlencode

from . import request as _request
from .request import RequestContext

WSGIApp = Callable[[Dict[str, Any], Callable], Iterable[bytes]]

CONTEXT_KEY = "pediasync.request_context"


def request_context(environ: Dict[str, Any]) -> RequestContext:
    """Return the RequestContext carried by ``environ``, or an empty one."""
    ctx = environ.get(CONTEXT_KEY)
    return ctx if ctx is not None else RequestContext()


def _query(environ: Dict[str, Any]) -> Dict[str, list]:
    return parse_qs(environ.get("QUERY_STRING", ""), keep_blank_values=True)


def with_accept_header(app: WSGIApp) -> WSGIApp:
    def middleware(environ, start_response):
        environ = dict(environ)
        environ[CONTEXT_KEY] = _request.with_accept_header(
            request_context(environ), environ.get("HTTP_ACCEPT", "")
        )
        return app(environ, start_response)

    return middleware


def with_request_query(app: WSGIApp) -> WSGIApp:
    def middleware(environ, start_response):
        environ = dict(environ)
        environ[CONTEXT_KEY] = _request.with_request_query(
            request_context(environ), _query(environ)
        )
        return app(environ, start_response)

    return middleware


def remove_field_selector_from_request(app: WSGIApp) -> WSGIApp:
    """Strip ``fieldSelector`` from the query string, keeping the original query in the context."""

    def middleware(environ, start_response):
        environ = dict(environ)
        ctx = request_context(environ)
        if not _request.has_request_query(ctx):
            environ[CONTEXT_KEY] = _request.with_request_query(ctx, _query(environ))

        origin = _query(environ)
        if origin.get("fieldSelector", [""])[0]:
            del origin["fieldSelector"]
            environ["QUERY_STRING"] = urlencode(sorted(origin.items()), doseq=True)

        return app(environ, start_response)

    return middleware