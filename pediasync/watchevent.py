"""Watch events that report an error as an API status."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

ERROR = "ERROR"

STATUS_FAILURE = "Failure"
STATUS_REASON_INTERNAL_ERROR = "InternalError"


@dataclass
class Status:
    """An API status object."""

    status: str = ""
    message: str = ""
    reason: str = ""
    code: int = 0


class StatusError(Exception):
    """An error that carries an API status."""

    def __init__(self, status: Status) -> None:
        super().__init__(status.message)
        self.status = status


@dataclass
class WatchEvent:
    type: str
    object: Any


def new_error_event(err: Any) -> WatchEvent:
    """Return an error watch event describing ``err``.

    A Status is used as it is, a StatusError contributes its status, and any
    other error becomes an internal-error failure status.
    """
    if isinstance(err, Status):
        obj = err
    elif isinstance(err, StatusError):
        obj = err.status
    else:
        obj = Status(
            status=STATUS_FAILURE,
            message=str(err),
            reason=STATUS_REASON_INTERNAL_ERROR,
            code=int(HTTPStatus.INTERNAL_SERVER_ERROR),
        )
    return WatchEvent(type=ERROR, object=obj)