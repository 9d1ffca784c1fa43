from http import HTTPStatus

from pediasync.watchevent import (
    ERROR,
    STATUS_FAILURE,
    STATUS_REASON_INTERNAL_ERROR,
    Status,
    StatusError,
    new_error_event,
)


def test_generic_error_becomes_internal_error():
    event = new_error_event(ValueError("boom"))
    assert event.type == ERROR
    assert event.object == Status(
        status=STATUS_FAILURE,
        message="boom",
        reason=STATUS_REASON_INTERNAL_ERROR,
        code=HTTPStatus.INTERNAL_SERVER_ERROR,
    )


def test_generic_error_status_values():
    event = new_error_event(RuntimeError("broken"))
    assert event.object.status == "Failure"
    assert event.object.reason == "InternalError"
    assert event.object.code == 500


def test_status_error_uses_its_status():
    status = Status(status=STATUS_FAILURE, message="gone", reason="Expired", code=410)
    event = new_error_event(StatusError(status))
    assert event.type == ERROR
    assert event.object is status


def test_status_error_message():
    status = Status(message="not found")
    assert str(StatusError(status)) == "not found"


def test_status_object_used_directly():
    status = Status(status=STATUS_FAILURE, message="m")
    event = new_error_event(status)
    assert event.object is status
    assert event.type == ERROR