from __future__ import annotations

import contextvars
import io
import json
import logging
from collections.abc import Iterator

import pytest

from tasktracker.core.config import Settings
from tasktracker.core.context import bind_request_id, bind_user_id, reset_request_id
from tasktracker.core.logging import REDACTED, configure_logging


@pytest.fixture()
def captured_logs() -> Iterator[io.StringIO]:
    settings = Settings(environment="test", log_level="INFO")
    configure_logging(settings)

    root_logger = logging.getLogger()
    handler = next(
        (h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)),
        None,
    )
    assert handler is not None, "Expected JSON stream handler to be configured"

    buffer = io.StringIO()
    previous_stream = handler.setStream(buffer)
    try:
        yield buffer
    finally:
        handler.flush()
        handler.setStream(previous_stream)


def _last_line(buffer: io.StringIO) -> dict:
    log_lines = buffer.getvalue().strip().splitlines()
    assert log_lines, "Expected structured log line to be captured"
    return json.loads(log_lines[-1])


def test_configure_logging_outputs_json_with_request_id(captured_logs: io.StringIO) -> None:
    token = bind_request_id("req-json-1")
    try:
        logging.getLogger("tasktracker.tests").info("structured log event", extra={"component": "unit-test"})
    finally:
        reset_request_id(token)

    payload = _last_line(captured_logs)
    assert payload["message"] == "structured log event"
    assert payload["request_id"] == "req-json-1"
    assert payload["environment"] == "test"
    assert payload["level"] == "INFO"
    assert payload["component"] == "unit-test"
    assert payload["service"] == "Task Tracker"


def test_credentials_in_extra_fields_are_masked(captured_logs: io.StringIO) -> None:
    logging.getLogger("tasktracker.tests").warning(
        "sign-in attempt",
        extra={"username": "alice", "password": "pw1", "token": "abc.def.ghi"},
    )

    payload = _last_line(captured_logs)
    assert payload["username"] == "alice"
    assert payload["password"] == REDACTED
    assert payload["token"] == REDACTED
    assert "pw1" not in captured_logs.getvalue()


def test_bound_user_id_is_included(captured_logs: io.StringIO) -> None:
    def _emit() -> None:
        bind_user_id("652f1c8a8b3e4a0012a1b2c2")
        logging.getLogger("tasktracker.tests").info("task created")

    contextvars.copy_context().run(_emit)

    assert _last_line(captured_logs)["user_id"] == "652f1c8a8b3e4a0012a1b2c2"
