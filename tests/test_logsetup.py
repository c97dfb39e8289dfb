import io
import logging

import pytest

from bookings.logsetup import err, setup_logger


@pytest.fixture
def stream():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    buffer = io.StringIO()
    yield buffer
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_err_holds_message():
    assert err(ValueError("boom")) == {"error": "boom"}


def test_debug_records_are_written(stream):
    setup_logger(stream)
    logging.getLogger("bookings.test").debug("hello")
    line = stream.getvalue().strip()
    assert "level=DEBUG" in line
    assert "msg=hello" in line
    assert line.startswith("time=")


def test_returns_root_at_debug_level(stream):
    logger = setup_logger(stream)
    assert logger is logging.getLogger()
    assert logger.level == logging.DEBUG


def test_message_with_spaces_is_quoted(stream):
    setup_logger(stream)
    logging.getLogger("bookings.test").info("application started")
    assert 'msg="application started"' in stream.getvalue()


def test_error_attribute_is_rendered(stream):
    setup_logger(stream)
    logging.getLogger("bookings.test").info(
        "failed to decode request body", extra=err(ValueError("bad input"))
    )
    output = stream.getvalue()
    assert 'error="bad input"' in output
    assert "level=INFO" in output


def test_warning_uses_short_level_name(stream):
    setup_logger(stream)
    logging.getLogger("bookings.test").warning("careful")
    assert "level=WARN " in stream.getvalue()


def test_setup_twice_does_not_duplicate(stream):
    setup_logger(io.StringIO())
    setup_logger(stream)
    logging.getLogger("bookings.test").info("once")
    assert len(stream.getvalue().splitlines()) == 1