"""
Tests for request-scoped logging.
"""

import logging

from barberbooking.request_logger import REDACTED, RequestLogger, sanitize_data


def test_sanitize_data_redacts_nested_secrets():
    data = {
        "user": "ana",
        "Password": "hunter2",
        "nested": {"apiKey": "k", "items": [{"token": "t", "ok": 1}]},
    }

    assert sanitize_data(data) == {
        "user": "ana",
        "Password": REDACTED,
        "nested": {"apiKey": REDACTED, "items": [{"token": REDACTED, "ok": 1}]},
    }


def test_sanitize_data_leaves_scalars():
    assert sanitize_data("plain") == "plain"
    assert sanitize_data(None) is None


def test_records_carry_request_metadata(caplog):
    caplog.set_level(logging.DEBUG, logger="tests.request")
    log = RequestLogger(
        logging.getLogger("tests.request"),
        function_name="time-slots",
        invocation_id="abcdef1234567890",
    )

    log.info("Time slots retrieved", data={"slotsCount": 3, "secret": "x"})

    record = caplog.records[0]
    assert record.function_name == "time-slots"
    assert record.invocation_id == "abcdef1234567890"
    assert record.data == {"slotsCount": 3, "secret": REDACTED}
    assert record.getMessage().startswith("[time-slots:abcdef12] Time slots retrieved")


def test_db_operation_helpers(caplog):
    caplog.set_level(logging.DEBUG, logger="tests.request")
    log = RequestLogger(logging.getLogger("tests.request"), function_name="appointments")

    log.log_before_db_operation("insertAppointment", {"barberId": 1})
    log.log_after_db_operation("insertAppointment", {"insertedId": "x"})

    before, after = caplog.records
    assert before.levelno == logging.DEBUG
    assert before.data == {"operation": "insertAppointment", "data": {"barberId": 1}}
    assert after.levelno == logging.INFO
    assert "After insertAppointment" in after.getMessage()


def test_generated_invocation_id():
    first = RequestLogger(function_name="a")
    second = RequestLogger(function_name="a")

    assert first.extra["invocation_id"] != second.extra["invocation_id"]
