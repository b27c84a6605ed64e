"""
Tests for the JSON log pipeline: interception, request ids and secret masking.
"""

import logging

import pytest
from loguru import logger

from app.core.logging_config import (
    REDACTED,
    configure_logging,
    redact,
    request_id_var,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("state=abc&code=xyz", f"state={REDACTED}&code={REDACTED}"),
        (
            "https://app.example.com/#/auth/verify-token?token=eyJ.a.b",
            f"https://app.example.com/#/auth/verify-token?token={REDACTED}",
        ),
        ("access_token=gho_1&scope=user", f"access_token={REDACTED}&scope=user"),
        ("client_secret=s3cr3t", f"client_secret={REDACTED}"),
        ("error=unable-to-auth", "error=unable-to-auth"),
        ("barcode=1234", "barcode=1234"),
        ("no parameters here", "no parameters here"),
    ],
)
def test_redact(text, expected):
    assert redact(text) == expected


def test_standard_logging_is_written_as_json(captured_logs):
    logging.getLogger("app.auth.github.flow").warning(
        "GitHub login failed for /callback?state=s1&code=c1"
    )

    record = captured_logs.records()[-1]
    assert record["level"] == "WARNING"
    assert record["message"] == (
        f"GitHub login failed for /callback?state={REDACTED}&code={REDACTED}"
    )
    assert record["request_id"] is None
    assert "exception" not in record


def test_level_filters_records(captured_logs):
    configure_logging(level="WARNING", stream=captured_logs)
    logging.getLogger(__name__).info("ignored")
    logging.getLogger(__name__).error("kept")

    assert "ignored" not in captured_logs.messages()
    assert "kept" in captured_logs.messages()


def test_request_id_attached_from_context(captured_logs):
    context = request_id_var.set("req-123")
    try:
        logger.info("inside request")
    finally:
        request_id_var.reset(context)
    logger.info("outside request")

    records = {r["message"]: r for r in captured_logs.records()}
    assert records["inside request"]["request_id"] == "req-123"
    assert records["outside request"]["request_id"] is None


def test_exception_text_is_masked(captured_logs):
    try:
        raise ValueError("bad callback /callback?code=c1")
    except ValueError:
        logging.getLogger(__name__).exception("Callback crashed")

    record = captured_logs.records()[-1]
    assert record["exception"]["type"] == "ValueError"
    assert record["exception"]["value"] == f"bad callback /callback?code={REDACTED}"
    assert "code=c1" not in record["exception"]["traceback"]
