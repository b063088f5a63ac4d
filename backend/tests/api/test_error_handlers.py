"""Error envelope helpers — Retry-After and validation messages."""

from datetime import datetime, timezone

from studyfront.api.error_handlers import retry_after_headers, validation_envelope
from studyfront.core.errors import (
    CompletionServiceError, QuotaExceededError, ResourceNotFoundError,
)


def test_quota_retry_after_counts_to_utc_midnight():
    now = datetime(2026, 4, 1, 23, 0, 30, tzinfo=timezone.utc)
    headers = retry_after_headers(QuotaExceededError("limit", 5), now)
    assert headers == {"Retry-After": "3570"}


def test_upstream_retry_after_rounds_up():
    exc = CompletionServiceError("slow down", "rate_limit", retry_after_ms=1500)
    assert retry_after_headers(exc) == {"Retry-After": "2"}


def test_no_retry_after_for_other_errors():
    assert retry_after_headers(ResourceNotFoundError("Course", "x")) is None


def test_validation_envelope_strips_value_error_prefix():
    envelope = validation_envelope([
        {"loc": ("body", "notes"), "msg": "Value error, Notes must be at least 50 characters",
         "type": "value_error"},
        {"loc": ("body", "courseId"), "msg": "Input should be a valid UUID",
         "type": "uuid_parsing"},
    ])
    error = envelope["error"]
    assert error["message"] == "Notes must be at least 50 characters"
    assert [d["field"] for d in error["details"]] == ["body.notes", "body.courseId"]


def test_validation_envelope_without_errors():
    assert validation_envelope([])["error"]["message"] == "Invalid request data"
