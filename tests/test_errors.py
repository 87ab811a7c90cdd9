from __future__ import annotations

import pytest

from healthnav.domain.errors import (
    USER_MESSAGES,
    AssistantError,
    AssistantErrorKind,
    classify_assistant_failure,
)


@pytest.mark.parametrize(
    "message,status,kind",
    [
        ("API key not valid. Please pass a valid API key.", 400, AssistantErrorKind.INVALID_CREDENTIALS),
        ("unauthorized", 401, AssistantErrorKind.INVALID_CREDENTIALS),
        ("API key expired. Please renew the API key.", 400, AssistantErrorKind.KEY_EXPIRED),
        ("reason: API_KEY_SERVICE_BLOCKED", 403, AssistantErrorKind.SERVICE_BLOCKED),
        ("[429 Too Many Requests] Resource exhausted", None, AssistantErrorKind.RATE_LIMITED),
        ("quota", 429, AssistantErrorKind.RATE_LIMITED),
        ('model "llama9" not found, try pulling it first', 404, AssistantErrorKind.MODEL_NOT_FOUND),
        ("Candidate was blocked due to SAFETY", None, AssistantErrorKind.SAFETY_BLOCK),
        ("forbidden", 403, AssistantErrorKind.SERVICE_BLOCKED),
        ("connection reset", 500, AssistantErrorKind.UNAVAILABLE),
        (None, None, AssistantErrorKind.UNAVAILABLE),
    ],
)
def test_classify_assistant_failure(message, status, kind):
    assert classify_assistant_failure(message, status) == kind


def test_every_kind_has_user_message():
    assert set(USER_MESSAGES) == set(AssistantErrorKind)


def test_assistant_error_carries_user_message():
    err = AssistantError(AssistantErrorKind.RATE_LIMITED, "[429] slow down")
    assert err.kind == AssistantErrorKind.RATE_LIMITED
    assert "high demand" in err.user_message
    assert str(err) == "rate_limited: [429] slow down"
    assert str(AssistantError(AssistantErrorKind.UNAVAILABLE)) == "unavailable"
