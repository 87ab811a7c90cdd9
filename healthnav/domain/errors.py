from __future__ import annotations

from enum import Enum
from typing import Optional


class HealthNavError(Exception):
    """Base class for failures raised by collaborators of the extraction core."""


class OCRError(HealthNavError):
    """The OCR engine could not produce text for the document."""


class UnreadableImageError(OCRError):
    """Uploaded bytes could not be decoded as an image."""


class AssistantErrorKind(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    KEY_EXPIRED = "key_expired"
    SERVICE_BLOCKED = "service_blocked"
    MODEL_NOT_FOUND = "model_not_found"
    RATE_LIMITED = "rate_limited"
    SAFETY_BLOCK = "safety_block"
    UNAVAILABLE = "unavailable"


USER_MESSAGES = {
    AssistantErrorKind.INVALID_CREDENTIALS: (
        "Sorry, there seems to be an issue with the AI configuration (invalid API key)."
    ),
    AssistantErrorKind.KEY_EXPIRED: "Sorry, the AI service API key has expired.",
    AssistantErrorKind.SERVICE_BLOCKED: (
        "Sorry, access to the AI service is blocked for this API key."
    ),
    AssistantErrorKind.MODEL_NOT_FOUND: (
        "Sorry, the configured AI model was not found. It may be unavailable in this region."
    ),
    AssistantErrorKind.RATE_LIMITED: (
        "Sorry, the AI service is temporarily unavailable due to high demand. "
        "Please wait a few moments and try again."
    ),
    AssistantErrorKind.SAFETY_BLOCK: (
        "The response was blocked due to safety guidelines. Please modify your request."
    ),
    AssistantErrorKind.UNAVAILABLE: (
        "Sorry, I encountered an error connecting to the AI service. Please try again later."
    ),
}


class AssistantError(HealthNavError):
    """Conversational model call failed; `user_message` is safe to show to end users."""

    def __init__(self, kind: AssistantErrorKind, detail: Optional[str] = None) -> None:
        self.kind = kind
        self.detail = detail
        self.user_message = USER_MESSAGES[kind]
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)


def classify_assistant_failure(message: Optional[str], status_code: Optional[int] = None) -> AssistantErrorKind:
    """Map provider error text and HTTP status to an AssistantErrorKind.

    Providers word their errors differently, so both the status code and a few
    well-known message fragments are checked. Anything unrecognised is
    reported as UNAVAILABLE.
    """
    text = message or ""
    low = text.lower()

    if "api key expired" in low:
        return AssistantErrorKind.KEY_EXPIRED
    if "api_key_service_blocked" in low:
        return AssistantErrorKind.SERVICE_BLOCKED
    if "api key not valid" in low or "invalid api key" in low or status_code == 401:
        return AssistantErrorKind.INVALID_CREDENTIALS
    if "safety" in low:
        return AssistantErrorKind.SAFETY_BLOCK
    if status_code == 429 or "[429" in text or "resource exhausted" in low or "rate limit" in low:
        return AssistantErrorKind.RATE_LIMITED
    if status_code == 404 or "[404" in text or "not found" in low:
        return AssistantErrorKind.MODEL_NOT_FOUND
    if status_code == 403:
        return AssistantErrorKind.SERVICE_BLOCKED
    return AssistantErrorKind.UNAVAILABLE
