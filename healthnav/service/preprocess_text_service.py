from __future__ import annotations

import re
from typing import Optional

from healthnav.domain.ports.Preprocess_provider import Preprocess_text

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """Collapse every whitespace run (newlines included) into one space and trim."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


class PreprocessTextService(Preprocess_text):
    """Flatten OCR output into the single-line form the field extractor scans."""

    def normalize(self, text: str) -> str:
        return normalize_text(text)
