from __future__ import annotations

import os
from typing import Optional

from google import genai
from google.genai import errors, types

from healthnav.domain.errors import AssistantError, AssistantErrorKind, classify_assistant_failure
from healthnav.domain.ports.Assistant_provider import Assistant_provider
from healthnav.lib.logger import get_logger

_BLOCKED_CATEGORIES = (
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
)


class GeminiAssistant(Assistant_provider):
    """Chat provider backed by Google Gemini.

    Controlled by env:
      - GEMINI_API_KEY (required)
      - GEMINI_MODEL_NAME (default: gemini-2.0-flash)
    """

    def __init__(self, system_prompt: str, client: Optional[genai.Client] = None) -> None:
        self.logger = get_logger("assistant.gemini")
        self.model = os.getenv("GEMINI_MODEL_NAME", "gemini-2.0-flash")
        if client is None:
            api_key = os.getenv("GEMINI_API_KEY")
            if not api_key:
                raise AssistantError(AssistantErrorKind.INVALID_CREDENTIALS, "GEMINI_API_KEY is not set")
            client = genai.Client(api_key=api_key)
        self.client = client
        self.config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=0.7,
            top_k=1,
            top_p=1,
            max_output_tokens=2048,
            safety_settings=[
                types.SafetySetting(category=c, threshold=types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE)
                for c in _BLOCKED_CATEGORIES
            ],
        )

    def ask(self, prompt: str) -> str:
        self.logger.info("gemini: sending %d chars to model=%s", len(prompt), self.model)
        try:
            resp = self.client.models.generate_content(model=self.model, contents=prompt, config=self.config)
        except errors.APIError as e:
            kind = classify_assistant_failure(f"[{e.code}] {e.message}", e.code)
            self.logger.warning("gemini: request failed code=%s kind=%s", e.code, kind.value)
            raise AssistantError(kind, e.message) from e

        feedback = getattr(resp, "prompt_feedback", None)
        if feedback is not None and feedback.block_reason:
            raise AssistantError(AssistantErrorKind.SAFETY_BLOCK, str(feedback.block_reason))
        text = (resp.text or "").strip()
        if not text:
            raise AssistantError(AssistantErrorKind.UNAVAILABLE, "empty reply from model")
        return text
