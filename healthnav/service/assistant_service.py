from __future__ import annotations

import os
from typing import Optional

from healthnav.domain.ports.Assistant_provider import Assistant_provider
from healthnav.lib.logger import get_logger

from .insight_prompt_service import SYSTEM_PROMPT


class AssistantService:
    """High-level chat service with switchable provider (ASSISTANT_PROVIDER=ollama|gemini)."""

    def __init__(self, provider: Optional[Assistant_provider] = None) -> None:
        logger = get_logger("assistant")
        if provider is not None:
            self.provider = provider
            return
        which = os.getenv("ASSISTANT_PROVIDER", "ollama").lower()
        if which == "gemini":
            from healthnav.remote_ai_models.gemini_chat import GeminiAssistant

            self.provider = GeminiAssistant(SYSTEM_PROMPT)
            logger.info("assistant provider: Gemini")
        else:
            from healthnav.remote_ai_models.ollama_chat import OllamaAssistant

            self.provider = OllamaAssistant(SYSTEM_PROMPT)
            logger.info("assistant provider: Ollama")

    def ask(self, prompt: str) -> str:
        return self.provider.ask(prompt)
