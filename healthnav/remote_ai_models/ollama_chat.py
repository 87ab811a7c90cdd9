from __future__ import annotations

import os
from typing import Optional

from ollama import Client, RequestError, ResponseError

from healthnav.domain.errors import AssistantError, AssistantErrorKind, classify_assistant_failure
from healthnav.domain.ports.Assistant_provider import Assistant_provider
from healthnav.lib.logger import get_logger


class OllamaAssistant(Assistant_provider):
    """Chat provider backed by Ollama (cloud or self-hosted).

    Controlled by env:
      - OLLAMA_HOST (default: https://ollama.com)
      - OLLAMA_API_KEY (required for cloud)
      - OLLAMA_MODEL (default: gpt-oss:120b)
    """

    def __init__(self, system_prompt: str, client: Optional[Client] = None) -> None:
        self.logger = get_logger("assistant.ollama")
        self.system_prompt = system_prompt
        self.host = os.getenv("OLLAMA_HOST", "https://ollama.com")
        self.model = os.getenv("OLLAMA_MODEL", "gpt-oss:120b")
        self.api_key = os.getenv("OLLAMA_API_KEY")
        if client is None:
            headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
            client = Client(host=self.host, headers=headers)
        self.client = client

    def ask(self, prompt: str) -> str:
        messages = [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": prompt},
        ]
        self.logger.info("ollama: sending %d chars to model=%s", len(prompt), self.model)
        try:
            response = self.client.chat(self.model, messages=messages, stream=False)
        except ResponseError as e:
            kind = classify_assistant_failure(e.error, e.status_code)
            self.logger.warning("ollama: request failed status=%s kind=%s", e.status_code, kind.value)
            raise AssistantError(kind, e.error) from e
        except (RequestError, ConnectionError) as e:
            self.logger.warning("ollama: connection failed: %s", e)
            raise AssistantError(AssistantErrorKind.UNAVAILABLE, str(e)) from e

        text = (response.get("message", {}).get("content") or "").strip()
        if not text:
            raise AssistantError(AssistantErrorKind.UNAVAILABLE, "empty reply from model")
        return text
