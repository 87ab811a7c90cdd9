from abc import ABC, abstractmethod


class Assistant_provider(ABC):
    @abstractmethod
    def ask(self, prompt: str) -> str:
        """Send a single prompt and return the model's reply text.

        Raises AssistantError on any provider failure.
        """
        pass
