from abc import ABC, abstractmethod

MessageContent = str | list[dict[str, object]]


class BaseCompletionClient(ABC):
    """Contract for provider-specific chat completion clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_content: MessageContent,
    ) -> str:
        """Return provider response as plain text.

        ``user_content`` is either plain text or a list of OpenAI-style
        content parts (text, image_url, file).
        """
