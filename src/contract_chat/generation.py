"""Contract source generation through a chat-completions endpoint."""

import logging
from typing import Iterable, List, Optional

import requests

from .constants import (
    DEFAULT_GENERATION_MODEL,
    DEFAULT_GENERATION_URL,
    DEFAULT_MAX_TOKENS,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TEMPERATURE,
    SYSTEM_PROMPT,
)
from .exceptions import ServiceUnavailableError
from .types import ChatMessage

logger = logging.getLogger(__name__)


def build_generation_messages(
    history: Iterable[ChatMessage], system_prompt: str = SYSTEM_PROMPT
) -> List[ChatMessage]:
    """
    Prepend the fixed system instruction to a conversation.

    Any system messages already in the history are dropped so the
    instruction cannot be overridden by conversation content.
    """
    return [ChatMessage("system", system_prompt)] + [
        m for m in history if m.role != "system"
    ]


class GenerationClient:
    """Client for an OpenAI-compatible chat-completions API."""

    def __init__(
        self,
        api_key: Optional[str],
        url: str = DEFAULT_GENERATION_URL,
        model: str = DEFAULT_GENERATION_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Bearer token for the API
            url: Chat-completions endpoint
            model: Model name sent with every request
            temperature: Sampling temperature
            max_tokens: Completion length limit
            timeout: Per-request timeout in seconds
            session: Optional requests session to reuse

        Raises:
            ValueError: If api_key is missing
        """
        if not api_key:
            raise ValueError(
                "API key required: set $XAI_API_KEY environment variable "
                "or pass api_key parameter"
            )
        self._api_key = api_key
        self.url = url
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._session = session or requests.Session()

    def generate(self, history: Iterable[ChatMessage]) -> str:
        """
        Ask the service for a contract.

        Args:
            history: Conversation so far (user and assistant turns)

        Returns:
            Text of the first completion choice

        Raises:
            ServiceUnavailableError: On transport errors, HTTP errors or a
                                     malformed response body
        """
        messages = build_generation_messages(history)
        payload = {
            "model": self.model,
            "messages": [m.to_dict() for m in messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        try:
            response = self._session.post(
                self.url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self._api_key}",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ServiceUnavailableError(f"Generation service unreachable: {e}") from e

        # Map HTTP errors to readable reasons
        if response.status_code == 401:
            raise ServiceUnavailableError("Authentication error: invalid API key")
        if response.status_code == 429:
            raise ServiceUnavailableError("Rate limit exceeded: too many requests")
        if response.status_code != 200:
            logger.warning(
                "Generation request failed with status %s: %s",
                response.status_code,
                response.text[:500],
            )
            raise ServiceUnavailableError(
                f"Generation request failed with status {response.status_code}"
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ServiceUnavailableError("Malformed response from generation service") from e

        if not isinstance(content, str):
            raise ServiceUnavailableError("Generation service returned no text")

        return content
