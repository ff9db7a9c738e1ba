"""
Anthropic Claude API client wrapper.

This module provides a thin wrapper around the Anthropic SDK that:
1. Implements our TextModelClient protocol
2. Handles API-specific details (message format, content blocks)
3. Provides consistent error handling
4. Enables easy mocking for tests

The wrapper is intentionally thin. We're not building a general-purpose
client library, just enough to serve program generation.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import anthropic
from anthropic import APIError, APITimeoutError, RateLimitError

from src.core.program.generator import TextModelClient


logger = logging.getLogger(__name__)


class AnthropicClientError(Exception):
    """Raised when API calls fail."""
    pass


class RateLimitExceeded(AnthropicClientError):
    """Raised when we hit rate limits."""
    pass


@dataclass
class AnthropicConfig:
    """
    Configuration for the Anthropic client.

    Validated at construction time so a bad deployment fails on the first
    request instead of halfway through a generation.
    """
    api_key: str
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 8000
    timeout_seconds: float = 300.0

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("API key is required")
        if self.max_tokens < 1:
            raise ValueError("max_tokens must be positive")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")


class AnthropicTextClient(TextModelClient):
    """
    Implementation of TextModelClient using Claude.

    This class knows about Anthropic's API format but doesn't know about
    training programs. It sends a prompt and returns the text.
    """

    def __init__(self, config: AnthropicConfig) -> None:
        self._config = config
        self._client = anthropic.AsyncAnthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    async def complete(self, prompt: str) -> str:
        if not prompt:
            raise ValueError("Prompt is required")

        try:
            response = await self._client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                messages=[
                    {"role": "user", "content": prompt}
                ],
            )

            return self._extract_text_response(response)

        except RateLimitError as e:
            logger.warning("Rate limit hit", extra={"error": str(e)})
            raise RateLimitExceeded("API rate limit exceeded. Please try again later.") from e
        except APITimeoutError as e:
            logger.error("API timeout", extra={"timeout_seconds": self._config.timeout_seconds})
            raise AnthropicClientError("API request timed out") from e
        except APIError as e:
            logger.error(
                "API error",
                extra={"error": str(e), "status": getattr(e, "status_code", None)},
            )
            raise AnthropicClientError(f"API error: {e.message}") from e

    def _extract_text_response(self, response) -> str:
        """Extract text content from API response."""
        if not response.content:
            return ""

        text_blocks = [
            block.text
            for block in response.content
            if hasattr(block, "text")
        ]

        return "\n".join(text_blocks)


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_anthropic_client(
    api_key: Optional[str] = None,
    model: str = "claude-sonnet-4-20250514",
    max_tokens: int = 8000,
    timeout_seconds: float = 300.0,
) -> AnthropicTextClient:
    """
    Factory function to create configured client.

    Reads API key from parameter or environment variable.
    """
    key = api_key or os.environ.get("ANTHROPIC_API_KEY")
    if not key:
        raise ValueError(
            "API key must be provided or set in ANTHROPIC_API_KEY environment variable"
        )

    config = AnthropicConfig(
        api_key=key,
        model=model,
        max_tokens=max_tokens,
        timeout_seconds=timeout_seconds,
    )
    return AnthropicTextClient(config)
