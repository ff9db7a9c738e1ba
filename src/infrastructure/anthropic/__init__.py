"""
Anthropic Claude API client wrapper.

Implements the TextModelClient protocol from core.program.generator.
"""

from .client import (
    AnthropicClientError,
    AnthropicConfig,
    AnthropicTextClient,
    RateLimitExceeded,
    create_anthropic_client,
)

__all__ = [
    "AnthropicClientError",
    "AnthropicConfig",
    "AnthropicTextClient",
    "RateLimitExceeded",
    "create_anthropic_client",
]
