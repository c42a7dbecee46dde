"""Provider configurations."""

from toyclaw.configuration.providers.litellm import LiteLLMProvider

__all__ = ["LiteLLMProvider"]
