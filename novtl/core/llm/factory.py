"""
Provider resolution and construction.
"""

from typing import Optional

from novtl.config import (
    API_KEY,
    DEFAULT_MODELS,
    OPENAI_API_ENDPOINT,
    PROVIDER_ENDPOINTS,
    PROVIDER_GEMINI,
)
from novtl.models import AppState
from .base import LLMProvider, ProviderConfig, WireFormat
from .exceptions import ConfigurationError
from .providers.gemini import GeminiProvider
from .providers.openai import OpenAICompatibleProvider


def resolve_provider_config(state: AppState, provider: Optional[str] = None) -> ProviderConfig:
    """
    Map a provider id and the user's settings to network parameters.

    The key typed by the user wins; the API_KEY environment value is only a
    fallback. Unknown providers use the OpenAI endpoint.

    Args:
        state: Application settings holding keys and model selections
        provider: Provider id, defaults to the active provider

    Returns:
        ProviderConfig (the key may still be empty; providers check it before calling)
    """
    provider = provider or state.active_provider
    api_key = state.api_keys.get(provider, "") or API_KEY
    model = state.selected_models.get(provider) or DEFAULT_MODELS.get(provider, "")

    if provider == PROVIDER_GEMINI:
        return ProviderConfig(
            provider=provider,
            model=model,
            api_key=api_key,
            wire_format=WireFormat.NATIVE_STREAM,
        )

    return ProviderConfig(
        provider=provider,
        model=model,
        api_key=api_key,
        endpoint=PROVIDER_ENDPOINTS.get(provider, OPENAI_API_ENDPOINT),
        wire_format=WireFormat.HTTP_DELTA,
    )


def create_llm_provider(config: ProviderConfig, **kwargs) -> LLMProvider:
    """
    Factory function to create LLM providers.

    Args:
        config: Resolved provider configuration
        **kwargs: `client` for Gemini, `transport` for HTTP providers

    Raises:
        ConfigurationError: If the API key is empty
    """
    if not config.api_key or not config.api_key.strip():
        raise ConfigurationError(
            f"API key for {config.provider} is not set. Please enter your key first.",
            provider=config.provider,
        )

    if config.wire_format == WireFormat.NATIVE_STREAM:
        return GeminiProvider(config, client=kwargs.get("client"))
    return OpenAICompatibleProvider(config, transport=kwargs.get("transport"))
