"""Factory for the configured model client."""

from resume_scan.adapters.llm.base import AbstractLLMClient
from resume_scan.adapters.llm.gemini_client import GeminiClient
from resume_scan.adapters.llm.openai_client import OpenAIClient
from resume_scan.core.config import LLMSettings
from resume_scan.core.errors import ValidationAppError

SUPPORTED_PROVIDERS = ("gemini", "openai")


def create_llm_client(llm_settings: LLMSettings) -> AbstractLLMClient:
    """Instantiate the client for ``llm_settings.provider``.

    Args:
        llm_settings: Model section of the application settings.

    Returns:
        AbstractLLMClient: Configured client instance.

    Raises:
        ValidationAppError: If the API key is missing or the provider is unknown.
    """
    provider = llm_settings.provider.lower()

    if provider not in SUPPORTED_PROVIDERS:
        raise ValidationAppError(
            code="llm_unknown_provider",
            message=(
                f"Unknown LLM provider: '{provider}'. "
                f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
            ),
        )

    if not llm_settings.api_key:
        raise ValidationAppError(
            code="llm_missing_api_key",
            message=f"{provider} provider requires LLM_API_KEY (or GEMINI_API_KEY) environment variable",
        )

    if provider == "gemini":
        return GeminiClient(
            api_key=llm_settings.api_key,
            model=llm_settings.model,
            timeout_seconds=llm_settings.timeout_seconds,
            temperature=llm_settings.temperature,
        )

    return OpenAIClient(
        api_key=llm_settings.api_key,
        model=llm_settings.model,
        base_url=llm_settings.base_url,
        timeout_seconds=llm_settings.timeout_seconds,
        temperature=llm_settings.temperature,
    )
