from ...config import Settings
from ...errors import ConfigurationError
from .base import ProviderAdapter
from .gemini_adapter import GeminiAdapter
from .http_adapter import OpenAIHttpResponsesAdapter
from .openai_adapter import OpenAICompletionsAdapter, OpenAIResponsesAdapter


def build_adapter(settings: Settings) -> ProviderAdapter:
    """LLM_PROVIDER 설정값으로 어댑터를 고른다. 키가 없으면 ConfigurationError."""
    p = settings.provider
    timeout = settings.request_timeout

    if p == "openai-chat":
        return OpenAICompletionsAdapter(settings.openai_api_key, settings.openai_model, timeout)
    if p == "openai-responses":
        return OpenAIResponsesAdapter(settings.openai_api_key, settings.openai_model, timeout,
                                      reasoning_effort=settings.openai_reasoning_effort)
    if p == "openai-http":
        return OpenAIHttpResponsesAdapter(settings.openai_api_key, settings.openai_model, timeout,
                                          reasoning_effort=settings.openai_reasoning_effort,
                                          base_url=settings.openai_base_url)
    if p == "gemini":
        return GeminiAdapter(settings.gemini_api_key, settings.gemini_model, timeout)
    # Settings 검증을 통과했다면 도달하지 않음
    raise ConfigurationError(f"지원하지 않는 LLM_PROVIDER 입니다: {p}")
