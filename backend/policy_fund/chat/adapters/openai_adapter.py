import logging
from typing import Optional

import openai
from openai import OpenAI

from ...errors import ConfigurationError, UpstreamError, UpstreamTimeout
from ...schemas import ProviderKind, ProviderReply
from .base import ProviderAdapter

logger = logging.getLogger(__name__)

KEY_HINT = "OPENAI_API_KEY 가 설정되지 않았습니다. (.env 또는 배포 환경변수를 확인하세요)"


def _build_client(api_key: Optional[str], timeout: float) -> OpenAI:
    if not api_key:
        raise ConfigurationError("서버 API 키 설정 오류", hint=KEY_HINT)
    # 요청당 호출은 한 번뿐, SDK 자동 재시도는 끈다
    return OpenAI(api_key=api_key, timeout=timeout, max_retries=0)


def _translate(e: Exception) -> Exception:
    """openai SDK 예외 → UpstreamError / UpstreamTimeout"""
    if isinstance(e, openai.APITimeoutError):
        return UpstreamTimeout(detail=str(e))
    if isinstance(e, openai.APIStatusError):
        return UpstreamError(e.message, status=e.status_code, detail=e.body)
    return UpstreamError(str(e) or None, detail=type(e).__name__)


class OpenAICompletionsAdapter(ProviderAdapter):
    kind = ProviderKind.OPENAI_CHAT

    def __init__(self, api_key: Optional[str], model: str = "gpt-4o-mini", timeout: float = 30.0,
                 client: Optional[OpenAI] = None):
        self.model = model
        self.client = client or _build_client(api_key, timeout)

    def generate(self, system_instruction: str, user_prompt: str,
                 max_output_tokens: Optional[int] = None) -> ProviderReply:
        kwargs = {"max_tokens": max_output_tokens} if max_output_tokens else {}
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": user_prompt},
                ],
                **kwargs,
            )
        except openai.OpenAIError as e:
            logger.warning("chat.completions 호출 실패: %s", type(e).__name__)
            raise _translate(e) from e
        return self._reply(resp)


class OpenAIResponsesAdapter(ProviderAdapter):
    kind = ProviderKind.OPENAI_RESPONSES

    def __init__(self, api_key: Optional[str], model: str = "gpt-4o-mini", timeout: float = 30.0,
                 reasoning_effort: Optional[str] = None, client: Optional[OpenAI] = None):
        self.model = model
        self.reasoning_effort = reasoning_effort
        self.client = client or _build_client(api_key, timeout)

    def generate(self, system_instruction: str, user_prompt: str,
                 max_output_tokens: Optional[int] = None) -> ProviderReply:
        kwargs = {}
        if self.reasoning_effort:
            kwargs["reasoning"] = {"effort": self.reasoning_effort}
        if max_output_tokens:
            kwargs["max_output_tokens"] = max_output_tokens
        try:
            resp = self.client.responses.create(
                model=self.model,
                instructions=system_instruction,
                input=user_prompt,
                **kwargs,
            )
        except openai.OpenAIError as e:
            logger.warning("responses 호출 실패: %s", type(e).__name__)
            raise _translate(e) from e
        return self._reply(resp)
