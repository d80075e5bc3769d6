"""
SDK 없이 OpenAI Responses API(/v1/responses)를 httpx 로 직접 호출하는 어댑터.
"""
import logging
from typing import Optional

import httpx

from ...errors import ConfigurationError, UpstreamError, UpstreamTimeout
from ...schemas import ProviderKind, ProviderReply
from .base import ProviderAdapter
from .openai_adapter import KEY_HINT

logger = logging.getLogger(__name__)


class OpenAIHttpResponsesAdapter(ProviderAdapter):
    kind = ProviderKind.OPENAI_RESPONSES

    def __init__(self, api_key: Optional[str], model: str = "gpt-4o-mini", timeout: float = 30.0,
                 reasoning_effort: Optional[str] = None, base_url: str = "https://api.openai.com/v1",
                 client: Optional[httpx.Client] = None):
        if not api_key:
            raise ConfigurationError("서버 API 키 설정 오류", hint=KEY_HINT)
        self.model = model
        self.reasoning_effort = reasoning_effort
        self.url = base_url.rstrip("/") + "/responses"
        self._headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        self.client = client or httpx.Client(timeout=timeout)

    def _body(self, system_instruction: str, user_prompt: str, max_output_tokens: Optional[int]) -> dict:
        body = {
            "model": self.model,
            "input": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_prompt},
            ],
        }
        if self.reasoning_effort:
            body["reasoning"] = {"effort": self.reasoning_effort}
        if max_output_tokens:
            body["max_output_tokens"] = max_output_tokens
        return body

    def generate(self, system_instruction: str, user_prompt: str,
                 max_output_tokens: Optional[int] = None) -> ProviderReply:
        try:
            res = self.client.post(
                self.url,
                headers=self._headers,
                json=self._body(system_instruction, user_prompt, max_output_tokens),
            )
        except httpx.TimeoutException as e:
            raise UpstreamTimeout(detail=str(e)) from e
        except httpx.HTTPError as e:
            logger.warning("OpenAI HTTP 요청 실패: %s", type(e).__name__)
            raise UpstreamError(f"OpenAI API 연결 실패: {e}", detail=type(e).__name__) from e

        try:
            data = res.json()
        except ValueError:
            data = None

        if res.is_error:
            msg = None
            if isinstance(data, dict) and isinstance(data.get("error"), dict):
                msg = data["error"].get("message")
            logger.warning("OpenAI API 오류 응답: status=%s", res.status_code)
            raise UpstreamError(
                msg or f"OpenAI API error (status {res.status_code})",
                status=res.status_code,
                detail=data if data is not None else res.text,
            )

        if data is None:
            raise UpstreamError("OpenAI API 응답을 JSON 으로 해석할 수 없습니다.", status=res.status_code, detail=res.text)
        return self._reply(data)
