import logging
from typing import Optional

import httpx
from google import genai
from google.genai import errors, types

from ...errors import ConfigurationError, UpstreamError, UpstreamTimeout
from ...schemas import ProviderKind, ProviderReply
from .base import ProviderAdapter

logger = logging.getLogger(__name__)

# 모델 예: gemini-2.5-flash, gemini-2.5-pro 등(계정 보유 모델만 동작)


class GeminiAdapter(ProviderAdapter):
    kind = ProviderKind.GEMINI

    def __init__(self, api_key: Optional[str], model: str = "gemini-2.5-flash", timeout: float = 30.0,
                 client: Optional[genai.Client] = None):
        self.model = model
        if client is None:
            if not api_key:
                raise ConfigurationError(
                    "서버 API 키 설정 오류",
                    hint="GEMINI_API_KEY 가 설정되지 않았습니다. (.env 또는 배포 환경변수를 확인하세요)",
                )
            # HttpOptions.timeout 단위는 ms
            client = genai.Client(api_key=api_key, http_options=types.HttpOptions(timeout=int(timeout * 1000)))
        self.client = client

    def generate(self, system_instruction: str, user_prompt: str,
                 max_output_tokens: Optional[int] = None) -> ProviderReply:
        config = {"system_instruction": system_instruction}
        if max_output_tokens:
            config["max_output_tokens"] = max_output_tokens
        try:
            resp = self.client.models.generate_content(
                model=self.model,
                contents=user_prompt,
                config=config,
            )
        except errors.APIError as e:
            logger.warning("gemini 호출 실패: code=%s", e.code)
            raise UpstreamError(e.message or None, status=e.code, detail=e.details) from e
        except httpx.TimeoutException as e:
            raise UpstreamTimeout(detail=str(e)) from e
        except Exception as e:
            logger.exception("gemini 호출 중 예기치 않은 오류")
            raise UpstreamError(str(e) or None, detail=type(e).__name__) from e
        return self._reply(resp)
