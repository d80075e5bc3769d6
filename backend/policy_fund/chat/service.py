"""
요청 1건 처리 흐름:
    Received → Validated → Composed → Dispatched → Normalized → Responded

- 검증 실패(MalformedJson/MissingField)는 프로바이더까지 가지 않는다.
- 프로바이더 호출은 요청당 정확히 한 번, 재시도 없음.
- 프로바이더 쪽 예외는 UpstreamError / UpstreamTimeout 으로만 밖에 나간다.
"""
import logging
from typing import Mapping, Optional, Union

from starlette.concurrency import run_in_threadpool

from ..errors import ConfigurationError, PolicyFundError, UpstreamError
from ..prompts import PromptComposer, ensure_disclaimer
from ..schemas import NormalizedResult, RequestKind
from ..validation import validate_request
from .adapters.base import ProviderAdapter
from .normalizer import normalize

logger = logging.getLogger(__name__)


class GenerationService:
    def __init__(self, composer: PromptComposer, adapter: Optional[ProviderAdapter] = None,
                 config_error: Optional[ConfigurationError] = None,
                 chat_max_output_tokens: int = 900, blog_max_output_tokens: int = 1400):
        if adapter is None and config_error is None:
            config_error = ConfigurationError("LLM 프로바이더가 설정되지 않았습니다.")
        self.composer = composer
        self.adapter = adapter
        # 설정 오류는 메시지만 보관, 예외 인스턴스는 요청 간에 공유하지 않는다
        self.config_message = config_error.message if config_error else None
        self.config_hint = config_error.hint if config_error else None
        self.max_tokens = {
            RequestKind.CHAT: chat_max_output_tokens,
            RequestKind.BLOG: blog_max_output_tokens,
        }

    @property
    def model(self) -> str:
        return getattr(self.adapter, "model", "") or ""

    def _require_adapter(self) -> ProviderAdapter:
        if self.adapter is None:
            raise ConfigurationError(self.config_message, hint=self.config_hint)
        return self.adapter

    async def run(self, body: Union[Mapping, str, bytes, None], kind: RequestKind) -> NormalizedResult:
        req = validate_request(body, kind)
        adapter = self._require_adapter()
        prompt = self.composer.compose(req)

        logger.info("%s 요청 처리: 입력 %d자, provider=%s", kind.value, len(req.user_text), adapter.kind.value)
        try:
            reply = await run_in_threadpool(
                adapter.generate, prompt.system_instruction, prompt.user_prompt, self.max_tokens[kind]
            )
        except PolicyFundError:
            raise
        except Exception as e:
            # 어댑터가 예상하지 못한 예외도 UpstreamError 로 통일
            logger.exception("프로바이더 호출 중 예기치 않은 오류")
            raise UpstreamError(detail=type(e).__name__) from e

        text = normalize(reply.raw_payload)
        if not text:
            logger.warning("%s 응답에서 텍스트를 찾지 못함 (provider=%s)", kind.value, reply.provider_kind.value)
        return ensure_disclaimer(text, self.composer.disclaimer)
