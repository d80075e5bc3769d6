"""
환경 변수 설정 관리
.env 파일에서 값을 읽어 프로세스 시작 시 한 번만 Settings 로 고정한다.
"""
import os
from typing import FrozenSet, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigurationError

WILDCARD = "*"

PROVIDERS = ("openai-chat", "openai-responses", "openai-http", "gemini")


def _split_csv(val: Optional[str]) -> list[str]:
    if not val:
        return []
    return [x.strip() for x in val.split(",") if x.strip()]


def parse_allowed_origins(val: Optional[str]) -> FrozenSet[str]:
    """쉼표 목록을 허용 Origin 집합으로. 비어 있거나 `*` 가 섞여 있으면 와일드카드."""
    origins = [o.rstrip("/") for o in _split_csv(val)]
    if not origins or WILDCARD in origins:
        return frozenset({WILDCARD})
    return frozenset(origins)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: str = Field("openai-chat", description="openai-chat|openai-responses|openai-http|gemini")
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_reasoning_effort: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    allowed_origins: FrozenSet[str] = frozenset({WILDCARD})
    request_timeout: float = 30.0
    max_body_bytes: int = Field(1024 * 1024, gt=0)
    chat_max_output_tokens: int = 900
    blog_max_output_tokens: int = 1400
    chat_persona: Optional[str] = None
    blog_persona: Optional[str] = None
    log_level: str = "INFO"

    @field_validator("provider")
    @classmethod
    def _check_provider(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in PROVIDERS:
            raise ValueError(f"지원하지 않는 LLM_PROVIDER 입니다: {v} (가능: {', '.join(PROVIDERS)})")
        return v

    @field_validator("openai_reasoning_effort")
    @classmethod
    def _check_effort(cls, v: Optional[str]) -> Optional[str]:
        if v and v not in ("low", "medium", "high"):
            raise ValueError("OPENAI_REASONING_EFFORT 는 low|medium|high 중 하나여야 합니다.")
        return v or None

    @property
    def active_model(self) -> str:
        return self.gemini_model if self.provider == "gemini" else self.openai_model

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()

        env = os.environ
        origins = env.get("ALLOWED_ORIGINS") or env.get("FRONTEND_ORIGIN")
        try:
            return cls(
                provider=env.get("LLM_PROVIDER", "openai-chat"),
                openai_api_key=env.get("OPENAI_API_KEY") or None,
                openai_model=env.get("OPENAI_MODEL", "gpt-4o-mini"),
                openai_reasoning_effort=env.get("OPENAI_REASONING_EFFORT") or None,
                openai_base_url=env.get("OPENAI_BASE_URL", "https://api.openai.com/v1"),
                gemini_api_key=env.get("GEMINI_API_KEY") or None,
                gemini_model=env.get("GEMINI_MODEL", "gemini-2.5-flash"),
                allowed_origins=parse_allowed_origins(origins),
                request_timeout=float(env.get("REQUEST_TIMEOUT", "30")),
                max_body_bytes=int(env.get("MAX_BODY_BYTES", str(1024 * 1024))),
                chat_max_output_tokens=int(env.get("CHAT_MAX_OUTPUT_TOKENS", "900")),
                blog_max_output_tokens=int(env.get("BLOG_MAX_OUTPUT_TOKENS", "1400")),
                chat_persona=env.get("CHAT_PERSONA") or None,
                blog_persona=env.get("BLOG_PERSONA") or None,
                log_level=env.get("LOG_LEVEL", "INFO").upper(),
            )
        except ValueError as e:
            # pydantic.ValidationError 도 ValueError 의 하위 클래스
            raise ConfigurationError(f"환경 변수 설정 오류: {e}") from e
