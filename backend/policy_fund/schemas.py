from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RequestKind(str, Enum):
    CHAT = "chat"
    BLOG = "blog"


class ProviderKind(str, Enum):
    OPENAI_CHAT = "openai-chat"
    OPENAI_RESPONSES = "openai-responses"
    GEMINI = "gemini"


class GenerationRequest(BaseModel):
    """검증을 통과한 요청. user_text 는 항상 trim 후 비어있지 않다."""
    model_config = ConfigDict(frozen=True)

    kind: RequestKind
    user_text: str = Field(..., min_length=1)
    topic: Optional[str] = None
    # blog 전용 스타일 필드
    title: str = ""
    keywords: List[str] = Field(default_factory=list)
    audience: str = "소상공인/자영업자"
    tone: str = "친근하고 전문가 느낌"


class ComposedPrompt(BaseModel):
    model_config = ConfigDict(frozen=True)

    system_instruction: str
    user_prompt: str


class ProviderReply(BaseModel):
    # raw_payload 는 dict 이거나 SDK 응답 객체 그대로
    raw_payload: Any = None
    provider_kind: ProviderKind


class NormalizedResult(BaseModel):
    text: str = ""
    disclaimer_present: bool = False


class OriginDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_origin: Optional[str] = Field(None, description='에코할 Origin 또는 "*", 헤더를 내보내지 않으면 None')
    vary_header: bool = False


class ChatResponse(BaseModel):
    ok: bool = True
    reply: str
    model: str
    disclaimer_present: bool = False


class BlogResponse(BaseModel):
    ok: bool = True
    content: str
    model: str
    disclaimer_present: bool = False


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
    message: str
    detail: Optional[Any] = None
    hint: Optional[str] = None
