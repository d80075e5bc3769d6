"""
정책자금 AI 비서 백엔드 (FastAPI)
- GET  /          : health
- POST /api/chat  : 상담 채팅
- POST /api/blog  : 블로그 글 작성

/api/* 는 POST 전용. 브라우저 주소창(GET)으로 열면 405 가 정상이다.
실행: uvicorn policy_fund.main:create_app --factory --app-dir backend
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .chat.adapters.base import ProviderAdapter
from .chat.adapters.factory import build_adapter
from .chat.router import USAGE_HINTS, router as chat_router
from .chat.service import GenerationService
from .config import Settings
from .cors import OriginPolicy, cors_headers
from .errors import ConfigurationError, MethodNotAllowed, OriginRejected, PolicyFundError
from .prompts import PromptComposer

logger = logging.getLogger(__name__)


def error_response(exc: PolicyFundError, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def handle_domain_error(request: Request, exc: PolicyFundError):
    if exc.status_code >= 500:
        logger.error("%s %s 실패: %s (%s)", request.method, request.url.path, exc.error, exc.message)
    return error_response(exc)


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    # starlette 기본 {"detail": ...} 대신 동일한 오류 형태로
    if exc.status_code == 405:
        err = MethodNotAllowed(hint=USAGE_HINTS.get(request.url.path))
        return error_response(err, headers=exc.headers)
    body = {"ok": False, "error": str(exc.detail), "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


def create_app(settings: Optional[Settings] = None, adapter: Optional[ProviderAdapter] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    config_error = None
    if adapter is None:
        try:
            adapter = build_adapter(settings)
        except ConfigurationError as e:
            # 프로세스는 띄우고, 생성 요청마다 500 + 안내 문구로 알린다
            logger.error("LLM 어댑터 생성 실패: %s", e.hint or e.message)
            config_error = e

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if adapter is not None:
            logger.info("LLM 어댑터 정리")
            adapter.close()

    app = FastAPI(title="Policy Fund AI Assistant API", lifespan=lifespan)
    app.state.settings = settings
    app.state.origin_policy = OriginPolicy(settings.allowed_origins)
    app.state.service = GenerationService(
        PromptComposer(settings.chat_persona, settings.blog_persona),
        adapter=adapter,
        config_error=config_error,
        chat_max_output_tokens=settings.chat_max_output_tokens,
        blog_max_output_tokens=settings.blog_max_output_tokens,
    )

    app.add_exception_handler(PolicyFundError, handle_domain_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)

    @app.middleware("http")
    async def apply_origin_policy(request: Request, call_next):
        policy: OriginPolicy = request.app.state.origin_policy
        origin = request.headers.get("origin")
        if request.method == "OPTIONS":
            decision = policy.preflight(origin)
        else:
            try:
                decision = policy.decide(origin)
            except OriginRejected as e:
                # 본문 파싱/프로바이더 호출 전에 차단
                return error_response(e, headers={"Vary": "Origin"})

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("%s %s 처리 중 예기치 않은 오류", request.method, request.url.path)
            response = error_response(PolicyFundError())
        response.headers.update(cors_headers(decision))
        return response

    @app.get("/")
    def health():
        return {
            "status": "ok",
            "message": "정책자금 AI 비서 백엔드 서버",
            "provider": settings.provider,
            "endpoints": ["POST /api/chat", "POST /api/blog"],
        }

    app.include_router(chat_router)
    return app

