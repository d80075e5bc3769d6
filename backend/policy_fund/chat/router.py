from fastapi import APIRouter, Depends, Request, Response

from ..errors import PayloadTooLarge
from ..schemas import BlogResponse, ChatResponse, ErrorResponse, RequestKind
from .service import GenerationService

router = APIRouter(prefix="/api", tags=["chat"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    405: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}

# 405 응답에 붙여줄 사용 안내
USAGE_HINTS = {
    "/api/chat": "POST /api/chat 로 JSON { message: '...' } 를 보내야 합니다.",
    "/api/blog": "POST /api/blog 로 JSON { topic: '...', title?, keywords?, audience?, tone? } 를 보내야 합니다.",
}


def get_service(request: Request) -> GenerationService:
    return request.app.state.service


async def read_body(request: Request) -> bytes:
    """MAX_BODY_BYTES 를 넘으면 끝까지 읽지 않고 PayloadTooLarge"""
    limit = request.app.state.settings.max_body_bytes
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLarge(detail={"limit": limit})

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLarge(detail={"limit": limit})
    return bytes(body)


# 본문은 직접 읽는다: 문자열로 온 JSON 도 validate_request 한 곳에서 처리

@router.post("/chat", response_model=ChatResponse, responses=ERROR_RESPONSES)
async def chat(request: Request, service: GenerationService = Depends(get_service)):
    result = await service.run(await read_body(request), RequestKind.CHAT)
    return ChatResponse(reply=result.text, model=service.model, disclaimer_present=result.disclaimer_present)


@router.post("/blog", response_model=BlogResponse, responses=ERROR_RESPONSES)
async def blog(request: Request, service: GenerationService = Depends(get_service)):
    result = await service.run(await read_body(request), RequestKind.BLOG)
    return BlogResponse(content=result.text, model=service.model, disclaimer_present=result.disclaimer_present)


@router.options("/chat", status_code=204)
@router.options("/blog", status_code=204)
async def preflight():
    # CORS 헤더는 미들웨어에서 붙인다
    return Response(status_code=204)
