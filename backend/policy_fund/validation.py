"""요청 본문 검증.

본문은 이미 파싱된 dict 일 수도, 문자열/바이트일 수도 있다.
어느 쪽이든 여기 한 곳에서 GenerationRequest 로 바꾸고,
실패하면 MalformedJson / MissingField 를 던진다.
"""
import json
from collections.abc import Mapping
from typing import Any, List, Union

from .errors import MalformedJson, MissingField
from .schemas import GenerationRequest, RequestKind

# 요청 종류별 필수 필드
REQUIRED_FIELD = {
    RequestKind.CHAT: "message",
    RequestKind.BLOG: "topic",
}

MISSING_MESSAGES = {
    RequestKind.CHAT: "질문 내용(message)이 없습니다.",
    RequestKind.BLOG: "주제(topic)가 입력되지 않았습니다.",
}


def parse_body(body: Union[Mapping, str, bytes, None]) -> Mapping:
    if body is None:
        return {}
    if isinstance(body, Mapping):
        return body
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedJson() from e
    if isinstance(body, str):
        if not body.strip():
            return {}
        try:
            body = json.loads(body)
        except ValueError as e:
            raise MalformedJson() from e
    if not isinstance(body, Mapping):
        raise MalformedJson("JSON 객체 형식으로 보내주세요.")
    return body


def _keywords(val: Any) -> List[str]:
    if isinstance(val, (list, tuple)):
        return [str(k).strip() for k in val if str(k).strip()]
    return [k.strip() for k in str(val or "").split(",") if k.strip()]


def _optional_str(data: Mapping, key: str, default: str = "") -> str:
    val = data.get(key)
    if val is None:
        return default
    return str(val).strip() or default


def validate_request(body: Union[Mapping, str, bytes, None], kind: RequestKind) -> GenerationRequest:
    data = parse_body(body)

    field = REQUIRED_FIELD[kind]
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise MissingField(field, MISSING_MESSAGES[kind])
    value = value.strip()

    if kind == RequestKind.CHAT:
        return GenerationRequest(kind=kind, user_text=value)

    return GenerationRequest(
        kind=kind,
        user_text=value,
        topic=value,
        title=_optional_str(data, "title"),
        keywords=_keywords(data.get("keywords")),
        audience=_optional_str(data, "audience", "소상공인/자영업자"),
        tone=_optional_str(data, "tone", "친근하고 전문가 느낌"),
    )
