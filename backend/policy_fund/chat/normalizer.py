"""
프로바이더별로 제각각인 응답에서 평문 텍스트만 뽑는다.

우선순위(먼저 맞는 것 사용):
  1. chat.completions : choices[0].message.content
  2. responses 배열   : output[*].content[*].text 를 순서대로 이어붙임
  3. responses 편의값 : output_text
  4. gemini           : response.text (메서드든 프로퍼티든)
아무것도 안 맞으면 "" (예외를 던지지 않는다).
dict 와 SDK 객체(속성 접근) 모두 지원.
"""
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


def _get(obj: Any, key: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def _from_chat_completions(raw: Any) -> Optional[str]:
    choices = _get(raw, "choices")
    if not isinstance(choices, (list, tuple)) or not choices:
        return None
    content = _get(_get(choices[0], "message"), "content")
    return content if isinstance(content, str) else None


def _from_responses_array(raw: Any) -> Optional[str]:
    output = _get(raw, "output")
    if not isinstance(output, (list, tuple)):
        return None
    parts = []
    for item in output:
        # reasoning 아이템의 content 는 최종 답변이 아님
        if _get(item, "type") not in (None, "message"):
            continue
        content = _get(item, "content")
        if not isinstance(content, (list, tuple)):
            continue
        for c in content:
            if _get(c, "type") not in (None, "output_text", "text"):
                continue
            text = _get(c, "text")
            if isinstance(text, str):
                parts.append(text)
    return "".join(parts) if parts else None


def _from_output_text(raw: Any) -> Optional[str]:
    text = _get(raw, "output_text")
    return text if isinstance(text, str) else None


def _from_gemini(raw: Any) -> Optional[str]:
    if isinstance(raw, dict):
        return None
    try:
        text = getattr(raw, "text", None)
        if callable(text):
            text = text()
    except Exception as e:
        # google-genai 는 후보가 차단되면 text 접근에서 ValueError 를 낼 수 있다
        logger.warning("gemini text 추출 실패: %s", e)
        return None
    return text if isinstance(text, str) else None


EXTRACTORS = (
    ("chat.completions", _from_chat_completions),
    ("responses.output", _from_responses_array),
    ("responses.output_text", _from_output_text),
    ("gemini.text", _from_gemini),
)


def normalize(raw: Any) -> str:
    for name, extract in EXTRACTORS:
        try:
            text = extract(raw)
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            logger.debug("%s 형태 추출 중 오류: %s", name, e)
            continue
        if text is not None:
            return text
    logger.warning("알 수 없는 응답 형태라 빈 텍스트로 처리: %s", type(raw).__name__)
    return ""
