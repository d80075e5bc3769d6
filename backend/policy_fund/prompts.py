"""
페르소나 + 사용자 입력 → (system_instruction, user_prompt)
마지막 주의문구 요구는 항상 system_instruction 에 들어간다.
"""
import re
from typing import Optional

from .schemas import ComposedPrompt, GenerationRequest, NormalizedResult, RequestKind

DISCLAIMER = "⚠️ 정확한 정보는 공고/기관 안내를 꼭 확인하세요."

CHAT_PERSONA = """
당신은 '정책자금 AI 비서'입니다.
- 한국어로 친절하고 실무적으로 답합니다.
- 확정적 단정 대신, 조건/예외/필요서류/확인경로를 함께 안내합니다.
""".strip()

BLOG_PERSONA = """
당신은 정책자금/정부지원금 전문 네이버 블로그 작가입니다.
- 글은 '문제제기 → 정보제공 → 경험결합 → CTA' 구조로 SEO 최적화하여 작성합니다.
- 분량은 1,200~1,800자 정도로 맞춥니다.
""".strip()

BLOG_TEMPLATE = """
아래 조건으로 네이버 블로그용 글을 작성해줘.

- 제목: {title}
- 주제: {topic}
- 대상: {audience}
- 톤: {tone}
- 키워드(자연스럽게 분산 배치): {keywords}

구성:
1) 문제제기(후킹)
2) 정보제공(핵심 포인트 5~7개)
3) 경험/사례 느낌의 설명(현실적인 상황)
4) CTA 3단계(관심유도 → 행동유도 → 직접문의유도)
""".strip()


def disclaimer_rule(disclaimer: str = DISCLAIMER) -> str:
    return f'- 마지막 줄에는 항상 "{disclaimer}" 문구를 그대로 포함합니다.'


class PromptComposer:
    """설정값(페르소나)만 들고 있는 순수 함수 묶음. 같은 입력이면 같은 출력."""

    def __init__(self, chat_persona: Optional[str] = None, blog_persona: Optional[str] = None,
                 disclaimer: str = DISCLAIMER):
        self.chat_persona = (chat_persona or CHAT_PERSONA).strip()
        self.blog_persona = (blog_persona or BLOG_PERSONA).strip()
        self.disclaimer = disclaimer

    def compose(self, req: GenerationRequest) -> ComposedPrompt:
        if req.kind == RequestKind.CHAT:
            persona, user_prompt = self.chat_persona, req.user_text
        else:
            persona, user_prompt = self.blog_persona, self._blog_prompt(req)

        system_instruction = f"{persona}\n{disclaimer_rule(self.disclaimer)}"
        return ComposedPrompt(system_instruction=system_instruction, user_prompt=user_prompt)

    @staticmethod
    def _blog_prompt(req: GenerationRequest) -> str:
        return BLOG_TEMPLATE.format(
            title=req.title or "(추천 제목 3개도 함께 제안)",
            topic=req.topic or req.user_text,
            audience=req.audience,
            tone=req.tone,
            keywords=", ".join(req.keywords) or "(적절히 선정)",
        )


def _squash(text: str) -> str:
    return re.sub(r"\s+", "", text)


def has_disclaimer(text: str, disclaimer: str = DISCLAIMER) -> bool:
    """주의문구가 글 끝에 있는지. 이모지 유무/공백/마침표 차이는 무시."""
    core = _squash(disclaimer.replace("⚠️", "").replace("⚠", "")).rstrip(".")
    body = _squash(text)
    idx = body.rfind(core) if core else -1
    if idx < 0:
        return False
    # 문구 뒤에는 문장부호/이모지만 허용
    return re.search(r"\w", body[idx + len(core):]) is None


def ensure_disclaimer(text: str, disclaimer: str = DISCLAIMER) -> NormalizedResult:
    """모델이 주의문구를 빼먹었으면 재요청하지 않고 끝에 붙인다. 빈 텍스트는 그대로 둔다."""
    text = (text or "").strip()
    if not text:
        return NormalizedResult(text="", disclaimer_present=False)
    if has_disclaimer(text, disclaimer):
        return NormalizedResult(text=text, disclaimer_present=True)
    return NormalizedResult(text=f"{text}\n\n{disclaimer}", disclaimer_present=False)
