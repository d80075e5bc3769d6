from abc import ABC, abstractmethod
from typing import Optional

from ...schemas import ProviderKind, ProviderReply


class ProviderAdapter(ABC):
    """generate(system_instruction, user_prompt) 하나만 노출하는 프로바이더 인터페이스.

    구현체는 실패 시 UpstreamError / UpstreamTimeout 만 던져야 한다.
    """

    kind: ProviderKind
    model: str

    @abstractmethod
    def generate(self, system_instruction: str, user_prompt: str,
                 max_output_tokens: Optional[int] = None) -> ProviderReply:
        raise NotImplementedError

    def _reply(self, raw) -> ProviderReply:
        return ProviderReply(raw_payload=raw, provider_kind=self.kind)

    def close(self) -> None:
        """보유한 SDK/HTTP 클라이언트 정리. 앱 종료 시 한 번 호출된다."""
        close = getattr(getattr(self, "client", None), "close", None)
        if callable(close):
            close()
