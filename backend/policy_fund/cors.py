import logging
from typing import Dict, Iterable, Optional

from .config import WILDCARD
from .errors import OriginRejected
from .schemas import OriginDecision

logger = logging.getLogger(__name__)

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"


class OriginPolicy:
    """허용 목록과 요청의 Origin 헤더로 CORS 응답 헤더를 결정한다.

    - 허용 목록이 와일드카드면 어떤 Origin 이든(없어도) `*`
    - 구체 목록이면 포함된 Origin 만 그대로 돌려주고 `Vary: Origin`
    - 목록에 없는 Origin 은 `*` 로 폴백하지 않고 OriginRejected
    - Origin 헤더가 없는 요청(서버 간 호출, curl)은 CORS 헤더 없이 통과
    """

    def __init__(self, allowed_origins: Iterable[str]):
        origins = frozenset(o.rstrip("/") for o in allowed_origins)
        self.wildcard = not origins or WILDCARD in origins
        self.allowed_origins = frozenset({WILDCARD}) if self.wildcard else origins

    def decide(self, origin: Optional[str]) -> OriginDecision:
        if self.wildcard:
            return OriginDecision(allowed_origin=WILDCARD, vary_header=False)
        if not origin:
            return OriginDecision(allowed_origin=None, vary_header=True)
        if origin.rstrip("/") in self.allowed_origins:
            return OriginDecision(allowed_origin=origin, vary_header=True)
        logger.warning("허용되지 않은 Origin 차단: %s", origin)
        raise OriginRejected(detail={"origin": origin})

    def preflight(self, origin: Optional[str]) -> OriginDecision:
        """OPTIONS 는 항상 통과시키되, 허용되지 않은 Origin 에는 Allow-Origin 을 주지 않는다."""
        try:
            return self.decide(origin)
        except OriginRejected:
            return OriginDecision(allowed_origin=None, vary_header=True)


def cors_headers(decision: OriginDecision) -> Dict[str, str]:
    headers = {
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
    }
    if decision.allowed_origin:
        headers["Access-Control-Allow-Origin"] = decision.allowed_origin
    if decision.vary_header:
        headers["Vary"] = "Origin"
    return headers
