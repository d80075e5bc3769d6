import html
import os
from typing import Iterable, Optional, Union

import requests

BACKEND = os.getenv("BACKEND_URL", "http://localhost:8000")


class BackendError(Exception):
    def __init__(self, status: int, error: str, message: str):
        self.status = status
        self.error = error
        self.message = message
        super().__init__(f"{error}: {message}")


def _post(path: str, payload: dict, backend: Optional[str] = None, timeout: float = 60) -> dict:
    res = requests.post(f"{backend or BACKEND}{path}", json=payload, timeout=timeout)
    try:
        data = res.json()
    except ValueError:
        data = {}
    if not res.ok or data.get("ok") is False:
        raise BackendError(
            res.status_code,
            data.get("error") or f"HTTP {res.status_code}",
            data.get("message") or data.get("hint") or "요청을 처리하지 못했습니다.",
        )
    return data


def alert_html(message: str) -> str:
    # 백엔드 메시지는 신뢰하지 않는다, 마크업은 이스케이프
    return ('<div class="alert-inline"><span class="icon">❌</span>'
            f"<span>{html.escape(message)}</span></div>")


def fetch_chat(message: str, backend: Optional[str] = None) -> dict:
    return _post("/api/chat", {"message": message}, backend)


def fetch_blog(topic: str, title: str = "", keywords: Union[str, Iterable[str]] = "",
               audience: Optional[str] = None, tone: Optional[str] = None,
               backend: Optional[str] = None) -> dict:
    payload = {"topic": topic}
    if title:
        payload["title"] = title
    if keywords:
        payload["keywords"] = keywords if isinstance(keywords, str) else list(keywords)
    if audience:
        payload["audience"] = audience
    if tone:
        payload["tone"] = tone
    return _post("/api/blog", payload, backend)
