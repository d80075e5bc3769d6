from typing import Any, Dict, Optional


class PolicyFundError(Exception):
    """모든 도메인 오류의 기반 클래스.

    `error` 는 프론트가 분기할 수 있는 짧고 고정된 라벨,
    `message` 는 사람이 읽는 한국어 설명이다.
    """

    status_code = 500
    error = "Server Error"
    message = "서버 오류가 발생했습니다."

    def __init__(self, message: Optional[str] = None, *, detail: Any = None, hint: Optional[str] = None):
        self.message = message or self.message
        self.detail = detail
        self.hint = hint
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"ok": False, "error": self.error, "message": self.message}
        if self.detail is not None:
            body["detail"] = self.detail
        if self.hint:
            body["hint"] = self.hint
        return body


class ConfigurationError(PolicyFundError):
    status_code = 500
    error = "Configuration Error"
    message = "서버 설정 오류"


class OriginRejected(PolicyFundError):
    status_code = 403
    error = "Origin Not Allowed"
    message = "허용되지 않은 출처(Origin)입니다."


class MalformedJson(PolicyFundError):
    status_code = 400
    error = "Invalid JSON"
    message = "데이터 형식이 잘못되었습니다."


class MissingField(PolicyFundError):
    status_code = 400
    error = "Missing Field"
    message = "필수 입력값이 없습니다."

    def __init__(self, field: str, message: Optional[str] = None, **kwargs):
        self.field = field
        super().__init__(message or f"'{field}' 값을 입력해주세요.", **kwargs)


class MethodNotAllowed(PolicyFundError):
    status_code = 405
    error = "Method Not Allowed"
    message = "POST 요청만 가능합니다."


class UpstreamError(PolicyFundError):
    """프로바이더가 실패 응답을 줬거나 SDK 가 예외를 던진 경우.

    `status` 는 프로바이더 쪽 HTTP 상태(알 수 없으면 None)이고,
    클라이언트에 돌려주는 상태 코드는 항상 502 이다.
    """

    status_code = 502
    error = "Upstream Error"
    message = "AI 호출에 실패했습니다."

    def __init__(self, message: Optional[str] = None, *, status: Optional[int] = None, **kwargs):
        self.status = status
        super().__init__(message, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.status is not None:
            body["upstream_status"] = self.status
        return body


class UpstreamTimeout(PolicyFundError):
    status_code = 504
    error = "Upstream Timeout"
    message = "AI 응답 시간이 초과되었습니다. 잠시 후 다시 시도해주세요."


class PayloadTooLarge(PolicyFundError):
    status_code = 413
    error = "Payload Too Large"
    message = "요청 본문이 너무 큽니다."
