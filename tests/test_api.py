import traceback

import httpx
import openai
import pytest

from policy_fund.errors import ConfigurationError, UpstreamError, UpstreamTimeout
from policy_fund.prompts import DISCLAIMER

from conftest import FakeAdapter


def test_chat_returns_reply_with_disclaimer(client, fake_adapter):
    res = client.post("/api/chat", json={"message": "  창업자금 신청 방법  "})
    assert res.status_code == 200
    data = res.json()
    assert data["ok"] is True
    assert data["reply"] == f"OK\n\n{DISCLAIMER}"
    assert data["model"] == "fake-model"
    assert data["disclaimer_present"] is False

    assert len(fake_adapter.calls) == 1
    system_instruction, user_prompt, max_tokens = fake_adapter.calls[0]
    assert user_prompt == "창업자금 신청 방법"
    assert DISCLAIMER in system_instruction
    assert max_tokens == 900


def test_chat_accepts_json_sent_as_plain_text(client):
    res = client.post("/api/chat", content='{"message": "안녕하세요"}', headers={"Content-Type": "text/plain"})
    assert res.status_code == 200


def test_chat_without_message_never_reaches_provider(client, fake_adapter):
    res = client.post("/api/chat", json={})
    assert res.status_code == 400
    assert res.json()["error"] == "Missing Field"
    assert fake_adapter.calls == []


def test_chat_with_broken_json(client, fake_adapter):
    res = client.post("/api/chat", content="{message:", headers={"Content-Type": "application/json"})
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid JSON"
    assert fake_adapter.calls == []


def test_options_is_bodyless_preflight(client, fake_adapter):
    res = client.options("/api/chat", headers={"Origin": "https://front.example",
                                               "Access-Control-Request-Method": "POST"})
    assert res.status_code in (200, 204)
    assert res.content == b""
    assert "POST" in res.headers["Access-Control-Allow-Methods"]
    assert fake_adapter.calls == []


def test_other_methods_are_405(client):
    res = client.get("/api/blog")
    assert res.status_code == 405
    body = res.json()
    assert body["error"] == "Method Not Allowed"
    assert "POST /api/blog" in body["hint"]
    assert "POST" in res.headers["Allow"]


def test_foreign_origin_is_rejected(make_client, fake_adapter):
    client = make_client(fake_adapter, allowed_origins={"https://example.com"})
    res = client.post("/api/chat", json={"message": "질문"}, headers={"Origin": "https://evil.com"})
    assert res.status_code == 403
    assert res.json()["error"] == "Origin Not Allowed"
    assert "Access-Control-Allow-Origin" not in res.headers
    assert fake_adapter.calls == []


def test_allowed_origin_is_echoed(make_client, fake_adapter):
    client = make_client(fake_adapter, allowed_origins={"https://example.com"})
    res = client.post("/api/chat", json={"message": "질문"}, headers={"Origin": "https://example.com"})
    assert res.status_code == 200
    assert res.headers["Access-Control-Allow-Origin"] == "https://example.com"
    assert "Origin" in res.headers["Vary"]


def test_wildcard_origin_on_error_responses_too(client):
    res = client.post("/api/chat", json={}, headers={"Origin": "https://any.example"})
    assert res.status_code == 400
    assert res.headers["Access-Control-Allow-Origin"] == "*"


def test_upstream_429_becomes_5xx(make_client):
    adapter = FakeAdapter(exc=UpstreamError("Rate limit reached", status=429, detail={"error": {"code": "rate_limit"}}))
    res = make_client(adapter).post("/api/chat", json={"message": "질문"})
    assert res.status_code == 502
    body = res.json()
    assert body["error"] == "Upstream Error"
    assert body["message"] == "Rate limit reached"
    assert body["upstream_status"] == 429


def test_raw_sdk_error_from_adapter_is_relabeled(make_client):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    exc = openai.RateLimitError("rate limited", response=httpx.Response(429, request=request), body=None)
    res = make_client(FakeAdapter(exc=exc)).post("/api/chat", json={"message": "질문"})
    assert res.status_code == 502
    assert res.json()["error"] == "Upstream Error"


def test_unexpected_adapter_crash_is_contained(make_client):
    res = make_client(FakeAdapter(exc=RuntimeError("boom"))).post("/api/blog", json={"topic": "주제"})
    assert res.status_code == 502
    assert res.json()["ok"] is False


def test_upstream_timeout(make_client):
    res = make_client(FakeAdapter(exc=UpstreamTimeout())).post("/api/chat", json={"message": "질문"})
    assert res.status_code == 504
    assert res.json()["error"] == "Upstream Timeout"


def test_unrecognized_reply_is_empty_200(make_client):
    res = make_client(FakeAdapter(raw={"unexpected": True})).post("/api/chat", json={"message": "질문"})
    assert res.status_code == 200
    assert res.json()["reply"] == ""


def test_missing_credential_is_500_with_hint(make_client):
    client = make_client(None, provider="openai-chat", openai_api_key=None)
    res = client.post("/api/chat", json={"message": "질문"})
    assert res.status_code == 500
    body = res.json()
    assert body["error"] == "Configuration Error"
    assert "OPENAI_API_KEY" in body["hint"]

    # 설정 오류여도 입력 검증은 먼저
    assert client.post("/api/chat", json={}).status_code == 400


def test_blog_returns_content(make_client):
    adapter = FakeAdapter(raw={"output_text": f"블로그 본문\n{DISCLAIMER}"})
    res = make_client(adapter).post("/api/blog", json={"topic": "소상공인 정책자금", "keywords": ["대출", "보증"]})
    assert res.status_code == 200
    data = res.json()
    assert data["content"] == f"블로그 본문\n{DISCLAIMER}"
    assert data["disclaimer_present"] is True

    _, user_prompt, max_tokens = adapter.calls[0]
    assert "소상공인 정책자금" in user_prompt
    assert "대출, 보증" in user_prompt
    assert max_tokens == 1400


def test_health(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"
    assert "POST /api/chat" in res.json()["endpoints"]


def test_configuration_error_is_raised_fresh_each_time(make_client):
    client = make_client(None, provider="openai-chat", openai_api_key=None)
    for _ in range(30):
        assert client.post("/api/chat", json={"message": "질문"}).status_code == 500

    service = client.app.state.service
    with pytest.raises(ConfigurationError) as first:
        service._require_adapter()
    with pytest.raises(ConfigurationError) as second:
        service._require_adapter()
    assert first.value is not second.value
    assert "OPENAI_API_KEY" in second.value.hint
    assert len(traceback.extract_tb(second.value.__traceback__)) < 5


def test_oversized_body_is_413_before_provider(client, fake_adapter):
    res = client.post("/api/chat", json={"message": "가" * 3_000_000})
    assert res.status_code == 413
    assert res.json()["error"] == "Payload Too Large"
    assert fake_adapter.calls == []


def test_oversized_chunked_body_is_413(make_client, fake_adapter):
    client = make_client(fake_adapter, max_body_bytes=1024)
    chunks = iter([b'{"message": "', b"a" * 2048, b'"}'])
    res = client.post("/api/blog", content=chunks, headers={"Content-Type": "application/json"})
    assert res.status_code == 413
    assert fake_adapter.calls == []


def test_body_within_limit_is_accepted(make_client, fake_adapter):
    client = make_client(fake_adapter, max_body_bytes=1024)
    assert client.post("/api/chat", json={"message": "a" * 900}).status_code == 200


def test_adapter_closed_on_shutdown(make_client, fake_adapter):
    with make_client(fake_adapter) as client:
        assert client.get("/").status_code == 200
        assert fake_adapter.closed is False
    assert fake_adapter.closed is True


def test_main_exposes_factory_only():
    import policy_fund.main as main

    assert not hasattr(main, "app")
    assert callable(main.create_app)
