import pytest
from fastapi.testclient import TestClient

from policy_fund.chat.adapters.base import ProviderAdapter
from policy_fund.config import Settings
from policy_fund.main import create_app
from policy_fund.schemas import ProviderKind


class FakeAdapter(ProviderAdapter):
    """프로바이더 대역. raw 를 그대로 돌려주거나 exc 를 던진다."""

    kind = ProviderKind.OPENAI_CHAT
    model = "fake-model"

    def __init__(self, raw=None, exc=None):
        self.raw = raw if raw is not None else {"choices": [{"message": {"content": "OK"}}]}
        self.exc = exc
        self.calls = []
        self.closed = False

    def generate(self, system_instruction, user_prompt, max_output_tokens=None):
        self.calls.append((system_instruction, user_prompt, max_output_tokens))
        if self.exc is not None:
            raise self.exc
        return self._reply(self.raw)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_adapter():
    return FakeAdapter()


@pytest.fixture
def make_client():
    def _make(adapter=None, **settings):
        app = create_app(Settings(**settings), adapter=adapter)
        return TestClient(app)
    return _make


@pytest.fixture
def client(make_client, fake_adapter):
    return make_client(fake_adapter)
