import pytest
from fastapi.testclient import TestClient

from geminiapi.api.http_api import create_app
from geminiapi.llm.provider_config import ProviderConfig


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class FakeModel:
    def __init__(self, session, name):
        self.session = session
        self.name = name

    def generate_content(self, *parts):
        self.session.calls.append((self.name, list(parts)))
        if self.session.error is not None:
            raise self.session.error
        return self.session.response


class FakeSession:
    """Deterministic stand-in for `ProviderSession`."""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {
            "candidates": [{"content": {"role": "model", "parts": [{"text": "Hi there"}]}}]
        }
        self.error = error
        self.calls = []

    def generative_model(self, name):
        return FakeModel(self, name)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def config():
    return ProviderConfig(api_key="test-key")


@pytest.fixture
def client(fake_session, config):
    return TestClient(create_app(fake_session, config))
