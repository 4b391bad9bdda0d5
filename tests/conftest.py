import pytest
import requests
from fastapi.testclient import TestClient

from app import PromptRelay, app, get_relay
from gemini_client import GeminiRestClient
from tests.fakes import FakeSession


@pytest.fixture
def make_client():
    def _make(*responses):
        session = FakeSession(*responses)
        relay = PromptRelay(GeminiRestClient("test-key", "gemini-2.0-flash", "https://example.test/v1beta", session=session))
        app.dependency_overrides[get_relay] = lambda: relay
        return TestClient(app), session

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def network_error():
    return requests.ConnectionError("connection refused")
