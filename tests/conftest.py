import os
import pytest
from fastapi.testclient import TestClient

# Configure the LLM endpoint before any app imports
os.environ.setdefault("LLM_URL", "https://llm.test/infer_request/llama")
os.environ.setdefault("ON_DEMAND_API_ACCESS_TOKEN", "test-token")

from app.main import create_app
from app.config import get_settings


def envelope(**fields):
    """Wrap fields the way the hosted inference API does."""
    return {"body": {"infer_requests": [fields]}}


class FakeHttp:
    """Scripted stand-in for app.core.http.HttpClient."""

    def __init__(self, *, post=None, get=None):
        self.post_responses = list(post or [])
        self.get_responses = list(get or [])
        self.calls = []

    def post_json(self, url, body):
        self.calls.append(("POST", url, body))
        return self._next(self.post_responses)

    def get_json(self, url):
        self.calls.append(("GET", url, None))
        return self._next(self.get_responses)

    @property
    def gets(self):
        return [c for c in self.calls if c[0] == "GET"]

    @property
    def posts(self):
        return [c for c in self.calls if c[0] == "POST"]

    @staticmethod
    def _next(queue):
        if not queue:
            raise AssertionError("unexpected HTTP call")
        item = queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture(autouse=True)
def _reset_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
