import requests

from frontend.api_client import BackendClient


class _Response:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class _Session:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def request(self, method, url, json=None, timeout=None):
        self.calls.append((method, url, json, timeout))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def test_post_chat_success():
    session = _Session(_Response(200, {"success": True}))
    client = BackendClient("http://api.test/", session=session)

    ok, data = client.post_chat({"messages": []})

    assert ok is True
    assert data == {"success": True}
    assert session.calls == [("POST", "http://api.test/chat", {"messages": []}, 620.0)]


def test_error_status_returns_body():
    session = _Session(_Response(500, {"error": "Minting failed", "code": "INSUFFICIENT_BALANCE"}))

    ok, data = BackendClient("http://api.test", session=session).post_mint({"image": "x"})

    assert ok is False
    assert data["code"] == "INSUFFICIENT_BALANCE"
    assert session.calls[0][1] == "http://api.test/mint"


def test_non_json_error_is_wrapped():
    session = _Session(_Response(502, None, text="Bad Gateway"))

    ok, data = BackendClient("http://api.test", session=session).health()

    assert ok is False
    assert data == {"error": "502 Bad Gateway"}


def test_network_error_never_raises():
    session = _Session(requests.ConnectionError("refused"))

    ok, data = BackendClient("http://api.test", session=session).post_chat({})

    assert ok is False
    assert "refused" in data["error"]
