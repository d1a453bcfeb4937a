import json
import sys
import pathlib
from types import SimpleNamespace

# Make project root importable
sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

import pytest
import requests


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text

    def json(self):
        try:
            return json.loads(self.text)
        except json.JSONDecodeError as e:
            raise requests.exceptions.JSONDecodeError(e.msg, e.doc, e.pos)


class FakeSession:
    """Stands in for requests.Session; records every post() call."""

    def __init__(self, response=None, exc=None):
        self.response = response or FakeResponse(body={"content": [{"type": "text", "text": "Hi there"}]})
        self.exc = exc
        self.calls = []
        self.closed = False

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append(SimpleNamespace(url=url, headers=headers, json=json, timeout=timeout))
        if self.exc is not None:
            raise self.exc
        return self.response

    def respond(self, status_code=200, body=None, text=None):
        self.response = FakeResponse(status_code, body=body, text=text)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def make_session():
    def _make(status_code=200, body=None, text=None, exc=None):
        return FakeSession(response=FakeResponse(status_code, body=body, text=text), exc=exc)
    return _make


@pytest.fixture
def connection_error():
    return requests.exceptions.ConnectionError("Name or service not known")
