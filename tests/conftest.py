# tests/conftest.py
from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from wikimedia import transport
from wikimedia.client import Options, Wikimedia

API_URL = "https://en.wikipedia.org/w/api.php"

EXTRACT_PAYLOAD: dict[str, Any] = {
    "batchcomplete": "",
    "query": {
        "pages": {
            "1092923": {
                "pageid": 1092923,
                "ns": 0,
                "title": "Google",
                "extract": "Google LLC is an American multinational technology company.",
                "thumbnail": {
                    "source": "https://upload.wikimedia.org/thumb/Google_2015_logo.svg/50px.png",
                    "width": 50,
                    "height": 17,
                },
                "original": {
                    "source": "https://upload.wikimedia.org/Google_2015_logo.svg",
                },
            }
        }
    },
}

SEARCH_PAYLOAD: dict[str, Any] = {
    "batchcomplete": "",
    "continue": {"sroffset": 2, "continue": "-||"},
    "query": {
        "searchinfo": {"totalhits": 4021},
        "search": [
            {
                "ns": 0,
                "title": "Albert Einstein",
                "pageid": 736,
                "size": 254109,
                "wordcount": 26233,
                "snippet": '<span class="searchmatch">Einstein</span> was a physicist',
                "timestamp": "2024-01-31T12:00:00Z",
            },
            {
                "ns": 0,
                "title": "Einsteinium",
                "pageid": 9479,
                "size": 24080,
                "wordcount": 2760,
                "snippet": "Element 99 &amp; friends",
                "timestamp": "2023-11-02T08:30:15Z",
            },
        ],
    },
}

LEGACY_SEARCH_PAYLOAD: dict[str, Any] = {
    "query-continue": {"search": {"sroffset": 20}},
    "query": {
        "searchinfo": {"totalhits": 55},
        "search": [{"ns": 0, "title": "Ulm", "size": 100, "wordcount": 10}],
    },
}

ERROR_PAYLOAD: dict[str, Any] = {
    "error": {
        "code": "unknown_action",
        "info": 'Unrecognized value for parameter "action": nope.',
    },
    "servedby": "mw1234",
}


def make_response(
    body: bytes | str | dict, status_code: int = 200, url: str = API_URL
) -> requests.Response:
    if isinstance(body, dict):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = body
    resp.url = url
    resp.headers["Content-Type"] = "application/json; charset=utf-8"
    return resp


class FakeTransport:
    """
    Records prepared requests and answers each with the same canned body.
    """

    def __init__(self, body: bytes | str | dict = b"{}", status_code: int = 200) -> None:
        self.body = body
        self.status_code = status_code
        self.requests: list[requests.PreparedRequest] = []

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        self.requests.append(request)
        return make_response(self.body, self.status_code, url=request.url or API_URL)

    @property
    def last(self) -> requests.PreparedRequest:
        return self.requests[-1]


class FailingTransport:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        raise self.exc


@pytest.fixture
def fake() -> FakeTransport:
    return FakeTransport(EXTRACT_PAYLOAD)


@pytest.fixture
def client(fake: FakeTransport) -> Wikimedia:
    return Wikimedia(Options(url=API_URL, transport=fake))


@pytest.fixture
def default_fake(monkeypatch: pytest.MonkeyPatch) -> FakeTransport:
    """
    Replace the shared default session, for code paths that build their own client.
    """
    fake = FakeTransport(EXTRACT_PAYLOAD)
    monkeypatch.setattr(transport, "_default_session", fake)
    return fake
