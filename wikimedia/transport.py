# wikimedia/transport.py
from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Protocol

import requests

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """
    Anything that can send a prepared HTTP request and hand back the response.

    requests.Session satisfies this, so a session with its own headers, auth,
    cookies, proxies or mounted adapters can be passed straight in. When the
    transport also has prepare_request() (as a Session does), requests are
    prepared through it so those session settings apply. Test doubles only
    need send().
    """

    def send(
        self, request: requests.PreparedRequest, **kwargs: Any
    ) -> requests.Response:  # pragma: no cover
        ...


_default_session: Optional[requests.Session] = None
_default_lock = threading.Lock()


def default_transport() -> requests.Session:
    """
    Process-wide session used when the client was not given a transport.
    No timeout is configured on it, and it carries no User-Agent of its own.
    """
    global _default_session
    if _default_session is None:
        with _default_lock:
            if _default_session is None:
                session = requests.Session()
                session.headers.pop("User-Agent", None)
                _default_session = session
    return _default_session


def get(
    url: str,
    *,
    user_agent: Optional[str] = None,
    transport: Optional[Transport] = None,
) -> requests.Response:
    """
    GET url through the transport and return the raw response.

    - User-Agent is only set when user_agent is a non-empty string; it takes
      precedence over a User-Agent configured on an injected session.
    - The status code is not looked at and nothing is retried.
    - Invalid URLs surface as requests exceptions (MissingSchema, InvalidURL, ...).
    """
    headers = {}
    if user_agent:
        headers["User-Agent"] = user_agent

    sender = transport if transport is not None else default_transport()
    request = requests.Request("GET", url, headers=headers)

    # preparing is where requests rejects malformed URLs
    prepare = getattr(sender, "prepare_request", None)
    prepared = prepare(request) if prepare is not None else request.prepare()

    logger.debug("wikimedia.get.dispatch", extra={"url": prepared.url})
    response = sender.send(prepared)
    logger.debug(
        "wikimedia.get.completed",
        extra={"url": prepared.url, "status_code": response.status_code},
    )
    return response
