# wikimedia/client.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Union
from urllib.parse import urlencode, urlsplit

from wikimedia import config, transport
from wikimedia.datatypes import ApiResponse
from wikimedia.errors import ConfigurationError
from wikimedia.transport import Transport

logger = logging.getLogger(__name__)

ParamValue = Union[str, Sequence[str]]
QueryParams = Mapping[str, ParamValue]


@dataclass(frozen=True, slots=True)
class Options:
    """
    Connection options for one api.php endpoint.
    """

    # Full URL of the API, e.g. "https://en.wikipedia.org/w/api.php"
    url: str = ""
    # Used for every request when set, otherwise the shared default session
    transport: Optional[Transport] = None
    # Sent as User-Agent when set and non-empty
    user_agent: Optional[str] = None


def _validate_url(url: str) -> None:
    if not url:
        raise ConfigurationError("URL cannot be empty")
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        raise ConfigurationError(f"invalid control character in URL {url!r}")
    try:
        urlsplit(url)
    except ValueError as exc:
        raise ConfigurationError(f"invalid URL {url!r}: {exc}") from exc


def _normalise(params: QueryParams) -> dict[str, list[str]]:
    """
    Copy params into a fresh {key: [values]} dict. A bare string is one value.
    """
    out: dict[str, list[str]] = {}
    for key, value in params.items():
        if isinstance(value, str):
            out[key] = [value]
        else:
            out[key] = [str(v) for v in value]
    return out


class Wikimedia:
    """
    Client for a MediaWiki-family api.php (Wikipedia, Wiktionary, Commons, ...).

    One query() is one GET: no retries, no caching, no continuation following.
    The instance holds only its options and can be shared between threads
    as long as the transport can.
    """

    def __init__(self, options: Options) -> None:
        _validate_url(options.url)
        self._options = options

    @property
    def options(self) -> Options:
        return self._options

    def __repr__(self) -> str:
        return f"Wikimedia(url={self._options.url!r})"

    def build_url(self, params: QueryParams) -> str:
        """
        Full request URL for params, with format=json forced.
        Keys are sorted and multi-values repeat their key.
        """
        values = _normalise(params)
        values[config.FORMAT_PARAM] = [config.FORMAT_JSON]
        query_string = urlencode(sorted(values.items()), doseq=True)
        return f"{self._options.url}?{query_string}"

    def query(self, params: QueryParams) -> ApiResponse:
        """
        Run one API call. See https://www.mediawiki.org/wiki/API:Main_page

        Raises:
            requests.RequestException: the request did not complete.
            DecodeError: the body is not JSON of the expected shape.

        Non-2xx responses are decoded like any other; an API error payload
        yields an ApiResponse with empty fields.
        """
        url = self.build_url(params)
        resp = transport.get(
            url,
            user_agent=self._options.user_agent,
            transport=self._options.transport,
        )
        decoded = ApiResponse.from_json(resp.content)
        logger.debug(
            "wikimedia.query.decoded",
            extra={
                "pages": len(decoded.query.pages),
                "search_hits": len(decoded.query.search),
                "status_code": resp.status_code,
            },
        )
        return decoded


def new(options: Optional[Options] = None) -> Wikimedia:
    """
    Build a client, e.g. new(Options(url="https://da.wiktionary.org/w/api.php")).
    Without options there is no URL, which raises ConfigurationError.
    """
    return Wikimedia(options if options is not None else Options())
