# wikimedia/errors.py
from __future__ import annotations

import requests


class WikimediaError(Exception):
    """Base class for errors raised by the wikimedia client."""


class ConfigurationError(WikimediaError, ValueError):
    """The client options are unusable (empty or unparseable API URL)."""


class DecodeError(WikimediaError, ValueError):
    """
    The response body is not JSON, or its JSON does not have the shape
    of a MediaWiki api.php response.
    """


# Transport failures are not wrapped: whatever requests raises reaches the caller.
NetworkError = requests.RequestException
