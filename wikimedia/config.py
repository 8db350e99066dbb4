# wikimedia/config.py
from __future__ import annotations

# Wikimedia API endpoint (CLI default only, the library needs an explicit URL)
DEFAULT_API_URL = "https://en.wikipedia.org/w/api.php"
DEFAULT_UA = "wikimedia-query/0.1 (https://github.com/wikimedia-query; python-requests)"

# Response format forced on every request
FORMAT_PARAM = "format"
FORMAT_JSON = "json"

# Environment variables read by the CLI
ENV_API_URL = "WIKIMEDIA_API_URL"
ENV_USER_AGENT = "WIKIMEDIA_USER_AGENT"

# CLI defaults
DEFAULT_SEARCH_LIMIT = 10
DEFAULT_EXTRACT_SENTENCES = 5
