# tests/test_live.py
import os

import pytest

from wikimedia import config
from wikimedia.client import Options, new

pytestmark = [
    pytest.mark.network,
    pytest.mark.skipif(
        os.environ.get("WIKIMEDIA_LIVE_TESTS") != "1",
        reason="set WIKIMEDIA_LIVE_TESTS=1 to query en.wikipedia.org",
    ),
]


def test_query_google_extract():
    wiki = new(Options(url=config.DEFAULT_API_URL, user_agent=config.DEFAULT_UA))
    params = {
        "action": ["query"],
        "prop": ["extracts"],
        "titles": ["Google"],
        "exsentences": ["5"],
        "explaintext": ["1"],
    }
    resp = wiki.query(params)
    assert len(resp.query.pages) == 1
    for page in resp.query.pages.values():
        assert page.title == "Google"

    # unchanged upstream data decodes to the same structure
    assert wiki.query(params) == resp


def test_search_reports_continuation():
    wiki = new(Options(url=config.DEFAULT_API_URL, user_agent=config.DEFAULT_UA))
    resp = wiki.query(
        {"action": "query", "list": "search", "srsearch": "physics", "srlimit": "5"}
    )
    assert len(resp.query.search) == 5
    assert resp.query.search_info.total_hits > 5
    assert resp.has_more
