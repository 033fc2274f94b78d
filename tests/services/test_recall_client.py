"""
Tests for HTTPSimilarNotesFetcher.
"""

import json

import httpx
import pytest

from brainer.config import RecallConfig
from brainer.services.recall import RecallSession, RecallState
from brainer.services.recall_client import HTTPSimilarNotesFetcher
from brainer.utils.exceptions import ExternalServiceError

SEARCH_RESPONSE = {
    "results": [
        {
            "id": "n1",
            "title": "Q3 Project Plan",
            "content": "deadline is friday",
            "similarity": 0.67,
            "created_at": "2024-05-01T08:50:00",
            "summary": None,
            "matched_terms": ["project", "deadline"],
        }
    ],
    "query": "project deadline meeting",
    "fallback_mode": True,
    "tokens_used": 0,
}


def make_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url="http://brainer.test", transport=httpx.MockTransport(handler))


@pytest.mark.unit
@pytest.mark.asyncio
class TestHTTPSimilarNotesFetcher:
    """Test the search-endpoint fetcher."""

    async def test_posts_search_payload(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=SEARCH_RESPONSE)

        fetcher = HTTPSimilarNotesFetcher("user_1", client=make_client(handler))

        results = await fetcher("project deadline meeting", 3, "n9")

        assert len(requests) == 1
        assert requests[0].method == "POST"
        assert requests[0].url.path == "/search/similar"
        assert json.loads(requests[0].content) == {
            "user_id": "user_1",
            "query": "project deadline meeting",
            "limit": 3,
            "exclude_note_id": "n9",
        }
        assert [r.id for r in results] == ["n1"]
        assert results[0].matched_terms == ["project", "deadline"]

    async def test_http_error_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"detail": "Search failed"})

        fetcher = HTTPSimilarNotesFetcher("user_1", client=make_client(handler))

        with pytest.raises(ExternalServiceError) as exc_info:
            await fetcher("project deadline", 3, "n9")

        assert exc_info.value.context == {"exclude_id": "n9"}

    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = HTTPSimilarNotesFetcher("user_1", client=make_client(handler))

        with pytest.raises(ExternalServiceError):
            await fetcher("project deadline", 3, None)

    async def test_borrowed_client_left_open(self):
        client = make_client(lambda request: httpx.Response(200, json=SEARCH_RESPONSE))

        async with HTTPSimilarNotesFetcher("user_1", client=client):
            pass

        assert client.is_closed is False
        await client.aclose()

    async def test_owned_client_closed(self):
        fetcher = HTTPSimilarNotesFetcher("user_1", config=RecallConfig(base_url="http://brainer.test"))

        await fetcher.close()

        assert fetcher.client.is_closed is True

    async def test_drives_recall_session(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(json.loads(request.content))
            return httpx.Response(200, json=SEARCH_RESPONSE)

        fetcher = HTTPSimilarNotesFetcher("user_1", client=make_client(handler))
        session = RecallSession(fetcher, config=RecallConfig(debounce_ms=0))

        results = await session.find_similar("project deadline meeting", exclude_id="n9")
        again = await session.find_similar("project deadline meeting", exclude_id="n9")

        assert [r.id for r in results] == ["n1"]
        assert [r.id for r in again] == ["n1"]
        assert session.state == RecallState.DISPLAYING
        assert len(calls) == 1
        assert calls[0]["limit"] == 3
