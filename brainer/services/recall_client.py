"""
HTTP fetcher for recall sessions.

Calls the `/search/similar` endpoint of a running Brainer server and
returns the similar notes it reports.
"""

import httpx

from brainer.config import RecallConfig
from brainer.models.search import SearchResponse, SimilarNote
from brainer.utils.exceptions import ExternalServiceError
from brainer.utils.logger import get_logger

logger = get_logger(__name__)


class HTTPSimilarNotesFetcher:
    """
    Similar-notes fetcher backed by the search endpoint.

    Usable directly as the `fetcher` of a RecallSession:

        async with HTTPSimilarNotesFetcher(user_id="u1") as fetcher:
            session = RecallSession(fetcher)
            await session.find_similar("project deadline", exclude_id="n1")
    """

    def __init__(
        self,
        user_id: str,
        config: RecallConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.user_id = user_id
        self.config = config or RecallConfig()
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=self.config.base_url, timeout=self.config.timeout
        )

    async def __call__(
        self, content: str, limit: int, exclude_id: str | None
    ) -> list[SimilarNote]:
        payload = {
            "user_id": self.user_id,
            "query": content,
            "limit": limit,
            "exclude_note_id": exclude_id,
        }
        try:
            response = await self.client.post("/search/similar", json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ExternalServiceError(
                f"Similar notes request failed: {e}",
                context={"exclude_id": exclude_id},
            ) from e

        result = SearchResponse.model_validate(response.json())
        logger.bind(
            fallback_mode=result.fallback_mode
        ).debug(f"Fetched {len(result.results)} similar notes")
        return result.results

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HTTPSimilarNotesFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
