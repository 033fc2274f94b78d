"""
Recall session: debounced, cached similar-note lookups for an editor.

One session per editing context. Every keystroke calls `find_similar`;
the session waits for typing to pause, answers from its cache when it can
and otherwise asks the fetcher. Responses carry a sequence token and only
the latest one is displayed, so a slow older request can never overwrite
a newer result.
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum

from brainer.config import RecallConfig
from brainer.core.cache.base import CacheStore
from brainer.core.cache.memory import InMemoryCacheStore
from brainer.models.search import SimilarNote
from brainer.utils.logger import get_logger

logger = get_logger(__name__)

SimilarNotesFetcher = Callable[[str, int, str | None], Awaitable[list[SimilarNote]]]
ResultsListener = Callable[[list[SimilarNote]], None]

NO_EXCLUSION = "none"


class RecallState(str, Enum):
    """Lifecycle of a recall session."""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    FETCHING = "fetching"
    DISPLAYING = "displaying"


def build_cache_key(content: str, exclude_id: str | None, key_length: int = 100) -> str:
    """Key on the query prefix plus the editing context."""
    return f"{content[:key_length].lower().strip()}-{exclude_id or NO_EXCLUSION}"


class RecallSession:
    """
    Debounced, memoizing front for a similar-notes fetcher.

    States: IDLE -> DEBOUNCING -> FETCHING -> DISPLAYING, or straight to
    IDLE when the input is too short. Switching the excluded note clears
    the cache.
    """

    def __init__(
        self,
        fetcher: SimilarNotesFetcher,
        config: RecallConfig | None = None,
        cache: CacheStore[list[SimilarNote]] | None = None,
        on_results: ResultsListener | None = None,
    ):
        """
        Initialize recall session.

        Args:
            fetcher: Async callable (content, limit, exclude_id) -> similar notes
            config: Recall configuration (debounce, gates, cache bounds)
            cache: Result cache; defaults to a FIFO in-memory store
            on_results: Called whenever the displayed results change
        """
        self.fetcher = fetcher
        self.config = config or RecallConfig()
        self.cache = (
            cache if cache is not None else InMemoryCacheStore(self.config.cache_max_entries)
        )
        self.on_results = on_results

        self.state = RecallState.IDLE
        self.results: list[SimilarNote] = []
        self.fetch_count = 0

        self._exclude_id: str | None = None
        self._last_query = ""
        self._sequence = 0
        self._timer: asyncio.Task | None = None

    @property
    def visible(self) -> bool:
        """Whether the recall panel has anything to show."""
        return self.state == RecallState.DISPLAYING and bool(self.results)

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    def _display(self, results: list[SimilarNote], state: RecallState) -> None:
        self.results = list(results)
        self.state = state
        if self.on_results is not None:
            self.on_results(list(self.results))

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def set_context(self, exclude_id: str | None) -> None:
        """
        Switch the note being edited.

        Clears every cached entry and the last dispatched query, and
        invalidates in-flight responses for the previous context.
        """
        if exclude_id == self._exclude_id:
            return
        logger.bind(exclude_id=exclude_id).debug("Recall context changed, clearing cache")
        self._exclude_id = exclude_id
        self.cache.clear()
        self._last_query = ""
        self._sequence += 1

    async def find_similar(
        self, content: str, limit: int | None = None, exclude_id: str | None = None
    ) -> list[SimilarNote]:
        """
        Similar notes for the editor's current content.

        Args:
            content: Current editor content
            limit: Maximum results (default from config)
            exclude_id: Note being edited

        Returns:
            Results displayed once this call settles. A call superseded by a
            later keystroke returns whatever is displayed at that moment.
        """
        self.set_context(exclude_id)
        self._cancel_timer()
        limit = limit if limit is not None else self.config.default_limit

        if not content or len(content) < self.config.min_query_length:
            # Invalidate any fetch still in flight for longer content
            self._sequence += 1
            self._last_query = ""
            self._display([], RecallState.IDLE)
            return []

        self.state = RecallState.DEBOUNCING
        timer = asyncio.ensure_future(asyncio.sleep(self.config.debounce_ms / 1000))
        self._timer = timer
        try:
            await asyncio.wait({timer})
        finally:
            if self._timer is timer:
                self._cancel_timer()

        if timer.cancelled():
            return list(self.results)

        return await self._dispatch(content, limit, exclude_id)

    async def _dispatch(
        self, content: str, limit: int, exclude_id: str | None
    ) -> list[SimilarNote]:
        key = build_cache_key(content, exclude_id, self.config.cache_key_length)

        cached = self.cache.get(key)
        if cached is not None:
            logger.bind(key=key[:30]).debug("Recall cache hit")
            self._display(cached, RecallState.DISPLAYING)
            return list(cached)

        if content == self._last_query:
            logger.debug("Recall query unchanged, skipping fetch")
            return list(self.results)
        self._last_query = content

        self._sequence += 1
        token = self._sequence
        self.state = RecallState.FETCHING
        self.fetch_count += 1

        try:
            results = await self.fetcher(content, limit, exclude_id)
        except Exception as e:
            logger.bind(error_type=type(e).__name__).error(f"Recall search failed: {e}")
            if token == self._sequence:
                self._last_query = ""
                self._display([], RecallState.IDLE)
            return []

        # Stale responses still warm the cache for their own key, unless the
        # context has switched underneath them
        if exclude_id == self._exclude_id:
            self.cache.set(key, list(results))

        if token != self._sequence:
            logger.bind(
                token=token, latest=self._sequence
            ).debug("Discarding stale recall response")
            return list(self.results)

        self._display(results, RecallState.DISPLAYING)
        return list(results)

    def close(self) -> None:
        """Cancel any pending debounce timer."""
        self._cancel_timer()
