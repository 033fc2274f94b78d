"""
Similar-notes search.

Fetches a user's notes from the store and ranks them against the query.
The text-overlap heuristic is always available; with `prefer_embeddings`
enabled and an embedder configured, the query is embedded and notes that
already carry a vector are compared by cosine similarity.
"""

from brainer.config import SearchConfig
from brainer.core.note_store.base import NoteStore
from brainer.models.embedding import EmbeddingVector
from brainer.models.search import ScoringMethod, SearchResponse
from brainer.services.embedding_pipeline import EmbeddingPipeline
from brainer.services.ranking import SimilarityRanker
from brainer.utils.exceptions import BrainerError, ValidationError
from brainer.utils.logger import get_logger

logger = get_logger(__name__)


class SearchService:
    """Orchestrates candidate fetching, optional query embedding and ranking."""

    def __init__(
        self,
        store: NoteStore,
        config: SearchConfig | None = None,
        pipeline: EmbeddingPipeline | None = None,
        ranker: SimilarityRanker | None = None,
    ):
        """
        Initialize search service.

        Args:
            store: Note store providing candidates
            config: Search configuration
            pipeline: Optional embedding pipeline for the embedding path
            ranker: Ranking engine (built from config when omitted)
        """
        self.store = store
        self.config = config or SearchConfig()
        self.pipeline = pipeline
        self.ranker = ranker or SimilarityRanker(self.config)

    @property
    def embeddings_enabled(self) -> bool:
        return self.config.prefer_embeddings and self.pipeline is not None

    async def search(
        self,
        user_id: str,
        query: str,
        limit: int | None = None,
        exclude_note_id: str | None = None,
    ) -> SearchResponse:
        """
        Find the user's notes most similar to a query.

        Args:
            user_id: Owner whose notes are searched
            query: Free-text query
            limit: Maximum results (default 5, capped at 20)
            exclude_note_id: Note to leave out (the one being edited)

        Returns:
            SearchResponse; an empty result list means "no similar notes"

        Raises:
            ValidationError: If query or user_id is missing, or limit is negative
        """
        if not query or not isinstance(query, str):
            raise ValidationError("Query is required")
        if not user_id:
            raise ValidationError("User ID is required")

        logger.bind(
            user_id=user_id, limit=limit, exclude_note_id=exclude_note_id
        ).debug(f"Searching similar notes (query length {len(query)})")

        query_vector = await self._embed_query(query)
        candidates = await self.store.list_notes_for_user(user_id)

        ranked = self.ranker.rank(
            query,
            candidates,
            exclude_id=exclude_note_id,
            limit=limit,
            query_vector=query_vector,
        )

        fallback_mode = query_vector is None or any(
            c.method == ScoringMethod.TEXT_OVERLAP for c in ranked
        )

        logger.bind(
            user_id=user_id, fallback_mode=fallback_mode
        ).info(f"Found {len(ranked)} similar notes")
        return SearchResponse(
            results=[c.to_similar_note(self.config.preview_length) for c in ranked],
            query=query,
            fallback_mode=fallback_mode,
            tokens_used=query_vector.tokens_used if query_vector else 0,
        )

    async def _embed_query(self, query: str) -> EmbeddingVector | None:
        """Query embedding for the embedding path, None when unavailable."""
        if not self.embeddings_enabled:
            return None
        try:
            return await self.pipeline.generate_embedding(query)
        except BrainerError as e:
            logger.bind(
                error_type=type(e).__name__
            ).warning(f"Query embedding unavailable, using text overlap: {e}")
            return None
