"""
Similarity Ranking Engine.

Ranks a user's notes against a free-text query. The default signal is a
cheap term-overlap heuristic; when a query embedding is supplied, notes that
carry a vector from the same model are scored by cosine similarity instead,
and the rest keep the heuristic.
"""

from brainer.config import SearchConfig
from brainer.models.embedding import EmbeddingVector
from brainer.models.note import Note
from brainer.models.search import ScoredCandidate, ScoringMethod
from brainer.services.embedding_pipeline import batch_cosine_similarity
from brainer.utils.exceptions import ValidationError
from brainer.utils.logger import get_logger

logger = get_logger(__name__)


class SimilarityRanker:
    """
    Pure read-and-score ranking over a caller-owned candidate set.

    Pipeline:
    1. Tokenize the query (lower-case, whitespace split, drop short tokens,
       keep the first few)
    2. Score every candidate except the excluded note
    3. Drop scores at or under the floor
    4. Order by score, then by most recent update
    5. Truncate to the requested limit (hard-capped)
    """

    def __init__(self, config: SearchConfig | None = None):
        """
        Initialize ranker.

        Args:
            config: Search configuration (thresholds and limits)
        """
        self.config = config or SearchConfig()

    def tokenize(self, query: str) -> list[str]:
        """
        Split a query into search terms.

        Args:
            query: Free-text query

        Returns:
            Up to max_query_tokens lower-cased tokens of at least
            min_token_length characters, in query order
        """
        tokens = [
            token
            for token in query.lower().split()
            if len(token) >= self.config.min_token_length
        ]
        return tokens[: self.config.max_query_tokens]

    def resolve_limit(self, limit: int | None) -> int:
        if limit is None:
            limit = self.config.default_limit
        if limit < 0:
            raise ValidationError("Limit cannot be negative", context={"limit": limit})
        return min(limit, self.config.max_limit)

    def score_text_overlap(self, tokens: list[str], note: Note) -> tuple[float, list[str]]:
        """
        Fraction of query tokens found as substrings of the note's title and body.

        Returns:
            (score, matched tokens)
        """
        haystack = f"{note.title.lower()} {note.content.lower()}"
        matched = [token for token in tokens if token in haystack]
        return len(matched) / len(tokens), matched

    def rank(
        self,
        query: str,
        candidates: list[Note],
        exclude_id: str | None = None,
        limit: int | None = None,
        query_vector: EmbeddingVector | None = None,
    ) -> list[ScoredCandidate]:
        """
        Rank candidate notes against a query.

        Args:
            query: Free-text query
            candidates: Notes to evaluate, ideally most recent first
            exclude_id: Note to leave out (the one being edited)
            limit: Maximum results (default from config, capped at max_limit)
            query_vector: Optional query embedding enabling cosine scoring for
                notes that carry a vector from the same model

        Returns:
            Scored candidates, best first. Empty when the query has no usable
            terms or nothing clears the thresholds.

        Raises:
            ValidationError: If query is not a string or limit is negative
        """
        if not isinstance(query, str):
            raise ValidationError("Query must be a string")

        limit = self.resolve_limit(limit)
        tokens = self.tokenize(query)
        if not tokens or limit == 0:
            return []

        pool = [note for note in candidates if exclude_id is None or note.id != exclude_id]
        if not pool:
            return []

        scored: list[ScoredCandidate] = []
        text_scored = pool

        if query_vector is not None:
            embedded = [
                note
                for note in pool
                if note.has_embedding and note.embedding_vector.is_comparable_with(query_vector)
            ]
            scored.extend(self._score_embeddings(query_vector, embedded))
            embedded_ids = {note.id for note in embedded}
            text_scored = [note for note in pool if note.id not in embedded_ids]

        for note in text_scored:
            score, matched = self.score_text_overlap(tokens, note)
            if score > self.config.min_score:
                scored.append(
                    ScoredCandidate(
                        note=note,
                        score=score,
                        matched_terms=matched,
                        method=ScoringMethod.TEXT_OVERLAP,
                    )
                )

        # Stable sort keeps store order for exact ties
        scored.sort(key=lambda c: (c.score, c.note.updated_at), reverse=True)

        logger.bind(
            tokens=len(tokens), limit=limit, embedding=query_vector is not None
        ).debug(f"Ranked {len(pool)} candidates, {len(scored)} above threshold")
        return scored[:limit]

    def _score_embeddings(
        self, query_vector: EmbeddingVector, notes: list[Note]
    ) -> list[ScoredCandidate]:
        similarities = batch_cosine_similarity(
            query_vector.values, [note.embedding for note in notes]
        )
        return [
            ScoredCandidate(note=note, score=similarity, method=ScoringMethod.EMBEDDING)
            for note, similarity in zip(notes, similarities)
            if similarity > self.config.min_embedding_similarity
        ]
