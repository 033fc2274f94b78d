"""
Note Engine - Integrates all components.

Brings together:
- Note store
- Optional embedder and LLM providers
- Similarity search, embedding pipeline, summarization, topic extraction
  and enrichment
"""

from brainer.config import Config
from brainer.core.embeddings.base import Embedder
from brainer.core.llm.base import LLMProvider
from brainer.core.note_store.base import NoteStore
from brainer.core.tokenizer import Tokenizer
from brainer.models.enrichment import BatchEmbeddingReport, NoteEmbeddingResult
from brainer.models.note import Note
from brainer.models.search import SearchResponse
from brainer.models.topics import TopicExtractionResult
from brainer.models.transcription import TranscriptionOutcome
from brainer.services.embedding_pipeline import EmbeddingPipeline
from brainer.services.enrichment import NoteEnrichmentService
from brainer.services.ranking import SimilarityRanker
from brainer.services.search import SearchService
from brainer.services.summarizer import SummarizationService
from brainer.utils.logger import get_logger

logger = get_logger(__name__)


class NoteEngine:
    """
    Unified engine behind the HTTP surface.

    Providers are optional: without an embedder, search runs on text
    overlap only and embedding endpoints report the service as
    unconfigured; without an LLM, summaries and topics are unavailable.
    """

    def __init__(
        self,
        store: NoteStore,
        config: Config | None = None,
        embedder: Embedder | None = None,
        llm: LLMProvider | None = None,
        tokenizer: Tokenizer | None = None,
    ):
        """
        Initialize Note Engine.

        Args:
            store: Note persistence
            config: Configuration object
            embedder: Embedding provider, if configured
            llm: LLM provider for summaries and titles, if configured
            tokenizer: Token counter (built from config when omitted)
        """
        self.config = config or Config()
        self.store = store
        self.embedder = embedder
        self.llm = llm
        self.tokenizer = tokenizer or Tokenizer(self.config.tokenizer)

        self.pipeline = (
            EmbeddingPipeline(embedder, self.config.embedder) if embedder is not None else None
        )
        self.summarizer = (
            SummarizationService(
                llm,
                config=self.config.llm,
                enrichment=self.config.enrichment,
                tokenizer=self.tokenizer,
            )
            if llm is not None
            else None
        )
        self.ranker = SimilarityRanker(self.config.search)
        self.search_service = SearchService(
            store,
            config=self.config.search,
            pipeline=self.pipeline,
            ranker=self.ranker,
        )
        self.enrichment = NoteEnrichmentService(
            store,
            pipeline=self.pipeline,
            summarizer=self.summarizer,
            config=self.config.enrichment,
        )

    async def initialize(self) -> None:
        """Initialize the note store."""
        logger.info("Initializing Note Engine")
        await self.store.initialize()
        logger.bind(
            embeddings=self.pipeline is not None, summaries=self.summarizer is not None
        ).info("Note Engine ready")

    async def search_similar(
        self,
        user_id: str,
        query: str,
        limit: int | None = None,
        exclude_note_id: str | None = None,
    ) -> SearchResponse:
        return await self.search_service.search(
            user_id, query, limit=limit, exclude_note_id=exclude_note_id
        )

    async def generate_note_embedding(
        self, note_id: str, force_regenerate: bool = False
    ) -> NoteEmbeddingResult:
        return await self.enrichment.generate_note_embedding(note_id, force_regenerate)

    async def backfill_embeddings(self, user_id: str) -> BatchEmbeddingReport:
        return await self.enrichment.backfill_embeddings(user_id)

    async def summarize_note(self, note_id: str) -> Note:
        return await self.enrichment.summarize_note(note_id)

    async def extract_note_topics(
        self, note_id: str, force_regenerate: bool = False
    ) -> TopicExtractionResult:
        return await self.enrichment.extract_note_topics(note_id, force_regenerate)

    async def apply_transcription(self, note_id: str, outcome: TranscriptionOutcome) -> Note:
        return await self.enrichment.apply_transcription(note_id, outcome)

    async def close(self) -> None:
        """Close providers and the store."""
        logger.info("Closing Note Engine")
        if self.embedder is not None:
            await self.embedder.close()
        if self.llm is not None:
            await self.llm.close()
        await self.store.close()
