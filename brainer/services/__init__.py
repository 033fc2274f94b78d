"""
Services for Brainer.

High-level business logic services:
- NoteEngine: Unified interface behind the HTTP surface
- SearchService / SimilarityRanker: similar-notes ranking
- EmbeddingPipeline: embedding generation and vector comparison
- SummarizationService: LLM summaries and titles
- NoteEnrichmentService: on-demand, batch and post-transcription enrichment
- RecallSession / HTTPSimilarNotesFetcher: debounced, cached editor recall
"""

from brainer.services.embedding_pipeline import EmbeddingPipeline
from brainer.services.enrichment import NoteEnrichmentService
from brainer.services.note_engine import NoteEngine
from brainer.services.ranking import SimilarityRanker
from brainer.services.recall import RecallSession, RecallState
from brainer.services.recall_client import HTTPSimilarNotesFetcher
from brainer.services.search import SearchService
from brainer.services.summarizer import SummarizationService

__all__ = [
    "NoteEngine",
    "SearchService",
    "SimilarityRanker",
    "EmbeddingPipeline",
    "SummarizationService",
    "NoteEnrichmentService",
    "RecallSession",
    "RecallState",
    "HTTPSimilarNotesFetcher",
]
