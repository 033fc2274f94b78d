"""
Data models for Brainer.

Core models:
- Note, TranscriptionStatus: user notes as seen by recall
- EmbeddingVector: model-tagged vector embedding
- ScoredCandidate, SimilarNote, SearchResponse, ScoringMethod: ranking results
- SummaryPayload, SummaryResult: summarization output
- TopicPayload, NoteTopics, TopicResult, TopicExtractionResult: topic extraction
- TranscriptionOutcome: voice-note transcription result
- NoteEmbeddingResult, BatchEmbeddingReport: embedding generation outcomes
"""

from brainer.models.embedding import EmbeddingVector
from brainer.models.enrichment import BatchEmbeddingItem, BatchEmbeddingReport, NoteEmbeddingResult
from brainer.models.note import Note, TranscriptionStatus
from brainer.models.search import ScoredCandidate, ScoringMethod, SearchResponse, SimilarNote
from brainer.models.summary import SummaryPayload, SummaryResult
from brainer.models.topics import NoteTopics, TopicExtractionResult, TopicPayload, TopicResult
from brainer.models.transcription import TranscriptionOutcome

__all__ = [
    "Note",
    "TranscriptionStatus",
    "EmbeddingVector",
    "ScoredCandidate",
    "ScoringMethod",
    "SimilarNote",
    "SearchResponse",
    "SummaryPayload",
    "SummaryResult",
    "TopicPayload",
    "NoteTopics",
    "TopicResult",
    "TopicExtractionResult",
    "TranscriptionOutcome",
    "NoteEmbeddingResult",
    "BatchEmbeddingItem",
    "BatchEmbeddingReport",
]
