"""
Note enrichment.

Generates summaries, topics and embeddings around note lifecycle events:
on demand, in backfill batches, and right after a voice note's transcription
completes. Enrichment never rolls back the operation that triggered it; a
failed summary or embedding leaves the note without that attribute until a
later retry.
"""

import asyncio

from brainer.config import EnrichmentConfig
from brainer.core.note_store.base import NoteStore
from brainer.models.enrichment import BatchEmbeddingItem, BatchEmbeddingReport, NoteEmbeddingResult
from brainer.models.note import Note, TranscriptionStatus
from brainer.models.topics import TopicExtractionResult
from brainer.models.transcription import TranscriptionOutcome
from brainer.services.embedding_pipeline import (
    EmbeddingPipeline,
    prepare_content_for_embedding,
    should_generate_embedding,
)
from brainer.services.summarizer import SummarizationService
from brainer.utils.exceptions import (
    BrainerError,
    ConfigurationError,
    NotFoundError,
    ValidationError,
)
from brainer.utils.id_generator import generate_job_id
from brainer.utils.logger import get_logger

logger = get_logger(__name__)


def format_transcript_content(note: Note, outcome: TranscriptionOutcome) -> str:
    """Note body for a completed transcription."""
    confidence = (
        f" ({round(outcome.confidence * 100)}% confidence)"
        if outcome.confidence is not None
        else ""
    )
    lines = [
        "# Voice Recording - Transcribed",
        "",
        f"**File:** {note.title}",
    ]
    if outcome.job_id:
        lines.append(f"**Transcription Job:** {outcome.job_id}")
    lines += [
        f"**Status:** Completed{confidence}",
        "",
        "## Transcription",
        "",
        outcome.transcript.strip(),
        "",
        "---",
        "",
        "*Transcribed automatically. You can edit this content to make corrections.*",
    ]
    return "\n".join(lines)


def format_empty_transcript_content(note: Note) -> str:
    return "\n".join(
        [
            "# Voice Recording - Transcription Complete",
            "",
            f"**File:** {note.title}",
            "**Status:** Completed with Issues",
            "",
            "The transcription job completed, but no transcript content was received. "
            "The audio may contain no speech, or the speech was too unclear to transcribe.",
        ]
    )


def format_failed_transcript_content(note: Note, error: str | None) -> str:
    return "\n".join(
        [
            "# Voice Recording - Transcription Failed",
            "",
            f"**File:** {note.title}",
            "**Status:** Failed",
            "",
            f"**Error:** {error or 'Unknown transcription error'}",
        ]
    )


class NoteEnrichmentService:
    """
    Summary, topic and embedding generation for stored notes.

    Either provider may be absent; the corresponding enrichment is then
    skipped (or reported as unavailable for explicit requests).
    """

    def __init__(
        self,
        store: NoteStore,
        pipeline: EmbeddingPipeline | None = None,
        summarizer: SummarizationService | None = None,
        config: EnrichmentConfig | None = None,
    ):
        self.store = store
        self.pipeline = pipeline
        self.summarizer = summarizer
        self.config = config or EnrichmentConfig()

    async def _require_note(self, note_id: str) -> Note:
        note = await self.store.get_note(note_id)
        if note is None:
            raise NotFoundError(f"Note not found: {note_id}", context={"note_id": note_id})
        return note

    def _require_pipeline(self) -> EmbeddingPipeline:
        if self.pipeline is None:
            raise ConfigurationError("Embedding service is not configured")
        return self.pipeline

    # ═══════════════════════════════════════════════════════════
    # EMBEDDINGS
    # ═══════════════════════════════════════════════════════════

    async def generate_note_embedding(
        self, note_id: str, force_regenerate: bool = False
    ) -> NoteEmbeddingResult:
        """
        Generate and store a note's embedding.

        Args:
            note_id: Note to embed
            force_regenerate: Replace an existing embedding

        Returns:
            NoteEmbeddingResult (generated=False when one already existed)

        Raises:
            NotFoundError: If the note doesn't exist
            ValidationError: If the content isn't suitable for embedding
            ConfigurationError: If no embedder is configured
            EmbeddingError: If the provider call fails
        """
        pipeline = self._require_pipeline()
        note = await self._require_note(note_id)

        if note.has_embedding and not force_regenerate:
            return NoteEmbeddingResult(
                note_id=note.id,
                generated=False,
                has_embedding=True,
                message="Embedding already exists",
                embedding_model=note.embedding_model,
            )

        if not should_generate_embedding(note.content):
            raise ValidationError(
                "Note content is not suitable for embedding generation",
                context={"note_id": note.id},
            )

        embedding = await pipeline.embed_note(note)
        await self.store.update_embedding(note.id, embedding)

        logger.bind(
            note_id=note.id, model=embedding.model, tokens=embedding.tokens_used
        ).info(f"Embedding generated for note {note.id}")
        return NoteEmbeddingResult(
            note_id=note.id,
            generated=True,
            has_embedding=True,
            message="Embedding generated successfully",
            embedding_model=embedding.model,
            tokens_used=embedding.tokens_used,
        )

    async def backfill_embeddings(self, user_id: str) -> BatchEmbeddingReport:
        """
        Embed every suitable note of a user that has no embedding yet.

        One note's failure is recorded and the batch continues. Calls are
        spaced by the configured delay to stay under provider rate limits.

        Raises:
            ValidationError: If user_id is missing
            ConfigurationError: If no embedder is configured
        """
        if not user_id:
            raise ValidationError("User ID is required")
        pipeline = self._require_pipeline()

        pending = await self.store.list_notes_without_embedding(user_id)
        suitable = [note for note in pending if should_generate_embedding(note.content)]

        report = BatchEmbeddingReport(
            job_id=generate_job_id(),
            total_notes_checked=len(pending),
            notes_processed=len(suitable),
        )
        logger.bind(
            job_id=report.job_id, user_id=user_id
        ).info(f"Found {len(suitable)} notes suitable for embedding generation")

        delay = self.config.batch_delay_ms / 1000
        for index, note in enumerate(suitable):
            try:
                embedding = await pipeline.embed_note(note)
                await self.store.update_embedding(note.id, embedding)
                report.results.append(
                    BatchEmbeddingItem(
                        id=note.id,
                        title=note.title,
                        status="success",
                        tokens_used=embedding.tokens_used,
                    )
                )
                report.success_count += 1
            except BrainerError as e:
                logger.bind(
                    job_id=report.job_id, note_id=note.id
                ).error(f"Failed to generate embedding for note {note.id}: {e}")
                report.results.append(
                    BatchEmbeddingItem(id=note.id, title=note.title, status="error", error=str(e))
                )
                report.error_count += 1

            if delay and index < len(suitable) - 1:
                await asyncio.sleep(delay)

        return report

    # ═══════════════════════════════════════════════════════════
    # SUMMARIES
    # ═══════════════════════════════════════════════════════════

    async def summarize_note(self, note_id: str) -> Note:
        """
        Generate and store a note's summary.

        Raises:
            NotFoundError: If the note doesn't exist
            InputTooShortError: If the note is too short to summarize
            ConfigurationError: If no LLM is configured
            LLMError: If the provider call fails
        """
        if self.summarizer is None:
            raise ConfigurationError("Summarization service is not configured")
        note = await self._require_note(note_id)

        summary = await self.summarizer.generate_summary(note.content)
        return await self.store.update_summary(note.id, summary)

    # ═══════════════════════════════════════════════════════════
    # TOPICS
    # ═══════════════════════════════════════════════════════════

    async def extract_note_topics(
        self, note_id: str, force_regenerate: bool = False
    ) -> TopicExtractionResult:
        """
        Extract and store a note's topics, concepts and suggested tags.

        Args:
            note_id: Note to analyze
            force_regenerate: Replace previously extracted topics

        Returns:
            TopicExtractionResult (generated=False when topics already existed)

        Raises:
            NotFoundError: If the note doesn't exist
            InputTooShortError: If the note is too short for topic extraction
            ConfigurationError: If no LLM is configured
            LLMError: If the provider call fails
        """
        if self.summarizer is None:
            raise ConfigurationError("Topic extraction service is not configured")
        note = await self._require_note(note_id)

        if note.has_topics and not force_regenerate:
            return TopicExtractionResult(
                note_id=note.id,
                generated=False,
                message="Topics already extracted",
                topics=note.extracted_topics,
                tokens_used=note.topics_tokens_used or 0,
                topics_generated_at=note.topics_generated_at,
            )

        result = await self.summarizer.extract_topics(note.content)
        updated = await self.store.update_topics(note.id, result)

        logger.bind(note_id=note.id, tokens=result.tokens_used).info(
            f"Topics extracted for note {note.id}"
        )
        return TopicExtractionResult(
            note_id=note.id,
            generated=True,
            message="Topics extracted successfully",
            topics=result.topics,
            tokens_used=result.tokens_used,
            topics_generated_at=updated.topics_generated_at,
        )

    # ═══════════════════════════════════════════════════════════
    # TRANSCRIPTION
    # ═══════════════════════════════════════════════════════════

    async def apply_transcription(self, note_id: str, outcome: TranscriptionOutcome) -> Note:
        """
        Record a transcription result on its voice note and enrich it.

        A completed transcription stays completed even if the follow-up
        summary or embedding generation fails.

        Raises:
            NotFoundError: If the note doesn't exist
        """
        note = await self._require_note(note_id)

        if note.transcription_status == TranscriptionStatus.COMPLETED and not note.is_processing:
            logger.debug(f"Note {note.id} already has a completed transcription")
            return note

        if outcome.status == TranscriptionStatus.IN_PROGRESS:
            return note

        if outcome.status == TranscriptionStatus.FAILED:
            logger.bind(
                note_id=note.id, error=outcome.error
            ).warning(f"Transcription failed for note {note.id}")
            return await self.store.update_content(
                note.id,
                format_failed_transcript_content(note, outcome.error),
                transcription_status=TranscriptionStatus.FAILED,
                is_processing=False,
            )

        if not outcome.has_transcript:
            return await self.store.update_content(
                note.id,
                format_empty_transcript_content(note),
                transcription_status=TranscriptionStatus.COMPLETED,
                transcription_confidence=outcome.confidence,
                is_processing=False,
            )

        updated = await self.store.update_content(
            note.id,
            format_transcript_content(note, outcome),
            transcription_status=TranscriptionStatus.COMPLETED,
            transcription_confidence=outcome.confidence,
            is_processing=False,
        )
        logger.bind(note_id=note.id).info(f"Transcription applied to note {note.id}")

        transcript = outcome.transcript.strip()
        updated = await self._summarize_transcript(updated, transcript)
        await self._embed_transcript(updated, transcript)

        return await self.store.get_note(note.id) or updated

    async def _summarize_transcript(self, note: Note, transcript: str) -> Note:
        if (
            self.summarizer is None
            or not self.config.auto_summarize_transcripts
            or len(transcript) < self.config.min_summary_chars
        ):
            return note

        try:
            summary = await self.summarizer.generate_summary(transcript)
            note = await self.store.update_summary(note.id, summary)
            logger.info(f"Summary auto-generated for voice note {note.id}")
        except BrainerError as e:
            logger.bind(
                note_id=note.id, error_type=type(e).__name__
            ).error(f"Failed to auto-generate summary for voice note {note.id}: {e}")
        return note

    async def _embed_transcript(self, note: Note, transcript: str) -> None:
        if (
            self.pipeline is None
            or not self.config.auto_embed_transcripts
            or len(transcript) < self.config.min_transcript_chars_for_embedding
        ):
            return

        text = f"{note.title}\n\n{prepare_content_for_embedding(transcript)}"
        try:
            embedding = await self.pipeline.generate_embedding(text)
            await self.store.update_embedding(note.id, embedding)
            logger.info(f"Embedding auto-generated for voice note {note.id}")
        except BrainerError as e:
            logger.bind(
                note_id=note.id, error_type=type(e).__name__
            ).error(f"Failed to auto-generate embedding for voice note {note.id}: {e}")

