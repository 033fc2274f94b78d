"""
Tests for NoteEnrichmentService.

Tests cover:
1. Single-note embedding generation
2. Embedding backfill batches
3. Note summarization
4. Topic extraction
5. Transcription application and follow-up enrichment
"""

from unittest.mock import AsyncMock

import pytest

from brainer.config import EnrichmentConfig
from brainer.core.note_store.memory import InMemoryNoteStore
from brainer.models.embedding import EmbeddingVector
from brainer.models.note import TranscriptionStatus
from brainer.models.topics import TopicPayload
from brainer.models.transcription import TranscriptionOutcome
from brainer.services.embedding_pipeline import EmbeddingPipeline
from brainer.services.enrichment import NoteEnrichmentService, format_transcript_content
from brainer.services.summarizer import SummarizationService
from brainer.utils.exceptions import (
    ConfigurationError,
    EmbeddingError,
    InputTooShortError,
    NotFoundError,
    StoreError,
    ValidationError,
)

REAL_CONTENT = (
    "Project kickoff meeting covered the deadline for the first milestone "
    "and who owns each part of the launch checklist."
)
TRANSCRIPT = (
    "Okay so for the garden this year I want tomatoes along the fence, basil next "
    "to them, and a second bed of peppers near the shed."
)


@pytest.fixture
def service(note_store, fake_embedder, fake_llm):
    return NoteEnrichmentService(
        note_store,
        pipeline=EmbeddingPipeline(fake_embedder),
        summarizer=SummarizationService(fake_llm),
        config=EnrichmentConfig(batch_delay_ms=0),
    )


@pytest.mark.unit
@pytest.mark.asyncio
class TestGenerateNoteEmbedding:
    """Test single-note embedding generation."""

    async def test_generates_and_stores(self, service, note_store, note_factory):
        await note_store.save_note(note_factory("n1", title="Kickoff", content=REAL_CONTENT))

        result = await service.generate_note_embedding("n1")

        assert result.generated is True
        assert result.embedding_model == "fake-embed"
        assert result.tokens_used == 7
        stored = await note_store.get_note("n1")
        assert stored.has_embedding
        assert stored.embedding_generated_at is not None

    async def test_existing_embedding_kept(self, service, note_store, note_factory, fake_embedder):
        await note_store.save_note(
            note_factory("n1", content=REAL_CONTENT, embedding=[0.5], embedding_model="old")
        )

        result = await service.generate_note_embedding("n1")

        assert result.generated is False
        assert result.message == "Embedding already exists"
        assert fake_embedder.calls == []

    async def test_force_regenerate(self, service, note_store, note_factory):
        await note_store.save_note(
            note_factory("n1", content=REAL_CONTENT, embedding=[0.5], embedding_model="old")
        )

        result = await service.generate_note_embedding("n1", force_regenerate=True)

        assert result.generated is True
        assert (await note_store.get_note("n1")).embedding_model == "fake-embed"

    async def test_unsuitable_content(self, service, note_store, note_factory):
        await note_store.save_note(note_factory("n1", content="Status: Processing 45% confidence"))

        with pytest.raises(ValidationError):
            await service.generate_note_embedding("n1")

    async def test_missing_note(self, service):
        with pytest.raises(NotFoundError):
            await service.generate_note_embedding("nope")

    async def test_no_embedder_configured(self, note_store, note_factory):
        await note_store.save_note(note_factory("n1", content=REAL_CONTENT))
        service = NoteEnrichmentService(note_store)

        with pytest.raises(ConfigurationError):
            await service.generate_note_embedding("n1")


@pytest.mark.unit
@pytest.mark.asyncio
class TestBackfillEmbeddings:
    """Test batch embedding generation."""

    async def test_backfill_skips_unsuitable_and_embedded(self, service, note_store, note_factory):
        await note_store.save_note(note_factory("good", content=REAL_CONTENT))
        await note_store.save_note(note_factory("banner", content="Uploading audio file"))
        await note_store.save_note(
            note_factory("done", content=REAL_CONTENT, embedding=[1.0], embedding_model="m")
        )

        report = await service.backfill_embeddings("user_1")

        assert report.job_id.startswith("job_")
        assert report.total_notes_checked == 2
        assert report.notes_processed == 1
        assert report.success_count == 1
        assert report.error_count == 0
        assert [item.id for item in report.results] == ["good"]
        assert report.message == "Processed 1 notes"

    async def test_backfill_continues_after_failure(self, note_store, note_factory, fake_embedder):
        class FlakyPipeline(EmbeddingPipeline):
            async def embed_note(self, note):
                if note.id == "bad":
                    raise EmbeddingError("rate limited")
                return EmbeddingVector(values=[1.0], model="fake-embed", tokens_used=3)

        service = NoteEnrichmentService(
            note_store,
            pipeline=FlakyPipeline(fake_embedder),
            config=EnrichmentConfig(batch_delay_ms=0),
        )
        await note_store.save_note(note_factory("bad", content=REAL_CONTENT, minutes_ago=1))
        await note_store.save_note(note_factory("ok", content=REAL_CONTENT, minutes_ago=2))

        report = await service.backfill_embeddings("user_1")

        assert report.success_count == 1
        assert report.error_count == 1
        statuses = {item.id: item.status for item in report.results}
        assert statuses == {"bad": "error", "ok": "success"}
        assert (await note_store.get_note("ok")).has_embedding

    async def test_backfill_requires_user(self, service):
        with pytest.raises(ValidationError):
            await service.backfill_embeddings("")


@pytest.mark.unit
@pytest.mark.asyncio
class TestSummarizeNote:
    """Test on-demand summarization."""

    async def test_summary_stored(self, service, note_store, note_factory):
        await note_store.save_note(note_factory("n1", content=REAL_CONTENT))

        note = await service.summarize_note("n1")

        assert note.summary == "A short summary."
        assert note.key_points == ["First", "Second"]
        assert note.summary_tokens_used == 42
        assert note.summary_generated_at is not None

    async def test_short_note(self, service, note_store, note_factory):
        await note_store.save_note(note_factory("n1", content="tiny"))

        with pytest.raises(InputTooShortError):
            await service.summarize_note("n1")

    async def test_no_llm_configured(self, note_store, note_factory):
        await note_store.save_note(note_factory("n1", content=REAL_CONTENT))
        service = NoteEnrichmentService(note_store)

        with pytest.raises(ConfigurationError):
            await service.summarize_note("n1")


@pytest.mark.unit
@pytest.mark.asyncio
class TestExtractNoteTopics:
    """Test on-demand topic extraction."""

    async def test_topics_stored(self, service, note_store, note_factory):
        await note_store.save_note(note_factory("n1", content=REAL_CONTENT))

        result = await service.extract_note_topics("n1")

        assert result.generated is True
        assert result.message == "Topics extracted successfully"
        assert result.topics.suggested_tags == ["work", "planning"]
        assert result.tokens_used == 42
        stored = await note_store.get_note("n1")
        assert stored.has_topics
        assert stored.topics_tokens_used == 42
        assert stored.topics_generated_at == result.topics_generated_at

    async def test_existing_topics_returned(self, service, note_store, note_factory, fake_llm):
        await note_store.save_note(note_factory("n1", content=REAL_CONTENT))
        first = await service.extract_note_topics("n1")

        second = await service.extract_note_topics("n1")

        assert second.generated is False
        assert second.message == "Topics already extracted"
        assert second.topics == first.topics
        assert len(fake_llm.prompts) == 1

    async def test_force_regenerate(self, service, note_store, note_factory, fake_llm):
        await note_store.save_note(note_factory("n1", content=REAL_CONTENT))
        await service.extract_note_topics("n1")
        fake_llm.topics = TopicPayload(topics=["Hiring"], concepts=[], tags=["team"])

        result = await service.extract_note_topics("n1", force_regenerate=True)

        assert result.generated is True
        assert (await note_store.get_note("n1")).extracted_topics.topics == ["Hiring"]

    async def test_short_note(self, service, note_store, note_factory):
        await note_store.save_note(note_factory("n1", content="buy seeds"))

        with pytest.raises(InputTooShortError):
            await service.extract_note_topics("n1")

    async def test_missing_note(self, service):
        with pytest.raises(NotFoundError):
            await service.extract_note_topics("nope")

    async def test_no_llm_configured(self, note_store, note_factory):
        await note_store.save_note(note_factory("n1", content=REAL_CONTENT))
        service = NoteEnrichmentService(note_store)

        with pytest.raises(ConfigurationError):
            await service.extract_note_topics("n1")


@pytest.mark.unit
@pytest.mark.asyncio
class TestApplyTranscription:
    """Test post-transcription enrichment."""

    @pytest.fixture
    async def voice_note(self, note_store, note_factory):
        note = note_factory(
            "voice",
            title="garden.m4a",
            content="Uploading...",
            transcription_status=TranscriptionStatus.IN_PROGRESS,
            is_processing=True,
        )
        await note_store.save_note(note)
        return note

    async def test_completed_transcript_enriched(self, service, voice_note):
        outcome = TranscriptionOutcome(
            status=TranscriptionStatus.COMPLETED, transcript=TRANSCRIPT, confidence=0.92
        )

        note = await service.apply_transcription("voice", outcome)

        assert note.transcription_status == TranscriptionStatus.COMPLETED
        assert note.is_processing is False
        assert note.transcription_confidence == 0.92
        assert TRANSCRIPT in note.content
        assert "(92% confidence)" in note.content
        assert note.has_summary
        assert note.has_embedding

    async def test_embedding_uses_title_and_transcript(self, service, voice_note, fake_embedder):
        outcome = TranscriptionOutcome(status=TranscriptionStatus.COMPLETED, transcript=TRANSCRIPT)

        await service.apply_transcription("voice", outcome)

        assert fake_embedder.calls[0].startswith("garden.m4a Okay so for the garden")

    async def test_enrichment_failures_keep_transcript(
        self, service, voice_note, fake_embedder, fake_llm
    ):
        fake_embedder.fail = True
        fake_llm.fail = True
        outcome = TranscriptionOutcome(status=TranscriptionStatus.COMPLETED, transcript=TRANSCRIPT)

        note = await service.apply_transcription("voice", outcome)

        assert note.transcription_status == TranscriptionStatus.COMPLETED
        assert TRANSCRIPT in note.content
        assert not note.has_summary
        assert not note.has_embedding

    async def test_provider_error_text_with_braces_keeps_transcript(
        self, service, voice_note, fake_embedder
    ):
        fake_embedder.embed = AsyncMock(
            side_effect=RuntimeError("Error code: 429 - {'error': {'type': 'rate_limit'}}")
        )
        outcome = TranscriptionOutcome(status=TranscriptionStatus.COMPLETED, transcript=TRANSCRIPT)

        note = await service.apply_transcription("voice", outcome)

        assert note.transcription_status == TranscriptionStatus.COMPLETED
        assert TRANSCRIPT in note.content
        assert note.has_summary
        assert not note.has_embedding

    async def test_store_failure_during_embedding_keeps_transcript(
        self, note_factory, fake_embedder, fake_llm
    ):
        class FailingEmbeddingWrites(InMemoryNoteStore):
            async def update_embedding(self, note_id, embedding):
                raise StoreError("database is locked")

        store = FailingEmbeddingWrites()
        await store.save_note(
            note_factory(
                "voice",
                title="garden.m4a",
                transcription_status=TranscriptionStatus.IN_PROGRESS,
                is_processing=True,
            )
        )
        service = NoteEnrichmentService(
            store,
            pipeline=EmbeddingPipeline(fake_embedder),
            summarizer=SummarizationService(fake_llm),
        )
        outcome = TranscriptionOutcome(status=TranscriptionStatus.COMPLETED, transcript=TRANSCRIPT)

        note = await service.apply_transcription("voice", outcome)

        assert note.transcription_status == TranscriptionStatus.COMPLETED
        assert note.has_summary
        assert not note.has_embedding

    async def test_short_transcript_not_summarized(self, service, voice_note, fake_llm):
        outcome = TranscriptionOutcome(
            status=TranscriptionStatus.COMPLETED, transcript="Buy more basil seeds."
        )

        note = await service.apply_transcription("voice", outcome)

        assert fake_llm.prompts == []
        assert not note.has_summary
        assert note.has_embedding

    async def test_empty_transcript(self, service, voice_note, fake_embedder):
        outcome = TranscriptionOutcome(status=TranscriptionStatus.COMPLETED, transcript="  ")

        note = await service.apply_transcription("voice", outcome)

        assert "Completed with Issues" in note.content
        assert note.transcription_status == TranscriptionStatus.COMPLETED
        assert fake_embedder.calls == []

    async def test_failed_transcription(self, service, voice_note):
        outcome = TranscriptionOutcome(status=TranscriptionStatus.FAILED, error="Unsupported codec")

        note = await service.apply_transcription("voice", outcome)

        assert note.transcription_status == TranscriptionStatus.FAILED
        assert "Unsupported codec" in note.content
        assert note.is_processing is False

    async def test_in_progress_is_a_no_op(self, service, voice_note):
        outcome = TranscriptionOutcome(status=TranscriptionStatus.IN_PROGRESS)

        note = await service.apply_transcription("voice", outcome)

        assert note.content == "Uploading..."
        assert note.is_processing is True

    async def test_already_completed_not_reapplied(self, service, voice_note, fake_llm):
        outcome = TranscriptionOutcome(status=TranscriptionStatus.COMPLETED, transcript=TRANSCRIPT)
        first = await service.apply_transcription("voice", outcome)
        prompts = len(fake_llm.prompts)

        second = await service.apply_transcription(
            "voice",
            TranscriptionOutcome(status=TranscriptionStatus.COMPLETED, transcript="different"),
        )

        assert second.content == first.content
        assert len(fake_llm.prompts) == prompts

    async def test_missing_note(self, service):
        outcome = TranscriptionOutcome(status=TranscriptionStatus.COMPLETED, transcript=TRANSCRIPT)

        with pytest.raises(NotFoundError):
            await service.apply_transcription("nope", outcome)


@pytest.mark.unit
class TestTranscriptFormatting:
    """Test transcript note bodies."""

    def test_transcript_formatting(self, note_factory):
        note = note_factory("voice", title="memo.m4a")
        outcome = TranscriptionOutcome(
            status=TranscriptionStatus.COMPLETED,
            transcript="  hello there  ",
            confidence=0.5,
            job_id="job_1",
        )

        content = format_transcript_content(note, outcome)

        assert content.startswith("# Voice Recording - Transcribed")
        assert "**File:** memo.m4a" in content
        assert "**Transcription Job:** job_1" in content
        assert "**Status:** Completed (50% confidence)" in content
        assert "\nhello there\n" in content
