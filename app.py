"""
Brainer FastAPI Application

A REST API server for the Brainer note recall core.
Provides endpoints for similar-note search, embedding generation,
summarization, topic extraction and transcription enrichment.
"""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from brainer.config import Config
from brainer.core.factory import EmbedderFactory, LLMFactory, NoteStoreFactory
from brainer.core.tokenizer import Tokenizer
from brainer.models.enrichment import BatchEmbeddingReport, NoteEmbeddingResult
from brainer.models.search import SearchResponse
from brainer.models.topics import TopicExtractionResult
from brainer.models.transcription import TranscriptionOutcome
from brainer.services.note_engine import NoteEngine
from brainer.utils.exceptions import (
    BrainerError,
    ConfigurationError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from brainer.utils.logger import get_logger, setup_logging

# Global engine instance
engine: NoteEngine | None = None
logger = get_logger(__name__)


# Pydantic models for API
class SearchSimilarRequest(BaseModel):
    """Request model for similar-note search."""

    # Presence is checked by the search service so missing values map to 400
    user_id: str | None = Field(default=None, description="Owner of the searched notes")
    query: str | None = Field(default=None, description="Editor content to match")
    limit: int | None = Field(default=None, description="Max results (default 5, capped at 20)")
    exclude_note_id: str | None = Field(default=None, description="Note being edited")


class GenerateEmbeddingRequest(BaseModel):
    """Request model for single-note embedding generation."""

    force_regenerate: bool = False


class ExtractTopicsRequest(BaseModel):
    """Request model for topic extraction."""

    force_regenerate: bool = False


class BatchEmbeddingRequest(BaseModel):
    """Request model for embedding backfill."""

    user_id: str | None = None


class SummaryResponse(BaseModel):
    """Response model for note summarization."""

    note_id: str
    summary: str
    key_points: list[str]
    tokens_used: int
    generated_at: datetime | None = None


class TranscriptionResponse(BaseModel):
    """Response model for transcription application."""

    note_id: str
    transcription_status: str | None
    is_processing: bool
    has_summary: bool
    has_embedding: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    engine_initialized: bool
    note_store: str
    embedding_model: str | None
    llm_model: str | None


def _create_optional(kind: str, create):
    """Build a provider, or None when it isn't configured."""
    try:
        return create()
    except ConfigurationError as e:
        logger.warning(f"{kind} disabled: {e}")
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global engine

    # Load configuration from environment or use defaults
    config = Config.from_env()

    # Initialize logging with config
    setup_logging(
        level=config.logging.level,
        log_to_file=config.logging.log_to_file,
        log_dir=config.logging.log_dir,
        file_rotation=config.logging.file_rotation,
        file_retention=config.logging.file_retention,
        compression=config.logging.compression,
        serialize=config.logging.serialize,
    )

    logger.info("Starting Brainer server")
    logger.info(
        f"Configuration: LLM={config.llm.provider}/{config.llm.model}, "
        f"Embedder={config.embedder.provider}/{config.embedder.model}, "
        f"Store={config.store.backend}"
    )

    tokenizer = Tokenizer(config.tokenizer)

    logger.info("Creating LLM provider")
    llm = _create_optional("Summaries", lambda: LLMFactory.create(config.llm))

    logger.info("Creating embedder")
    embedder = _create_optional(
        "Embeddings", lambda: EmbedderFactory.create(config.embedder, tokenizer)
    )

    logger.info("Creating note store")
    store = NoteStoreFactory.create(config.store)

    engine = NoteEngine(
        store=store,
        config=config,
        embedder=embedder,
        llm=llm,
        tokenizer=tokenizer,
    )

    await engine.initialize()
    logger.info("Brainer engine initialized")

    yield

    # Cleanup
    logger.info("Shutting down Brainer server")
    await engine.close()
    engine = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="Brainer API",
    description="Similar-note recall, embeddings and summaries for a note-taking app",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _require_engine() -> NoteEngine:
    if not engine:
        raise HTTPException(status_code=503, detail="Engine not initialized")
    return engine


def _http_error(e: BrainerError, action: str) -> HTTPException:
    """Map a domain error to an HTTP error. Internal details are never echoed."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=e.message)
    if isinstance(e, ConfigurationError):
        return HTTPException(status_code=503, detail=e.message)
    if isinstance(e, ExternalServiceError):
        return HTTPException(status_code=502, detail=f"{action} failed")
    return HTTPException(status_code=500, detail=f"{action} failed")


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if engine else "initializing",
        engine_initialized=engine is not None,
        note_store=engine.config.store.backend if engine else "unknown",
        embedding_model=engine.embedder.model if engine and engine.embedder else None,
        llm_model=engine.llm.model if engine and engine.llm else None,
    )


# Search endpoints
@app.post("/search/similar", response_model=SearchResponse)
async def search_similar(request: SearchSimilarRequest):
    """
    Find the user's notes most similar to the editor content.

    Results are ranked by keyword overlap (or by embedding similarity when
    enabled), exclude the note being edited, and carry a content preview.
    An empty result list means "no similar notes", not an error.
    """
    current = _require_engine()

    try:
        return await current.search_similar(
            user_id=request.user_id,
            query=request.query,
            limit=request.limit,
            exclude_note_id=request.exclude_note_id,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except Exception as e:
        logger.bind(error_type=type(e).__name__).error(f"Error searching similar notes: {e}")
        raise HTTPException(status_code=500, detail="Search failed") from e


# Embedding endpoints
@app.post("/notes/{note_id}/embedding", response_model=NoteEmbeddingResult)
async def generate_note_embedding(note_id: str, request: GenerateEmbeddingRequest | None = None):
    """
    Generate and store the embedding for one note.

    An existing embedding is kept unless `force_regenerate` is set.
    """
    current = _require_engine()
    force = request.force_regenerate if request else False

    try:
        return await current.generate_note_embedding(note_id, force_regenerate=force)
    except BrainerError as e:
        logger.error(f"Error generating embedding for note {note_id}: {e}")
        raise _http_error(e, "Embedding generation") from e


@app.post("/embeddings/batch-generate", response_model=BatchEmbeddingReport)
async def batch_generate_embeddings(request: BatchEmbeddingRequest):
    """
    Generate embeddings for every suitable note of a user that lacks one.

    Failures on individual notes are reported per item; the batch continues.
    """
    current = _require_engine()

    try:
        report = await current.backfill_embeddings(request.user_id)
    except BrainerError as e:
        logger.error(f"Error in batch embedding generation: {e}")
        raise _http_error(e, "Batch embedding generation") from e

    return report


# Summary endpoints
@app.post("/notes/{note_id}/summarize", response_model=SummaryResponse)
async def summarize_note(note_id: str):
    """Generate and store a summary with key points for one note."""
    current = _require_engine()

    try:
        note = await current.summarize_note(note_id)
    except BrainerError as e:
        logger.error(f"Error summarizing note {note_id}: {e}")
        raise _http_error(e, "Summary generation") from e

    return SummaryResponse(
        note_id=note.id,
        summary=note.summary or "",
        key_points=note.key_points,
        tokens_used=note.summary_tokens_used or 0,
        generated_at=note.summary_generated_at,
    )


# Topic endpoints
@app.post("/notes/{note_id}/topics", response_model=TopicExtractionResult)
async def extract_note_topics(note_id: str, request: ExtractTopicsRequest | None = None):
    """
    Extract topics, concepts and suggested tags for one note.

    Previously extracted topics are returned unless `force_regenerate` is set.
    """
    current = _require_engine()
    force = request.force_regenerate if request else False

    try:
        return await current.extract_note_topics(note_id, force_regenerate=force)
    except BrainerError as e:
        logger.error(f"Error extracting topics for note {note_id}: {e}")
        raise _http_error(e, "Topic extraction") from e


# Transcription endpoints
@app.post("/transcriptions/{note_id}", response_model=TranscriptionResponse)
async def apply_transcription(note_id: str, outcome: TranscriptionOutcome):
    """
    Record a voice note's transcription result.

    Completed transcripts are written into the note body, then summarized
    and embedded when long enough. Enrichment failures never undo the
    transcription.
    """
    current = _require_engine()

    try:
        note = await current.apply_transcription(note_id, outcome)
    except BrainerError as e:
        logger.error(f"Error applying transcription to note {note_id}: {e}")
        raise _http_error(e, "Transcription update") from e

    return TranscriptionResponse(
        note_id=note.id,
        transcription_status=note.transcription_status.value if note.transcription_status else None,
        is_processing=note.is_processing,
        has_summary=note.has_summary,
        has_embedding=note.has_embedding,
    )


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Brainer API",
        "version": "1.0.0",
        "description": "Similar-note recall, embeddings and summaries for a note-taking app",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
