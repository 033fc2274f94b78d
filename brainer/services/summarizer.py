"""
Summarization service.

Produces summaries with key points, topic and tag extraction, and short
titles for notes through the configured LLM provider.
"""

from brainer.config import EnrichmentConfig, LLMConfig
from brainer.core.llm.base import LLMProvider
from brainer.core.tokenizer import Tokenizer
from brainer.models.summary import SummaryPayload, SummaryResult
from brainer.models.topics import NoteTopics, TopicPayload, TopicResult
from brainer.utils.exceptions import InputTooShortError, LLMError, ValidationError
from brainer.utils.logger import get_logger

logger = get_logger(__name__)

UNTITLED = "Untitled Note"
MAX_TITLE_CHARS = 60

SUMMARY_SYSTEM_PROMPT = """You are an AI assistant that creates concise, helpful summaries.
Your task is to:
1. Create a brief, clear summary of the main content
2. Extract 3-5 key points
3. Focus on the most important information
4. Keep the summary professional yet accessible"""

TOPIC_MAX_TOKENS = 300
TOPIC_TEMPERATURE = 0.3

TOPIC_SYSTEM_PROMPT = """You are an AI that extracts topics, concepts, and suggests tags from text content.
Your task:
1. Identify main topics/themes (3-8 topics)
2. Extract key concepts (5-12 concepts)
3. Suggest relevant tags (3-6 tags)

Rules:
- Topics: broad themes (e.g. "Project Management", "Machine Learning")
- Concepts: specific ideas/terms (e.g. "deadline", "neural networks", "user feedback")
- Tags: searchable keywords (e.g. "work", "ai", "meeting")
- Keep everything concise and relevant"""

TITLE_SYSTEM_PROMPT = (
    "Generate a concise, descriptive title (max 60 characters) for the following "
    "content. Return only the title, nothing else."
)


class SummarizationService:
    """
    LLM-backed summaries, topics and titles.

    Token usage comes from the provider when reported, otherwise from the
    tokenizer over prompt and output.
    """

    def __init__(
        self,
        llm: LLMProvider,
        config: LLMConfig | None = None,
        enrichment: EnrichmentConfig | None = None,
        tokenizer: Tokenizer | None = None,
    ):
        self.llm = llm
        self.config = config or LLMConfig()
        self.enrichment = enrichment or EnrichmentConfig()
        self.tokenizer = tokenizer or Tokenizer()

    async def generate_summary(self, content: str, max_tokens: int | None = None) -> SummaryResult:
        """
        Summarize content.

        Args:
            content: Text to summarize
            max_tokens: Output budget (default from config)

        Returns:
            SummaryResult with summary, key points and tokens used

        Raises:
            InputTooShortError: If content is under the minimum length
            LLMError: If the provider fails or returns no summary
        """
        min_chars = self.enrichment.min_summary_chars
        if not content or len(content.strip()) < min_chars:
            raise InputTooShortError(
                f"Content is too short to summarize (minimum {min_chars} characters)"
            )

        prompt = f"Please summarize this content:\n\n{content}"
        try:
            payload = await self.llm.complete(
                prompt,
                response_format=SummaryPayload,
                max_tokens=max_tokens or self.config.max_tokens,
                temperature=self.config.temperature,
                system=SUMMARY_SYSTEM_PROMPT,
            )
        except (LLMError, ValidationError) as e:
            raise LLMError(f"Summary generation failed: {e}") from e

        if not isinstance(payload, SummaryPayload) or not payload.summary.strip():
            raise LLMError("Summary generation failed: empty summary")

        tokens_used = self.llm.last_token_usage
        if tokens_used is None:
            tokens_used = self.tokenizer.count_tokens(
                SUMMARY_SYSTEM_PROMPT + prompt
            ) + self.tokenizer.count_tokens(payload.model_dump_json())

        logger.bind(
            key_points=len(payload.key_points), tokens_used=tokens_used
        ).info("Summary generated")
        return SummaryResult(
            summary=payload.summary.strip(),
            key_points=payload.key_points,
            tokens_used=tokens_used,
        )


    async def extract_topics(self, content: str) -> TopicResult:
        """
        Extract topics, concepts and suggested tags from content.

        Only the first part of long content is sent to the provider.

        Raises:
            InputTooShortError: If content is under the minimum length
            LLMError: If the provider fails
        """
        min_chars = self.enrichment.min_topic_chars
        if not content or len(content.strip()) < min_chars:
            raise InputTooShortError(
                f"Content is too short for topic extraction (minimum {min_chars} characters)"
            )

        prompt = (
            "Extract topics, concepts, and tags from this content:\n\n"
            f"{content[: self.enrichment.topic_content_chars]}"
        )
        try:
            payload = await self.llm.complete(
                prompt,
                response_format=TopicPayload,
                max_tokens=TOPIC_MAX_TOKENS,
                temperature=TOPIC_TEMPERATURE,
                system=TOPIC_SYSTEM_PROMPT,
            )
        except (LLMError, ValidationError) as e:
            raise LLMError(f"Topic extraction failed: {e}") from e

        if not isinstance(payload, TopicPayload):
            raise LLMError("Topic extraction failed: unexpected response")

        tokens_used = self.llm.last_token_usage
        if tokens_used is None:
            tokens_used = self.tokenizer.count_tokens(
                TOPIC_SYSTEM_PROMPT + prompt
            ) + self.tokenizer.count_tokens(payload.model_dump_json())

        logger.bind(
            topics=len(payload.topics), concepts=len(payload.concepts), tokens_used=tokens_used
        ).info("Topics extracted")
        return TopicResult(
            topics=NoteTopics(
                topics=payload.topics, concepts=payload.concepts, suggested_tags=payload.tags
            ),
            tokens_used=tokens_used,
        )

    async def generate_title(self, content: str) -> str:
        """
        Short descriptive title for content.

        Never raises: returns "Untitled Note" for short content or on failure.
        """
        if not content or len(content.strip()) < 10:
            return UNTITLED

        try:
            title = await self.llm.complete(
                content[:500],
                max_tokens=20,
                temperature=self.config.temperature,
                system=TITLE_SYSTEM_PROMPT,
            )
        except (LLMError, ValidationError) as e:
            logger.error(f"Error generating title: {e}")
            return UNTITLED

        title = str(title).strip().strip('"').strip()
        return title[:MAX_TITLE_CHARS] if title else UNTITLED
