"""
Configuration for Brainer.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    """LLM provider configuration (summaries and titles)."""

    provider: str = "openai"  # openai, ollama
    model: str = "gpt-3.5-turbo"
    base_url: str | None = None
    api_key: str | None = None
    temperature: float = 0.3
    max_tokens: int = 150
    timeout: float = 120.0


class EmbedderConfig(BaseModel):
    """Embedder configuration."""

    provider: str = "openai"  # openai, ollama
    model: str = "text-embedding-3-small"
    base_url: str | None = None
    api_key: str | None = None
    timeout: float = 120.0
    # Optional: embedding dimension (fallback to auto-detect)
    dimension: int | None = None
    min_input_chars: int = 10
    max_input_chars: int = 8000


class SearchConfig(BaseModel):
    """Similarity ranking configuration."""

    default_limit: int = 5
    max_limit: int = 20
    min_token_length: int = 3
    max_query_tokens: int = 10
    min_score: float = 0.1
    preview_length: int = 150
    # Score query embeddings against stored note vectors when available
    prefer_embeddings: bool = False
    min_embedding_similarity: float = 0.25


class RecallConfig(BaseModel):
    """Editor-side recall session configuration."""

    debounce_ms: int = 600
    min_query_length: int = 5
    cache_max_entries: int = 50
    cache_key_length: int = 100
    default_limit: int = 3
    base_url: str = "http://localhost:8000"
    timeout: float = 10.0


class StoreConfig(BaseModel):
    """Note store configuration."""

    backend: str = "memory"  # memory, sqlite
    sqlite_path: str = "data/brainer.db"


class TokenizerConfig(BaseModel):
    """Token counting configuration."""

    provider: str = "tiktoken"  # tiktoken, approximate
    model: str = "cl100k_base"
    chars_per_token: float = 4.0


class EnrichmentConfig(BaseModel):
    """Summary, topic and embedding generation around note lifecycle events."""

    min_summary_chars: int = 50
    min_topic_chars: int = 20
    topic_content_chars: int = 2000
    min_transcript_chars_for_embedding: int = 10
    batch_delay_ms: int = 100
    auto_summarize_transcripts: bool = True
    auto_embed_transcripts: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    embedder: EmbedderConfig = Field(default_factory=EmbedderConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    recall: RecallConfig = Field(default_factory=RecallConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    tokenizer: TokenizerConfig = Field(default_factory=TokenizerConfig)
    enrichment: EnrichmentConfig = Field(default_factory=EnrichmentConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)

        Returns:
            Config instance

        Environment variables:
            BRAINER_LLM_PROVIDER: LLM provider (openai, ollama)
            BRAINER_LLM_MODEL: LLM model name
            BRAINER_LLM_API_KEY: LLM API key (falls back to OPENAI_API_KEY)
            BRAINER_EMBEDDER_PROVIDER: Embedder provider
            BRAINER_EMBEDDER_MODEL: Embedder model name
            BRAINER_EMBEDDER_API_KEY: Embedder API key (falls back to OPENAI_API_KEY)
            BRAINER_SEARCH_PREFER_EMBEDDINGS: Use stored vectors when ranking
            BRAINER_RECALL_DEBOUNCE_MS: Recall debounce window
            BRAINER_STORE_BACKEND: Note store backend (memory, sqlite)
            BRAINER_STORE_SQLITE_PATH: SQLite database path
            BRAINER_LOG_LEVEL: Log level
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None or value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        openai_key = get_env("OPENAI_API_KEY")

        return cls(
            llm=LLMConfig(
                provider=get_env("BRAINER_LLM_PROVIDER", "openai"),
                model=get_env("BRAINER_LLM_MODEL", "gpt-3.5-turbo"),
                base_url=get_env("BRAINER_LLM_BASE_URL"),
                api_key=get_env("BRAINER_LLM_API_KEY", openai_key),
                temperature=get_env("BRAINER_LLM_TEMPERATURE", 0.3),
                max_tokens=get_env("BRAINER_LLM_MAX_TOKENS", 150),
                timeout=get_env("BRAINER_LLM_TIMEOUT", 120.0),
            ),
            embedder=EmbedderConfig(
                provider=get_env("BRAINER_EMBEDDER_PROVIDER", "openai"),
                model=get_env("BRAINER_EMBEDDER_MODEL", "text-embedding-3-small"),
                base_url=get_env("BRAINER_EMBEDDER_BASE_URL"),
                api_key=get_env("BRAINER_EMBEDDER_API_KEY", openai_key),
                timeout=get_env("BRAINER_EMBEDDER_TIMEOUT", 120.0),
                dimension=get_env("BRAINER_EMBEDDER_DIMENSION"),
            ),
            search=SearchConfig(
                default_limit=get_env("BRAINER_SEARCH_DEFAULT_LIMIT", 5),
                max_limit=get_env("BRAINER_SEARCH_MAX_LIMIT", 20),
                min_score=get_env("BRAINER_SEARCH_MIN_SCORE", 0.1),
                prefer_embeddings=get_env("BRAINER_SEARCH_PREFER_EMBEDDINGS", False),
                min_embedding_similarity=get_env("BRAINER_SEARCH_MIN_EMBEDDING_SIMILARITY", 0.25),
            ),
            recall=RecallConfig(
                debounce_ms=get_env("BRAINER_RECALL_DEBOUNCE_MS", 600),
                min_query_length=get_env("BRAINER_RECALL_MIN_QUERY_LENGTH", 5),
                cache_max_entries=get_env("BRAINER_RECALL_CACHE_MAX_ENTRIES", 50),
                base_url=get_env("BRAINER_RECALL_BASE_URL", "http://localhost:8000"),
            ),
            store=StoreConfig(
                backend=get_env("BRAINER_STORE_BACKEND", "memory"),
                sqlite_path=get_env("BRAINER_STORE_SQLITE_PATH", "data/brainer.db"),
            ),
            tokenizer=TokenizerConfig(
                provider=get_env("BRAINER_TOKENIZER_PROVIDER", "tiktoken"),
                model=get_env("BRAINER_TOKENIZER_MODEL", "cl100k_base"),
            ),
            enrichment=EnrichmentConfig(
                batch_delay_ms=get_env("BRAINER_ENRICHMENT_BATCH_DELAY_MS", 100),
                auto_summarize_transcripts=get_env("BRAINER_ENRICHMENT_AUTO_SUMMARIZE", True),
                auto_embed_transcripts=get_env("BRAINER_ENRICHMENT_AUTO_EMBED", True),
            ),
            logging=LoggingConfig(
                level=get_env("BRAINER_LOG_LEVEL", "INFO"),
                log_to_file=get_env("BRAINER_LOG_TO_FILE", True),
                log_dir=get_env("BRAINER_LOG_DIR", "logs"),
                file_rotation=get_env("BRAINER_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("BRAINER_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("BRAINER_LOG_COMPRESSION", "zip"),
                serialize=get_env("BRAINER_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        # Env sections that differ from defaults override YAML sections
        final_dict = {**config_dict}
        default = cls()
        for section in (
            "llm",
            "embedder",
            "search",
            "recall",
            "store",
            "tokenizer",
            "enrichment",
            "logging",
        ):
            env_section = getattr(env_config, section)
            if env_section != getattr(default, section):
                final_dict[section] = env_section.model_dump()

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
