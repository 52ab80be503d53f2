"""Application settings and configuration management."""

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


class Settings:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    @property
    def google_api_key(self) -> Optional[str]:
        """Google Custom Search API key."""
        return os.getenv("GOOGLE_API_KEY")

    @property
    def google_cse_id(self) -> Optional[str]:
        """Google Programmable Search Engine identifier (cx)."""
        return os.getenv("GOOGLE_CSE_ID")

    @property
    def openai_api_key(self) -> Optional[str]:
        """API key for the answer-generation model."""
        return os.getenv("OPENAI_API_KEY")

    @property
    def llm_model(self) -> str:
        """LLM model identifier."""
        return os.getenv("LLM_MODEL", "gpt-4o")

    @property
    def llm_base_url(self) -> Optional[str]:
        """Base URL of an OpenAI-compatible API. None uses the OpenAI default."""
        return os.getenv("LLM_BASE_URL") or None

    @property
    def http_timeout_seconds(self) -> float:
        """HTTP client timeout in seconds."""
        return float(os.getenv("HTTP_TIMEOUT_SECONDS", "20.0"))

    @property
    def search_timeout_seconds(self) -> float:
        """Total time budget for one site-restricted search, retries included."""
        return float(os.getenv("SEARCH_TIMEOUT_SECONDS", "15.0"))

    @property
    def search_concurrency(self) -> int:
        """Maximum number of upstream searches in flight."""
        return int(os.getenv("SEARCH_CONCURRENCY", "5"))

    @property
    def search_result_count(self) -> int:
        """Results requested per domain (the provider caps this at 10)."""
        return int(os.getenv("SEARCH_RESULT_COUNT", "10"))

    @property
    def search_language(self) -> str:
        """Document language restriction (``lr``)."""
        return os.getenv("SEARCH_LANGUAGE", "lang_nl")

    @property
    def search_country(self) -> str:
        """Geolocation hint (``gl``)."""
        return os.getenv("SEARCH_COUNTRY", "nl")

    @property
    def search_interface_language(self) -> str:
        """Interface language hint (``hl``)."""
        return os.getenv("SEARCH_INTERFACE_LANGUAGE", "nl")

    @property
    def search_retry_attempts(self) -> int:
        """Attempts per upstream call on transport errors."""
        return int(os.getenv("SEARCH_RETRY_ATTEMPTS", "2"))

    @property
    def search_query_expansion(self) -> bool:
        """Whether statute domains are searched with expanded legal-term queries."""
        return os.getenv("SEARCH_QUERY_EXPANSION", "true").strip().lower() in ("1", "true", "yes")

    @property
    def cache_ttl_statutes(self) -> int:
        """Cache TTL in seconds for official statute-text domains."""
        return int(os.getenv("CACHE_TTL_STATUTES", str(4 * 60 * 60)))

    @property
    def cache_ttl_case_law(self) -> int:
        """Cache TTL in seconds for case-law and disciplinary domains."""
        return int(os.getenv("CACHE_TTL_CASE_LAW", str(2 * 60 * 60)))

    @property
    def cache_ttl_policy(self) -> int:
        """Cache TTL in seconds for policy, tax and fines domains."""
        return int(os.getenv("CACHE_TTL_POLICY", str(60 * 60)))

    @property
    def cache_ttl_default(self) -> int:
        """Cache TTL in seconds for all other domains."""
        return int(os.getenv("CACHE_TTL_DEFAULT", str(30 * 60)))

    @property
    def cache_max_entries(self) -> int:
        """Entry count above which expired cache entries are purged."""
        return int(os.getenv("CACHE_MAX_ENTRIES", "1000"))

    @property
    def log_level(self) -> str:
        """Logging level for the command-line interface."""
        return os.getenv("LOG_LEVEL", "WARNING").upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    return Settings()
