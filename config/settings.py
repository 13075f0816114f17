"""
Settings Configuration
Configuration validated and managed through Pydantic
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class BraveSearchSettings(BaseSettings):
    """Brave Search API (primary source)"""
    api_key: Optional[str] = Field(default=None, description="Brave Search subscription token")
    timeout: float = Field(default=10.0, description="Request timeout (seconds)")
    result_count: int = Field(default=5, description="Results requested per query")

    class Config:
        env_prefix = "BRAVE_SEARCH_"


class NewsAPISettings(BaseSettings):
    """NewsAPI.org (primary backup)"""
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("NEWSAPI_KEY", "NEWSAPI_API_KEY"),
        description="NewsAPI key",
    )
    timeout: float = Field(default=10.0, description="Request timeout (seconds)")
    page_size: int = Field(default=5, description="Articles requested per query")

    class Config:
        env_prefix = "NEWSAPI_"
        populate_by_name = True


class CurrentsSettings(BaseSettings):
    """CurrentsAPI (metered backup)"""
    api_key: Optional[str] = Field(default=None, description="CurrentsAPI key")
    timeout: float = Field(default=30.0, description="Request timeout (seconds)")
    monthly_limit: int = Field(default=600, description="Free tier monthly request quota")
    daily_minimum: int = Field(default=1, description="Calls sampled per day even when coverage is satisfied")

    @property
    def daily_budget(self) -> int:
        return self.monthly_limit // 30

    class Config:
        env_prefix = "CURRENTS_"


class MediaStackSettings(BaseSettings):
    """MediaStack (scarce backup, HTTP-only free tier)"""
    api_key: Optional[str] = Field(default=None, description="MediaStack access key")
    timeout: float = Field(default=10.0, description="Request timeout (seconds)")
    daily_limit: int = Field(default=3, description="Hard daily call cap")
    limit: int = Field(default=5, description="Articles requested per query")

    class Config:
        env_prefix = "MEDIASTACK_"


class GeneralSettings(BaseSettings):
    """Shared HTTP behaviour"""
    max_retries: int = Field(default=2, description="Retries after the first attempt for transient failures")
    retry_backoff_base: float = Field(default=1.0, description="First backoff delay (seconds)")
    retry_backoff_max: float = Field(default=5.0, description="Backoff cap (seconds)")
    max_articles_per_source: int = Field(default=3, description="Articles kept per provider call")
    user_agent: str = Field(default="DailyNewsAggregator/1.0", description="User Agent")


class AggregationSettings(BaseSettings):
    """Escalation policy and run phases"""
    min_articles_per_topic: int = Field(default=2, description="Coverage target that stops escalation")
    max_articles_per_topic: int = Field(default=4, description="Articles kept per topic")
    max_concurrent_topics: int = Field(default=4, description="Phase 1 batch size")
    batch_delay: float = Field(default=0.4, description="Pause between Phase 1 batches (seconds)")
    retry_cooldown: float = Field(default=2.0, description="Pause before Phase 2 (seconds)")
    retry_delay: float = Field(default=1.0, description="Pause after each Phase 2 retry (seconds)")
    targeted_cooldown: float = Field(default=2.0, description="Pause before Phase 3 (seconds)")
    targeted_delay: float = Field(default=1.5, description="Pause after each Phase 3 search (seconds)")
    max_targeted_topics: int = Field(default=5, description="Phase 3 topics per run")
    targeted_freshness_hours: int = Field(default=24 * 7, description="Relaxed Phase 3 freshness window")
    flagship_topic: str = Field(default="World News", description="Topic that always samples the metered backup")

    class Config:
        env_prefix = "AGGREGATION_"


class StorageSettings(BaseSettings):
    """Cache and usage-counter storage"""
    cache_dir: str = Field(default="./cache", description="Daily news cache directory")
    usage_dir: str = Field(default="./data", description="Usage counter directory")
    min_topics_for_cache: int = Field(default=5, description="Minimum topics for a trusted cache entry")
    cache_fallback_to_latest: bool = Field(
        default=False,
        description="Serve the most recent cache file when today's is missing (interactive mode)",
    )

    class Config:
        env_prefix = "STORAGE_"


class Settings(BaseSettings):
    """Root configuration aggregating every section"""

    brave: BraveSearchSettings = Field(default_factory=BraveSearchSettings)
    newsapi: NewsAPISettings = Field(default_factory=NewsAPISettings)
    currents: CurrentsSettings = Field(default_factory=CurrentsSettings)
    mediastack: MediaStackSettings = Field(default_factory=MediaStackSettings)
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    aggregation: AggregationSettings = Field(default_factory=AggregationSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load configuration after applying the given .env file"""
        if env_path is None:
            # Default: config/.env
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            brave=BraveSearchSettings(),
            newsapi=NewsAPISettings(),
            currents=CurrentsSettings(),
            mediastack=MediaStackSettings(),
            general=GeneralSettings(),
            aggregation=AggregationSettings(),
            storage=StorageSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings singleton"""
    return Settings.load_from_env_file()
