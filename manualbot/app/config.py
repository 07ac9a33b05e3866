"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./manualbot.db"
    use_inmemory_store: bool = True

    # Session TTLs (seconds)
    registration_ttl_seconds: int = 5 * 60
    inquiry_ttl_seconds: int = 10 * 60

    # Timeouts (milliseconds) for record store calls
    record_store_timeout_ms: int = 5000
    notification_timeout_ms: int = 3000

    # Search
    search_max_results: int = 10
    search_score_threshold: float = 0.3
    search_min_query_length: int = 2
    search_max_query_length: int = 100
    detail_score_threshold: float = 0.9
    related_max_items: int = 3

    # Registration
    allowed_email_domains: list[str] = []
    default_permission: str = "一般"

    # Inquiry
    inquiry_min_length: int = 10
    inquiry_max_length: int = 1000

    # Notification
    admin_recipients: list[str] = []
    notification_webhook_url: str = ""

    # Conversational phrase lists
    positive_phrases: list[str] = [
        "はい", "yes", "y", "ok", "おk", "オーケー",
        "確認", "登録", "送信", "よろしく", "お願いします",
        "大丈夫", "だいじょうぶ", "👍", "✅",
    ]
    negative_phrases: list[str] = [
        "いいえ", "no", "n", "ng", "だめ", "ダメ",
        "修正", "変更", "やり直し", "もう一度", "いや",
        "ちがう", "違う", "間違い", "❌", "🙅",
        # Negated verbs, so "送信しないで" is never read as a yes
        "しない", "しません", "できません", "やめ",
    ]
    cancel_phrases: list[str] = ["キャンセル", "取り消し", "中止", "やめる", "cancel", "quit"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
