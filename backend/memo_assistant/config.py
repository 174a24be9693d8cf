from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8000",
    ]

    cors_origin_regex: str | None = None
    trusted_hosts: list[str] = ["*"]
    root_path: str = ""

    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str
    memos_table: str = "memos"

    # OpenAI
    openai_api_key: str
    completion_model: str = "gpt-4o-mini"

    tag_temperature: float = 0.5
    tag_max_tokens: int = 50
    tag_request_timeout: float = 20.0
    tag_deadline: float = 25.0

    title_temperature: float = 0.7
    title_max_tokens: int = 100
    title_request_timeout: float = 20.0

    suggestion_temperature: float = 0.8
    suggestion_max_tokens: int = 500
    suggestion_request_timeout: float = 25.0
    suggestion_deadline: float = 30.0

    chat_temperature: float = 0.7
    chat_max_tokens: int = 800

    # Memo context sent to the model
    context_memo_limit: int = 100

    # Visualization
    chart_window_days: int = 30
    chart_top_tags: int = 10

    placeholder_tag: str = "memo"


settings = Settings()
