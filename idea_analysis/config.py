"""Application configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_anon_key: str = ""

    # Persistence
    store_backend: str = "memory"  # "memory" or "supabase"
    analyses_table: str = "analyses"

    # Auth
    auth_mode: str = "supabase"  # "supabase" or "header"

    # LLM providers
    anthropic_api_key: Optional[str] = None
    anthropic_model: str = "claude-sonnet-4-20250514"
    perplexity_api_key: Optional[str] = None
    perplexity_model: str = "sonar"
    perplexity_base_url: str = "https://api.perplexity.ai"
    llm_max_tokens: int = 4000
    llm_request_timeout_seconds: float = 120.0

    # Section execution
    section_timeout_seconds: float = Field(default=90.0, gt=0)
    section_max_retries: int = Field(default=2, ge=0)
    retry_base_delay_seconds: float = 1.0
    retry_max_delay_seconds: float = 8.0
    retry_jitter_seconds: float = 0.5
    persistence_max_retries: int = Field(default=3, ge=0)
    persistence_retry_delay_seconds: float = 0.5

    # Lifecycle
    shutdown_grace_seconds: float = 30.0

    # Server
    api_port: int = 8000
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
