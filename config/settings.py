"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # ── Remote host-platform API ─────────────────────────────────────────
    api_url: str = "https://api.omni7.io"
    api_prefix: str = "/api/v1"
    http_timeout_seconds: float = 30.0       # 0 disables the client timeout

    # ── Providers ────────────────────────────────────────────────────────
    primary_provider: str = "meta"           # redirect target when no ?provider=
    enabled_providers: List[str] = ["meta", "google"]

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 8080
    host: str = "127.0.0.1"
    debug: bool = False
    cors_origins: list = ["http://localhost:5173"]   # the hub frontend; credentials are allowed
    max_operator_sessions: int = 1000      # one per browser cookie, oldest evicted

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    @property
    def http_timeout(self) -> Optional[float]:
        """Timeout handed to httpx; ``None`` means wait indefinitely."""
        return self.http_timeout_seconds or None


config = Settings()
