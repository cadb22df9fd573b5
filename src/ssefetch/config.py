"""Client configuration via environment variables (SSEFETCH_ prefix) or defaults."""

from __future__ import annotations

import httpx
from pydantic_settings import BaseSettings


class ClientConfig(BaseSettings):
    connect_timeout: float = 10.0
    read_timeout: float | None = None  # streams may idle between events
    follow_redirects: bool = True
    default_method: str = "GET"
    log_level: str = "INFO"
    log_file: str | None = None

    model_config = {"env_prefix": "SSEFETCH_"}

    def timeout(self) -> httpx.Timeout:
        """Build the httpx timeout used by clients this library creates."""
        return httpx.Timeout(
            connect=self.connect_timeout,
            read=self.read_timeout,
            write=self.connect_timeout,
            pool=self.connect_timeout,
        )
