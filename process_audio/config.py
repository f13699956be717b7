from __future__ import annotations

from functools import lru_cache

import httpx
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # QuestDB
    questdb_url: str = "http://127.0.0.1:9000"
    questdb_username: str = "admin"
    questdb_password: str = "quest"
    questdb_timeout: float = 10.0

    # App config
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def sender_conf(self) -> str:
        """Build the ILP sender configuration string for ``questdb_url``.

        Retries are disabled (``retry_timeout=0``) so a rejected batch surfaces
        immediately instead of being retried by the client.
        """
        url = httpx.URL(self.questdb_url)
        port = url.port or (443 if url.scheme == "https" else 9000)
        conf = f"{url.scheme}::addr={url.host}:{port};"
        if self.questdb_username:
            conf += f"username={self.questdb_username};password={self.questdb_password};"
        return conf + "retry_timeout=0;"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
