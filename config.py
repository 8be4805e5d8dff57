from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Application Review Portal"
    debug: bool = False
    log_level: str = "INFO"

    # Service URL written by scripts/select_backend.py
    database_url: str = "sqlite+aiosqlite:///./review_portal.db"
    anon_key: Optional[str] = None
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.split(":")[0].lower().startswith("sqlite")


settings = Settings()
