"""Server configuration from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment."""

    mongodb_uri: str = "mongodb://localhost:27017"
    db_name: str = "afterschool"
    mongo_timeout_ms: int = 5000
    host: str = "0.0.0.0"
    port: int = 3000

    # Static image namespace served under /images/
    images_dir: str = "images"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # Observability
    log_format: str = "pretty"  # "json" or "pretty"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            mongodb_uri=os.environ.get("MONGODB_URI", "mongodb://localhost:27017"),
            db_name=os.environ.get("DB_NAME", "afterschool"),
            mongo_timeout_ms=int(os.environ.get("MONGO_TIMEOUT_MS", "5000")),
            host=os.environ.get("HOST", "0.0.0.0"),
            port=int(os.environ.get("PORT", "3000")),
            images_dir=os.environ.get("IMAGES_DIR", "images"),
            cors_origins=_split_origins(os.environ.get("CORS_ORIGINS", "*")),
            log_format=os.environ.get("LOG_FORMAT", "pretty"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )


settings = Settings.from_env()
