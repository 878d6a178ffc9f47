# recipe_organizer/config.py
import os
from dataclasses import dataclass, field
from typing import List

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:3002", "http://127.0.0.1:3000"]


def _split_csv(value: str | None) -> List[str]:
    if not value:
        return []
    return [p.strip() for p in value.split(",") if p.strip()]


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "recipe_organizer"
    recipes_collection: str = "recipes"
    log_level: str = "DEBUG"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    host: str = "0.0.0.0"
    port: int = 3001

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (call ``load_dotenv`` first)."""
        environment = os.getenv("ENVIRONMENT", "development")
        default_level = "DEBUG" if environment == "development" else "INFO"
        return cls(
            environment=environment,
            mongodb_uri=os.getenv("MONGODB_URI", "mongodb://localhost:27017"),
            mongodb_db=os.getenv("MONGODB_DB", "recipe_organizer"),
            recipes_collection=os.getenv("RECIPES_COLLECTION", "recipes"),
            log_level=os.getenv("LOG_LEVEL", default_level).upper(),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS")) or list(DEFAULT_CORS_ORIGINS),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3001")),
        )
