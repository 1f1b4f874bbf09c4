"""Project configuration and paths.

Loads settings from config/settings.yaml, then applies environment overrides
(.env is read from the project root).
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")

_TRUTHY = {"1", "true", "yes", "on"}


class CollectionSettings(BaseModel):
    """Settings for the in-memory post collection."""
    seed_path: str = str(DATA_DIR / "posts.yaml")
    verify_on_write: bool = False


class QuerySettings(BaseModel):
    """Pagination defaults for the query engine."""
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)


class LoggingSettings(BaseModel):
    """Log output settings."""
    level: str = "INFO"


class Settings(BaseModel):
    """Top-level application settings."""
    collection: CollectionSettings = Field(default_factory=CollectionSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def load(cls, settings_path: Path | None = None) -> Settings:
        """Load settings from YAML, falling back to defaults, then apply env overrides."""
        settings_path = settings_path or CONFIG_DIR / "settings.yaml"
        data: dict = {}
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        loaded = cls(**data)
        loaded.apply_env_overrides()
        return loaded

    def apply_env_overrides(self) -> None:
        """Override file values from environment variables."""
        if seed := os.getenv("POST_COLLECTION_SEED_PATH"):
            self.collection.seed_path = seed
        if verify := os.getenv("POST_COLLECTION_VERIFY_ON_WRITE"):
            self.collection.verify_on_write = verify.strip().lower() in _TRUTHY
        if level := os.getenv("LOG_LEVEL"):
            self.logging.level = level.strip().upper()

    @property
    def seed_abs_path(self) -> Path:
        """Resolve the seed path relative to project root."""
        p = Path(self.collection.seed_path)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p


# Singleton settings instance
settings = Settings.load()
