"""Application configuration using Pydantic Settings."""

import logging
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Neo4jSettings(BaseSettings):
    """Connection settings for the graph store."""

    model_config = SettingsConfigDict(env_prefix="NEO4J_")

    uri: str = "bolt://localhost:7687"
    user: str = "neo4j"
    password: str = "familytree"
    database: str = "neo4j"
    max_connection_pool_size: int = 50
    connection_timeout: float = 30.0


class DatabaseSettings(BaseSettings):
    """Which store backs the family tree, and where local data lives."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    backend: Literal["neo4j", "sqlite"] = "neo4j"
    sqlite_path: str = "data/family_tree.db"
    sqlite_timeout: float = 10.0

    def ensure_dirs(self) -> None:
        """Create data directory if needed."""
        Path(self.sqlite_path).parent.mkdir(parents=True, exist_ok=True)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    neo4j: Neo4jSettings = Neo4jSettings()
    database: DatabaseSettings = DatabaseSettings()


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = None) -> None:
    """Configure root logging once for scripts and the API server."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )


settings = Settings()
