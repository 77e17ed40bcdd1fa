"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, perceptron_store.toml only
contains overrides. An empty file (or none at all) gives a working
SQLite store in the current directory.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    url: str | None = None
    path: Path = Path("perceptron.db")
    pool_size: int = Field(default=5, ge=1)
    max_overflow: int = Field(default=5, ge=0)
    pool_timeout: float = Field(default=10.0, gt=0)
    busy_timeout: float = Field(default=30.0, gt=0)
    echo: bool = False

    def resolved_url(self, root: Path | None = None) -> str:
        """Return the SQLAlchemy URL, falling back to a SQLite file.

        A relative *path* is resolved against *root* when given.
        """
        if self.url:
            return self.url
        path = self.path
        if root is not None and not path.is_absolute():
            path = root / path
        return f"sqlite:///{path}"


class CacheConfig(BaseModel):
    """[cache] section. A capacity of 0 disables caching for that layer."""

    model_config = {"frozen": True}

    input_capacity: int = Field(default=150, ge=0)
    output_capacity: int = Field(default=10, ge=0)


class WeightsConfig(BaseModel):
    """[weights] section."""

    model_config = {"frozen": True}

    input_to_hidden_default: float = -0.2
    hidden_to_output_default: float = 0.0
    initial_fan_out: float = 0.1
    key_delimiter: str = Field(default=":", min_length=1)


class LoggingConfig(BaseModel):
    """[logging] section.

    Off by default: the store then only emits through standard
    ``logging`` and the host application decides where records go.
    """

    model_config = {"frozen": True}

    enabled: bool = False
    verbose: bool = False
    log_json: bool = False
