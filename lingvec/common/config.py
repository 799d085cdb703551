"""Configuration management for lingvec.

This module centralizes environment-driven configuration for the embedding
store and the HTTP service built on it. It builds on
``pydantic_settings.BaseSettings`` so configuration can be provided via
environment variables, ``.env`` files, or defaults.

Highlights
- Strongly-typed settings with sensible defaults
- One place to discover the environment variables the store understands
- A small service-specific subclass to keep concerns clear

Usage
- Inject the appropriate config in your entrypoint:
  ``config = EmbeddingServiceConfig()``
- Or select dynamically: ``config = get_config("embedding")``
"""

from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_model_dir() -> str:
    return str(Path.home() / ".lingvec" / "models")


class BaseConfig(BaseSettings):
    """Base configuration shared by library and service.

    Parameters are read from the process environment using the upper-cased
    field names (``LINGVEC_LOG_LEVEL`` and so on).

    Notes
    - Add new shared settings here so the service config inherits them.
    - Prefer declaring a field over reading ``os.environ`` directly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    lingvec_env: str = Field(default="local")

    # Logging
    lingvec_log_level: str = Field(default="INFO")
    lingvec_log_format: str = Field(default="json")

    # Model source
    lingvec_model_source: str = Field(default="local")
    lingvec_model_dir: str = Field(default_factory=_default_model_dir)

    # Tables and search
    lingvec_vector_dimension: int = Field(default=300, ge=0)
    lingvec_query_batch_size: int = Field(default=256, gt=0)
    lingvec_default_neighbors: int = Field(default=10, gt=0)

    @property
    def expected_dimension(self):
        """Dimension enforced at load time, or ``None`` when unchecked."""
        return self.lingvec_vector_dimension or None


class EmbeddingServiceConfig(BaseConfig):
    """Configuration for the embedding HTTP service.

    Extends ``BaseConfig`` with the listening port and the languages to
    load during startup.
    """

    lingvec_service_port: int = Field(default=9006)
    lingvec_preload_languages: str = Field(default="")

    @property
    def preload_languages(self) -> List[str]:
        """Language codes from ``LINGVEC_PRELOAD_LANGUAGES`` in given order."""
        return [code.strip() for code in self.lingvec_preload_languages.split(",") if code.strip()]


def get_config(service_name: str) -> BaseConfig:
    """Get configuration for a specific service.

    Parameters
    - service_name: ``embedding`` for the HTTP service; anything else yields
      the plain ``BaseConfig``.
    """
    config_map = {
        "embedding": EmbeddingServiceConfig,
    }

    config_class = config_map.get(service_name, BaseConfig)
    return config_class()

