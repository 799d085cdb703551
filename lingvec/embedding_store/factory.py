"""Model source factory.

Centralizes creation of concrete ``ModelSource`` backends so callers don't
depend on implementation details.
"""

from enum import Enum
from typing import Any, Dict, Optional

import structlog

from lingvec.common.config import BaseConfig

from .base import ModelSource
from .sources import InMemoryModelSource, LocalModelSource

logger = structlog.get_logger("embedding_store.factory")


class ModelSourceType(Enum):
    """Supported model source types."""
    LOCAL = "local"
    MEMORY = "memory"


class ModelSourceFactory:
    """Factory for creating model source instances."""

    @staticmethod
    def create(source_type: ModelSourceType, config: Dict[str, Any]) -> ModelSource:
        """Create a model source.

        Parameters
        - source_type: A ``ModelSourceType`` value
        - config: Backend parameters (``directory`` for local sources)
        """
        if source_type == ModelSourceType.LOCAL:
            directory = config.get("directory")
            if not directory:
                raise ValueError("Local model source requires 'directory' in config")
            return LocalModelSource(directory)

        elif source_type == ModelSourceType.MEMORY:
            return InMemoryModelSource(config.get("artifacts"))

        else:
            raise ValueError(f"Unsupported model source type: {source_type}")


def create_model_source_from_config(config: Optional[BaseConfig] = None) -> ModelSource:
    """Create the model source described by ``config`` (or the environment)."""
    config = config or BaseConfig()

    try:
        source_type = ModelSourceType(config.lingvec_model_source.lower())
    except ValueError:
        raise ValueError(f"Unknown model source: {config.lingvec_model_source}") from None

    source = ModelSourceFactory.create(
        source_type,
        {"directory": config.lingvec_model_dir}
    )
    logger.info("Model source created", source_type=source_type.value, location=source.describe())
    return source
