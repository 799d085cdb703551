"""Common utilities shared by the library and the embedding service.

Includes:
- ``config``: Pydantic-based configuration from environment variables.
- ``logging``: structured logging setup with structlog.
- ``metrics``: Prometheus metrics helpers and decorators.

Import pattern:
- from lingvec.common.config import BaseConfig
- from lingvec.common.logging import configure_logging
"""
