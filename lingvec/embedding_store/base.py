"""Base model source interface and the store's error taxonomy.

A model source hands out the serialized artifact for a language code; what
the bytes look like on disk (or wherever) is the source's business. The
registry only needs ``read`` to turn a code into bytes and ``available`` to
report which codes are installed.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class ModelSource(ABC):
    """Abstract supplier of serialized embedding tables."""

    @abstractmethod
    def read(self, code: str) -> bytes:
        """Return the raw artifact for ``code``.

        Raises
        - ``ModelNotFoundError`` when no artifact exists for ``code``
        """
        pass

    @abstractmethod
    def available(self) -> List[str]:
        """Language codes with an artifact present, sorted."""
        pass

    def describe(self) -> str:
        """Human-readable location used in logs and error messages."""
        return type(self).__name__


class EmbeddingStoreError(Exception):
    """Base exception for embedding store operations."""
    pass


class LanguageNotLoadedError(EmbeddingStoreError):
    """A language code has no table in the registry."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(
            f"language '{code}' has not yet been loaded; "
            f"call load_language('{code}') and try again"
        )


class ModelNotFoundError(EmbeddingStoreError):
    """The model source holds no artifact for a language code."""

    def __init__(self, code: str, location: Optional[str] = None):
        self.code = code
        self.location = location
        where = f" in {location}" if location else ""
        super().__init__(f"no model file found for language '{code}'{where}")


class InvalidArgumentError(EmbeddingStoreError, ValueError):
    """A caller-supplied argument is out of range."""
    pass


class InvalidTableError(EmbeddingStoreError):
    """An artifact could not be turned into a valid embedding table."""
    pass
