"""In-memory multilingual embedding store.

Primary components:
- ``table``: immutable ``EmbeddingTable`` and word normalization.
- ``registry``: ``ModelRegistry`` holding the loaded tables by language code.
- ``lookup``: resolve word batches to vectors with missing-row markers.
- ``search``: exact cosine nearest neighbors across (possibly different) tables.
- ``manager``: ``EmbeddingManager``, the public operations.
- ``sources``/``factory``: where serialized tables come from.
- ``catalog``: the static list of known languages.
"""

from .base import (
    EmbeddingStoreError,
    InvalidArgumentError,
    InvalidTableError,
    LanguageNotLoadedError,
    ModelNotFoundError,
    ModelSource,
)
from .catalog import CatalogEntry, Language, LanguageCatalog
from .lookup import LookupResult, resolve
from .manager import EmbeddingManager
from .registry import ModelRegistry
from .search import NeighborResult, nearest
from .sources import InMemoryModelSource, LocalModelSource
from .table import EmbeddingTable, normalize_word

__all__ = [
    "CatalogEntry",
    "EmbeddingManager",
    "EmbeddingStoreError",
    "EmbeddingTable",
    "InMemoryModelSource",
    "InvalidArgumentError",
    "InvalidTableError",
    "Language",
    "LanguageCatalog",
    "LanguageNotLoadedError",
    "LocalModelSource",
    "LookupResult",
    "ModelNotFoundError",
    "ModelRegistry",
    "ModelSource",
    "NeighborResult",
    "nearest",
    "normalize_word",
    "resolve",
]
