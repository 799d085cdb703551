"""Process-wide collection of loaded embedding tables.

Design
- Tables are keyed by language code and immutable once installed
- Writers (``load``/``install``/``unload``) serialize on a lock and publish
  a fresh read-only mapping; readers grab the current mapping without
  locking, so they see either the old table or the new one, never a mix
- I/O and deserialization happen before the lock is taken; a failed load
  leaves the registry untouched
"""

import threading
from types import MappingProxyType
from typing import List, Mapping, Optional

import structlog

from lingvec.common.metrics import measure_time

from .base import InvalidTableError, LanguageNotLoadedError, ModelSource
from .catalog import CatalogEntry, LanguageCatalog
from .table import EmbeddingTable

logger = structlog.get_logger("embedding_store.registry")


class ModelRegistry:
    """Owns the loaded tables and mediates access by language code.

    Parameters
    - source: Default ``ModelSource`` consulted by ``load`` and
      ``list_catalog``
    - catalog: Known languages; defaults to the bundled catalog
    - expected_dimension: Reject tables of any other dimension; ``None``
      accepts any dimension
    """

    def __init__(
        self,
        source: ModelSource,
        catalog: Optional[LanguageCatalog] = None,
        expected_dimension: Optional[int] = None
    ):
        self.source = source
        self.catalog = catalog or LanguageCatalog.default()
        self.expected_dimension = expected_dimension
        self._tables: Mapping[str, EmbeddingTable] = MappingProxyType({})
        self._write_lock = threading.Lock()

    @measure_time("load_language_table")
    def load(self, code: str, source: Optional[ModelSource] = None) -> EmbeddingTable:
        """Deserialize the table for ``code`` and install it.

        Replaces any table already loaded under ``code``.

        Raises
        - ``ModelNotFoundError`` if the source has no artifact for ``code``
        - ``InvalidTableError`` if the artifact is unusable
        """
        source = source or self.source
        raw = source.read(code)
        table = EmbeddingTable.from_bytes(raw, language=code)
        self.install(code, table)
        logger.info(
            "Language table loaded",
            language=code,
            location=source.describe(),
            size=len(table),
            dimension=table.dimension
        )
        return table

    def install(self, code: str, table: EmbeddingTable) -> None:
        """Install an already-built table under ``code``."""
        self._check_dimension(code, table)
        with self._write_lock:
            tables = dict(self._tables)
            replaced = code in tables
            tables[code] = table
            self._tables = MappingProxyType(tables)
        if replaced:
            logger.debug("Replaced previously loaded table", language=code)

    def unload(self, code: str) -> bool:
        """Drop the table for ``code``; returns ``False`` if none was loaded."""
        with self._write_lock:
            if code not in self._tables:
                return False
            tables = dict(self._tables)
            del tables[code]
            self._tables = MappingProxyType(tables)
        logger.info("Language table unloaded", language=code)
        return True

    def clear(self) -> None:
        """Release every table."""
        with self._write_lock:
            self._tables = MappingProxyType({})

    def is_loaded(self, code: str) -> bool:
        return code in self._tables

    def get(self, code: str) -> EmbeddingTable:
        """Current table for ``code``.

        Do not hold on to the result across a later ``load``/``unload`` of
        the same code; fetch it again instead.

        Raises ``LanguageNotLoadedError`` when ``code`` has no table.
        """
        try:
            return self._tables[code]
        except KeyError:
            raise LanguageNotLoadedError(code) from None

    def loaded_codes(self) -> List[str]:
        """Codes of loaded tables, in load order."""
        return list(self._tables)

    def list_catalog(self, source: Optional[ModelSource] = None) -> List[CatalogEntry]:
        """Catalog languages with installed-on-disk and loaded-in-memory flags."""
        source = source or self.source
        installed = set(source.available())
        tables = self._tables
        return [
            CatalogEntry(
                code=language.code,
                name=language.name,
                installed=language.code in installed,
                loaded=language.code in tables,
            )
            for language in self.catalog
        ]

    def _check_dimension(self, code: str, table: EmbeddingTable) -> None:
        if self.expected_dimension and table.dimension != self.expected_dimension:
            raise InvalidTableError(
                f"table for '{code}' has dimension {table.dimension}, "
                f"expected {self.expected_dimension}"
            )

    def __len__(self) -> int:
        return len(self._tables)
