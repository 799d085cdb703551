"""Embedding manager: the public operations of the store.

Wraps a ``ModelRegistry`` with the caller-facing API (list, load, unload,
embed, nearest neighbors), structured logging, and metrics. Registry
errors (unknown or unloaded languages, missing artifacts, bad ``k``) abort
the call; per-word vocabulary misses come back as missing rows.
"""

import time
from typing import List, Optional

import numpy as np

from lingvec.common.config import BaseConfig
from lingvec.common.logging import ServiceLogger, log_performance
from lingvec.common.metrics import MetricsCollector

from .base import ModelSource
from .catalog import CatalogEntry, LanguageCatalog
from .factory import create_model_source_from_config
from .lookup import LookupResult, Words, resolve
from .registry import ModelRegistry
from .search import NeighborResult, nearest
from .table import EmbeddingTable


class EmbeddingManager:
    """Loads language tables and answers embedding and neighbor queries.

    Parameters
    - config: ``BaseConfig``; read from the environment when omitted
    - source: Model source overriding the configured one
    - catalog: Language catalog overriding the bundled one
    - metrics: Optional ``MetricsCollector`` to record into
    """

    def __init__(
        self,
        config: Optional[BaseConfig] = None,
        source: Optional[ModelSource] = None,
        catalog: Optional[LanguageCatalog] = None,
        metrics: Optional[MetricsCollector] = None
    ):
        self.config = config or BaseConfig()
        self.metrics = metrics
        self.registry = ModelRegistry(
            source or create_model_source_from_config(self.config),
            catalog=catalog,
            expected_dimension=self.config.expected_dimension
        )
        self.log = ServiceLogger("embedding_store.manager", source=self.registry.source.describe())

    def list_languages(self, source: Optional[ModelSource] = None) -> List[CatalogEntry]:
        """Catalog report: code, name, installed on disk, loaded in memory."""
        return self.registry.list_catalog(source)

    def load_language(self, code: str = "en", source: Optional[ModelSource] = None) -> EmbeddingTable:
        """Load (or reload) the table for ``code``."""
        log = self.log.bind(language=code)
        try:
            table = self.registry.load(code, source)
        except Exception as e:
            log.warning("Language load failed", error=str(e))
            self._record_load(code, "failure")
            raise
        self._record_load(code, "success")
        log.info("Language ready", size=len(table), loaded=self.loaded_languages())
        return table

    def unload_language(self, code: str) -> bool:
        unloaded = self.registry.unload(code)
        if not unloaded:
            self.log.bind(language=code).debug("Unload skipped, language not loaded")
        if self.metrics:
            self.metrics.set_languages_loaded(len(self.registry))
        return unloaded

    def loaded_languages(self) -> List[str]:
        return self.registry.loaded_codes()

    def is_loaded(self, code: str) -> bool:
        return self.registry.is_loaded(code)

    def lookup(self, words: Words, code: str = "en") -> LookupResult:
        """Resolve ``words`` in the ``code`` table, keeping hit/miss detail."""
        table = self.registry.get(code)
        start_time = time.time()
        result = resolve(words, table)
        duration = time.time() - start_time

        found = int(result.found.sum())
        if self.metrics:
            self.metrics.record_lookup(code, found, len(result) - found, duration)
        self.log.bind(language=code).debug("Lookup completed", words=len(result), found=found)
        return result

    def embed(self, words: Words, code: str = "en") -> np.ndarray:
        """``len(words) x dimension`` matrix; rows of unknown words are NaN."""
        return self.lookup(words, code).vectors

    def nearest_neighbors(
        self,
        words: Words,
        code: str = "en",
        target_code: Optional[str] = None,
        k: Optional[int] = None
    ) -> NeighborResult:
        """Top-``k`` words of ``target_code`` for each word of ``code``.

        ``target_code`` defaults to ``code`` and ``k`` to the configured
        ``lingvec_default_neighbors``.
        """
        target_code = target_code or code
        k = self.config.lingvec_default_neighbors if k is None else k

        source_table = self.registry.get(code)
        target_table = self.registry.get(target_code)

        start_time = time.time()
        result = nearest(
            words,
            source_table,
            target_table,
            k,
            batch_size=self.config.lingvec_query_batch_size
        )
        duration = time.time() - start_time

        if self.metrics:
            self.metrics.record_search(code, target_code, duration)
        log_performance(
            "nearest_neighbors",
            duration * 1000,
            source_language=code,
            target_language=target_code,
            words=len(result),
            k=result.k
        )
        return result

    def close(self) -> None:
        """Release all loaded tables."""
        self.registry.clear()
        if self.metrics:
            self.metrics.set_languages_loaded(0)

    def _record_load(self, code: str, status: str) -> None:
        if self.metrics:
            self.metrics.record_model_load(code, status)
            self.metrics.set_languages_loaded(len(self.registry))
