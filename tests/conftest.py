"""Shared fixtures: small aligned English/French tables."""

import sys
from pathlib import Path

import numpy as np
import pytest

from lingvec.common.config import BaseConfig
from lingvec.embedding_store import (
    EmbeddingManager,
    EmbeddingTable,
    InMemoryModelSource,
    LanguageCatalog,
)

# The service package lives outside the installable tree
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root / "service-embedding"))


@pytest.fixture
def en_table():
    return EmbeddingTable.from_mapping(
        {
            "cat": [1.0, 0.0, 0.0],
            "dog": [0.0, 1.0, 0.0],
            "fish": [0.0, 0.0, 1.0],
        },
        language="en",
    )


@pytest.fixture
def fr_table():
    return EmbeddingTable.from_mapping(
        {
            "chat": [0.9, 0.1, 0.0],
            "chien": [0.1, 0.9, 0.05],
            "poisson": [0.0, 0.1, 0.95],
        },
        language="fr",
    )


@pytest.fixture
def memory_source(en_table, fr_table):
    source = InMemoryModelSource()
    source.write("en", en_table)
    source.write("fr", fr_table)
    return source


@pytest.fixture
def catalog():
    return LanguageCatalog([("en", "English"), ("fr", "French"), ("de", "German")])


@pytest.fixture
def config():
    return BaseConfig(lingvec_vector_dimension=0, lingvec_default_neighbors=2)


@pytest.fixture
def manager(config, memory_source, catalog):
    return EmbeddingManager(config, source=memory_source, catalog=catalog)


@pytest.fixture
def random_table():
    rng = np.random.default_rng(7)
    words = [f"w{i}" for i in range(50)]
    return EmbeddingTable(words, rng.normal(size=(50, 8)), language="xx")
