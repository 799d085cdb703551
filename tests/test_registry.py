"""Tests for the model registry and language catalog."""

import io
import threading

import numpy as np
import pytest

from lingvec.embedding_store import (
    EmbeddingTable,
    InMemoryModelSource,
    InvalidTableError,
    LanguageCatalog,
    LanguageNotLoadedError,
    ModelNotFoundError,
    ModelRegistry,
)


@pytest.fixture
def registry(memory_source, catalog):
    return ModelRegistry(memory_source, catalog=catalog)


def test_registry_starts_empty(registry):
    assert len(registry) == 0
    assert not registry.is_loaded("en")
    with pytest.raises(LanguageNotLoadedError) as excinfo:
        registry.get("en")
    assert excinfo.value.code == "en"
    assert "load_language('en')" in str(excinfo.value)


def test_load_and_get(registry, en_table):
    table = registry.load("en")

    assert registry.is_loaded("en")
    assert registry.get("en") is table
    assert table.language == "en"
    assert table.vocabulary == en_table.vocabulary
    assert registry.loaded_codes() == ["en"]


def test_load_missing_model_leaves_registry_untouched(registry):
    registry.load("en")
    with pytest.raises(ModelNotFoundError):
        registry.load("de")
    assert registry.loaded_codes() == ["en"]


def test_reload_replaces_table(registry, memory_source):
    first = registry.load("en")
    second = registry.load("en")

    assert second is not first
    assert registry.get("en") is second
    assert second.vocabulary == first.vocabulary
    np.testing.assert_array_equal(second.vectors, first.vectors)


def test_load_from_alternate_source(registry, fr_table):
    other = InMemoryModelSource()
    other.write("de", fr_table)

    registry.load("de", source=other)
    assert registry.get("de").vocabulary == fr_table.vocabulary


def test_unload_and_clear(registry):
    registry.load("en")
    registry.load("fr")

    assert registry.unload("en") is True
    assert registry.unload("en") is False
    assert registry.loaded_codes() == ["fr"]

    registry.clear()
    assert len(registry) == 0


def test_dimension_is_enforced(memory_source, catalog):
    registry = ModelRegistry(memory_source, catalog=catalog, expected_dimension=300)
    with pytest.raises(InvalidTableError):
        registry.load("en")
    assert not registry.is_loaded("en")


def test_list_catalog(registry):
    registry.load("en")

    entries = registry.list_catalog()
    assert [(e.code, e.name, e.installed, e.loaded) for e in entries] == [
        ("en", "English", True, True),
        ("fr", "French", True, False),
        ("de", "German", False, False),
    ]
    assert entries[0].to_dict() == {"code": "en", "name": "English", "installed": True, "loaded": True}


def test_list_catalog_uses_given_source(registry, en_table):
    other = InMemoryModelSource()
    other.write("de", en_table)

    installed = {e.code for e in registry.list_catalog(other) if e.installed}
    assert installed == {"de"}


def test_default_catalog_is_bundled():
    catalog = LanguageCatalog.default()

    assert len(catalog) == 44
    assert catalog.codes()[:3] == ["af", "ar", "bg"]
    assert catalog.get("fr").name == "French"
    assert "en" in catalog
    assert "xx" not in catalog
    assert catalog.get("xx") is None


def test_readers_never_see_a_torn_table(memory_source, catalog):
    registry = ModelRegistry(memory_source, catalog=catalog)
    small = EmbeddingTable(["a"], np.ones((1, 3)))
    big = EmbeddingTable([f"w{i}" for i in range(100)], np.ones((100, 3)))
    registry.install("xx", small)

    errors = []
    stop = threading.Event()

    def reader():
        while not stop.is_set():
            table = registry.get("xx")
            if (len(table), table.vectors.shape[0]) not in {(1, 1), (100, 100)}:
                errors.append(table)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for i in range(200):
        registry.install("xx", big if i % 2 else small)
    stop.set()
    for thread in threads:
        thread.join()

    assert errors == []


def _string_vector_artifact():
    buffer = io.BytesIO()
    np.savez(buffer, words=np.array(["a"]), vectors=np.array([["x", "y", "z"]]))
    return buffer.getvalue()


@pytest.mark.parametrize("data", [b"garbage", _string_vector_artifact()], ids=["corrupt", "string-vectors"])
def test_invalid_artifact_leaves_registry_untouched(catalog, en_table, data):
    registry = ModelRegistry(InMemoryModelSource({"de": data}), catalog=catalog)
    registry.install("en", en_table)

    with pytest.raises(InvalidTableError):
        registry.load("de")
    assert registry.loaded_codes() == ["en"]
