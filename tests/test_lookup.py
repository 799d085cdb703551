"""Tests for word lookup."""

import numpy as np
import pytest

from lingvec.embedding_store import EmbeddingTable, InvalidArgumentError, resolve


def test_found_words_return_stored_vectors(en_table):
    result = resolve(["dog", "cat"], en_table)

    np.testing.assert_array_equal(result.vectors[0], en_table.vector("dog"))
    np.testing.assert_array_equal(result.vectors[1], en_table.vector("cat"))
    assert result.found.tolist() == [True, True]
    assert result.missing_words == []


def test_lookup_is_case_insensitive(en_table):
    result = resolve(["CAT", "Cat", "cat"], en_table)

    np.testing.assert_array_equal(result.vectors[0], result.vectors[2])
    np.testing.assert_array_equal(result.vectors[1], result.vectors[2])


def test_missing_words_give_all_nan_rows(en_table):
    result = resolve(["cat", "zzz", "ca"], en_table)

    assert result.vectors.shape == (3, 3)
    assert not np.isnan(result.vectors[0]).any()
    assert np.isnan(result.vectors[1]).all()
    assert np.isnan(result.vectors[2]).all()
    assert result.indices.tolist() == [0, -1, -1]
    assert result.missing_words == ["zzz", "ca"]
    assert result.rows()[1] is None
    assert result.rows()[0] == [1.0, 0.0, 0.0]


def test_no_matches_is_not_an_error(en_table):
    result = resolve(["zzz", "yyy"], en_table)
    assert np.isnan(result.vectors).all()


def test_empty_batch(en_table):
    result = resolve([], en_table)
    assert len(result) == 0
    assert result.vectors.shape == (0, 3)


def test_order_and_duplicates_are_preserved(en_table):
    words = ["fish", "cat", "fish", "nope", "cat"]
    result = resolve(words, en_table)

    assert result.words == tuple(words)
    assert result.indices.tolist() == [2, 0, 2, -1, 0]
    np.testing.assert_array_equal(result.vectors[0], result.vectors[2])


def test_single_string_is_one_word(en_table):
    result = resolve("Dog", en_table)
    assert result.words == ("Dog",)
    assert result.indices.tolist() == [1]


def test_float32_tables_keep_their_dtype():
    table = EmbeddingTable(["a", "b"], np.eye(2, dtype=np.float32))
    result = resolve(["b", "c"], table)

    assert result.vectors.dtype == np.float32
    assert np.isnan(result.vectors[1]).all()


@pytest.mark.parametrize("bad", [None, 7, b"cat"])
def test_non_string_words_are_rejected(bad):
    table = EmbeddingTable(["none", "7", "cat"], np.eye(3))
    with pytest.raises(InvalidArgumentError):
        resolve(["cat", bad], table)


def test_numpy_strings_are_words(en_table):
    result = resolve(np.array(["cat", "zzz"]), en_table)
    assert result.indices.tolist() == [0, -1]
