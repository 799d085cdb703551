"""Tests for cosine nearest-neighbor search."""

import numpy as np
import pytest

from lingvec.embedding_store import EmbeddingTable, InvalidArgumentError, nearest
from lingvec.embedding_store.search import cosine_similarities, rank_top_k


def test_cross_lingual_neighbors(en_table, fr_table):
    result = nearest(["cat", "zzz"], en_table, fr_table, 1)

    assert result.labels == [["chat"], None]
    assert result.scores[1] is None
    assert result[0] == ["chat"]
    assert len(result) == 2


def test_full_ranking(en_table, fr_table):
    result = nearest(["dog"], en_table, fr_table, 3)

    assert result.labels[0] == ["chien", "chat", "poisson"]
    assert result.scores[0] == sorted(result.scores[0], reverse=True)


def test_word_ranks_itself_first(random_table):
    words = list(random_table.vocabulary)
    result = nearest(words, random_table, random_table, 5)

    for word, labels, scores in zip(words, result.labels, result.scores):
        assert labels[0] == word
        assert scores[0] == pytest.approx(1.0)
        assert len(labels) == 5


def test_matches_naive_cosine(random_table):
    query = random_table.vector("w3")
    expected = []
    for word in random_table.vocabulary:
        u = random_table.vector(word)
        expected.append(np.dot(query, u) / (np.linalg.norm(query) * np.linalg.norm(u)))
    expected_order = [random_table.vocabulary[i] for i in np.argsort(expected)[::-1][:10]]

    assert nearest(["w3"], random_table, random_table, 10).labels[0] == expected_order


def test_batching_does_not_change_results(random_table):
    words = list(random_table.vocabulary) + ["missing"]
    whole = nearest(words, random_table, random_table, 4, batch_size=1000)
    chunked = nearest(words, random_table, random_table, 4, batch_size=3)

    assert chunked.labels == whole.labels
    assert chunked.labels[-1] is None


def test_ties_follow_vocabulary_order():
    table = EmbeddingTable(["b", "a", "c"], np.array([[1.0, 0.0], [2.0, 0.0], [0.0, 1.0]]))

    assert nearest(["a"], table, table, 2).labels[0] == ["b", "a"]
    assert nearest(["b"], table, table, 2).labels[0] == ["b", "a"]


def test_zero_norm_targets_rank_last():
    table = EmbeddingTable(["zero", "x", "y"], np.array([[0.0, 0.0], [1.0, 0.0], [-1.0, 0.0]]))
    result = nearest(["x"], table, table, 3)

    assert result.labels[0] == ["x", "y", "zero"]
    assert result.scores[0][:2] == [pytest.approx(1.0), pytest.approx(-1.0)]
    assert result.scores[0][2] == -np.inf


def test_zero_norm_query_falls_back_to_vocabulary_order():
    table = EmbeddingTable(["x", "y", "zero"], np.array([[1.0, 0.0], [0.0, 1.0], [0.0, 0.0]]))
    result = nearest(["zero"], table, table, 2)

    assert result.labels[0] == ["x", "y"]
    assert all(score == -np.inf for score in result.scores[0])


def test_duplicates_and_order_are_preserved(en_table, fr_table):
    result = nearest(["fish", "CAT", "fish"], en_table, fr_table, 1)
    assert result.labels == [["poisson"], ["chat"], ["poisson"]]
    assert result.words == ("fish", "CAT", "fish")


def test_empty_batch(en_table, fr_table):
    result = nearest([], en_table, fr_table, 2)
    assert result.labels == []


@pytest.mark.parametrize("k", [0, -1, 4, 2.5, True, "3"])
def test_invalid_k_is_rejected(en_table, fr_table, k):
    with pytest.raises(InvalidArgumentError):
        nearest(["cat"], en_table, fr_table, k)


def test_k_is_validated_even_without_matches(en_table, fr_table):
    with pytest.raises(InvalidArgumentError):
        nearest(["zzz"], en_table, fr_table, 10)


def test_k_accepts_numpy_integers(en_table, fr_table):
    assert nearest(["cat"], en_table, fr_table, np.int64(2)).k == 2


def test_dimension_mismatch_is_rejected(en_table):
    other = EmbeddingTable(["a", "b"], np.eye(2))
    with pytest.raises(InvalidArgumentError):
        nearest(["cat"], en_table, other, 1)


def test_cosine_similarities_helper():
    queries = np.array([[1.0, 0.0], [0.0, 0.0]])
    targets = np.array([[2.0, 0.0], [0.0, 3.0]])
    similarities = cosine_similarities(
        queries, np.linalg.norm(queries, axis=1), targets, np.linalg.norm(targets, axis=1)
    )

    np.testing.assert_allclose(similarities[0], [1.0, 0.0])
    assert np.isneginf(similarities[1]).all()
    assert rank_top_k(similarities, 1).tolist() == [[0], [0]]
