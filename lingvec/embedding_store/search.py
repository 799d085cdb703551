"""Exact nearest-neighbor search by cosine similarity.

Query words are resolved in a source table and scored against every row
of a target table. The two tables may be the same (monolingual neighbors)
or different languages sharing an aligned vector space; the computation is
identical either way. Target norms come precomputed with the table, so a
batch only pays for the matrix product and the ranking.

Ranking is a stable descending sort: equal scores keep the target
vocabulary's enumeration order, which makes results reproducible. Rows
with zero norm have no defined cosine and score ``-inf``.
"""

import numbers
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import structlog

from .base import InvalidArgumentError
from .lookup import Words, resolve
from .table import EmbeddingTable

logger = structlog.get_logger("embedding_store.search")

DEFAULT_BATCH_SIZE = 256


@dataclass(frozen=True)
class NeighborResult:
    """Ranked target words per input word.

    ``labels[i]`` holds exactly ``k`` words (best first) or ``None`` when
    ``words[i]`` is missing from the source table; ``scores`` mirrors it.
    """
    words: Tuple[str, ...]
    k: int
    labels: List[Optional[List[str]]]
    scores: List[Optional[List[float]]]

    def __len__(self) -> int:
        return len(self.words)

    def __getitem__(self, position: int) -> Optional[List[str]]:
        return self.labels[position]


def validate_k(k: int, target: EmbeddingTable) -> int:
    if isinstance(k, bool) or not isinstance(k, numbers.Integral):
        raise InvalidArgumentError(f"k must be an integer, got {k!r}")
    if k <= 0:
        raise InvalidArgumentError(f"k must be positive, got {k}")
    if k > len(target):
        raise InvalidArgumentError(
            f"k={k} exceeds the target vocabulary size of {len(target)}"
        )
    return int(k)


def cosine_similarities(
    queries: np.ndarray,
    query_norms: np.ndarray,
    targets: np.ndarray,
    target_norms: np.ndarray
) -> np.ndarray:
    """``len(queries) x len(targets)`` cosine matrix with ``-inf`` for zero norms."""
    dots = np.asarray(queries, dtype=np.float64) @ np.asarray(targets, dtype=np.float64).T
    denominators = np.outer(query_norms, target_norms)
    undefined = denominators == 0
    with np.errstate(divide="ignore", invalid="ignore"):
        similarities = dots / denominators
    similarities[undefined] = -np.inf
    return similarities


def rank_top_k(similarities: np.ndarray, k: int) -> np.ndarray:
    """Column indices of the ``k`` best scores per row, ties in column order."""
    order = np.argsort(-similarities, axis=1, kind="stable")
    return order[:, :k]


def nearest(
    words: Words,
    source: EmbeddingTable,
    target: EmbeddingTable,
    k: int,
    batch_size: int = DEFAULT_BATCH_SIZE
) -> NeighborResult:
    """Top-``k`` target words for each word resolved in ``source``.

    Raises ``InvalidArgumentError`` before any scoring if ``k`` is not in
    ``1..len(target)`` or the two tables differ in dimension.
    """
    k = validate_k(k, target)
    if source.dimension != target.dimension:
        raise InvalidArgumentError(
            f"source dimension {source.dimension} does not match "
            f"target dimension {target.dimension}"
        )
    if batch_size <= 0:
        raise InvalidArgumentError(f"batch_size must be positive, got {batch_size}")

    lookup = resolve(words, source)
    labels: List[Optional[List[str]]] = [None] * len(lookup)
    scores: List[Optional[List[float]]] = [None] * len(lookup)

    positions = np.flatnonzero(lookup.found)
    vocabulary = target.vocabulary
    for start in range(0, len(positions), batch_size):
        block = positions[start:start + batch_size]
        rows = lookup.indices[block]
        similarities = cosine_similarities(
            source.vectors[rows],
            source.norms[rows],
            target.vectors,
            target.norms
        )
        best = rank_top_k(similarities, k)
        for offset, position in enumerate(block):
            picks = best[offset]
            labels[position] = [vocabulary[column] for column in picks]
            scores[position] = similarities[offset, picks].tolist()

    logger.debug(
        "Neighbor search completed",
        source_language=source.language,
        target_language=target.language,
        queries=len(lookup),
        resolved=len(positions),
        k=k
    )
    return NeighborResult(words=lookup.words, k=k, labels=labels, scores=scores)
