"""Resolve word batches against one embedding table.

Every input word is normalized (see ``table.normalize_word``) and matched
exactly against the table's vocabulary. Misses are data, not errors: their
rows come back filled with NaN, and the output keeps the input order
(duplicates included). Non-string entries are caller errors.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .base import InvalidArgumentError
from .table import EmbeddingTable

Words = Union[str, Sequence[str]]


def as_word_list(words: Words) -> List[str]:
    """Accept a single word or a sequence of words.

    Raises ``InvalidArgumentError`` for entries that are not strings.
    """
    if isinstance(words, str):
        return [words]
    batch = list(words)
    for position, word in enumerate(batch):
        if not isinstance(word, str):
            raise InvalidArgumentError(
                f"word at position {position} must be a string, got {type(word).__name__}"
            )
    return batch


@dataclass(frozen=True, eq=False)
class LookupResult:
    """Vectors for a word batch.

    Attributes
    - words: The raw input words, in order
    - vectors: ``len(words) x dimension`` matrix; rows of missing words are NaN
    - indices: Table row per word, ``-1`` where the word is missing
    """
    words: Tuple[str, ...]
    vectors: np.ndarray
    indices: np.ndarray

    @property
    def found(self) -> np.ndarray:
        """Boolean mask of words present in the vocabulary."""
        return self.indices >= 0

    @property
    def missing_words(self) -> List[str]:
        return [word for word, index in zip(self.words, self.indices) if index < 0]

    def __len__(self) -> int:
        return len(self.words)

    def rows(self) -> List[Optional[List[float]]]:
        """Plain-Python rows with ``None`` for missing words."""
        return [
            self.vectors[position].tolist() if index >= 0 else None
            for position, index in enumerate(self.indices)
        ]


def resolve(words: Words, table: EmbeddingTable) -> LookupResult:
    """Look up ``words`` in ``table``.

    A batch with no matches (or no words) is a valid, all-missing result.
    """
    batch = as_word_list(words)
    indices = np.fromiter(
        (_row_of(table, word) for word in batch),
        dtype=np.intp,
        count=len(batch)
    )

    vectors = np.full((len(batch), table.dimension), np.nan, dtype=table.vectors.dtype)
    found = indices >= 0
    if found.any():
        vectors[found] = table.vectors[indices[found]]

    return LookupResult(words=tuple(batch), vectors=vectors, indices=indices)


def _row_of(table: EmbeddingTable, word: str) -> int:
    position = table.index_of(word)
    return -1 if position is None else position
