"""Immutable per-language embedding tables.

An ``EmbeddingTable`` maps normalized words to rows of a dense matrix. Keys
are normalized once at construction with ``normalize_word``; lookups must
use the same function or they silently miss. Row norms are computed once
and shared by every similarity query against the table.

Artifacts are numpy ``.npz`` archives with two arrays: ``words`` (unicode)
and ``vectors`` (``len(words) x dimension`` floats).
"""

import io
import zipfile
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

from .base import InvalidTableError


def normalize_word(word: str) -> str:
    """Lower-case ``word``; ``str.lower`` does not depend on the locale."""
    return word.lower()


class EmbeddingTable:
    """Word to vector mapping for one language.

    Parameters
    - words: Vocabulary in enumeration order; normalized on the way in
    - vectors: ``len(words) x dimension`` array of finite floats
    - language: Optional language code, informational only

    The table copies ``vectors`` and marks its arrays read-only, so a
    constructed table never changes.
    """

    def __init__(
        self,
        words: Sequence[str],
        vectors: np.ndarray,
        language: Optional[str] = None
    ):
        matrix = np.array(vectors, copy=True)
        if matrix.dtype.kind not in "fiub":
            raise InvalidTableError(f"vectors must be real numbers, got dtype {matrix.dtype}")
        if matrix.dtype.kind != "f":
            matrix = matrix.astype(np.float64)
        if matrix.ndim != 2:
            raise InvalidTableError(f"vectors must be two-dimensional, got shape {matrix.shape}")
        if matrix.shape[0] != len(words):
            raise InvalidTableError(
                f"{len(words)} words but {matrix.shape[0]} vectors"
            )
        if matrix.shape[1] == 0:
            raise InvalidTableError("vector dimension must be positive")
        if not np.all(np.isfinite(matrix)):
            raise InvalidTableError("vectors contain NaN or infinite values")

        index: Dict[str, int] = {}
        keys = []
        for position, word in enumerate(words):
            key = normalize_word(str(word))
            if key in index:
                raise InvalidTableError(f"duplicate vocabulary entry: {key!r}")
            index[key] = position
            keys.append(key)

        matrix.setflags(write=False)
        norms = np.linalg.norm(matrix.astype(np.float64, copy=False), axis=1)
        norms.setflags(write=False)

        self.language = language
        self._words: Tuple[str, ...] = tuple(keys)
        self._index = index
        self._vectors = matrix
        self._norms = norms

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Iterable[float]], language: Optional[str] = None) -> "EmbeddingTable":
        """Build a table from ``{word: vector}``, keeping insertion order."""
        words = list(mapping)
        if not words:
            raise InvalidTableError("cannot infer dimension from an empty mapping")
        vectors = np.array([list(mapping[word]) for word in words], dtype=np.float64)
        return cls(words, vectors, language=language)

    @classmethod
    def from_bytes(cls, data: bytes, language: Optional[str] = None) -> "EmbeddingTable":
        """Deserialize an ``.npz`` artifact.

        Raises ``InvalidTableError`` for corrupt archives, missing arrays,
        or contents that violate the table invariants.
        """
        try:
            archive = np.load(io.BytesIO(data), allow_pickle=False)
            if not hasattr(archive, "files"):
                raise InvalidTableError("model artifact is not an .npz archive")
            with archive:
                words = archive["words"]
                vectors = archive["vectors"]
        except (OSError, EOFError, ValueError, KeyError, zipfile.BadZipFile) as e:
            raise InvalidTableError(f"unreadable model artifact: {e}") from e

        if words.ndim != 1:
            raise InvalidTableError(f"words array must be one-dimensional, got shape {words.shape}")
        if words.dtype.kind != "U":
            raise InvalidTableError(f"words array must hold strings, got dtype {words.dtype}")
        return cls(words.tolist(), vectors, language=language)

    def to_bytes(self) -> bytes:
        """Serialize to the ``.npz`` artifact format read by ``from_bytes``."""
        buffer = io.BytesIO()
        np.savez(buffer, words=np.array(self._words, dtype=str), vectors=self._vectors)
        return buffer.getvalue()

    @property
    def dimension(self) -> int:
        return int(self._vectors.shape[1])

    @property
    def vocabulary(self) -> Tuple[str, ...]:
        """Normalized words in enumeration order."""
        return self._words

    @property
    def vectors(self) -> np.ndarray:
        """Read-only ``size x dimension`` matrix aligned with ``vocabulary``."""
        return self._vectors

    @property
    def norms(self) -> np.ndarray:
        """Read-only Euclidean norm of each row."""
        return self._norms

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and normalize_word(word) in self._index

    def __repr__(self) -> str:
        return (
            f"EmbeddingTable(language={self.language!r}, "
            f"size={len(self)}, dimension={self.dimension})"
        )

    def index_of(self, word: str) -> Optional[int]:
        """Row of ``word`` after normalization, or ``None`` when absent."""
        return self._index.get(normalize_word(word))

    def vector(self, word: str) -> Optional[np.ndarray]:
        """Copy of the stored vector for ``word``, or ``None``."""
        position = self.index_of(word)
        if position is None:
            return None
        return self._vectors[position].copy()
