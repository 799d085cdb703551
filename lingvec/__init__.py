"""lingvec: multilingual word-embedding store with cross-lingual neighbors.

Import pattern:
- from lingvec.embedding_store import EmbeddingManager, ModelRegistry
- from lingvec.common.config import BaseConfig
"""

__version__ = "0.1.0"
