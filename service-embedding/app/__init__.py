"""Embedding service package.

Layout:
- ``api``: FastAPI route handlers and request/response models.
- ``runtime``: service-local metrics facade.

The store itself lives in ``lingvec.embedding_store``; the service keeps an
``EmbeddingManager`` on ``app.state``.
"""
