"""Tests for lingvec.

Unit tests cover the embedding store (tables, registry, lookup, neighbor
search, manager) and the shared config/logging/metrics helpers; service
tests drive the FastAPI app in-process with ``TestClient``.
"""
