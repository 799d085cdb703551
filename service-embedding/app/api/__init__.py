"""API subpackage for the embedding service.

Contains FastAPI routers that expose endpoints for:
- The language catalog and load/unload (``/languages``)
- Word vectors (``/embed``)
- Nearest neighbors, within or across languages (``/neighbors``)
"""
