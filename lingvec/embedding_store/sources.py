"""Model source implementations.

``LocalModelSource`` reads ``<directory>/<code>.npz`` files, the layout
produced when prepared tables are installed. ``InMemoryModelSource`` keeps
artifacts in a dict, which is handy for tests and for embedding callers
that build tables on the fly.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

import structlog

from .base import ModelNotFoundError, ModelSource
from .table import EmbeddingTable

logger = structlog.get_logger("embedding_store.sources")

ARTIFACT_SUFFIX = ".npz"


class LocalModelSource(ModelSource):
    """Artifacts stored as files in one directory.

    Parameters
    - directory: Folder holding ``<code>.npz`` files; it need not exist
      until something is written to it
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory).expanduser()

    def path_for(self, code: str) -> Path:
        return self.directory / f"{code}{ARTIFACT_SUFFIX}"

    def read(self, code: str) -> bytes:
        path = self.path_for(code)
        if not path.is_file():
            raise ModelNotFoundError(code, str(self.directory))
        return path.read_bytes()

    def available(self) -> List[str]:
        if not self.directory.is_dir():
            return []
        return sorted(
            path.name[:-len(ARTIFACT_SUFFIX)]
            for path in self.directory.glob(f"*{ARTIFACT_SUFFIX}")
            if path.is_file()
        )

    def write(self, code: str, table: EmbeddingTable) -> Path:
        """Install ``table`` as the artifact for ``code``.

        The file is written next to its final name and renamed into place,
        so a concurrent ``read`` sees either the old or the new artifact.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(code)
        staging = path.with_name(path.name + ".tmp")
        staging.write_bytes(table.to_bytes())
        staging.replace(path)
        logger.info("Model artifact written", language=code, path=str(path), size=len(table))
        return path

    def describe(self) -> str:
        return str(self.directory)


class InMemoryModelSource(ModelSource):
    """Artifacts held in process memory, keyed by language code."""

    def __init__(self, artifacts: Optional[Dict[str, bytes]] = None):
        self._artifacts: Dict[str, bytes] = dict(artifacts or {})

    def read(self, code: str) -> bytes:
        try:
            return self._artifacts[code]
        except KeyError:
            raise ModelNotFoundError(code, self.describe()) from None

    def available(self) -> List[str]:
        return sorted(self._artifacts)

    def write(self, code: str, table: EmbeddingTable) -> None:
        self._artifacts[code] = table.to_bytes()

    def describe(self) -> str:
        return "memory"
