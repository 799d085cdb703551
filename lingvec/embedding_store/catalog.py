"""Static catalog of known languages.

The catalog lists every language an embedding table may exist for, in a
fixed order, independent of what is installed or loaded. It ships as
``data/language_codes.csv`` with ``language`` and ``iso_code`` columns.
"""

import csv
import io
from dataclasses import dataclass
from importlib import resources
from typing import Iterator, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Language:
    """A catalog entry."""
    code: str
    name: str


@dataclass(frozen=True)
class CatalogEntry:
    """A catalog language cross-referenced with disk and memory state."""
    code: str
    name: str
    installed: bool
    loaded: bool

    def to_dict(self):
        return {
            "code": self.code,
            "name": self.name,
            "installed": self.installed,
            "loaded": self.loaded,
        }


class LanguageCatalog:
    """Ordered, read-only collection of ``Language`` records."""

    def __init__(self, languages: Sequence[Tuple[str, str]]):
        self._languages = tuple(Language(code=code, name=name) for code, name in languages)
        self._by_code = {language.code: language for language in self._languages}

    @classmethod
    def from_csv(cls, text: str) -> "LanguageCatalog":
        reader = csv.DictReader(io.StringIO(text))
        return cls([(row["iso_code"].strip(), row["language"].strip()) for row in reader])

    @classmethod
    def default(cls) -> "LanguageCatalog":
        """The catalog bundled with the package."""
        text = (
            resources.files("lingvec.embedding_store")
            .joinpath("data").joinpath("language_codes.csv")
            .read_text(encoding="utf-8")
        )
        return cls.from_csv(text)

    def __iter__(self) -> Iterator[Language]:
        return iter(self._languages)

    def __len__(self) -> int:
        return len(self._languages)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def get(self, code: str) -> Optional[Language]:
        return self._by_code.get(code)

    def codes(self) -> List[str]:
        return [language.code for language in self._languages]
