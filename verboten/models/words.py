"""Word catalog models — secret words and their proscribed variants."""

from __future__ import annotations

import random

from pydantic import BaseModel, ConfigDict, Field

from verboten.errors import WordCatalogError
from verboten.text import contains_word, normalize


class ForbiddenWord(BaseModel):
    """One secret word together with the words the describer may not say."""

    model_config = ConfigDict(frozen=True)

    word: str = Field(min_length=1)
    forbidden: tuple[str, ...] = ()
    language: str = ""  # language code of the catalog partition

    @property
    def normalized(self) -> str:
        return normalize(self.word)

    @property
    def proscribed(self) -> list[str]:
        """The secret word first, then its forbidden variants."""
        return [self.word, *self.forbidden]

    def is_guessed_by(self, guess: str) -> bool:
        return contains_word(guess, self.word)


class WordCatalog(BaseModel):
    """Language-partitioned, ordered word lists. Read-only once loaded."""

    model_config = ConfigDict(frozen=True)

    languages: dict[str, tuple[ForbiddenWord, ...]] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: dict[str, list[dict[str, object]]]) -> WordCatalog:
        """Build a catalog from the ``{lang: [{word, forbidden}]}`` file layout."""
        return cls(
            languages={
                lang: tuple(ForbiddenWord.model_validate({**entry, "language": lang}) for entry in entries)
                for lang, entries in data.items()
            }
        )

    def entries(self, lang: str) -> tuple[ForbiddenWord, ...]:
        return self.languages.get(lang, ())

    def pick(self, lang: str, rng: random.Random) -> ForbiddenWord:
        """Draw a uniformly random entry for *lang*."""
        entries = self.entries(lang)
        if not entries:
            raise WordCatalogError(f"no words for language {lang!r}")
        return entries[rng.randrange(len(entries))]

    def to_file_layout(self) -> dict[str, list[dict[str, object]]]:
        return {
            lang: [{"word": e.word, "forbidden": list(e.forbidden)} for e in entries]
            for lang, entries in self.languages.items()
        }
