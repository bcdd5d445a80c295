"""Challenge type definitions."""

from typing import Iterable, Optional, Union

from pydantic import BaseModel, Field, StrictInt, model_validator

ChallengePayload = Union[str, dict[str, str]]


class Challenge(BaseModel):
    """A single selectable challenge.

    Single-language decks carry ``text``; multilingual decks carry ``texts``,
    a mapping of language code to string.
    """

    model_config = {"frozen": True}

    id: StrictInt
    text: Optional[str] = Field(default=None)
    texts: Optional[dict[str, str]] = Field(default=None, description="Text per language code")

    @model_validator(mode="after")
    def _check_payload(self) -> "Challenge":
        if self.text is None and not self.texts:
            raise ValueError(f"challenge {self.id} has neither 'text' nor 'texts'")
        if self.text is not None and self.texts:
            raise ValueError(f"challenge {self.id} has both 'text' and 'texts'")
        return self

    @property
    def payload(self) -> ChallengePayload:
        """Return the raw text payload (string or language map)."""
        return self.text if self.text is not None else dict(self.texts or {})

    @property
    def languages(self) -> list[str]:
        """Language codes available for this challenge (empty for plain text)."""
        return list(self.texts) if self.texts else []

    def text_in(self, language: Optional[str] = None, fallback: str = "en") -> str:
        """Resolve the display text for a language.

        Plain text is returned as is. For a language map, the requested
        language wins, then the fallback, then the first entry.
        """
        if self.text is not None:
            return self.text
        texts = self.texts or {}
        if language and language in texts:
            return texts[language]
        if fallback in texts:
            return texts[fallback]
        return next(iter(texts.values()))


class ChallengeDeck(BaseModel):
    """Shape of the challenge data source."""

    challenges: list[Challenge] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "ChallengeDeck":
        seen: set[int] = set()
        for challenge in self.challenges:
            if challenge.id in seen:
                raise ValueError(f"duplicate challenge id {challenge.id}")
            seen.add(challenge.id)
        return self

    @property
    def languages(self) -> list[str]:
        return languages_of(self.challenges)


def languages_of(challenges: Iterable[Challenge]) -> list[str]:
    """All language codes used by the challenges, in first-seen order."""
    found: list[str] = []
    for challenge in challenges:
        for lang in challenge.languages:
            if lang not in found:
                found.append(lang)
    return found


class SelectorStats(BaseModel):
    """Read-only snapshot of the selector for diagnostics."""

    history_size: int
    available_count: int
    total_count: int
    recent_ids: list[int] = Field(default_factory=list)
