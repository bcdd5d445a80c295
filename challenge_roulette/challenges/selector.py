"""Random challenge selection with a short no-repeat window."""

import random
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional, Protocol, Sequence

import structlog

from ..errors import Busy, DataUnavailable
from .types import Challenge, SelectorStats

logger = structlog.get_logger(__name__)

HISTORY_LIMIT = 3


class IndexSource(Protocol):
    """Anything that can draw a uniform index in ``[0, n)``."""

    def randrange(self, n: int) -> int: ...


class Selector:
    """Owns the challenge set, the recent-pick history and the busy flag.

    The selector never toggles the busy flag on its own: callers wrap the
    whole presentation sequence in ``begin()``/``finish()`` (or ``holding()``)
    and call ``pick()`` once inside it. A second ``pick()`` inside the same
    busy window fails with ``Busy``.
    """

    def __init__(
        self,
        challenges: Iterable[Challenge] = (),
        rng: Optional[IndexSource] = None,
        history_limit: int = HISTORY_LIMIT,
    ):
        """Initialize the selector.

        Args:
            challenges: Initial challenge set. May be empty until ``load()``.
            rng: Uniform index source, ``random.Random()`` when omitted
            history_limit: Size of the no-repeat window
        """
        self._rng: IndexSource = rng or random.Random()
        self._history_limit = history_limit
        self._challenges: list[Challenge] = list(challenges)
        self._history: list[Challenge] = []
        self._busy = False
        self._committed = False

    @property
    def challenges(self) -> tuple[Challenge, ...]:
        return tuple(self._challenges)

    @property
    def history(self) -> tuple[Challenge, ...]:
        """Recent picks, most recent first."""
        return tuple(self._history)

    @property
    def history_ids(self) -> list[int]:
        return [c.id for c in self._history]

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def is_loaded(self) -> bool:
        return bool(self._challenges)

    def load(self, challenges: Sequence[Challenge]) -> None:
        """Replace the working set.

        Raises:
            DataUnavailable: if ``challenges`` is empty. The set is left empty.
        """
        self._challenges = list(challenges)
        if not self._challenges:
            self._history = []
            raise DataUnavailable("The challenge list is empty")

        known = {c.id for c in self._challenges}
        self._history = [c for c in self._history if c.id in known]
        logger.debug("challenges_loaded", total=len(self._challenges))

    def restore(self, ids: Iterable[int]) -> None:
        """Rebuild history from persisted ids, dropping unknown ones."""
        by_id = {c.id: c for c in self._challenges}
        restored: list[Challenge] = []
        for challenge_id in ids:
            challenge = by_id.get(challenge_id)
            if challenge is not None and challenge not in restored:
                restored.append(challenge)
        self._history = restored[: self._history_limit]

    def get(self, challenge_id: int) -> Optional[Challenge]:
        """Get a challenge by id."""
        for challenge in self._challenges:
            if challenge.id == challenge_id:
                return challenge
        return None

    def index_of(self, challenge: Challenge) -> int:
        """Position of a challenge in the set, -1 if absent."""
        for i, candidate in enumerate(self._challenges):
            if candidate.id == challenge.id:
                return i
        return -1

    def available_for_pick(self) -> list[Challenge]:
        """Challenges whose id is not in the history."""
        recent = {c.id for c in self._history}
        return [c for c in self._challenges if c.id not in recent]

    def pick(self) -> Challenge:
        """Draw the next challenge and push it onto the history.

        Raises:
            Busy: if the caller has not finished the previous pick.
            DataUnavailable: if no challenge set is loaded.
        """
        if self._busy and self._committed:
            raise Busy("A pick is already in progress")
        if not self._challenges:
            raise DataUnavailable("No challenges loaded")

        available = self.available_for_pick()
        if not available:
            # History covers the whole set
            logger.info("history_exhausted", total=len(self._challenges))
            self._history = []
            available = list(self._challenges)

        chosen = available[self._rng.randrange(len(available))]
        self._history.insert(0, chosen)
        del self._history[self._history_limit :]
        if self._busy:
            self._committed = True
        logger.debug("challenge_picked", challenge_id=chosen.id, available=len(available))
        return chosen

    def begin(self) -> None:
        """Mark a pick as in progress."""
        if self._busy:
            raise Busy("A pick is already in progress")
        self._busy = True
        self._committed = False

    def finish(self) -> None:
        """Mark the pick in progress as done."""
        self._busy = False
        self._committed = False

    @contextmanager
    def holding(self) -> Iterator["Selector"]:
        """Hold the busy flag for the duration of the block."""
        self.begin()
        try:
            yield self
        finally:
            self.finish()

    def stats(self) -> SelectorStats:
        return SelectorStats(
            history_size=len(self._history),
            available_count=len(self.available_for_pick()),
            total_count=len(self._challenges),
            recent_ids=self.history_ids,
        )

    def reset(self) -> None:
        """Clear the history. Does not touch the busy flag."""
        self._history = []
