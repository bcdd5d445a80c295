"""Roulette engine: data loading, picking and history persistence."""

from typing import Awaitable, Callable, Optional

import structlog

from .loader import load_deck
from .selector import Selector
from .types import Challenge, SelectorStats
from ..config.settings import RouletteConfig
from ..errors import DataUnavailable
from ..storage.database import Database
from ..storage.history import HistoryStore

logger = structlog.get_logger(__name__)

Animation = Callable[[Challenge], Awaitable[None]]


class RouletteEngine:
    """Engine composing the selector with its data source and history slot.

    ``spin()`` follows the caller contract of the selector: it holds the
    busy flag, picks once, runs the animation, releases the flag and then
    persists the history.
    """

    def __init__(
        self,
        config: Optional[RouletteConfig] = None,
        selector: Optional[Selector] = None,
        history_store: Optional[HistoryStore] = None,
    ):
        """Initialize the roulette engine.

        Args:
            config: Runtime configuration
            selector: Selector to drive, a fresh one by default
            history_store: History persistence, backed by ``config.db_path`` by default
        """
        self.config = config or RouletteConfig()
        self.selector = selector or Selector()
        self.history_store = history_store or HistoryStore(Database(self.config.db_path))
        self.error: Optional[str] = None
        self._started = False

    @property
    def ready(self) -> bool:
        """True when challenges are loaded and picking is possible."""
        return self._started and self.error is None and self.selector.is_loaded

    @property
    def challenges(self) -> tuple[Challenge, ...]:
        return self.selector.challenges

    async def start(self) -> None:
        """Load the deck and restore the persisted history.

        Raises:
            DataUnavailable: if the deck cannot be loaded; the engine stays in
                error state and ``spin()`` keeps failing.
        """
        self._started = True
        try:
            challenges = await load_deck(self.config.data_source, timeout=self.config.fetch_timeout)
            self.selector.load(challenges)
        except DataUnavailable as e:
            self.error = str(e)
            logger.error("roulette_error_state", error=self.error)
            raise

        await self.history_store.open()
        ids = await self.history_store.load()
        self.selector.restore(ids)
        logger.info(
            "roulette_started",
            total=len(self.selector.challenges),
            restored=self.selector.history_ids,
        )

    async def spin(self, animate: Optional[Animation] = None) -> Challenge:
        """Pick the next challenge and run the animation for it.

        Args:
            animate: Coroutine function run with the drawn challenge while busy

        Returns:
            The drawn challenge

        Raises:
            Busy: if a spin is already running
            DataUnavailable: if the engine is in error state
        """
        if self.error is not None:
            raise DataUnavailable(self.error)

        with self.selector.holding():
            challenge = self.selector.pick()
            logger.info("spin_started", challenge_id=challenge.id)
            if animate is not None:
                await animate(challenge)

        await self.history_store.save(self.selector.history_ids)
        logger.info("spin_completed", challenge_id=challenge.id, history=self.selector.history_ids)
        return challenge

    async def reset(self) -> None:
        """Clear the history, in memory and persisted."""
        self.selector.reset()
        await self.history_store.clear()
        logger.info("roulette_reset")

    def stats(self) -> SelectorStats:
        return self.selector.stats()

    async def close(self) -> None:
        """Release the history store."""
        await self.history_store.close()
