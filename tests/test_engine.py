import asyncio
import json
import random
import tempfile
import unittest
from pathlib import Path

from challenge_roulette.challenges.engine import RouletteEngine
from challenge_roulette.challenges.selector import Selector
from challenge_roulette.config.settings import RouletteConfig
from challenge_roulette.errors import Busy, DataUnavailable


def write_deck(path: Path, n: int) -> Path:
    deck = {"challenges": [{"id": i, "text": f"challenge {i}"} for i in range(1, n + 1)]}
    path.write_text(json.dumps(deck), encoding="utf-8")
    return path


class RouletteEngineTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.config = RouletteConfig(
            data_source=str(write_deck(self.tmp / "deck.json", 6)),
            db_path=self.tmp / "data.db",
            log_file=None,
        )
        self.engine = RouletteEngine(self.config, selector=Selector(rng=random.Random(9)))

    async def asyncTearDown(self) -> None:
        await self.engine.close()
        self._tmp.cleanup()

    async def test_start_loads_deck(self) -> None:
        await self.engine.start()
        self.assertTrue(self.engine.ready)
        self.assertEqual(len(self.engine.challenges), 6)
        self.assertEqual(self.engine.stats().history_size, 0)

    async def test_spin_persists_history(self) -> None:
        await self.engine.start()
        first = await self.engine.spin()
        second = await self.engine.spin()
        self.assertNotEqual(first.id, second.id)
        self.assertFalse(self.engine.selector.busy)

        saved = await self.engine.history_store.load()
        self.assertEqual(saved, [second.id, first.id])

    async def test_history_restored_on_restart(self) -> None:
        await self.engine.start()
        picks = [(await self.engine.spin()).id for _ in range(4)]
        await self.engine.close()

        restarted = RouletteEngine(self.config)
        await restarted.start()
        try:
            self.assertEqual(restarted.selector.history_ids, list(reversed(picks))[:3])
            self.assertEqual(restarted.stats().available_count, 3)
        finally:
            await restarted.close()

    async def test_animation_runs_while_busy(self) -> None:
        await self.engine.start()
        seen = []

        async def animate(challenge) -> None:
            seen.append((challenge.id, self.engine.selector.busy))

        challenge = await self.engine.spin(animate)
        self.assertEqual(seen, [(challenge.id, True)])
        self.assertFalse(self.engine.selector.busy)

    async def test_concurrent_spin_is_busy(self) -> None:
        await self.engine.start()
        release = asyncio.Event()

        async def animate(challenge) -> None:
            await release.wait()

        first = asyncio.create_task(self.engine.spin(animate))
        await asyncio.sleep(0)
        self.assertTrue(self.engine.selector.busy)
        history = self.engine.selector.history_ids

        with self.assertRaises(Busy):
            await self.engine.spin()
        self.assertEqual(self.engine.selector.history_ids, history)

        release.set()
        await first
        self.assertFalse(self.engine.selector.busy)

    async def test_reset_clears_persisted_history(self) -> None:
        await self.engine.start()
        await self.engine.spin()
        await self.engine.reset()
        self.assertEqual(self.engine.selector.history, ())
        self.assertEqual(await self.engine.history_store.load(), [])

    async def test_missing_deck_enters_error_state(self) -> None:
        config = self.config.model_copy(update={"data_source": str(self.tmp / "missing.json")})
        engine = RouletteEngine(config)
        with self.assertRaises(DataUnavailable):
            await engine.start()
        self.assertFalse(engine.ready)
        self.assertIsNotNone(engine.error)
        self.assertEqual(engine.challenges, ())
        with self.assertRaises(DataUnavailable):
            await engine.spin()
        await engine.close()

    async def test_storage_failure_does_not_block_spins(self) -> None:
        blocker = self.tmp / "blocker"
        blocker.write_text("", encoding="utf-8")
        config = self.config.model_copy(update={"db_path": blocker / "data.db"})
        engine = RouletteEngine(config)
        await engine.start()
        challenge = await engine.spin()
        self.assertEqual(engine.selector.history_ids, [challenge.id])
        await engine.reset()
        await engine.close()


if __name__ == "__main__":
    unittest.main()
