import json
import random
import tempfile
import unittest
from pathlib import Path

from textual.widgets import Button

from challenge_roulette.config.settings import RouletteConfig
from challenge_roulette.ui.app import RouletteApp
from challenge_roulette.ui.screens.roulette import LABEL_AGAIN, LABEL_ERROR


async def settle(app, pilot) -> None:
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


def make_config(tmp: Path, data_source: str) -> RouletteConfig:
    return RouletteConfig(
        data_source=data_source,
        db_path=tmp / "data.db",
        sound_enabled=False,
        spin_steps_min=1,
        spin_steps_max=2,
        step_ms=0,
        log_file=None,
    )


class RouletteScreenTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        deck = {
            "challenges": [
                {"id": i, "texts": {"en": f"challenge {i}", "es": f"desafío {i}"}}
                for i in range(1, 6)
            ]
        }
        self.deck = self.tmp / "deck.json"
        self.deck.write_text(json.dumps(deck), encoding="utf-8")

    async def asyncTearDown(self) -> None:
        self._tmp.cleanup()

    async def test_spin_updates_history(self) -> None:
        app = RouletteApp(make_config(self.tmp, str(self.deck)), rng=random.Random(4))
        async with app.run_test() as pilot:
            await settle(app, pilot)
            self.assertTrue(app.engine.ready)

            await pilot.press("space")
            await settle(app, pilot)

            self.assertEqual(len(app.engine.selector.history), 1)
            self.assertFalse(app.engine.selector.busy)
            spin_button = app.screen.query_one("#btn-spin", Button)
            self.assertFalse(spin_button.disabled)
            self.assertIn(LABEL_AGAIN, str(spin_button.label))

            picked = app.engine.selector.history[0]
            self.assertEqual(app.screen.current_slide, app.engine.selector.index_of(picked))

    async def test_navigation_and_reset(self) -> None:
        app = RouletteApp(make_config(self.tmp, str(self.deck)), rng=random.Random(4))
        async with app.run_test() as pilot:
            await settle(app, pilot)
            screen = app.screen

            self.assertTrue(screen.query_one("#btn-prev", Button).disabled)
            await pilot.press("right")
            await pilot.press("right")
            self.assertEqual(screen.current_slide, 2)
            await pilot.press("left")
            self.assertEqual(screen.current_slide, 1)

            await pilot.press("space")
            await settle(app, pilot)
            await pilot.press("r")
            await settle(app, pilot)

            self.assertEqual(app.engine.selector.history, ())
            self.assertEqual(screen.current_slide, 0)
            self.assertEqual(await app.engine.history_store.load(), [])

    async def test_language_cycles(self) -> None:
        app = RouletteApp(make_config(self.tmp, str(self.deck)))
        async with app.run_test() as pilot:
            await settle(app, pilot)
            self.assertEqual(app.screen.language, "en")
            await pilot.press("t")
            self.assertEqual(app.screen.language, "es")
            await pilot.press("t")
            self.assertEqual(app.screen.language, "en")

    async def test_missing_deck_shows_error(self) -> None:
        app = RouletteApp(make_config(self.tmp, str(self.tmp / "missing.json")))
        async with app.run_test() as pilot:
            await settle(app, pilot)

            spin_button = app.screen.query_one("#btn-spin", Button)
            self.assertTrue(spin_button.disabled)
            self.assertIn(LABEL_ERROR, str(spin_button.label))
            self.assertIsNotNone(app.engine.error)
            self.assertFalse(app.screen.query_one("#slideshow").display)

            await pilot.press("space")
            await settle(app, pilot)
            self.assertEqual(app.engine.selector.history, ())


if __name__ == "__main__":
    unittest.main()
