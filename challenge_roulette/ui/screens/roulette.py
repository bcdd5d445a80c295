"""Slideshow roulette screen."""

import asyncio
import random
from typing import Optional

import structlog
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Label, Static

from ..widgets.particles import ParticleField
from ...audio.tones import TonePlayer, slide_frequency, spin_schedule
from ...challenges.engine import RouletteEngine
from ...challenges.types import Challenge, languages_of
from ...errors import Busy, DataUnavailable

logger = structlog.get_logger(__name__)

PROMPT_TEXT = "Spin the roulette to start!"
LABEL_START = "START ROULETTE"
LABEL_SPINNING = "SPINNING..."
LABEL_AGAIN = "SPIN AGAIN"
LABEL_ERROR = "ERROR"

SPIN_BURST = 30
COMPLETION_BURST = 50
SLIDE_TONE_MS = 150


class RouletteScreen(Screen):
    """Slideshow of challenge numbers with a spin button."""

    CSS = """
    #slideshow {
        height: auto;
        margin: 1 0;
        padding: 1;
        background: $surface-darken-1;
        border: solid $error;
    }

    #slideshow.-spinning {
        border: heavy $error;
    }

    #slide-number {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        color: $error;
    }

    #slide-dots {
        width: 100%;
        content-align: center middle;
        color: $text-muted;
    }

    #current-challenge {
        height: auto;
        margin: 1 0;
        padding: 1 2;
        border: solid $primary;
    }

    #current-challenge.-highlight {
        border: heavy $success;
    }

    #challenge-counter {
        color: $warning;
        text-style: bold;
    }

    #controls {
        height: auto;
        margin: 1 0;
    }

    #controls Button {
        margin-right: 1;
    }

    #error-state {
        display: none;
        padding: 1 2;
        background: $error-darken-2;
        border: solid $error;
    }
    """

    BINDINGS = [
        Binding("space", "spin", "Spin", show=True),
        Binding("left", "previous_slide", "Prev", show=True),
        Binding("right", "next_slide", "Next", show=True),
        Binding("r", "reset", "Reset", show=True),
        Binding("s", "stats", "Stats", show=True),
        Binding("t", "cycle_language", "Language", show=True),
    ]

    def __init__(
        self,
        engine: RouletteEngine,
        tones: Optional[TonePlayer] = None,
        rng: Optional[random.Random] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.engine = engine
        self.tones = tones or TonePlayer(enabled=False)
        self._rng = rng or random.Random()
        self.language = engine.config.language
        self.current_slide = 0
        self._failed = False

    @property
    def challenges(self) -> tuple[Challenge, ...]:
        return self.engine.challenges

    @property
    def spinning(self) -> bool:
        return self.engine.selector.busy

    def compose(self) -> ComposeResult:
        """Compose the roulette screen."""
        with Container(id="main-content"):
            yield Static("Challenge Roulette", classes="title")
            yield Static("Spin and get your next challenge", classes="subtitle")

            with Vertical(id="slideshow"):
                yield ParticleField(rng=self._rng, id="particles")
                yield Static("", id="slide-number", markup=False)
                yield Static("", id="slide-dots")

            yield Static("", id="error-state")

            with Vertical(id="current-challenge"):
                yield Label("", id="challenge-counter")
                yield Static("Loading challenges...", id="challenge-text", markup=False)

            with Horizontal(id="controls"):
                yield Button("< Prev", id="btn-prev", variant="default")
                yield Button(LABEL_START, id="btn-spin", variant="error")
                yield Button("Next >", id="btn-next", variant="default")

            yield Static(
                "Space: spin   ←/→: browse   r: reset   s: stats   t: language",
                classes="hint",
            )

    def on_mount(self) -> None:
        """Load the deck in the background."""
        self.query_one("#btn-spin", Button).disabled = True
        self._update_navigation()
        self.run_worker(self._start(), name="start")

    async def _start(self) -> None:
        try:
            await self.engine.start()
        except DataUnavailable as e:
            self.show_error(str(e))
            return

        self.tones.init()
        self.query_one("#btn-spin", Button).disabled = False
        self.go_to_slide(0, quiet=True)

    # Slideshow

    def go_to_slide(self, index: int, force: bool = False, quiet: bool = False) -> None:
        """Show the slide at ``index`` and its challenge text.

        Ignored while spinning unless ``force`` is set by the animation itself.
        """
        if not self.challenges or (self.spinning and not force):
            return
        index = max(0, min(index, len(self.challenges) - 1))
        self.current_slide = index
        challenge = self.challenges[index]

        self.query_one("#slide-number", Static).update(f"[ {challenge.id} ]")
        self.query_one("#slide-dots", Static).update(
            " ".join("●" if i == index else "○" for i in range(len(self.challenges)))
        )
        self.query_one("#challenge-text", Static).update(self._text_for(challenge))
        self.query_one("#challenge-counter", Label).update(f"Challenge #{challenge.id}")
        self._update_navigation()

        if not quiet:
            self.tones.play(slide_frequency(index), SLIDE_TONE_MS)

    def _text_for(self, challenge: Challenge) -> str:
        return challenge.text_in(self.language, self.engine.config.fallback_language)

    def _update_navigation(self) -> None:
        last = len(self.challenges) - 1
        locked = self.spinning or self._failed or last < 0
        self.query_one("#btn-prev", Button).disabled = locked or self.current_slide == 0
        self.query_one("#btn-next", Button).disabled = locked or self.current_slide >= last

    def action_previous_slide(self) -> None:
        if self.spinning or self.current_slide == 0:
            return
        self.go_to_slide(self.current_slide - 1)

    def action_next_slide(self) -> None:
        if self.spinning or self.current_slide >= len(self.challenges) - 1:
            return
        self.go_to_slide(self.current_slide + 1)

    # Spinning

    def action_spin(self) -> None:
        """Spin with the space key."""
        if self.spinning or not self.engine.ready:
            return
        self.run_worker(self._spin(), name="spin")

    async def _spin(self) -> None:
        try:
            challenge = await self.engine.spin(self._animate_spin)
        except Busy:
            return
        except DataUnavailable as e:
            self.show_error(str(e))
            return
        self._complete_spin(challenge)

    async def _animate_spin(self, challenge: Challenge) -> None:
        """Hop across random slides, then land on the drawn one."""
        spin_button = self.query_one("#btn-spin", Button)
        spin_button.disabled = True
        spin_button.label = LABEL_SPINNING
        self._update_navigation()

        self.query_one("#slideshow").add_class("-spinning")
        self.query_one(ParticleField).burst(SPIN_BURST)
        self._schedule_spin_tones()

        config = self.engine.config
        steps = self._rng.randint(config.spin_steps_min, config.spin_steps_max)
        delay = config.step_ms / 1000
        for _ in range(steps):
            self.go_to_slide(self._rng.randrange(len(self.challenges)), force=True)
            await asyncio.sleep(delay)

        self.go_to_slide(self.engine.selector.index_of(challenge), force=True)

    def _schedule_spin_tones(self) -> None:
        if not self.tones.available:
            return
        for delay_ms, frequency, duration_ms in spin_schedule():
            self.set_timer(
                delay_ms / 1000,
                lambda f=frequency, d=duration_ms: self.tones.play(f, d),
            )

    def _complete_spin(self, challenge: Challenge) -> None:
        spin_button = self.query_one("#btn-spin", Button)
        spin_button.disabled = False
        spin_button.label = LABEL_AGAIN

        self.query_one("#challenge-text", Static).update(self._text_for(challenge))
        self.query_one("#slideshow").remove_class("-spinning")
        self.query_one(ParticleField).burst(COMPLETION_BURST)

        panel = self.query_one("#current-challenge")
        panel.add_class("-highlight")
        self.set_timer(1.0, lambda: panel.remove_class("-highlight"))
        self._update_navigation()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        button_id = event.button.id

        if button_id == "btn-spin":
            self.action_spin()
        elif button_id == "btn-prev":
            self.action_previous_slide()
        elif button_id == "btn-next":
            self.action_next_slide()

    # Other actions

    def action_reset(self) -> None:
        """Forget the recent history and go back to the first slide."""
        if self._failed:
            return
        self.run_worker(self._reset(), name="reset")

    async def _reset(self) -> None:
        await self.engine.reset()
        self.query_one("#btn-spin", Button).label = LABEL_START
        self.go_to_slide(0, quiet=True)
        self.query_one("#challenge-text", Static).update(PROMPT_TEXT)

    def action_stats(self) -> None:
        """Show selector statistics."""
        stats = self.engine.stats()
        recent = ", ".join(str(i) for i in stats.recent_ids) or "none"
        self.app.notify(
            f"Recent: {recent}\n"
            f"Available: {stats.available_count} / {stats.total_count}",
            title="Roulette Stats",
            timeout=6,
        )

    def action_cycle_language(self) -> None:
        """Switch to the next language of a multilingual deck."""
        languages = languages_of(self.challenges)
        if len(languages) < 2:
            self.app.notify("This deck has a single language", title="Language")
            return

        position = languages.index(self.language) if self.language in languages else -1
        self.language = languages[(position + 1) % len(languages)]
        if self.challenges:
            current = self.challenges[self.current_slide]
            self.query_one("#challenge-text", Static).update(self._text_for(current))
        self.app.notify(f"Language: {self.language}", title="Language")

    def show_error(self, message: str) -> None:
        """Switch to the persistent error state."""
        self._failed = True
        self.query_one("#slideshow").display = False

        spin_button = self.query_one("#btn-spin", Button)
        spin_button.disabled = True
        spin_button.label = LABEL_ERROR
        self._update_navigation()

        self.query_one("#challenge-text", Static).update(message)
        error_panel = self.query_one("#error-state", Static)
        error_panel.update(f"⚠  {message}\nPlease restart the application.")
        error_panel.styles.display = "block"
        logger.error("error_state_displayed", message=message)
