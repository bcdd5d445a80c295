"""Main Textual application."""

import random
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from .screens.roulette import RouletteScreen
from ..audio.tones import TonePlayer
from ..challenges.engine import RouletteEngine
from ..config.settings import RouletteConfig


class RouletteApp(App):
    """Challenge roulette terminal application."""

    TITLE = "challenge-roulette"
    SUB_TITLE = "Spin for your next challenge"

    CSS = """
    Screen {
        background: $surface;
    }

    #main-content {
        width: 100%;
        height: 100%;
        padding: 1 2;
    }

    .title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }

    .subtitle {
        color: $text-muted;
        margin-bottom: 1;
    }

    .hint {
        color: $text-muted;
        text-style: italic;
    }

    *:focus {
        border: solid $success;
    }

    Button:focus {
        background: $primary-darken-1;
    }
    """

    BINDINGS = [
        Binding("j", "focus_next", "j:Down", show=False),
        Binding("k", "focus_previous", "k:Up", show=False),
        Binding("q", "quit", "q:Quit", show=True),
        Binding("?", "help", "?:Help", show=True),
    ]

    def __init__(
        self,
        config: Optional[RouletteConfig] = None,
        engine: Optional[RouletteEngine] = None,
        rng: Optional[random.Random] = None,
    ):
        super().__init__()
        config = config or (engine.config if engine else RouletteConfig())
        self.engine = engine or RouletteEngine(config)
        self.tones = TonePlayer(enabled=config.sound_enabled)
        self._rng = rng

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.push_screen(RouletteScreen(self.engine, tones=self.tones, rng=self._rng))

    async def on_unmount(self) -> None:
        """Release audio and storage on exit."""
        self.tones.quit()
        await self.engine.close()

    def action_focus_next(self) -> None:
        """Move focus to next focusable widget (vim j)."""
        self.screen.focus_next()

    def action_focus_previous(self) -> None:
        """Move focus to previous focusable widget (vim k)."""
        self.screen.focus_previous()

    def action_help(self) -> None:
        """Show help."""
        self.notify(
            "Space=Spin, ←/→=Browse slides, r=Reset history\n"
            "s=Stats, t=Switch language, j/k=Move focus, q=Quit",
            title="Keyboard Shortcuts",
            timeout=10,
        )
