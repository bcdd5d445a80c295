"""Challenge selection core."""

from .types import Challenge, ChallengeDeck, SelectorStats
from .selector import HISTORY_LIMIT, Selector
from .loader import load_deck, parse_deck
from .engine import RouletteEngine

__all__ = [
    "Challenge",
    "ChallengeDeck",
    "HISTORY_LIMIT",
    "RouletteEngine",
    "Selector",
    "SelectorStats",
    "load_deck",
    "parse_deck",
]
