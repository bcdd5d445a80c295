"""Exceptions raised by challenge-roulette."""


class RouletteError(Exception):
    """Base class for roulette errors."""


class DataUnavailable(RouletteError):
    """The challenge set could not be loaded, or it is empty.

    Fatal for the session: picking stays disabled until restart.
    """


class Busy(RouletteError):
    """A pick was attempted while another one is still in progress."""


class PersistenceUnavailable(RouletteError):
    """The history slot could not be read or written."""


class ConfigError(RouletteError):
    """Invalid configuration values."""
