"""Fetching and parsing the challenge data source."""

import json
from pathlib import Path
from typing import Optional, Union

import httpx
import structlog
from pydantic import ValidationError

from ..errors import DataUnavailable
from .types import Challenge, ChallengeDeck

logger = structlog.get_logger(__name__)

LOAD_FAILED_MESSAGE = "The roulette options could not be loaded. Sorry..."


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def _fetch_url(url: str, timeout: float, client: Optional[httpx.AsyncClient] = None) -> str:
    """Fetch the raw deck text from an HTTP(S) URL."""
    if client is None:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own_client:
            return await _fetch_url(url, timeout, own_client)

    response = await client.get(url, headers={"Accept": "application/json"})
    response.raise_for_status()
    return response.text


def parse_deck(raw: Union[str, bytes]) -> list[Challenge]:
    """Parse deck JSON into challenges.

    Raises:
        DataUnavailable: on invalid JSON, schema violations or an empty list
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DataUnavailable(LOAD_FAILED_MESSAGE) from e

    try:
        deck = ChallengeDeck.model_validate(data)
    except ValidationError as e:
        raise DataUnavailable(LOAD_FAILED_MESSAGE) from e

    if not deck.challenges:
        raise DataUnavailable(LOAD_FAILED_MESSAGE)
    return deck.challenges


async def load_deck(
    source: Union[str, Path],
    timeout: float = 10.0,
    client: Optional[httpx.AsyncClient] = None,
) -> list[Challenge]:
    """Load the challenge deck from a URL or a file path.

    Args:
        source: ``http(s)://`` URL or filesystem path
        timeout: HTTP timeout in seconds
        client: Optional HTTP client to reuse

    Returns:
        The loaded challenges, never empty

    Raises:
        DataUnavailable: if the source cannot be fetched or parsed
    """
    source = str(source)
    try:
        if _is_url(source):
            raw = await _fetch_url(source, timeout, client)
        else:
            raw = Path(source).read_text(encoding="utf-8")
        challenges = parse_deck(raw)
    except DataUnavailable as e:
        logger.error("deck_load_failed", source=source, error=repr(e.__cause__ or e))
        raise
    except (httpx.HTTPError, OSError, UnicodeDecodeError) as e:
        logger.error("deck_load_failed", source=source, error=repr(e))
        raise DataUnavailable(LOAD_FAILED_MESSAGE) from e

    logger.info("deck_loaded", source=source, count=len(challenges))
    return challenges
