"""Process-wide defaults for digramtok, with environment overrides."""

import os
from typing import Final, Literal

from .errors import ConfigError, StrategyError
from .strategy import list_strategies

type ByteOrder = Literal["little", "big", "native"]

BYTEORDER_ENV: Final[str] = "DIGRAMTOK_BYTEORDER"
UNKNOWN_CHAR_ENV: Final[str] = "DIGRAMTOK_UNKNOWN_CHAR"

# struct prefix for each supported byte order
_STRUCT_PREFIX: Final[dict[str, str]] = {"little": "<", "big": ">", "native": "="}

_byteorder: str = "little"
_unknown_char: str = "skip"


def set_byteorder(byteorder: ByteOrder) -> None:
    """Set the default byte order used to read and write vocabulary files."""
    global _byteorder
    _byteorder = _check_byteorder(byteorder)


def get_byteorder() -> str:
    """Return the default byte order (respects env var override)."""
    env = os.environ.get(BYTEORDER_ENV, "").strip().lower()
    if env:
        return _check_byteorder(env)
    return _byteorder


def set_unknown_char_strategy(name: str) -> None:
    """
    Set the name of the default strategy for characters missing from the alphabet.

    :raises StrategyError: If ``name`` is unknown or needs arguments ("substitute").
    """
    global _unknown_char
    _unknown_char = _check_strategy_name(name)


def get_unknown_char_strategy() -> str:
    """Return the default unknown character strategy name (respects env var override)."""
    env = os.environ.get(UNKNOWN_CHAR_ENV, "").strip().lower()
    if env:
        return _check_strategy_name(env)
    return _unknown_char


def struct_prefix(byteorder: str | None = None) -> str:
    """Return the ``struct`` format prefix for ``byteorder`` or the configured default."""
    if byteorder is None:
        byteorder = get_byteorder()
    return _STRUCT_PREFIX[_check_byteorder(byteorder)]


def _check_byteorder(byteorder: str) -> str:
    if byteorder not in _STRUCT_PREFIX:
        raise ConfigError(
            f"unknown byte order: {byteorder!r} "
            f"(available: {', '.join(_STRUCT_PREFIX)})"
        )
    return byteorder


def _check_strategy_name(name: str) -> str:
    # a default cannot carry the placeholder that "substitute" needs
    available = [s for s in list_strategies() if s != "substitute"]
    if name not in available:
        raise StrategyError(
            "unknown default strategy name",
            invalid_name=name,
            available_strats=available,
        )
    return name
