"""Handling of input characters that have no entry in the alphabet."""

from typing import Final, Literal, overload, override
from abc import ABC, abstractmethod
import logging
from .types import Lookup, Token

from .errors import StrategyError, TokenizationError

log = logging.getLogger(__name__)

# =========================================================================================

# unknown character handling strategies


class UnknownCharStrategy(ABC):
    """Base strategy for characters missing from the alphabet during encoding."""

    @abstractmethod
    def handle(self, char: str, position: int, lookup: Lookup) -> Token | None:
        """Return the seed token to use for ``char``, or ``None`` to drop it."""


class SkipStrategy(UnknownCharStrategy):
    """Strategy that drops unknown characters and logs a warning (the default)."""

    def __init__(self) -> None:
        """Start with no characters skipped."""
        super().__init__()
        self.skipped = 0

    @override
    def handle(self, char: str, position: int, lookup: Lookup) -> Token | None:
        """Log the character and contribute nothing to the output."""
        log.warning(
            f"{char!r} (U+{ord(char):04X}) at position {position} not in alphabet; skipping"
        )
        self.skipped += 1
        return None


class RaiseStrategy(UnknownCharStrategy):
    """Strategy that raises on the first unknown character."""

    @override
    def handle(self, char: str, position: int, lookup: Lookup) -> Token | None:
        """Raise ``TokenizationError`` naming the character and its position."""
        raise TokenizationError(
            "character not in alphabet", position=position, char=char
        )


class SubstituteStrategy(UnknownCharStrategy):
    """Strategy that replaces unknown characters with a placeholder token."""

    def __init__(self, placeholder: Token) -> None:
        """Store the token emitted in place of unknown characters."""
        super().__init__()
        self.placeholder = placeholder

    @override
    def handle(self, char: str, position: int, lookup: Lookup) -> Token | None:
        """Return the placeholder token."""
        log.debug(
            f"{char!r} at position {position} not in alphabet; "
            f"substituting token {self.placeholder}"
        )
        return self.placeholder


StrategyName = Literal["skip", "raise", "substitute"]

_UNKNOWN_CHAR_STRATEGIES: Final[dict[str, type[UnknownCharStrategy]]] = {
    "skip": SkipStrategy,
    "raise": RaiseStrategy,
    "substitute": SubstituteStrategy,
}


def list_strategies() -> list[str]:
    """Return available unknown character strategy names."""
    return list(_UNKNOWN_CHAR_STRATEGIES.keys())


@overload
def get_strategy(name: Literal["skip", "raise"]) -> UnknownCharStrategy: ...


@overload
def get_strategy(
    name: Literal["substitute"], placeholder: Token
) -> SubstituteStrategy: ...


def get_strategy(
    name: StrategyName = "skip", placeholder: Token | None = None
) -> UnknownCharStrategy:
    """
    Create an unknown character strategy by name.

    :param name: Strategy identifier: "skip", "raise" or "substitute".
    :param placeholder: Required for "substitute"; token emitted for unknown characters.
    :raises StrategyError: If name is unknown or placeholder is missing for substitute.

    .. code-block:: python

        strategy = get_strategy("raise")
        strategy = get_strategy("substitute", placeholder=0)
    """
    if name not in _UNKNOWN_CHAR_STRATEGIES:
        raise StrategyError(
            "unknown strategy name",
            invalid_name=name,
            available_strats=list(_UNKNOWN_CHAR_STRATEGIES.keys()),
        )

    if name == "substitute":
        if placeholder is None:
            raise StrategyError("placeholder is required for substitute strategy")
        return SubstituteStrategy(placeholder)

    return _UNKNOWN_CHAR_STRATEGIES[name]()


__all__ = [
    "StrategyName",
    "UnknownCharStrategy",
    "SkipStrategy",
    "RaiseStrategy",
    "SubstituteStrategy",
    "list_strategies",
    "get_strategy",
]
