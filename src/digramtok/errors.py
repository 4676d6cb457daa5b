"""Custom exception hierarchy for digramtok errors."""

from .types import Token


class DigramTokError(Exception):
    """Base exception for all digramtok errors."""


class VocabularyLoadError(DigramTokError):
    """Raised when reading a binary vocabulary fails."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        extra = " "
        if path:
            extra += f"(path: {path}) "
        super().__init__(message + extra)
        self.path = path


class UnexpectedEndOfInputError(VocabularyLoadError):
    """Raised when the source runs out before all declared entries are read."""

    def __init__(
        self,
        message: str = "unexpected end of input",
        *,
        entry: int | None = None,
        vocab_size: int | None = None,
        path: str | None = None,
    ) -> None:
        """
        Initialize with the position reached when the source ran dry.

        :param entry: Index of the entry being read, or ``None`` for the header.
        :param vocab_size: Number of entries the caller asked for.
        :param path: Source path when loading from disk.
        """
        if entry is not None:
            message += f" (entry: {entry})"
        else:
            message += " (header)"
        if vocab_size is not None:
            message += f" (vocab size: {vocab_size})"
        super().__init__(message, path=path)
        self.entry = entry
        self.vocab_size = vocab_size


class VocabularyError(DigramTokError):
    """Raised when vocabulary contents or token ids are invalid."""

    def __init__(
        self,
        message: str,
        *,
        vocab_size: int | None = None,
        invalid_tok: Token | None = None,
    ) -> None:
        """Initialize with optional token and vocab_size that get appended to the message."""
        extra = " "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        # decoding: token not in alphabet
        if invalid_tok is not None:
            extra += f"(invalid token: {invalid_tok}) "
        super().__init__(message + extra)
        self.vocab_size = vocab_size
        self.invalid_tok = invalid_tok


class TokenizationError(DigramTokError):
    """Raised when tokenization fails."""

    def __init__(
        self,
        message: str,
        *,
        position: int | None = None,
        char: str | None = None,
    ) -> None:
        extra = " "
        if char is not None:
            extra += f"(char: {char!r} U+{ord(char):04X}) "
        if position is not None:
            extra += f"(position: {position}) "
        super().__init__(message + extra)
        self.position = position
        self.char = char


class StrategyError(DigramTokError):
    """Raised when strategy operations fail."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available_strats: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name:
            extra += f"(available: {available_strats}) (got {invalid_name}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available_strats = available_strats


class ConfigError(DigramTokError):
    """Raised when a configuration value is not recognised."""
