"""digramtok: greedy digram encoding over pre-trained vocabularies."""

from ._config import set_byteorder, set_unknown_char_strategy
from .errors import (
    ConfigError,
    DigramTokError,
    StrategyError,
    TokenizationError,
    UnexpectedEndOfInputError,
    VocabularyError,
    VocabularyLoadError,
)
from .factory import load_tokenizer
from .loader import load_vocabulary, save_vocabulary
from .sequence import TokenSequence, smallest_typecode
from .strategy import (
    RaiseStrategy,
    SkipStrategy,
    SubstituteStrategy,
    UnknownCharStrategy,
    get_strategy,
    list_strategies,
)
from .tokenizer import Tokenizer

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("digramtok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Tokenizer",
    "TokenSequence",
    "UnknownCharStrategy",
    "SkipStrategy",
    "RaiseStrategy",
    "SubstituteStrategy",
    "DigramTokError",
    "VocabularyLoadError",
    "UnexpectedEndOfInputError",
    "VocabularyError",
    "TokenizationError",
    "StrategyError",
    "ConfigError",
    "load_tokenizer",
    "load_vocabulary",
    "save_vocabulary",
    "get_strategy",
    "list_strategies",
    "set_byteorder",
    "set_unknown_char_strategy",
    "smallest_typecode",
]
