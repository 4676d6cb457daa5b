"""Factory functions for creating tokenizers."""

import logging

from .loader import Source, load_vocabulary
from .tokenizer import Tokenizer

log = logging.getLogger(__name__)


def load_tokenizer(
    source: Source, vocab_size: int, *, byteorder: str | None = None
) -> Tokenizer:
    """
    Load a pre-trained tokenizer from a binary vocabulary.

    :param source: Path to the vocabulary file or an open binary stream.
    :param vocab_size: Number of entries stored in the file; not recorded in the file itself.
    :param byteorder: "little", "big" or "native"; defaults to the configured order.
    :return: Tokenizer over the loaded alphabet and scores.
    :raises VocabularyLoadError: If the file does not exist or is corrupt.
    :raises UnexpectedEndOfInputError: If the file holds fewer than ``vocab_size`` entries.

    .. code-block:: python

        tokenizer = load_tokenizer("path/to/tokenizer.bin", 32000)
        tokens = tokenizer.encode("Hello world")
    """
    alphabet, scores = load_vocabulary(source, vocab_size, byteorder=byteorder)
    tokenizer = Tokenizer(alphabet, scores)
    log.debug(f"built {tokenizer!r}")
    return tokenizer
