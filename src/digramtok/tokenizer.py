"""
Digram encoding tokenizer over a pre-trained alphabet.
"""

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Final

from ._config import get_unknown_char_strategy
from ._merge import fold_escapes, greedy_merge
from ._sanitise import _render_piece
from .errors import VocabularyError
from .loader import save_vocabulary
from .sequence import TokenSequence
from .strategy import UnknownCharStrategy, get_strategy
from .types import Alphabet, Lookup, Scores, Token

MODEL_SUFFIX: Final[str] = ".bin"
VOCAB_SUFFIX: Final[str] = ".vocab"

log = logging.getLogger(__name__)


class Tokenizer:
    """
    Greedy digram encoding tokenizer.

    Owns an alphabet of pieces and the merge score of each piece. Text is
    seeded one character per token and adjacent tokens are then merged into
    the highest-scoring piece equal to their concatenation until no merge is
    possible. A byte pair encoder is the special case where the pieces are
    byte strings.

    Instances are read-only after construction and can be shared freely.

    .. code-block:: python

        tok = load_tokenizer("tokenizer.bin", 32000)
        seq = tok.encode("Hello world")
        seq.decode()  # "Hello world"
    """

    def __init__(self, alphabet: Sequence[str], scores: Sequence[float]) -> None:
        """
        Build a tokenizer from an alphabet and its aligned scores.

        :raises VocabularyError: If alphabet and scores differ in length.
        """
        if len(alphabet) != len(scores):
            raise VocabularyError(
                f"alphabet has {len(alphabet)} entries but scores has {len(scores)}",
                vocab_size=len(alphabet),
            )
        self.alphabet: Alphabet = tuple(alphabet)
        self.scores: Scores = tuple(float(s) for s in scores)
        # piece -> (token, score); the lowest id wins for duplicated pieces
        self.lookup: Lookup = {}
        for tok, (piece, score) in enumerate(zip(self.alphabet, self.scores)):
            self.lookup.setdefault(fold_escapes(piece), (tok, score))

        n_dupes = len(self.alphabet) - len(self.lookup)
        if n_dupes:
            log.debug(f"alphabet has {n_dupes} duplicated pieces")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(vocab_size={self.vocab_size()})"

    def vocab_size(self) -> int:
        """Return the number of entries in the alphabet."""
        return len(self.alphabet)

    def token_to_piece(self, tok: Token) -> str:
        """
        Return the alphabet entry for ``tok``.

        :raises VocabularyError: If ``tok`` is not a valid token id.
        """
        self._check_token(tok)
        return self.alphabet[tok]

    def piece_to_token(self, piece: str) -> Token | None:
        """Return the lowest token id whose entry equals ``piece``, if any."""
        hit = self.lookup.get(piece)
        return None if hit is None else hit[0]

    def encode(
        self,
        text: str,
        strategy: UnknownCharStrategy | None = None,
    ) -> TokenSequence:
        """
        Encode text into a token sequence.

        Characters without a single-character entry in the alphabet are handed
        to ``strategy``. The default strategy drops them with a warning, in
        which case decoding the result does not reproduce ``text``.

        :param text: Input text to encode.
        :param strategy: Unknown character handling; defaults to the configured strategy.
        :returns: Encoded token sequence bound to this tokenizer's alphabet.
        :raises TokenizationError: If the strategy rejects an unknown character.
        :raises VocabularyError: If a substitute placeholder is not a valid token id.
        """
        seeds = self._seed(text, strategy)
        tokens, n_merges = greedy_merge(seeds, self.alphabet, self.lookup)
        log.debug(
            f"encoded {len(text)} chars: {len(seeds)} seed tokens, "
            f"{n_merges} merges, {len(tokens)} tokens"
        )
        return TokenSequence(tuple(tokens), self.alphabet)

    def decode(self, tokens: Iterable[Token]) -> str:
        """
        Decode a sequence of tokens back into text.

        :raises VocabularyError: If any token id is not in the alphabet.
        """
        if isinstance(tokens, TokenSequence) and tokens.alphabet is self.alphabet:
            return tokens.decode()
        pieces = []
        for tok in tokens:
            self._check_token(tok)
            pieces.append(self.alphabet[tok])
        return "".join(pieces)

    def save(self, file_prefix: str) -> None:
        """
        Save the vocabulary to disk.

        Creates two files: a .bin file in the binary vocabulary format and a
        .vocab file with human-readable entries.

        :param file_prefix: Path prefix for output files.
        """
        log.info(f"saving tokenizer to {file_prefix}")
        save_vocabulary(
            Path(file_prefix).with_suffix(MODEL_SUFFIX), self.alphabet, self.scores
        )
        self._save_vocab(file_prefix)
        log.info("tokenizer saved successfully")

    def _seed(
        self, text: str, strategy: UnknownCharStrategy | None
    ) -> list[Token]:
        """Map every character to its single-character token."""
        if strategy is None:
            strategy = get_strategy(get_unknown_char_strategy())

        seeds: list[Token] = []
        for pos, char in enumerate(text):
            hit = self.lookup.get(char)
            if hit is not None:
                seeds.append(hit[0])
                continue
            tok = strategy.handle(char, pos, self.lookup)
            if tok is not None:
                self._check_token(tok)
                seeds.append(tok)
        return seeds

    def _check_token(self, tok: Token) -> None:
        if not 0 <= tok < len(self.alphabet):
            raise VocabularyError(
                "token not in alphabet",
                vocab_size=len(self.alphabet),
                invalid_tok=tok,
            )

    def _save_vocab(self, file_prefix: str) -> None:
        """Persist human-readable entries to a .vocab file."""
        vocab_path = Path(file_prefix).with_suffix(VOCAB_SUFFIX)
        vocab_path.parent.mkdir(parents=True, exist_ok=True)

        log.debug(f"saving vocab to {vocab_path}")

        with vocab_path.open("w", encoding="utf-8", newline="\n") as f:
            for tok, (piece, score) in enumerate(zip(self.alphabet, self.scores)):
                f.write(f"[{tok}] {score:g} {_render_piece(piece)}\n")
