"""Token sequences bound to the alphabet that produced them."""

from array import array
from dataclasses import dataclass, field
from typing import Final, Iterator, overload

from .loader import TEXT_ENCODING, TEXT_ERRORS
from .types import Alphabet, Token

# unsigned array typecodes from narrowest to widest
_UNSIGNED_TYPECODES: Final[tuple[str, ...]] = ("B", "H", "I", "L", "Q")


def smallest_typecode(n: int) -> str:
    """
    Return the narrowest unsigned ``array`` typecode that can hold ``n``.

    The bound is exclusive of each type's maximum value, so ``n == 255``
    already needs two bytes.

    :raises OverflowError: If ``n`` does not fit in 64 bits.
    """
    for code in _UNSIGNED_TYPECODES:
        if n < (1 << (8 * array(code).itemsize)) - 1:
            return code
    raise OverflowError(f"{n} does not fit in a 64-bit unsigned integer")


@dataclass(frozen=True, slots=True)
class TokenSequence:
    """
    An ordered sequence of token ids and the alphabet they index into.

    The alphabet is shared with the tokenizer, never copied, and ignored when
    comparing sequences. Characters dropped during encoding are not recorded,
    so the decoded text can be shorter than the text that was encoded.
    """

    tokens: tuple[Token, ...]
    alphabet: Alphabet = field(repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    @overload
    def __getitem__(self, index: int) -> Token: ...

    @overload
    def __getitem__(self, index: slice) -> "TokenSequence": ...

    def __getitem__(self, index: int | slice) -> "Token | TokenSequence":
        if isinstance(index, slice):
            return TokenSequence(self.tokens[index], self.alphabet)
        return self.tokens[index]

    def pieces(self) -> list[str]:
        """Return the alphabet entry of every token, in order."""
        return [self.alphabet[tok] for tok in self.tokens]

    def decode(self) -> str:
        """Concatenate the alphabet entries of all tokens."""
        return "".join(self.alphabet[tok] for tok in self.tokens)

    def to_bytes(self) -> bytes:
        """Decode to raw bytes, restoring entries that were not valid UTF-8."""
        return self.decode().encode(TEXT_ENCODING, errors=TEXT_ERRORS)

    def is_valid(self) -> bool:
        """Return ``True`` if every token indexes into the alphabet."""
        n = len(self.alphabet)
        return all(0 <= tok < n for tok in self.tokens)

    def to_array(self) -> array:
        """Return the tokens packed in the narrowest array type for the alphabet size."""
        return array(smallest_typecode(len(self.alphabet)), self.tokens)
