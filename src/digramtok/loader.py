"""
Reader and writer for the binary vocabulary format.

A vocabulary file is a header followed by ``vocab_size`` entries::

    int32    max_token_length
    repeated vocab_size times:
        float32  score
        int32    length
        bytes    text (``length`` bytes)

The entry count is not stored in the file and must be supplied by the caller.
Byte order is little-endian unless configured otherwise.
"""

import logging
import os
import struct
from pathlib import Path
from typing import BinaryIO, Final, Iterator
from contextlib import contextmanager

from ._config import struct_prefix
from ._decorators import measure_time
from .errors import UnexpectedEndOfInputError, VocabularyError, VocabularyLoadError
from .types import Alphabet, Scores

# entry text is decoded so that invalid UTF-8 bytes survive the round trip
TEXT_ENCODING: Final[str] = "utf-8"
TEXT_ERRORS: Final[str] = "surrogateescape"

log = logging.getLogger(__name__)

type Source = str | os.PathLike[str] | BinaryIO


@measure_time
def load_vocabulary(
    source: Source,
    vocab_size: int,
    *,
    byteorder: str | None = None,
) -> tuple[Alphabet, Scores]:
    """
    Parse a binary vocabulary into an alphabet and its aligned merge scores.

    Entry ``i`` of the file becomes ``alphabet[i]`` / ``scores[i]``. Entries
    longer than the declared maximum are logged and loaded in full. Bytes left
    after the last entry are logged and ignored.

    :param source: Path to the vocabulary file or an open binary stream.
    :param vocab_size: Number of entries to read.
    :param byteorder: "little", "big" or "native"; defaults to the configured order.
    :return: ``(alphabet, scores)`` tuples of equal length.
    :raises VocabularyError: If ``vocab_size`` is negative.
    :raises VocabularyLoadError: If the path does not exist or an entry length is negative.
    :raises UnexpectedEndOfInputError: If the source ends before ``vocab_size`` entries.
    """
    if vocab_size < 0:
        raise VocabularyError("vocab size must not be negative", vocab_size=vocab_size)

    prefix = struct_prefix(byteorder)
    with _open_source(source, "rb") as (f, path):
        name = path or "<stream>"
        log.info(f"loading {vocab_size} vocabulary entries from {name}")
        alphabet, scores = _read_entries(f, vocab_size, prefix, path)

        # anything after the declared entries is not part of the vocabulary
        if f.read(1):
            log.warning(f"stopped before end of vocabulary source was reached: {name}")

    log.info(f"vocabulary loaded: {len(alphabet)} entries")
    return alphabet, scores


def _read_entries(
    f: BinaryIO, vocab_size: int, prefix: str, path: str | None
) -> tuple[Alphabet, Scores]:
    """Read the header and ``vocab_size`` entries from an open stream."""
    int32 = struct.Struct(prefix + "i")
    entry_head = struct.Struct(prefix + "fi")

    raw = f.read(int32.size)
    if len(raw) < int32.size:
        raise UnexpectedEndOfInputError(vocab_size=vocab_size, path=path)
    (max_token_length,) = int32.unpack(raw)
    log.debug(f"declared max token length: {max_token_length}")

    alphabet: list[str] = []
    scores: list[float] = []

    for i in range(vocab_size):
        raw = f.read(entry_head.size)
        if len(raw) < entry_head.size:
            raise UnexpectedEndOfInputError(entry=i, vocab_size=vocab_size, path=path)
        score, length = entry_head.unpack(raw)

        if length < 0:
            raise VocabularyLoadError(
                f"negative token length {length} for entry {i}", path=path
            )
        if length > max_token_length:
            log.error(
                f"encountered token with id {i} of length {length} "
                f"exceeding maximum of {max_token_length}"
            )

        text = f.read(length)
        if len(text) < length:
            raise UnexpectedEndOfInputError(entry=i, vocab_size=vocab_size, path=path)

        alphabet.append(text.decode(TEXT_ENCODING, errors=TEXT_ERRORS))
        scores.append(score)

    return tuple(alphabet), tuple(scores)


def save_vocabulary(
    target: Source,
    alphabet: Alphabet,
    scores: Scores,
    *,
    max_token_length: int | None = None,
    byteorder: str | None = None,
) -> None:
    """
    Write an alphabet and its scores in the binary vocabulary format.

    Scores are stored as 32-bit floats, so values that are not exactly
    representable come back rounded.

    :param target: Output path or an open binary stream.
    :param max_token_length: Header bound; defaults to the longest encoded entry.
    :param byteorder: "little", "big" or "native"; defaults to the configured order.
    :raises VocabularyError: If alphabet and scores differ in length.
    """
    if len(alphabet) != len(scores):
        raise VocabularyError(
            f"alphabet has {len(alphabet)} entries but scores has {len(scores)}",
            vocab_size=len(alphabet),
        )

    prefix = struct_prefix(byteorder)
    encoded = [piece.encode(TEXT_ENCODING, errors=TEXT_ERRORS) for piece in alphabet]
    if max_token_length is None:
        max_token_length = max((len(b) for b in encoded), default=0)

    with _open_source(target, "wb") as (f, path):
        log.debug(f"saving {len(encoded)} vocabulary entries to {path or '<stream>'}")
        f.write(struct.pack(prefix + "i", max_token_length))
        for score, b in zip(scores, encoded):
            f.write(struct.pack(prefix + "fi", score, len(b)))
            f.write(b)


@contextmanager
def _open_source(source: Source, mode: str) -> Iterator[tuple[BinaryIO, str | None]]:
    """Yield an open binary stream and its path; only streams opened here are closed."""
    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        if "r" in mode and not path.exists():
            raise VocabularyLoadError(
                "vocabulary filepath does not exist", path=str(path)
            )
        if "w" in mode:
            path.parent.mkdir(parents=True, exist_ok=True)
        with path.open(mode) as f:
            yield f, str(path)
    else:
        name = getattr(source, "name", None)
        yield source, name if isinstance(name, str) else None
