"""Shared fixtures for building vocabulary files and tokenizers."""

import struct
from pathlib import Path

import pytest

import digramtok as dtok


def pack_vocab(
    entries: list[tuple[float, bytes]],
    max_token_length: int,
    byteorder: str = "<",
    trailing: bytes = b"",
) -> bytes:
    """Serialize entries in the binary vocabulary layout."""
    out = struct.pack(byteorder + "i", max_token_length)
    for score, text in entries:
        out += struct.pack(byteorder + "fi", score, len(text)) + text
    return out + trailing


@pytest.fixture
def write_vocab(tmp_path):
    """Return a helper that writes packed vocabulary bytes to a temp file."""

    def _write(data: bytes, name: str = "tokenizer.bin") -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def ab_tokenizer():
    """Return a tokenizer whose only merge is a + b -> ab."""
    return dtok.Tokenizer(["a", "b", "ab"], [0.0, 0.0, 5.0])


@pytest.fixture
def abc_tokenizer():
    """Return a tokenizer where bc outscores ab."""
    return dtok.Tokenizer(["a", "b", "c", "ab", "bc"], [0.0, 0.0, 0.0, 1.0, 2.0])
