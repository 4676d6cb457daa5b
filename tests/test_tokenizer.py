"""Unit tests for Tokenizer encode/decode, merge order, edge cases, and serialization."""

import itertools
import logging
import math
import random

import pytest

import digramtok as dtok
from digramtok._merge import greedy_merge, naive_greedy_merge
from digramtok.errors import VocabularyError


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def word_tokenizer():
    """Return a tokenizer with a handful of multi-character pieces."""
    pieces = list("helo wrd") + ["he", "ll", "llo", "hello", "wo", "or", "rl", "ld", " w"]
    scores = [0.0] * 8 + [3.0, 2.0, 4.0, 6.0, 1.0, 1.0, 5.0, 2.5, 0.5]
    return dtok.Tokenizer(pieces, scores)


def _random_vocab(rng: random.Random) -> tuple[list[str], list[float]]:
    """Build a small alphabet over 'abc' with frequent score ties."""
    singles = ["a", "b", "c"]
    multis = [
        "".join(p)
        for n in (2, 3)
        for p in itertools.product("abc", repeat=n)
        if rng.random() < 0.5
    ]
    alphabet = singles + multis
    # occasional duplicate content to exercise lowest-id lookup
    alphabet += rng.sample(multis, k=min(2, len(multis)))
    scores = [float(rng.choice([0, 1, 1, 2, 3])) for _ in alphabet]
    return alphabet, scores


# Examples
# ---------------------------------------------------------------------------


def test_single_merge(ab_tokenizer):
    """Two seed tokens with a known concatenation merge into one."""
    seq = ab_tokenizer.encode("ab")
    assert seq.tokens == (2,)
    assert seq.decode() == "ab"


def test_higher_score_wins(abc_tokenizer):
    """The pair with the highest score merges first; later pairs may not match."""
    seq = abc_tokenizer.encode("abc")
    assert seq.tokens == (0, 4)
    assert seq.pieces() == ["a", "bc"]
    assert seq.decode() == "abc"


def test_tie_goes_to_leftmost_pair():
    """Equal scores at different positions merge the leftmost pair first."""
    tok = dtok.Tokenizer(["a", "aa"], [0.0, 1.0])
    assert tok.encode("aaa").tokens == (1, 0)


def test_tie_between_different_pieces():
    """Equal scores for different pieces also favour the leftmost pair."""
    tok = dtok.Tokenizer(["a", "b", "c", "ab", "bc"], [0.0, 0.0, 0.0, 2.0, 2.0])
    assert tok.encode("abc").tokens == (3, 2)


def test_merges_chain(word_tokenizer):
    """Merged tokens keep merging with their new neighbours."""
    seq = word_tokenizer.encode("hello world")
    # rl outscores both or and ld, so neither of those pieces can form
    assert seq.pieces() == ["hello", " ", "wo", "rl", "d"]
    assert seq.decode() == "hello world"


def test_duplicate_piece_uses_lowest_id():
    """When content repeats, the first entry and its score are used."""
    tok = dtok.Tokenizer(["a", "b", "ab", "ab"], [0.0, 0.0, 1.0, 9.0])
    assert tok.encode("ab").tokens == (2,)
    assert tok.piece_to_token("ab") == 2


def test_minus_infinity_score_never_merges():
    """A piece scored -inf is never chosen as a merge."""
    tok = dtok.Tokenizer(["a", "b", "ab"], [0.0, 0.0, -math.inf])
    assert tok.encode("ab").tokens == (0, 1)


def test_negative_scores_still_merge():
    """Any finite score beats the sentinel."""
    tok = dtok.Tokenizer(["a", "b", "ab"], [0.0, 0.0, -1e30])
    assert tok.encode("ab").tokens == (2,)


def test_byte_fragments_merge_into_character():
    """Escaped single bytes merge step by step into a full multi-byte entry."""
    data = [b"\xe2", b"\x82", b"\xac", b"\xe2\x82", "€".encode("utf-8")]
    alphabet = [b.decode("utf-8", "surrogateescape") for b in data]
    tok = dtok.Tokenizer(alphabet, [0.0, 0.0, 0.0, 1.0, 2.0])

    seq = tok.encode("\udce2\udc82\udcac")
    assert seq.tokens == (4,)
    assert seq.to_bytes() == "€".encode("utf-8")

    with pytest.deprecated_call():
        assert naive_greedy_merge([0, 1, 2], tok.alphabet, tok.scores) == [4]


def test_unfolded_escaped_entry_is_found():
    """An entry spelled as escaped bytes matches the same bytes joined from fragments."""
    tok = dtok.Tokenizer(
        ["\udce2\udc82", "\udcac", "\udce2\udc82\udcac"], [0.0, 0.0, 1.0]
    )
    merged, _ = greedy_merge([0, 1], tok.alphabet, tok.lookup)
    assert merged == [2]


# Unknown characters
# ---------------------------------------------------------------------------


def test_unknown_character_is_skipped(ab_tokenizer, caplog):
    """Unknown characters are dropped with a warning; the rest still merges."""
    with caplog.at_level(logging.WARNING, logger="digramtok"):
        seq = ab_tokenizer.encode("axb")
    assert seq.tokens == (2,)
    assert seq.decode() == "ab"
    assert "'x'" in caplog.text
    assert "position 1" in caplog.text


def test_only_unknown_characters(ab_tokenizer):
    """Text made entirely of unknown characters encodes to nothing."""
    assert len(ab_tokenizer.encode("xyz")) == 0


# Edge cases
# ---------------------------------------------------------------------------


def test_empty_string(ab_tokenizer):
    """Empty string encodes to an empty sequence and decodes back."""
    seq = ab_tokenizer.encode("")
    assert seq.tokens == ()
    assert seq.decode() == ""


def test_single_character(ab_tokenizer):
    """A single known character is a single token."""
    assert ab_tokenizer.encode("b").tokens == (1,)


def test_mismatched_alphabet_and_scores():
    """Alphabet and scores must be the same length."""
    with pytest.raises(VocabularyError):
        dtok.Tokenizer(["a", "b"], [0.0])


def test_empty_tokenizer():
    """A tokenizer without entries drops everything."""
    tok = dtok.Tokenizer([], [])
    assert tok.vocab_size() == 0
    assert tok.encode("abc").tokens == ()


# Properties
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("text", ["hello world", "hello hello", "lowered", " ", "dhwol"])
def test_roundtrip(word_tokenizer, text):
    """Text made only of known characters always decodes back exactly."""
    assert word_tokenizer.encode(text).decode() == text


@pytest.mark.parametrize("seed", range(25))
def test_merge_count_bound(seed):
    """n seed tokens need at most n - 1 merges and leave 1..n tokens."""
    rng = random.Random(seed)
    alphabet, scores = _random_vocab(rng)
    tok = dtok.Tokenizer(alphabet, scores)
    text = "".join(rng.choice("abc") for _ in range(rng.randint(1, 30)))
    seeds = [tok.piece_to_token(ch) for ch in text]

    merged, n_merges = greedy_merge(seeds, tok.alphabet, tok.lookup)

    assert n_merges <= len(seeds) - 1
    assert 1 <= len(merged) <= len(seeds)
    assert len(merged) == len(seeds) - n_merges
    assert "".join(tok.alphabet[t] for t in merged) == text


@pytest.mark.parametrize("seed", range(40))
def test_matches_linear_scan_reference(seed):
    """The heap-based merge makes exactly the choices of a full rescan."""
    rng = random.Random(seed)
    alphabet, scores = _random_vocab(rng)
    tok = dtok.Tokenizer(alphabet, scores)
    text = "".join(rng.choice("abc") for _ in range(rng.randint(0, 40)))
    seeds = [tok.piece_to_token(ch) for ch in text]

    with pytest.deprecated_call():
        expected = naive_greedy_merge(seeds, tok.alphabet, tok.scores)

    assert list(tok.encode(text).tokens) == expected


# Decoding
# ---------------------------------------------------------------------------


def test_decode_token_ids(abc_tokenizer):
    """Plain lists of ids decode through the tokenizer."""
    assert abc_tokenizer.decode([3, 2, 4]) == "abcbc"


def test_decode_sequence(abc_tokenizer):
    """Token sequences decode through the tokenizer."""
    seq = abc_tokenizer.encode("cab")
    assert abc_tokenizer.decode(seq) == "cab"


def test_decode_invalid_token_raises(abc_tokenizer):
    """Ids outside the alphabet are rejected."""
    with pytest.raises(VocabularyError):
        abc_tokenizer.decode([0, 5])
    with pytest.raises(VocabularyError):
        abc_tokenizer.decode([-1])


def test_token_to_piece(abc_tokenizer):
    """Single ids map to their entries."""
    assert abc_tokenizer.token_to_piece(4) == "bc"
    with pytest.raises(VocabularyError):
        abc_tokenizer.token_to_piece(99)


# Save and load round-trip
# ---------------------------------------------------------------------------


def test_save_load_roundtrip(word_tokenizer, tmp_path):
    """Save and load preserves alphabet, scores and encodings."""
    prefix = str(tmp_path / "tok")
    word_tokenizer.save(prefix)

    loaded = dtok.load_tokenizer(f"{prefix}.bin", word_tokenizer.vocab_size())
    assert loaded.alphabet == word_tokenizer.alphabet
    assert loaded.scores == word_tokenizer.scores
    assert loaded.encode("hello world") == word_tokenizer.encode("hello world")


def test_save_writes_readable_vocab(tmp_path):
    """The .vocab listing shows ids, scores and escaped pieces."""
    tok = dtok.Tokenizer(["a", "\n", "a\n"], [0.0, 0.0, 1.5])
    prefix = tmp_path / "tok"
    tok.save(str(prefix))

    lines = (tmp_path / "tok.vocab").read_text(encoding="utf-8").splitlines()
    assert lines == ["[0] 0 a", "[1] 0 \\u000a", "[2] 1.5 a\\u000a"]
