"""
Greedy digram merge operations.

Both functions below take the seed tokens produced from single characters and
repeatedly replace the adjacent pair with the highest-scoring merge until no
pair can be merged. Among equal scores the leftmost pair wins.
"""

import heapq
import math
from itertools import groupby
from typing_extensions import deprecated

from .loader import TEXT_ENCODING, TEXT_ERRORS
from .types import Alphabet, Lookup, Scores, Token


def _is_escape(c: str) -> bool:
    """Return ``True`` for a surrogate standing in for an undecodable byte."""
    return "\udc80" <= c <= "\udcff"


def fold_escapes(piece: str) -> str:
    """
    Re-decode every run of escaped bytes in ``piece``.

    Bytes that were invalid UTF-8 on their own, such as the two halves of a
    split multi-byte character, can form valid text once joined. Folding puts
    such strings in the form the loader would have produced for the joined
    bytes, so equal bytes compare as equal strings.
    """
    if not any(_is_escape(c) for c in piece):
        return piece
    out = []
    for escaped, run in groupby(piece, key=_is_escape):
        run = "".join(run)
        if escaped:
            raw = run.encode(TEXT_ENCODING, TEXT_ERRORS)
            run = raw.decode(TEXT_ENCODING, TEXT_ERRORS)
        out.append(run)
    return "".join(out)


def join_pieces(left: str, right: str) -> str:
    """Concatenate two pieces as their underlying bytes would concatenate."""
    if left and right and _is_escape(left[-1]) and _is_escape(right[0]):
        return fold_escapes(left + right)
    return left + right


def greedy_merge(
    tokens: list[Token], alphabet: Alphabet, lookup: Lookup
) -> tuple[list[Token], int]:
    """
    Merge adjacent tokens greedily by score.

    Live tokens are kept in a doubly linked list (``prev``/``nxt`` arrays over
    seed positions) and candidate pairs in a heap keyed by ``(-score, left)``,
    where ``left`` is the seed position of the pair's left node. Merging never
    reorders nodes, so seed positions keep their left-to-right order and the
    heap pops exactly the pair a full left-to-right scan would choose.

    Heap entries are invalidated lazily: each node carries a version counter
    that is bumped whenever its token changes or it is removed.

    A pair whose score is not greater than ``-inf`` (``-inf`` itself or NaN)
    never merges.

    :param tokens: Seed tokens.
    :param alphabet: Alphabet the tokens index into.
    :param lookup: Piece content -> (token, score).
    :return: Merged tokens and the number of merges performed.
    """
    n = len(tokens)
    if n < 2:
        return list(tokens), 0

    toks = list(tokens)
    prev = list(range(-1, n - 1))
    nxt = list(range(1, n + 1))
    nxt[-1] = -1
    version = [0] * n
    alive = [True] * n

    heap: list[tuple[float, int, int, int, int, Token]] = []

    def push(left: int) -> None:
        """Queue the pair starting at node ``left`` if it forms a known piece."""
        right = nxt[left]
        if right == -1:
            return
        hit = lookup.get(join_pieces(alphabet[toks[left]], alphabet[toks[right]]))
        if hit is None:
            return
        merged, score = hit
        # strict comparison against -inf also rejects NaN
        if not score > -math.inf:
            return
        heapq.heappush(
            heap, (-score, left, version[left], right, version[right], merged)
        )

    for i in range(n - 1):
        push(i)

    n_merges = 0
    while heap:
        _, left, left_ver, right, right_ver, merged = heapq.heappop(heap)
        # skip pairs whose nodes changed since they were queued
        if (
            not alive[left]
            or not alive[right]
            or version[left] != left_ver
            or version[right] != right_ver
            or nxt[left] != right
        ):
            continue

        # left node absorbs right node
        toks[left] = merged
        version[left] += 1
        alive[right] = False
        version[right] += 1
        after = nxt[right]
        nxt[left] = after
        if after != -1:
            prev[after] = left
        n_merges += 1

        # only the pairs touching the merged node can have changed
        if prev[left] != -1:
            push(prev[left])
        push(left)

    merged_toks: list[Token] = []
    node = 0
    while node != -1:
        merged_toks.append(toks[node])
        node = nxt[node]
    return merged_toks, n_merges


@deprecated(
    "Reference implementation for documentation only. Use `greedy_merge()` for production."
)
def naive_greedy_merge(
    tokens: list[Token], alphabet: Alphabet, scores: Scores
) -> list[Token]:
    """
    Merge adjacent tokens greedily by rescanning the whole sequence each round.

    Every candidate piece is located with a linear search of the alphabet, so
    the first entry with matching content is used. Pieces are compared as the
    bytes they stand for, so split multi-byte characters can merge. Each round
    scans all adjacent pairs, keeps the one with the strictly highest score
    (the leftmost wins ties) and merges it; the loop ends when a scan finds
    nothing better than ``-inf``.

    Naive algorithm: O(n^2 × V).

    where:

    - n = number of seed tokens
    - V = alphabet size

    :param tokens: Seed tokens.
    :param alphabet: Alphabet the tokens index into.
    :param scores: Merge scores aligned with ``alphabet``.
    :return: Merged tokens.
    """
    toks = list(tokens)

    while True:
        best_score = -math.inf
        best_id = best_idx = -1

        for i in range(len(toks) - 1):
            piece = join_pieces(alphabet[toks[i]], alphabet[toks[i + 1]])
            tok = next(
                (j for j, p in enumerate(alphabet) if fold_escapes(p) == piece), None
            )
            if tok is not None and scores[tok] > best_score:
                best_score = scores[tok]
                best_id = tok
                best_idx = i

        if best_idx == -1:
            break

        toks[best_idx] = best_id
        del toks[best_idx + 1]

    return toks
