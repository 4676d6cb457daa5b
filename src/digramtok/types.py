"""
Core types for tokenization.
"""

type Token = int
type Alphabet = tuple[str, ...]
type Scores = tuple[float, ...]
# piece content -> (lowest token id with that content, its score)
type Lookup = dict[str, tuple[Token, float]]
