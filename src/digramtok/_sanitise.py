"""
Utilities for converting alphabet entries to displayable strings.
"""

import unicodedata


def _escape_ctrl_chars(s: str) -> str:
    """Replace all Unicode control characters with their escape sequences."""
    cleaned = []
    for c in s:
        # control category codes vary: Cc, Cf, Cn etc.
        # so check via first character
        if unicodedata.category(c)[0] != "C":
            cleaned.append(c)
        else:
            cleaned.append(f"\\u{ord(c):04x}")
    return "".join(cleaned)


def _render_piece(piece: str) -> str:
    """
    Render an alphabet entry for human-readable output.

    Entries carrying raw bytes that were not valid UTF-8 are shown with the
    Unicode replacement character; control characters are escaped.
    """
    raw = piece.encode("utf-8", errors="surrogateescape")
    return _escape_ctrl_chars(raw.decode("utf-8", errors="replace"))
