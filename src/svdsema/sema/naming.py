from __future__ import annotations

import re

# Some vendors put these in peripheral/field names; they are never valid
# in an identifier.
BLACKLIST_CHARS = "()"

KEYWORDS = frozenset(
    [
        "abstract", "alignof", "as", "become", "box", "break", "const",
        "continue", "crate", "do", "else", "enum", "extern", "false", "final",
        "fn", "for", "if", "impl", "in", "let", "loop", "macro", "match",
        "mod", "move", "mut", "offsetof", "override", "priv", "proc", "pub",
        "pure", "ref", "return", "self", "sizeof", "static", "struct",
        "super", "trait", "true", "type", "typeof", "unsafe", "unsized",
        "use", "virtual", "where", "while", "yield",
    ]
)

_DIGITS = "0123456789"
_SEPARATORS = re.compile(r"[^0-9A-Za-z]+")
_BOUNDARY = re.compile(r"(?<=[a-z])(?=[A-Z])|(?<=[A-Z0-9])(?=[A-Z][a-z])")


def _strip(s: str) -> str:
    return s.translate({ord(c): None for c in BLACKLIST_CHARS})


def words(s: str) -> list[str]:
    out: list[str] = []
    for chunk in _SEPARATORS.split(s):
        if chunk:
            out.extend(w for w in _BOUNDARY.split(chunk) if w)
    return out


def to_snake_case(s: str) -> str:
    return "_".join(w.lower() for w in words(s))


def to_pascal_case(s: str) -> str:
    return "".join(w[:1].upper() + w[1:].lower() for w in words(s))


def _lead(out: str) -> str:
    # identifiers can neither be empty nor start with a digit
    if not out or out[0] in _DIGITS:
        return "_" + out
    return out


def to_sanitized_snake_case(s: str) -> str:
    s = _strip(s)
    if s.lower() in KEYWORDS:
        return s.lower() + "_"
    return _lead(to_snake_case(s))


def to_sanitized_pascal_case(s: str) -> str:
    return _lead(to_pascal_case(_strip(s)))


def respace(s: str) -> str:
    return " ".join(s.split())
