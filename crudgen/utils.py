# File: crudgen/utils.py
"""
crudgen - Utility Functions & Helpers
=======================================
String transformation, checksum and timing utilities used throughout the
generation pipeline.

Every naming helper is pure and decorated with ``@lru_cache(maxsize=None)``:
all templates that need "the plural variable name" call the same function
with the same input and therefore get the identical string.
"""

from __future__ import annotations

import functools
import hashlib
import logging
import re
import time
from typing import Dict, FrozenSet, List, Optional, Tuple

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (compiled once at module load)
# ---------------------------------------------------------------------------

_CAMEL_TO_SNAKE_RE1: re.Pattern[str] = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_TO_SNAKE_RE2: re.Pattern[str] = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUM_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9]")
_MULTI_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"_{2,}")
_LEADING_TRAILING_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"^_+|_+$")
_SPLIT_WORDS_RE: re.Pattern[str] = re.compile(
    r"[A-Z]?[a-z]+|[A-Z]+(?=[A-Z][a-z]|\d|\b)|[A-Z]|\d+"
)
# Splits "SalesPerson" into ("Sales", "Person"); only the last word inflects.
_LAST_WORD_RE: re.Pattern[str] = re.compile(r"^(.*?)([A-Z]?[a-z]*)$")

# ---------------------------------------------------------------------------
# Inflection tables
# ---------------------------------------------------------------------------

_UNCOUNTABLE: FrozenSet[str] = frozenset({
    "audio", "equipment", "feedback", "information", "knowledge",
    "metadata", "money", "news", "rice", "series", "sheep", "species",
    "fish", "deer", "traffic", "staff", "software", "hardware", "evidence",
})

_IRREGULAR_PLURALS: Dict[str, str] = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "goose": "geese",
    "tooth": "teeth",
    "foot": "feet",
    "ox": "oxen",
    "datum": "data",
    "criterion": "criteria",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "axis": "axes",
    "crisis": "crises",
    "analysis": "analyses",
    "thesis": "theses",
    "basis": "bases",
    "diagnosis": "diagnoses",
    "cactus": "cacti",
    "quiz": "quizzes",
    "gas": "gases",
    "alias": "aliases",
    "canvas": "canvases",
    "atlas": "atlases",
    "bias": "biases",
}

_IRREGULAR_PLURAL_FORMS: FrozenSet[str] = frozenset(_IRREGULAR_PLURALS.values())

# Words ending in -f / -fe that keep their ending in the plural
_F_EXCEPTIONS: FrozenSet[str] = frozenset({
    "roof", "chief", "belief", "chef", "proof", "reef", "cliff", "safe",
})

# Words ending in consonant + o that only take -s
_O_EXCEPTIONS: FrozenSet[str] = frozenset({
    "photo", "piano", "memo", "logo", "video", "radio", "zero", "studio",
    "portfolio", "kilo", "demo", "promo", "repo",
})


# ---------------------------------------------------------------------------
# Cached string transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """
    Convert any string to snake_case.

    Examples:
        >>> to_snake_case("BlogPost")
        'blog_post'
        >>> to_snake_case("getHTTPResponse")
        'get_http_response'
        >>> to_snake_case("already_snake")
        'already_snake'
    """
    if not name:
        return ""
    s: str = _CAMEL_TO_SNAKE_RE1.sub(r"\1_\2", name)
    s = _CAMEL_TO_SNAKE_RE2.sub(r"\1_\2", s)
    s = _NON_ALPHANUM_RE.sub("_", s)
    s = _MULTI_UNDERSCORE_RE.sub("_", s)
    s = _LEADING_TRAILING_UNDERSCORE_RE.sub("", s)
    return s.lower()


@functools.lru_cache(maxsize=None)
def to_pascal_case(name: str) -> str:
    """
    Convert any string to PascalCase.

    Examples:
        >>> to_pascal_case("blog_post")
        'BlogPost'
    """
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    return "".join(word.capitalize() for word in words)


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Convert any string to camelCase.

    Examples:
        >>> to_camel_case("BlogPost")
        'blogPost'
        >>> to_camel_case("order_items")
        'orderItems'
    """
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    if not words:
        return ""
    first: str = words[0].lower()
    rest: str = "".join(w.capitalize() for w in words[1:])
    return first + rest


@functools.lru_cache(maxsize=None)
def to_kebab_case(name: str) -> str:
    """Convert any string to kebab-case (used in route segments)."""
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    return "-".join(w.lower() for w in words)


def _match_case(source: str, target: str) -> str:
    """Give *target* the leading-letter casing of *source*."""
    if source and source[0].isupper():
        return target[0].upper() + target[1:]
    return target


@functools.lru_cache(maxsize=None)
def _pluralize_word(word: str) -> str:
    lower: str = word.lower()

    if lower in _UNCOUNTABLE:
        return word
    if lower in _IRREGULAR_PLURALS:
        return _match_case(word, _IRREGULAR_PLURALS[lower])
    if lower in _IRREGULAR_PLURAL_FORMS:
        return word

    # -sis nouns of Greek origin: hypothesis -> hypotheses
    if lower.endswith("sis"):
        return word[:-2] + "es"
    if lower.endswith(("ss", "sh", "ch", "x", "z", "us", "is")):
        return word + "es"
    # Already plural ("Products", "Users")
    if lower.endswith("s"):
        return word
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        return word[:-1] + "ies"
    if lower.endswith("fe") and lower not in _F_EXCEPTIONS:
        return word[:-2] + "ves"
    if lower.endswith("f") and not lower.endswith("ff") and lower not in _F_EXCEPTIONS:
        return word[:-1] + "ves"
    if (
        lower.endswith("o")
        and len(lower) > 1
        and lower[-2] not in "aeiou"
        and lower not in _O_EXCEPTIONS
    ):
        return word + "es"
    return word + "s"


@functools.lru_cache(maxsize=None)
def to_plural(name: str) -> str:
    """
    English pluralisation of an identifier.

    Only the last word of a compound identifier inflects, and the casing of
    that word's first letter is kept.

    Examples:
        >>> to_plural("Category")
        'Categories'
        >>> to_plural("SalesPerson")
        'SalesPeople'
        >>> to_plural("Status")
        'Statuses'
    """
    if not name:
        return ""
    match: Optional[re.Match[str]] = _LAST_WORD_RE.match(name)
    if match is None or not match.group(2):
        return name + "s"
    prefix, word = match.group(1), match.group(2)
    return prefix + _pluralize_word(word)


@functools.lru_cache(maxsize=None)
def _extract_words(name: str) -> Tuple[str, ...]:
    """
    Extract individual words from any casing style.

    Returns a tuple (hashable for the LRU cache) of lowercase words.
    """
    cleaned: str = _NON_ALPHANUM_RE.sub(" ", name)
    words: List[str] = _SPLIT_WORDS_RE.findall(cleaned)
    return tuple(w.lower() for w in words if w)


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling generation steps.

    Usage:
        with Timer("render") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "to_snake_case",
    "to_pascal_case",
    "to_camel_case",
    "to_kebab_case",
    "to_plural",
    "sha256_hex",
    "count_lines",
    "Timer",
]

logger.debug("crudgen.utils loaded — %d public symbols.", len(__all__))
