"""Canonical word forms used for every concept name and lookup."""

from __future__ import annotations

import functools

import snowballstemmer

# Porter2, the revised Porter algorithm
_ALGORITHM = "english"


@functools.lru_cache(maxsize=1)
def _stemmer():
    return snowballstemmer.stemmer(_ALGORITHM)


def stem(word: str) -> str:
    """Reduce a single word to its stem (``"Dogs"`` -> ``"dog"``)."""
    return _stemmer().stemWord(word.strip().casefold())


def split_words(text: str) -> list[str]:
    """Split text on runs of whitespace, dropping empty words."""
    return text.split()


def normalize(text: str) -> str:
    """Stem every word of *text* and join them with single spaces."""
    return " ".join(stem(w) for w in split_words(text))
