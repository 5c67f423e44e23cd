"""Keyword extraction from bookmark titles and descriptions."""

import re
from typing import List

STOPWORDS = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "had",
    "her", "was", "one", "our", "out", "day", "get", "has", "him", "his",
    "how", "its", "may", "new", "now", "old", "see", "two", "who", "boy",
    "did", "does", "let", "put", "say", "she", "too", "use",
})

# Whitespace plus / - _ . , ! ? ( ) :
_SPLIT_RE = re.compile(r"[\s/\-_.,!?():]+")
_NUMBER_RE = re.compile(r"^\d+$")

MIN_KEYWORD_LENGTH = 3


def extract_keywords(text: str) -> List[str]:
    """Split text into candidate keywords.

    Tokens shorter than three characters, stop-words and pure numbers are
    dropped. Repeated tokens are kept; each occurrence counts when scoring.

    Args:
        text: Title and description joined by a space (never the URL)

    Returns:
        Keywords in the order they appear
    """
    if not text:
        return []

    return [
        word
        for word in _SPLIT_RE.split(text.lower())
        if len(word) >= MIN_KEYWORD_LENGTH
        and word not in STOPWORDS
        and not _NUMBER_RE.match(word)
    ]
