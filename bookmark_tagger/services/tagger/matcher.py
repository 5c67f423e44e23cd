"""Lexical matching of extracted keywords against a team's existing tags.

Four strategies, strongest first:

1. perfect: keyword equals the tag
2. grammatical-variation: keyword and tag share a lemma ("running" / "run")
3. keyword-in-tag / tag-in-keyword: substring containment
4. fuzzy: rapidfuzz ratio fallback, only for tags nothing else matched

The first three accumulate across keywords. A fuzzy score is assigned once.
"""

import asyncio
import logging
import threading
from typing import Dict, List, Optional, Protocol, Set, Tuple

from rapidfuzz import fuzz

from bookmark_tagger.lib.logging_config import log_with_context

from .config import (
    FUZZY_SCORE_DIVISOR,
    FUZZY_SIMILARITY_THRESHOLD,
    GRAMMATICAL_VARIATION_SCORE,
    KEYWORD_IN_TAG_SCORE,
    MAX_SCORED_TAGS,
    MIN_SUBSTRING_LENGTH,
    PERFECT_MATCH_SCORE,
    TAG_IN_KEYWORD_SCORE,
)
from .corpus import TagCorpusStore
from .keywords import extract_keywords
from .models import MatchType, ScoredTag

logger = logging.getLogger(__name__)

# WordNet parts of speech: noun, verb, adjective
_LEMMA_POS = ("n", "v", "a")


class Lemmatizer(Protocol):
    """Reduces a word to its base forms."""

    def lemmas(self, word: str) -> Set[str]:
        """Return the lemmas of ``word`` under noun, verb and adjective readings."""
        ...


class WordNetLemmatizer:
    """Lemmatizer backed by NLTK's WordNet data.

    Call ``load()`` at startup: it downloads the ``wordnet`` corpus when
    missing, once, under a lock. ``LexicalMatcher`` does this for its
    default lemmatizer so no request ever waits on a download. If WordNet
    cannot be loaded an error is logged, ``available`` stays False and words
    are treated as their own lemma.
    """

    def __init__(self, auto_download: bool = True):
        self.auto_download = auto_download
        self._lemmatizer = None
        self._unavailable = False
        self._lock = threading.Lock()

    @property
    def available(self) -> bool:
        return self._lemmatizer is not None

    def load(self) -> bool:
        """Load WordNet, downloading it if needed. Safe to call repeatedly.

        Returns:
            True when WordNet lemmas are available
        """
        with self._lock:
            if self._lemmatizer is None and not self._unavailable:
                try:
                    self._lemmatizer = self._load()
                except (LookupError, OSError) as e:
                    logger.error(
                        f"WordNet unavailable, grammatical-variation matching "
                        f"reduced to exact equality: {e}"
                    )
                    self._unavailable = True
        return self.available

    def _load(self):
        from nltk.stem import WordNetLemmatizer as _NLTKLemmatizer

        lemmatizer = _NLTKLemmatizer()
        try:
            lemmatizer.lemmatize("tests")
        except LookupError:
            if not self.auto_download:
                raise
            import nltk

            logger.info("Downloading NLTK wordnet corpus")
            nltk.download("wordnet", quiet=True)
            nltk.download("omw-1.4", quiet=True)
            lemmatizer.lemmatize("tests")
        return lemmatizer

    def lemmas(self, word: str) -> Set[str]:
        if self._lemmatizer is None and not self.load():
            return {word}
        return {self._lemmatizer.lemmatize(word, pos) for pos in _LEMMA_POS}


def is_grammatical_variation(
    word1: str,
    word2: str,
    lemmatizer: Lemmatizer,
) -> bool:
    """Check whether two words share a base form.

    Args:
        word1: First word
        word2: Second word
        lemmatizer: Lemma source

    Returns:
        True when any lemma of one word equals any lemma of the other
    """
    w1 = word1.lower()
    w2 = word2.lower()
    if w1 == w2:
        return True
    return not lemmatizer.lemmas(w1).isdisjoint(lemmatizer.lemmas(w2))


def classify_match(
    keyword: str,
    tag: str,
    lemmatizer: Lemmatizer,
) -> Optional[Tuple[MatchType, int]]:
    """Find the strongest non-fuzzy match between a keyword and a tag.

    Returns:
        (match type, score increment), or None when nothing matches
    """
    if keyword == tag:
        return MatchType.PERFECT, PERFECT_MATCH_SCORE
    if is_grammatical_variation(keyword, tag, lemmatizer):
        return MatchType.GRAMMATICAL_VARIATION, GRAMMATICAL_VARIATION_SCORE
    if len(keyword) > MIN_SUBSTRING_LENGTH and keyword in tag:
        return MatchType.KEYWORD_IN_TAG, KEYWORD_IN_TAG_SCORE
    if len(tag) > MIN_SUBSTRING_LENGTH and tag in keyword:
        return MatchType.TAG_IN_KEYWORD, TAG_IN_KEYWORD_SCORE
    return None


def fuzzy_similarity(keyword: str, tag: str) -> int:
    """Normalized edit-distance similarity on a 0-100 integer scale."""
    # Halves round up
    return int(fuzz.ratio(keyword, tag) + 0.5)


def score_tags(
    keywords: List[str],
    existing_tags: List[str],
    lemmatizer: Lemmatizer,
    limit: int = MAX_SCORED_TAGS,
) -> List[ScoredTag]:
    """Score existing tags against keywords.

    Args:
        keywords: Extracted keywords (duplicates count once per occurrence)
        existing_tags: Team corpus
        lemmatizer: Lemma source for grammatical variations
        limit: Maximum number of tags returned

    Returns:
        Top ``limit`` tags by score, ties in first-match order
    """
    scores: Dict[str, float] = {}
    # Strongest single contribution seen per tag
    best: Dict[str, Tuple[float, MatchType]] = {}

    for keyword in keywords:
        for tag in existing_tags:
            match = classify_match(keyword, tag, lemmatizer)
            if match is None:
                continue

            match_type, boost = match
            old_score = scores.get(tag, 0)
            scores[tag] = old_score + boost
            if tag not in best or boost > best[tag][0]:
                best[tag] = (boost, match_type)
            logger.debug(
                f"Tag match found: {match_type.value} keyword={keyword!r} tag={tag!r} "
                f"{old_score} -> {scores[tag]}"
            )

        # Fuzzy matches never override a tag that already has a score
        for tag in existing_tags:
            if tag in scores:
                continue
            similarity = fuzzy_similarity(keyword, tag)
            if similarity >= FUZZY_SIMILARITY_THRESHOLD:
                score = similarity / FUZZY_SCORE_DIVISOR
                scores[tag] = score
                best[tag] = (score, MatchType.FUZZY)
                logger.debug(
                    f"Fuzzy tag match found: keyword={keyword!r} tag={tag!r} "
                    f"similarity={similarity} score={score}"
                )

    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    return [
        ScoredTag(tag=tag, score=score, match_type=best[tag][1])
        for tag, score in ranked[:limit]
    ]


class LexicalMatcher:
    """Scores a team's existing tags against a bookmark's title and description."""

    def __init__(
        self,
        corpus: Optional[TagCorpusStore] = None,
        lemmatizer: Optional[Lemmatizer] = None,
        limit: int = MAX_SCORED_TAGS,
    ):
        """Initialize matcher.

        Args:
            corpus: Tag corpus store. Without one every request sees an empty corpus.
            lemmatizer: Lemma source. Defaults to WordNet, loaded here so the
                download never happens while scoring a request.
            limit: Number of top-scoring tags returned
        """
        self.corpus = corpus
        if lemmatizer is None:
            lemmatizer = WordNetLemmatizer()
            lemmatizer.load()
        self.lemmatizer = lemmatizer
        self.limit = limit

    async def fetch_existing_tags(self, team_id: Optional[str]) -> List[str]:
        """Load the team corpus, treating any store failure as an empty corpus."""
        if not team_id or self.corpus is None:
            return []

        try:
            return list(await self.corpus.get_existing_tags(team_id))
        except Exception as e:
            log_with_context(
                logger,
                "warning",
                "Failed to fetch existing tags, continuing with empty corpus",
                team_id=team_id,
                error=repr(e),
            )
            return []

    async def score_existing_tags(
        self,
        title: str,
        description: str,
        team_id: Optional[str] = None,
    ) -> List[ScoredTag]:
        """Rank existing tags by lexical relevance to the bookmark.

        Args:
            title: Bookmark title
            description: Bookmark description
            team_id: Team whose corpus is consulted

        Returns:
            Up to ``limit`` scored tags, best first
        """
        content = f"{title or ''} {description or ''}"

        keywords, existing_tags = await asyncio.gather(
            asyncio.to_thread(extract_keywords, content),
            self.fetch_existing_tags(team_id),
        )

        log_with_context(
            logger,
            "info",
            "Keywords extracted for tag matching",
            keywords=keywords,
            existing_tags_count=len(existing_tags),
            team_id=team_id,
        )

        if not keywords or not existing_tags:
            return []

        return await asyncio.to_thread(
            score_tags, keywords, existing_tags, self.lemmatizer, self.limit
        )
