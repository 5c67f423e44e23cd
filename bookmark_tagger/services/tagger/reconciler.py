"""Hybrid reconciliation: force back high-confidence corpus matches."""

import logging
from typing import List

from .config import HIGH_CONFIDENCE_SCORE, MAX_GENERATED_TAGS
from .models import ScoredTag

logger = logging.getLogger(__name__)


def reconcile(
    current_tags: List[str],
    scored_existing: List[ScoredTag],
    threshold: float = HIGH_CONFIDENCE_SCORE,
    max_total: int = MAX_GENERATED_TAGS,
) -> List[str]:
    """Append strong lexical matches the generative stages dropped.

    Args:
        current_tags: Output of the specificity filter
        scored_existing: Lexical matcher output
        threshold: Minimum score for a corpus tag to be forced in
        max_total: Cap on the returned list

    Returns:
        ``current_tags`` followed by missing high-scoring tags, best first,
        truncated to ``max_total``
    """
    present = {tag.lower().strip() for tag in current_tags}
    missing = sorted(
        (
            scored
            for scored in scored_existing
            if scored.score >= threshold and scored.tag.lower().strip() not in present
        ),
        key=lambda scored: scored.score,
        reverse=True,
    )

    room = max(max_total - len(current_tags), 0)
    additional = [scored.tag for scored in missing[:room]]

    if missing:
        logger.info(
            f"Adding high-scoring existing tags: {additional} "
            f"(candidates: {[(s.tag, s.score) for s in missing[:3]]})"
        )

    return (list(current_tags) + additional)[:max_total]
