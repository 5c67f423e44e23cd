"""Data models for tag generation."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class MatchType(str, Enum):
    """How an existing corpus tag matched an extracted keyword."""

    PERFECT = "perfect"
    GRAMMATICAL_VARIATION = "grammatical-variation"
    KEYWORD_IN_TAG = "keyword-in-tag"
    TAG_IN_KEYWORD = "tag-in-keyword"
    FUZZY = "fuzzy"


class ScoredTag(BaseModel):
    """An existing corpus tag with its accumulated lexical score."""

    model_config = ConfigDict(frozen=True)

    tag: str
    score: float
    match_type: MatchType


class TagContext(BaseModel):
    """Bookmark context rendered into both prompts."""

    url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None


class TagGenerationOptions(TagContext):
    """Options accepted by ``generate_tags``."""

    team_id: Optional[str] = None
    manual_tags: List[str] = []

    def context(self) -> TagContext:
        """Prompt context without the team and manual tags."""
        return TagContext(url=self.url, title=self.title, description=self.description)


class TagUsage(BaseModel):
    """A corpus tag with its usage count."""

    tag_name: str
    usage_count: int
