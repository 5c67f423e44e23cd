"""Tag generation engine for bookmarked content.

Lexical matching against a team's existing tags, two generative passes
(draft, then specificity filter), and hybrid reconciliation.

Example:
    >>> from bookmark_tagger.services.tagger import create_tag_generator, TagGenerationOptions
    >>> generator = create_tag_generator()
    >>> tags = await generator.generate_tags(
    ...     "React Hooks Tutorial",
    ...     options=TagGenerationOptions(title="React Hooks Tutorial", team_id="T1"),
    ... )
"""

from .models import MatchType, ScoredTag, TagContext, TagGenerationOptions, TagUsage
from .config import TaggerConfig
from .errors import CorpusStoreError, ServiceCallError, TaggerError
from .keywords import extract_keywords
from .corpus import JsonTagCorpusStore, TagCorpusStore
from .completion import CompletionService, PydanticAICompletionService
from .matcher import LexicalMatcher, WordNetLemmatizer
from .drafter import TagDrafter
from .specificity import SpecificityFilter
from .reconciler import reconcile
from .generator import (
    HybridTagGenerator,
    SimpleTagGenerator,
    TagGenerator,
    create_tag_generator,
)

__all__ = [
    # Models
    "MatchType",
    "ScoredTag",
    "TagContext",
    "TagGenerationOptions",
    "TagUsage",
    # Configuration
    "TaggerConfig",
    # Errors
    "TaggerError",
    "ServiceCallError",
    "CorpusStoreError",
    # Components
    "extract_keywords",
    "TagCorpusStore",
    "JsonTagCorpusStore",
    "CompletionService",
    "PydanticAICompletionService",
    "LexicalMatcher",
    "WordNetLemmatizer",
    "TagDrafter",
    "SpecificityFilter",
    "reconcile",
    "TagGenerator",
    "HybridTagGenerator",
    "SimpleTagGenerator",
    # Factory functions
    "create_tag_generator",
]
