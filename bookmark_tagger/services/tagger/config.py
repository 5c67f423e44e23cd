"""Configuration and scoring constants for the tag generation engine."""

from dataclasses import dataclass, field

from bookmark_tagger.lib.config_manager import get_config


# Lexical match increments (accumulated per keyword)
PERFECT_MATCH_SCORE = 15
GRAMMATICAL_VARIATION_SCORE = 12
KEYWORD_IN_TAG_SCORE = 8
TAG_IN_KEYWORD_SCORE = 5

# Fuzzy fallback: minimum rapidfuzz ratio (0-100); score is ratio / FUZZY_SCORE_DIVISOR
FUZZY_SIMILARITY_THRESHOLD = 80
FUZZY_SCORE_DIVISOR = 10

# Substring strategies ignore fragments this short or shorter
MIN_SUBSTRING_LENGTH = 2

MAX_SCORED_TAGS = 6

# Existing tags at or above this score are forced into the final set
HIGH_CONFIDENCE_SCORE = 15

MAX_GENERATED_TAGS = 6
MAX_TAGS_WITH_MANUAL = 8

# Draft parsing limits
MAX_DRAFT_TAGS = 10
MAX_TAG_LENGTH = 50

DRAFT_MAX_OUTPUT_TOKENS = 200
FILTER_MAX_OUTPUT_TOKENS = 100
DEFAULT_TEMPERATURE = 0.1


@dataclass
class TaggerConfig:
    """Configuration for the tag generation engine.

    Attributes:
        model: pydantic-ai model identifier (e.g. "anthropic:claude-3-5-haiku-latest")
        request_timeout: Per-call deadline for the generative service, in seconds
        max_retries: Retries for transient transport errors
        temperature: Sampling temperature for both prompts
        draft_max_output_tokens: Token budget for the draft prompt
        filter_max_output_tokens: Token budget for the specificity prompt
        max_scored_tags: How many lexical matches feed the prompts
        high_confidence_score: Reconciler threshold
        max_generated_tags: Cap without manual tags
        max_tags_with_manual: Cap when manual tags are present
        corpus_path: JSON file backing the default tag corpus store
    """

    model: str = field(default_factory=lambda: get_config("TAGGER_MODEL"))
    request_timeout: float = field(
        default_factory=lambda: float(get_config("TAGGER_REQUEST_TIMEOUT"))
    )
    max_retries: int = field(default_factory=lambda: int(get_config("TAGGER_MAX_RETRIES")))
    temperature: float = DEFAULT_TEMPERATURE
    draft_max_output_tokens: int = DRAFT_MAX_OUTPUT_TOKENS
    filter_max_output_tokens: int = FILTER_MAX_OUTPUT_TOKENS
    max_scored_tags: int = MAX_SCORED_TAGS
    high_confidence_score: float = HIGH_CONFIDENCE_SCORE
    max_generated_tags: int = MAX_GENERATED_TAGS
    max_tags_with_manual: int = MAX_TAGS_WITH_MANUAL
    corpus_path: str = field(default_factory=lambda: get_config("TAG_CORPUS_PATH"))
