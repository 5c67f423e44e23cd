"""Tag generation orchestrator.

Pipeline, per call:

1. LexicalMatcher scores the team corpus against title + description
2. TagDrafter asks the model for tags, preferring the matched ones
3. SpecificityFilter drops generic tags, protecting the matched ones
4. reconcile() forces back strong matches the model left out
5. Manual tags go first; duplicates are removed case-insensitively
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, Union

from bookmark_tagger.lib.logging_config import log_with_context

from .completion import CompletionService, PydanticAICompletionService
from .config import TaggerConfig
from .corpus import JsonTagCorpusStore, TagCorpusStore
from .drafter import TagDrafter, render_context
from .errors import ServiceCallError
from .matcher import Lemmatizer, LexicalMatcher
from .models import TagGenerationOptions
from .parsing import TagParseError, dedupe_tags, parse_tag_reply
from .reconciler import reconcile
from .specificity import SpecificityFilter

logger = logging.getLogger(__name__)

OptionsArg = Union[TagGenerationOptions, Dict[str, Any], None]


class TagGenerator(Protocol):
    """Public contract shared by every tag generator."""

    async def generate_tags(
        self,
        content: str,
        existing_tags_hint: Optional[List[str]] = None,
        options: OptionsArg = None,
    ) -> List[str]:
        ...


def _coerce_options(options: OptionsArg) -> TagGenerationOptions:
    if options is None:
        return TagGenerationOptions()
    if isinstance(options, TagGenerationOptions):
        return options
    return TagGenerationOptions(**options)


def merge_manual_tags(manual_tags: List[str], generated: List[str], limit: int) -> List[str]:
    """Manual tags first, then generated ones, deduplicated and capped.

    Manual tags beyond ``limit`` are dropped; otherwise every manual tag is kept.
    """
    return dedupe_tags(list(manual_tags) + list(generated))[:limit]


class HybridTagGenerator:
    """Combines lexical corpus matching with two generative passes."""

    def __init__(
        self,
        matcher: LexicalMatcher,
        drafter: TagDrafter,
        specificity_filter: SpecificityFilter,
        config: Optional[TaggerConfig] = None,
    ):
        """Initialize generator.

        Args:
            matcher: Lexical matcher over the team corpus
            drafter: First generative pass
            specificity_filter: Second generative pass
            config: Caps and thresholds (defaults to TaggerConfig())
        """
        self.matcher = matcher
        self.drafter = drafter
        self.specificity_filter = specificity_filter
        self.config = config or TaggerConfig()

    async def generate_tags(
        self,
        content: str,
        existing_tags_hint: Optional[List[str]] = None,
        options: OptionsArg = None,
    ) -> List[str]:
        """Generate tags for a bookmark.

        Args:
            content: Title and description text sent to the model
            existing_tags_hint: Tags the user has used before. Only added to
                the draft prompt; corpus matches always come from ``team_id``.
            options: URL, title, description, team_id and manual_tags

        Returns:
            Up to 6 tags, or up to 8 when manual tags are given (manual first)

        Raises:
            ServiceCallError: The draft call failed
        """
        opts = _coerce_options(options)
        manual_tags = [tag.strip() for tag in opts.manual_tags if tag and tag.strip()]

        log_with_context(
            logger,
            "info",
            "Generating tags",
            content_length=len(content or ""),
            existing_tags_count=len(existing_tags_hint or []),
            team_id=opts.team_id,
            has_manual_tags=bool(manual_tags),
        )

        generated = await self._generate_internal(content, existing_tags_hint, opts)

        if not manual_tags:
            return generated

        combined = merge_manual_tags(manual_tags, generated, self.config.max_tags_with_manual)
        log_with_context(
            logger,
            "info",
            "Combined manual and generated tags",
            manual_tags_count=len(manual_tags),
            generated_tags_count=len(generated),
            total_tags=len(combined),
        )
        return combined

    async def _generate_internal(
        self,
        content: str,
        existing_tags_hint: Optional[List[str]],
        opts: TagGenerationOptions,
    ) -> List[str]:
        context = opts.context()

        scored = await self.matcher.score_existing_tags(
            opts.title or "",
            opts.description or "",
            opts.team_id,
        )
        existing_matches = [s.tag for s in scored]
        log_with_context(
            logger,
            "info",
            "Found existing tag matches",
            existing_matches=existing_matches,
            top_scores=[(s.tag, s.score, s.match_type.value) for s in scored[:3]],
        )

        draft = await self.drafter.draft(
            content,
            context,
            existing_matches,
            hint_tags=existing_tags_hint,
        )
        logger.info(f"Initial tags before specificity filter: {draft}")

        filtered = await self.specificity_filter.filter(draft, context, existing_matches)
        logger.info(f"Tags after specificity filter: {filtered}")

        hybrid = reconcile(
            dedupe_tags(filtered),
            scored,
            threshold=self.config.high_confidence_score,
            max_total=self.config.max_generated_tags,
        )
        logger.info(f"Final tags after hybrid inclusion: {hybrid}")
        return hybrid


class SimpleTagGenerator:
    """Single-prompt generator without corpus matching or filtering."""

    def __init__(
        self,
        completion: CompletionService,
        config: Optional[TaggerConfig] = None,
    ):
        self.completion = completion
        self.config = config or TaggerConfig()

    def build_system_prompt(
        self,
        existing_tags_hint: Optional[List[str]],
        options: TagGenerationOptions,
    ) -> str:
        consider = ", ".join(existing_tags_hint) if existing_tags_hint else "none"
        return f"""You are a helpful assistant that generates relevant, specific tags for bookmarked content.

{render_context(options.context())}

Guidelines:
- Generate 3-7 concise, relevant tags
- Focus on specific technologies, concepts, and topics mentioned
- Use lowercase, hyphenated format (e.g., "machine-learning", "aws-lambda")
- Avoid generic tags like "article", "blog", "tutorial" unless specifically relevant
- Consider existing user tags for consistency: {consider}
- Return only the tags as a JSON array of strings"""

    async def generate_tags(
        self,
        content: str,
        existing_tags_hint: Optional[List[str]] = None,
        options: OptionsArg = None,
    ) -> List[str]:
        opts = _coerce_options(options)

        try:
            reply = await self.completion.complete(
                self.build_system_prompt(existing_tags_hint, opts),
                f"Generate tags for this content:\n\n{content}",
                max_output_tokens=self.config.draft_max_output_tokens,
                temperature=self.config.temperature,
            )
        except Exception as e:
            logger.error(f"Failed to generate tags: {e!r}")
            raise ServiceCallError(f"Failed to generate tags: {e}") from e

        if not reply or not reply.strip():
            raise ServiceCallError("No text content in generative service reply")

        try:
            generated = dedupe_tags(parse_tag_reply(reply))
        except TagParseError as e:
            logger.warning(f"Could not parse tags from reply: {e}")
            generated = []

        logger.info(f"Tags generated successfully: {len(generated)}")

        manual_tags = [tag.strip() for tag in opts.manual_tags if tag and tag.strip()]
        if manual_tags:
            return merge_manual_tags(manual_tags, generated, self.config.max_tags_with_manual)
        return generated


def create_tag_generator(
    config: Optional[TaggerConfig] = None,
    corpus: Optional[TagCorpusStore] = None,
    completion: Optional[CompletionService] = None,
    lemmatizer: Optional[Lemmatizer] = None,
) -> HybridTagGenerator:
    """Wire a hybrid tag generator.

    Args:
        config: Engine configuration (defaults read from environment)
        corpus: Tag corpus store (defaults to the JSON store at config.corpus_path)
        completion: Generative service (defaults to pydantic-ai with config.model)
        lemmatizer: Lemma source for grammatical matching (defaults to WordNet)

    Returns:
        HybridTagGenerator instance
    """
    config = config or TaggerConfig()

    if corpus is None:
        corpus = JsonTagCorpusStore(config.corpus_path)

    if completion is None:
        completion = PydanticAICompletionService(
            model=config.model,
            request_timeout=config.request_timeout,
            max_retries=config.max_retries,
        )

    return HybridTagGenerator(
        matcher=LexicalMatcher(corpus, lemmatizer=lemmatizer, limit=config.max_scored_tags),
        drafter=TagDrafter(
            completion,
            max_output_tokens=config.draft_max_output_tokens,
            temperature=config.temperature,
        ),
        specificity_filter=SpecificityFilter(
            completion,
            max_output_tokens=config.filter_max_output_tokens,
            temperature=config.temperature,
        ),
        config=config,
    )
