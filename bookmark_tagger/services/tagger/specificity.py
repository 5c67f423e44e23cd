"""Second generative pass: drop generic or subjective draft tags.

Tags that matched the team corpus lexically are protected and never sent to
the model. Every failure fails open: the draft is returned unchanged.
"""

import logging
from typing import List

from bookmark_tagger.lib.logging_config import log_with_context

from .completion import CompletionService
from .config import DEFAULT_TEMPERATURE, FILTER_MAX_OUTPUT_TOKENS
from .drafter import render_context
from .models import TagContext
from .parsing import TagParseError, clean_tags, extract_json_array

logger = logging.getLogger(__name__)


class SpecificityFilter:
    """Removes low-specificity tags from a draft while keeping protected ones."""

    def __init__(
        self,
        completion: CompletionService,
        max_output_tokens: int = FILTER_MAX_OUTPUT_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.completion = completion
        self.max_output_tokens = max_output_tokens
        self.temperature = temperature

    def build_system_prompt(self, context: TagContext, candidates: List[str]) -> str:
        """Build the filtering prompt for the unprotected candidates."""
        return f"""Evaluate these bookmark tags for search specificity and usefulness. Remove any tags that are too generic, vague, or unhelpful for finding this specific content.

{render_context(context)}

Tags to evaluate: {', '.join(candidates)}

REMOVE tags that are:
- Too generic (e.g., "superset" when it just means "extension of")
- Subjective quality terms (e.g., "clean", "good", "awesome")
- Overly broad concepts that don't help narrow search
- Conceptual relationships that aren't searchable terms

KEEP tags that are:
- Specific technology names (typescript, react, python)
- Concrete platforms or tools (github, npm, docker)
- Specific domain concepts (api, database, tutorial)
- Terms someone would actually search for to find this content

Return only the useful tags as a JSON array. If a tag is borderline, err on the side of keeping it."""

    async def filter(
        self,
        draft_tags: List[str],
        context: TagContext,
        protected_tags: List[str],
    ) -> List[str]:
        """Filter the draft.

        Args:
            draft_tags: Output of the draft stage
            context: Bookmark URL, title and description
            protected_tags: Tags exempt from filtering

        Returns:
            Protected tags followed by surviving candidates, or ``draft_tags``
            unchanged when there is nothing to filter or the pass fails
        """
        if not draft_tags:
            return draft_tags

        protected_set = set(protected_tags)
        protected = [tag for tag in draft_tags if tag in protected_set]
        candidates = [tag for tag in draft_tags if tag not in protected_set]

        log_with_context(
            logger,
            "info",
            "Separating tags for specificity filtering",
            protected_tags=protected,
            candidate_tags=candidates,
        )

        if not candidates:
            return draft_tags

        try:
            reply = await self.completion.complete(
                self.build_system_prompt(context, candidates),
                f"Filter these tags: {', '.join(candidates)}",
                max_output_tokens=self.max_output_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            logger.warning(f"Specificity filter failed, keeping original tags: {e!r}")
            return draft_tags

        if not reply or not reply.strip():
            logger.warning("Empty reply from specificity filter, keeping original tags")
            return draft_tags

        try:
            returned = extract_json_array(reply)
            kept = set(clean_tags(returned, max_tags=len(returned)))
        except TagParseError as e:
            log_with_context(
                logger,
                "warning",
                "Could not parse specificity filter reply, keeping original tags",
                error=str(e),
                reply=reply[:500],
            )
            return draft_tags

        # The model may only remove candidates, never add new tags
        surviving = [tag for tag in candidates if tag.lower().strip() in kept]
        final_tags = protected + surviving

        if not final_tags:
            logger.warning("Specificity filter removed everything, keeping originals")
            return draft_tags

        log_with_context(
            logger,
            "info",
            "Completed specificity filtering",
            surviving_tags=surviving,
            final_tags=final_tags,
        )
        return final_tags
