"""First generative pass: draft candidate tags for a bookmark."""

import logging
from typing import List, Optional

from bookmark_tagger.lib.logging_config import log_with_context

from .completion import CompletionService
from .config import DEFAULT_TEMPERATURE, DRAFT_MAX_OUTPUT_TOKENS, MAX_DRAFT_TAGS
from .errors import ServiceCallError
from .models import TagContext
from .parsing import TagParseError, parse_tag_reply

logger = logging.getLogger(__name__)

AVOID_TERMS = (
    '"clean output", "good article", "useful tool", "helpful resource", '
    '"great example", "awesome project", "best practices", "high quality"'
)


def render_context(context: TagContext) -> str:
    """Bookmark details block shared by both prompts."""
    return (
        f"URL: {context.url or 'Unknown'}\n"
        f"Title: {context.title or 'Unknown'}\n"
        f"Description: {context.description or 'No description available'}"
    )


class TagDrafter:
    """Asks the generative service for an initial set of tags."""

    def __init__(
        self,
        completion: CompletionService,
        max_output_tokens: int = DRAFT_MAX_OUTPUT_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tags: int = MAX_DRAFT_TAGS,
    ):
        self.completion = completion
        self.max_output_tokens = max_output_tokens
        self.temperature = temperature
        self.max_tags = max_tags

    def build_system_prompt(
        self,
        context: TagContext,
        preferred_tags: List[str],
        hint_tags: Optional[List[str]] = None,
    ) -> str:
        """Build the draft prompt.

        Args:
            context: Bookmark URL, title and description
            preferred_tags: Corpus tags that matched the content lexically
            hint_tags: Tags the user has used before (informational only)
        """
        prompt = "Generate 3-5 specific, searchable tags for this bookmark.\n\n"
        prompt += render_context(context) + "\n\n"

        if preferred_tags:
            prompt += f"PREFER these existing tags if appropriate: {', '.join(preferred_tags)}\n\n"

        if hint_tags:
            prompt += f"Tags this user has used before, for reference: {', '.join(hint_tags)}\n\n"

        prompt += f"""AVOID generic quality terms like: {AVOID_TERMS}

PREFER specific terms like:
- Technology names (typescript, react, python, docker)
- Domain concepts (api, database, tutorial, documentation)
- Platform names (github, stackoverflow, npm)
- Concrete topics that help search (not subjective quality)

Requirements:
- Use lowercase, single words or short phrases (2-3 words max)
"""
        if preferred_tags:
            prompt += "- Prioritize existing tags when they fit the content\n"

        prompt += """- Each tag should help someone find this specific type of content
- Focus on WHAT the content is about, not HOW GOOD it is
- Return as JSON array of strings only"""
        return prompt

    async def draft(
        self,
        content: str,
        context: TagContext,
        preferred_tags: List[str],
        hint_tags: Optional[List[str]] = None,
    ) -> List[str]:
        """Draft tags for the content.

        Args:
            content: Text sent as the user message (title and description)
            context: Bookmark URL, title and description
            preferred_tags: Corpus tags to prefer when they fit
            hint_tags: Tags the user has used before

        Returns:
            Up to ``max_tags`` lowercase tags; empty when the reply holds no array

        Raises:
            ServiceCallError: The service call failed or returned no text
        """
        system_prompt = self.build_system_prompt(context, preferred_tags, hint_tags)

        try:
            reply = await self.completion.complete(
                system_prompt,
                content,
                max_output_tokens=self.max_output_tokens,
                temperature=self.temperature,
            )
        except ServiceCallError:
            raise
        except Exception as e:
            logger.error(f"Failed to generate tags: {e!r}")
            raise ServiceCallError(f"Failed to generate tags: {e}") from e

        if not reply or not reply.strip():
            raise ServiceCallError("No text content in generative service reply")

        try:
            tags = parse_tag_reply(reply, max_tags=self.max_tags)
        except TagParseError as e:
            log_with_context(
                logger,
                "warning",
                "Could not parse tags from draft reply",
                error=str(e),
                reply=reply[:500],
            )
            return []

        log_with_context(logger, "info", "Draft tags generated", tags=tags)
        return tags
