"""Extract tag lists from free-text model replies."""

import json
import re
from typing import Any, List

from .config import MAX_DRAFT_TAGS, MAX_TAG_LENGTH

_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)


class TagParseError(ValueError):
    """A reply did not contain a decodable JSON array."""


def extract_json_array(text: str) -> List[Any]:
    """Pull the JSON array out of a reply that may be wrapped in prose.

    Takes the span from the first "[" to the last "]". When that span is not
    valid JSON (e.g. prose with brackets after the array), decodes just the
    first array instead.

    Raises:
        TagParseError: No bracketed region, or it is not a JSON array
    """
    match = _ARRAY_RE.search(text or "")
    if not match:
        raise TagParseError("No JSON array found in reply")

    candidate = match.group(0)
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError:
        try:
            value, _ = json.JSONDecoder().raw_decode(candidate)
        except json.JSONDecodeError as e:
            raise TagParseError(f"Invalid JSON array in reply: {e}") from e

    if not isinstance(value, list):
        raise TagParseError(f"Expected a JSON array, got {type(value).__name__}")
    return value


def clean_tags(
    values: List[Any],
    max_tags: int = MAX_DRAFT_TAGS,
    max_length: int = MAX_TAG_LENGTH,
) -> List[str]:
    """Keep strings, lowercase and trim them, drop empty or overlong ones.

    Args:
        values: Decoded array elements
        max_tags: Cap on the number of tags returned
        max_length: Longest tag accepted

    Returns:
        Cleaned tags in reply order
    """
    cleaned = [value.lower().strip() for value in values if isinstance(value, str)]
    return [tag for tag in cleaned if 0 < len(tag) <= max_length][:max_tags]


def parse_tag_reply(text: str, max_tags: int = MAX_DRAFT_TAGS) -> List[str]:
    """Extract and clean the tag array from a reply.

    Raises:
        TagParseError: The reply holds no decodable array
    """
    return clean_tags(extract_json_array(text), max_tags=max_tags)


def dedupe_tags(tags: List[str]) -> List[str]:
    """Drop case-insensitive duplicates, keeping the first spelling seen."""
    seen = set()
    result = []
    for tag in tags:
        key = tag.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(tag.strip())
    return result
