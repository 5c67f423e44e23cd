"""Tag corpus store: the per-team set of previously used tags."""

import json
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol

from .errors import CorpusStoreError
from .models import TagUsage

logger = logging.getLogger(__name__)


# Common tags offered to every team, after the team's own tags
DEFAULT_SEED_TAGS = [
    "javascript", "typescript", "python", "java", "go", "rust",
    "react", "vue", "angular", "nodejs", "express",
    "programming", "coding", "development", "software", "web development",
    "frontend", "backend", "fullstack", "api", "database",
    "tutorial", "documentation", "guide", "reference",
    "github", "open source", "repository", "code",
    "framework", "library", "tool", "utility",
    "ai", "machine learning", "ml", "llm", "openai",
    "design", "ui", "ux", "css", "html",
    "devops", "docker", "kubernetes", "aws", "cloud", "container",
]


class TagCorpusStore(Protocol):
    """Read-only access to previously used tags.

    Implementations:
    - JsonTagCorpusStore: JSON file on disk
    - FakeTagCorpusStore: in-memory implementation for testing
    """

    async def get_existing_tags(self, team_id: str) -> List[str]:
        """All tags the team has used, most used first."""
        ...

    async def get_seed_tags(
        self,
        user_id: str,
        team_id: Optional[str] = None,
        limit: int = 20,
    ) -> List[str]:
        """Tags to suggest for a user, scoped to the team when given."""
        ...


def _normalize(tag: str) -> str:
    return tag.lower().strip()


def _parse_counts(section: Dict) -> Dict[str, Dict[str, int]]:
    """Coerce a ``{owner: {tag: count}}`` section, normalizing tag names.

    Raises:
        AttributeError, TypeError, ValueError: The section has another shape
    """
    return {
        owner: {_normalize(tag): int(count) for tag, count in tags.items()}
        for owner, tags in section.items()
    }


def _rank(counts: Dict[str, int]) -> List[TagUsage]:
    """Order by usage count descending, then tag name ascending."""
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [TagUsage(tag_name=tag, usage_count=count) for tag, count in ordered]


class JsonTagCorpusStore:
    """Tag corpus persisted as a JSON file.

    File format::

        {
          "updated_at": "2024-01-01T00:00:00",
          "teams": {"T1": {"react": 4, "hooks": 1}},
          "users": {"U1": {"react": 2}}
        }
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        seed_tags: Optional[List[str]] = None,
    ):
        """Initialize store.

        Args:
            path: JSON file. If None or missing, starts empty.
            seed_tags: Tags appended to every team's corpus (defaults to DEFAULT_SEED_TAGS)
        """
        self.path = Path(path) if path else None
        self.seed_tags = list(DEFAULT_SEED_TAGS if seed_tags is None else seed_tags)
        self.teams: Dict[str, Dict[str, int]] = {}
        self.users: Dict[str, Dict[str, int]] = {}
        self.updated_at: Optional[str] = None

        if self.path and self.path.exists():
            self.load()

    def load(self) -> None:
        """Load corpus from the JSON file."""
        if not self.path or not self.path.exists():
            raise FileNotFoundError(f"Tag corpus file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise CorpusStoreError(f"Failed to read tag corpus {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise CorpusStoreError(f"Tag corpus {self.path} must contain a JSON object")

        try:
            self.teams = _parse_counts(data.get("teams", {}))
            self.users = _parse_counts(data.get("users", {}))
        except (AttributeError, TypeError, ValueError) as e:
            raise CorpusStoreError(f"Malformed tag corpus {self.path}: {e}") from e
        self.updated_at = data.get("updated_at")

    def save(self, path: Optional[Path] = None) -> None:
        """Save corpus to JSON.

        Args:
            path: Optional path to save to. If None, uses self.path.
        """
        save_path = Path(path) if path else self.path
        if not save_path:
            raise ValueError("No save path specified")

        data = {
            "updated_at": datetime.now().isoformat(),
            "teams": self.teams,
            "users": self.users,
        }

        try:
            save_path.parent.mkdir(parents=True, exist_ok=True)
            with open(save_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise CorpusStoreError(f"Failed to write tag corpus {save_path}: {e}") from e

        self.updated_at = data["updated_at"]

    def record_tags(
        self,
        team_id: str,
        tags: Iterable[str],
        user_id: Optional[str] = None,
    ) -> None:
        """Bump usage counts for tags applied to a saved bookmark.

        Args:
            team_id: Team the bookmark belongs to
            tags: Tags applied
            user_id: Optional user who saved the bookmark
        """
        normalized = [t for t in (_normalize(tag) for tag in tags) if t]
        team_counts = Counter(self.teams.get(team_id, {}))
        team_counts.update(normalized)
        self.teams[team_id] = dict(team_counts)

        if user_id:
            user_counts = Counter(self.users.get(user_id, {}))
            user_counts.update(normalized)
            self.users[user_id] = dict(user_counts)

        logger.debug(f"Recorded {len(normalized)} tags for team {team_id}")

    def existing_tags(self, team_id: str) -> List[str]:
        """Team tags by usage, followed by the seed tags, deduplicated."""
        ordered = [usage.tag_name for usage in _rank(self.teams.get(team_id, {}))]
        return list(dict.fromkeys(ordered + self.seed_tags))

    async def get_existing_tags(self, team_id: str) -> List[str]:
        return self.existing_tags(team_id)

    async def get_seed_tags(
        self,
        user_id: str,
        team_id: Optional[str] = None,
        limit: int = 20,
    ) -> List[str]:
        if team_id:
            return self.existing_tags(team_id)[:limit]
        return [usage.tag_name for usage in _rank(self.users.get(user_id, {}))][:limit]

    async def get_popular_tags(self, team_id: str, limit: int = 20) -> List[TagUsage]:
        """Team tags with usage counts, most used first."""
        return _rank(self.teams.get(team_id, {}))[:limit]

    def get_stats(self) -> Dict:
        """Corpus statistics."""
        return {
            "teams": len(self.teams),
            "users": len(self.users),
            "team_tags": sum(len(tags) for tags in self.teams.values()),
            "seed_tags": len(self.seed_tags),
            "updated_at": self.updated_at,
        }
