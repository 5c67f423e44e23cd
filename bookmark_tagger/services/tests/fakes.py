"""Fake implementations for testing the tag generation engine.

These fakes provide in-memory implementations of the generative text
service, the tag corpus store and the lemmatizer, so unit tests run
without network access or WordNet data.

Usage:
    from bookmark_tagger.services.tests.fakes import (
        FakeCompletionService,
        FakeTagCorpusStore,
    )

    completion = FakeCompletionService(['["react", "hooks"]', '["hooks"]'])
    corpus = FakeTagCorpusStore({"T1": ["react", "javascript"]})
"""

from typing import Any


class FakeCompletionService:
    """Scripted completion service.

    Each call pops the next scripted reply. A reply that is an exception
    instance is raised instead of returned. When the script runs out, the
    last reply is repeated.

    Attributes:
        replies: Remaining scripted replies
        calls: List of dicts recording every call for assertions
    """

    def __init__(self, replies: list[Any] | None = None):
        self.replies: list[Any] = list(replies or [])
        self.calls: list[dict[str, Any]] = []
        self._last: Any = "[]"

    def add_reply(self, reply: Any) -> None:
        """Queue another reply (string or exception)."""
        self.replies.append(reply)

    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        *,
        max_output_tokens: int,
        temperature: float = 0.1,
    ) -> str:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_content": user_content,
                "max_output_tokens": max_output_tokens,
                "temperature": temperature,
            }
        )

        if self.replies:
            self._last = self.replies.pop(0)
        reply = self._last

        if isinstance(reply, BaseException):
            raise reply
        return reply

    @property
    def call_count(self) -> int:
        return len(self.calls)


class FakeTagCorpusStore:
    """In-memory tag corpus keyed by team.

    Attributes:
        teams: Dict mapping team IDs to their tags, most used first
        error: Exception raised by every read when set
        requested_teams: Team IDs passed to get_existing_tags
    """

    def __init__(
        self,
        teams: dict[str, list[str]] | None = None,
        error: Exception | None = None,
    ):
        self.teams = teams or {}
        self.error = error
        self.requested_teams: list[str] = []

    async def get_existing_tags(self, team_id: str) -> list[str]:
        self.requested_teams.append(team_id)
        if self.error:
            raise self.error
        return list(self.teams.get(team_id, []))

    async def get_seed_tags(
        self,
        user_id: str,
        team_id: str | None = None,
        limit: int = 20,
    ) -> list[str]:
        if self.error:
            raise self.error
        return list(self.teams.get(team_id or "", []))[:limit]


class FakeLemmatizer:
    """Lemmatizer backed by an explicit word -> lemmas table.

    Words missing from the table are their own lemma.
    """

    def __init__(self, table: dict[str, set[str]] | None = None):
        self.table = table or {}

    def lemmas(self, word: str) -> set[str]:
        return set(self.table.get(word, {word}))
