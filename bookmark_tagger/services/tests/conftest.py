"""Shared pytest fixtures for tagger tests."""

import tempfile
from pathlib import Path

import pytest

from bookmark_tagger.services.tagger.config import TaggerConfig
from bookmark_tagger.services.tests.fakes import (
    FakeCompletionService,
    FakeLemmatizer,
    FakeTagCorpusStore,
)


# =============================================================================
# Fake Factories
# =============================================================================

# Covers the inflections used across the test suite
LEMMA_TABLE = {
    "running": {"running", "run"},
    "run": {"run"},
    "runs": {"runs", "run"},
    "hooks": {"hooks", "hook"},
    "hook": {"hook"},
    "tutorials": {"tutorials", "tutorial"},
    "tutorial": {"tutorial"},
    "containers": {"containers", "container"},
    "container": {"container"},
}


def create_fake_lemmatizer() -> FakeLemmatizer:
    """Lemmatizer with a small fixed inflection table."""
    return FakeLemmatizer(LEMMA_TABLE)


def create_test_config(**overrides) -> TaggerConfig:
    """TaggerConfig with environment-independent values."""
    values = {
        "model": "test",
        "request_timeout": 5.0,
        "max_retries": 0,
        "corpus_path": "unused.json",
    }
    values.update(overrides)
    return TaggerConfig(**values)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def temp_dir():
    """Temporary directory for tests.

    Automatically cleaned up after test completes.
    """
    with tempfile.TemporaryDirectory(ignore_cleanup_errors=True) as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_lemmatizer():
    """Fixture providing a table-driven lemmatizer."""
    return create_fake_lemmatizer()


@pytest.fixture
def fake_completion():
    """Fixture providing an empty scripted completion service."""
    return FakeCompletionService()


@pytest.fixture
def fake_corpus():
    """Fixture providing a corpus for team T1."""
    return FakeTagCorpusStore({"T1": ["react", "javascript", "typescript", "hooks"]})


@pytest.fixture
def test_config():
    """Fixture providing an environment-independent TaggerConfig."""
    return create_test_config()


@pytest.fixture
def sample_context():
    """Sample bookmark context."""
    return {
        "url": "https://react.dev/learn",
        "title": "React Hooks Tutorial",
        "description": "Learn useState and useEffect",
    }
