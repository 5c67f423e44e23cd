"""Unit tests for keyword extraction."""

import pytest

from bookmark_tagger.services.tagger.keywords import STOPWORDS, extract_keywords


@pytest.mark.unit
def test_punctuation_split_and_short_tokens():
    """Dots and colons split tokens; "&", "a" and "js" are under three chars and dropped."""
    keywords = extract_keywords("Node.js & Express: A Guide")

    assert keywords == ["node", "express", "guide"]
    assert "a" not in keywords
    assert "js" not in keywords


@pytest.mark.unit
def test_lowercases_input():
    assert extract_keywords("TypeScript React") == ["typescript", "react"]


@pytest.mark.unit
def test_drops_stopwords():
    keywords = extract_keywords("How to use the new Docker CLI and get started")

    assert "docker" in keywords
    assert "started" in keywords
    for word in ("how", "use", "the", "new", "and", "get"):
        assert word not in keywords


@pytest.mark.unit
def test_drops_pure_numbers():
    keywords = extract_keywords("Python 3000 release notes 2024 py3k")

    assert "3000" not in keywords
    assert "2024" not in keywords
    assert "py3k" in keywords


@pytest.mark.unit
def test_keeps_duplicates_in_order():
    assert extract_keywords("react hooks react") == ["react", "hooks", "react"]


@pytest.mark.unit
def test_splits_on_every_separator():
    text = "alpha/beta-gamma_delta.epsilon,zeta!theta?iota(kappa)lambda:omicron"

    assert extract_keywords(text) == [
        "alpha", "beta", "gamma", "delta", "epsilon",
        "zeta", "theta", "iota", "kappa", "lambda", "omicron",
    ]


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", None, "a an to", "  \n\t "])
def test_empty_results(text):
    assert extract_keywords(text) == []


@pytest.mark.unit
def test_stopwords_are_lowercase():
    assert all(word == word.lower() for word in STOPWORDS)
