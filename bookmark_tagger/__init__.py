"""Hybrid lexical + generative tag suggestions for bookmarks."""

__version__ = "0.1.0"
