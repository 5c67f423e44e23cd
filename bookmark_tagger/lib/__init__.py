"""Shared infrastructure: configuration, logging and retry helpers."""
