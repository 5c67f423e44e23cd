"""Default configuration values for the tagger.

All hardcoded defaults live here. The tagger should be fully functional
with these defaults (minus the generative service credentials).

Config hierarchy: .env → environment → these defaults
"""

from typing import Any

# =============================================================================
# Configuration Defaults
# =============================================================================

DEFAULTS: dict[str, Any] = {
    # -------------------------------------------------------------------------
    # Generative Text Service
    # -------------------------------------------------------------------------
    "TAGGER_MODEL": "anthropic:claude-3-5-haiku-latest",
    "TAGGER_REQUEST_TIMEOUT": 30.0,
    "TAGGER_MAX_RETRIES": 2,

    # -------------------------------------------------------------------------
    # Tag Corpus Store
    # -------------------------------------------------------------------------
    "TAG_CORPUS_PATH": "data/tag_corpus.json",

    # -------------------------------------------------------------------------
    # External API Keys (empty = not configured)
    # -------------------------------------------------------------------------
    "ANTHROPIC_API_KEY": "",
    "OPENAI_API_KEY": "",

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    "LOG_LEVEL": "INFO",
}


# =============================================================================
# Sensitive Keys (should be masked when displayed)
# =============================================================================

SENSITIVE_KEYS = {
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
}


def get_default(key: str) -> Any:
    """Get the default value for a config key.

    Args:
        key: Configuration key name

    Returns:
        Default value, or None if key not found
    """
    return DEFAULTS.get(key)


def is_sensitive(key: str) -> bool:
    """Check if a config key contains sensitive data."""
    return key in SENSITIVE_KEYS
