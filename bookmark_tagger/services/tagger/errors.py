"""Exceptions raised by the tag generation engine.

Recoverable conditions (unparsable replies, an unavailable corpus, a failed
specificity pass) are logged as warnings and never raised.
"""


class TaggerError(Exception):
    """Base class for tag generation errors."""


class ServiceCallError(TaggerError):
    """The generative text service failed to produce a reply.

    Raised by the draft stage; the orchestrator lets it propagate.
    """

    def __init__(self, message: str, service: str = "generative-text"):
        super().__init__(message)
        self.service = service


class CorpusStoreError(TaggerError):
    """The tag corpus store could not be read or written."""
