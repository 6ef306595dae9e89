"""
Error Taxonomy
===============
None of these are fatal to the simulation. Each one is caught at the
seam where it can be degraded into an advisory message.
"""


class WordRunnerError(Exception):
    """Base class for WORD_RUNNER errors."""


class PoolUnavailable(WordRunnerError):
    """The word list could not be read. Spawning degrades to a no-op."""


class SubmissionFailed(WordRunnerError):
    """Saving a finished run to the score service failed."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code
