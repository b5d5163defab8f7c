"""
Gita-Guidance-Service - Custom Exceptions

Anti-Patterns Avoided:
- #7, #13 (Exception Shadowing): Custom namespaced exceptions
  Use GitaGuidanceError instead of shadowing builtins like LookupError
"""


class GitaGuidanceError(Exception):
    """Base exception for Gita-Guidance-Service.

    All custom exceptions inherit from this base class.
    """
    pass


class InvalidCorpusError(GitaGuidanceError):
    """Raised when the verse corpus cannot produce any result.

    The matcher guarantees a non-empty result, so an empty corpus is
    reported instead of returning an empty sequence.
    """
    pass


class CorpusLoadError(GitaGuidanceError):
    """Raised when the verse fixture is missing or malformed."""
    pass


class CorpusNotReadyError(GitaGuidanceError):
    """Raised when the corpus is accessed before it's loaded.

    Used by /ready and the guidance endpoints to report 503.
    """
    pass


class ConfigurationError(GitaGuidanceError):
    """Raised when configuration is invalid or missing."""
    pass
