"""Exception hierarchy for Rulescope."""

from __future__ import annotations


class RulescopeError(Exception):
    """Base class for all Rulescope errors."""


class ExternalToolFailure(RulescopeError):
    """The repomix subprocess is missing, failed, or timed out."""
    def __init__(self, message: str, returncode: int | None = None):
        super().__init__(message)
        self.returncode = returncode


class CandidateParseError(RulescopeError):
    """A config candidate exists but could not be loaded."""


class CandidateMissing(RulescopeError):
    """A config candidate exists on disk but does not hold a config (e.g. no eslintConfig key)."""


class ConfigurationNotFound(RulescopeError):
    """No ESLint config candidate exists and parses."""
    def __init__(self, accepted: list[str], attempts: tuple = ()):
        self.accepted = list(accepted)
        self.attempts = tuple(attempts)
        super().__init__(
            "ESLint config not found. Expected one of: " + ", ".join(self.accepted)
        )
