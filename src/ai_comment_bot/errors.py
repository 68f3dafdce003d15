"""
Exception types raised by the pipeline and mapped to exit codes/comments in the handler.
"""

from __future__ import annotations


class BotError(Exception):
    """Base class for all bot errors."""


class MissingConfiguration(BotError):
    """Required invocation inputs are absent or malformed."""


class ConfigurationError(BotError):
    """A configuration file (e.g. the model alias table) could not be used."""


class UsageError(BotError):
    """The user's command cannot be served; reported back as a help comment."""

    def __init__(self, message: str, aliases: list[str]) -> None:
        super().__init__(message)
        self.aliases = aliases


class EmptyPrompt(UsageError):
    pass


class UnknownModel(UsageError):
    pass


class GenerationError(BotError):
    """The model backend returned an error response."""


class GitHubError(BotError):
    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
