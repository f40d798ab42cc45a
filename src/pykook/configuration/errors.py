"""Exceptions raised by the configuration layer."""


class ConfigurationError(Exception):
    """Base class for every configuration failure."""


class FormatError(ConfigurationError):
    """Raised when text cannot be turned into a configuration tree.

    Parser diagnostics are kept as ``__cause__``; their message (which carries
    the line and column of the problem) is reused as this error's message.
    """


class DeserializationError(ConfigurationError):
    """Raised when a typed object cannot be rebuilt from its mapping."""

    def __init__(self, message: str, type_tag: str | None = None) -> None:
        super().__init__(message)
        self.type_tag = type_tag
