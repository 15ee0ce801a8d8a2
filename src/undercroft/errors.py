class UndercroftError(Exception):
    """Base exception for the Undercroft project."""


class InvariantViolation(UndercroftError):
    """Raised when a structural invariant of the session is broken.

    This signals a programmer error. It is never caught inside the library;
    execution must halt rather than continue with corrupted state.
    """


class ConfigError(UndercroftError):
    """Raised when configuration values are missing or out of range."""


class ChoiceError(UndercroftError):
    """Raised when a level-up choice is resolved while none is pending."""
