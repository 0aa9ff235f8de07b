"""formstate exceptions."""


class FormStateError(Exception):
    """Base class for formstate errors."""


class ReentrantMutationError(FormStateError, RuntimeError):
    """Raised when a listener mutates the store it is being notified by."""
