"""
Framework configuration.

Module-level settings with explicit setters so tests and host applications
can toggle them without touching private state.

- diagnostics: misuse warnings (self-watch, unknown field names).
  Enabled unless FORMSTATE_ENV=production.
- debug_notifications: per-notification debug logging.
"""

import os

ENV_VAR = 'FORMSTATE_ENV'

_diagnostics_enabled: bool = os.environ.get(ENV_VAR, 'development') != 'production'
_debug_notifications: bool = False


def set_diagnostics_enabled(enabled: bool) -> None:
    """Enable or disable caller-misuse warnings."""
    global _diagnostics_enabled
    _diagnostics_enabled = bool(enabled)


def get_diagnostics_enabled() -> bool:
    return _diagnostics_enabled


def set_debug_notifications(enabled: bool) -> None:
    """Enable or disable verbose logging of every notification."""
    global _debug_notifications
    _debug_notifications = bool(enabled)


def get_debug_notifications() -> bool:
    return _debug_notifications
