"""Subpaths exception hierarchy.

Resolution never raises: a path that cannot be resolved is returned
unchanged. These types cover wiring and settings mistakes.
"""


class SubpathError(Exception):
    """Base for all subpaths-specific errors."""


class ConfigurationError(SubpathError):
    """Raised when settings are invalid or a collaborator is missing.

    Typically raised while building ``SubpathConfig``, registering a
    duplicate route, or on the first validity check of a processor that
    was never given a validator.
    """
