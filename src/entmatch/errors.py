"""Exception types shared across entmatch."""

__all__ = ["ConfigurationError"]


class ConfigurationError(ValueError):
    """Raised when a matcher, strategy or config document is invalid.

    Only ever raised while building objects (or loading configuration),
    never while blocking or scoring records.
    """
