"""Exception types raised by the clone detector."""

from __future__ import annotations


class InputError(ValueError):
    """The image handed to the detector is missing, empty or malformed."""
    pass


class ConfigError(ValueError):
    """A detection parameter or configuration value is out of range."""
    pass
