"""Exceptions raised by the auto rewarder."""


class RewarderError(Exception):
    """Base class for all rewarder errors."""


class ValidationError(RewarderError, ValueError):
    """A call was rejected before any state was mutated."""


class TooEarlyError(ValidationError):
    """A new distribution cycle was requested before the minimal cycle period elapsed."""


class InfoTooOldError(ValidationError):
    """Collected vault info is older than the allowed staleness window."""


class InsufficientFundsError(ValidationError):
    """The reward sink can't cover the payouts of the requested slice."""


class ConfigurationError(RewarderError, ValueError):
    """An invalid parameter was passed to a config setter."""
