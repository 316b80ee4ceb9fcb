"""Governance parameters for the distribution engine."""

from auto_rewarder.constants import MAX_NETWORK_RATIO, PRECISION
from auto_rewarder.errors import ConfigurationError
from auto_rewarder.models import RewarderConfig


class ConfigStore:
    """
    Mutable rewardsPerDay / networkRatio.

    Values are read by the engine on every distribute() call, so a change in the middle of a
    cycle applies to the slices not yet paid. Already paid slices are not adjusted.
    """

    def __init__(self, config: RewarderConfig | None = None) -> None:
        self._config = config if config is not None else RewarderConfig()

    @property
    def config(self) -> RewarderConfig:
        return self._config

    def set_rewards_per_day(self, amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ConfigurationError(f"rewardsPerDay must be an integer amount, got {amount!r}")
        if amount < 0:
            raise ConfigurationError(f"rewardsPerDay must be >= 0, got {amount}")
        self._config.rewards_per_day = amount

    def set_network_ratio(self, ratio: int) -> None:
        if isinstance(ratio, bool) or not isinstance(ratio, int):
            raise ConfigurationError(f"networkRatio must be a 1e18-scaled integer, got {ratio!r}")
        if ratio < 0 or ratio > MAX_NETWORK_RATIO:
            raise ConfigurationError(f"networkRatio must be within [0, {MAX_NETWORK_RATIO}], got {ratio}")
        self._config.network_ratio = ratio

    def rewards_per_day(self) -> int:
        return self._config.rewards_per_day

    def network_ratio(self) -> int:
        return self._config.network_ratio

    def scaled_rewards_per_day(self) -> int:
        """Daily budget actually paid out: rewardsPerDay * networkRatio, truncated."""
        return self._config.rewards_per_day * self._config.network_ratio // PRECISION
