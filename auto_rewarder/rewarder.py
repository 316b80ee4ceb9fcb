"""AutoRewarder facade: collect, distribute, governance setters and read accessors."""

import time
from collections.abc import Callable, Sequence

from auto_rewarder.collector import Collector, StrategyRewardsSource
from auto_rewarder.constants import MAX_INFO_AGE, MIN_CYCLE_PERIOD
from auto_rewarder.context import RewarderContext
from auto_rewarder.engine import DistributionEngine
from auto_rewarder.errors import ValidationError
from auto_rewarder.formatters import vault_key
from auto_rewarder.ledger import RewardSink
from auto_rewarder.models import CollectionResult, DistributionStep, VaultInfo


class AutoRewarder:
    """Distributes a daily reward budget across vaults proportionally to their strategy rewards in USD."""

    def __init__(
        self,
        ctx: RewarderContext | None = None,
        *,
        source: StrategyRewardsSource | None = None,
        sink: RewardSink | None = None,
        clock: Callable[[], int] | None = None,
        min_cycle_period: int = MIN_CYCLE_PERIOD,
        max_info_age: int = MAX_INFO_AGE,
        verbose: bool = True,
    ) -> None:
        self.ctx = ctx if ctx is not None else RewarderContext()
        self._clock = clock or (lambda: int(time.time()))
        self._source = source
        self._verbose = verbose
        self.engine = DistributionEngine(
            self.ctx,
            sink=sink,
            clock=self._clock,
            min_cycle_period=min_cycle_period,
            max_info_age=max_info_age,
        )

    # Operations

    def collect(self, vaults: Sequence[str]) -> list[CollectionResult]:
        if self._source is None:
            raise ValidationError("No strategy rewards source configured")
        collector = Collector(self.ctx, self._source, clock=self._clock, verbose=self._verbose)
        return collector.collect(vaults)

    def distribute(self, count: int) -> DistributionStep:
        return self.engine.distribute(count)

    def set_rewards_per_day(self, amount: int) -> None:
        self.ctx.config.set_rewards_per_day(amount)

    def set_network_ratio(self, ratio: int) -> None:
        self.ctx.config.set_network_ratio(ratio)

    # Read accessors

    def vaults(self, i: int) -> str:
        return self.ctx.registry.vault(i)

    def vaults_size(self) -> int:
        return self.ctx.registry.size()

    def last_distributed_id(self) -> int:
        return self.ctx.state.last_distributed_id

    def distributed(self) -> int:
        return self.ctx.state.distributed_total

    def last_distributed_amount(self, vault: str) -> int:
        return self.ctx.last_distributed_amounts.get(vault_key(vault), 0)

    def last_info(self, vault: str) -> VaultInfo:
        return self.ctx.infos.last_info(vault)

    def rewards_per_day(self) -> int:
        """Scaled daily budget actually paid out (rewardsPerDay * networkRatio)."""
        return self.ctx.config.scaled_rewards_per_day()

    def base_rewards_per_day(self) -> int:
        return self.ctx.config.rewards_per_day()

    def network_ratio(self) -> int:
        return self.ctx.config.network_ratio()

    def total_strategy_rewards_usd(self) -> int:
        return self.ctx.state.total_strategy_rewards_usd

    def cycle_started_at(self) -> int | None:
        return self.ctx.state.cycle_started_at
