import pytest

from auto_rewarder.collector import StaticRewardsSource
from auto_rewarder.formatters import parse_units
from auto_rewarder.rewarder import AutoRewarder

T0 = 1_700_000_000


class FakeClock:
    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class MutableSource:
    """StaticRewardsSource whose values can be changed between collections."""

    def __init__(self, rewards: dict[str, int]) -> None:
        self.rewards = dict(rewards)

    def strategy_rewards_usd(self, vault: str) -> int:
        return StaticRewardsSource(self.rewards).strategy_rewards_usd(vault)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_rewarder(clock):
    def _make(rewards: dict[str, int], *, per_day: str = "1000", ratio: str = "0.231", fund: str = "1000000"):
        source = MutableSource(rewards)
        rewarder = AutoRewarder(source=source, clock=clock, verbose=False)
        rewarder.set_rewards_per_day(parse_units(per_day))
        rewarder.set_network_ratio(parse_units(ratio))
        rewarder.ctx.ledger.fund(parse_units(fund))
        return rewarder, source

    return _make
