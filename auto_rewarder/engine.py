"""Paginated reward distribution and the cycle state machine."""

import time
from collections.abc import Callable

from auto_rewarder.constants import MAX_INFO_AGE, MIN_CYCLE_PERIOD
from auto_rewarder.context import RewarderContext
from auto_rewarder.errors import InfoTooOldError, InsufficientFundsError, TooEarlyError, ValidationError
from auto_rewarder.formatters import format_age, vault_key
from auto_rewarder.ledger import RewardSink
from auto_rewarder.models import DistributionStep, Payout, VaultInfo


def proportional_share(budget: int, part: int, total: int) -> int:
    """budget * part / total, truncated toward zero. Zero when total is zero."""
    if total <= 0 or part <= 0 or budget <= 0:
        return 0
    return budget * part // total


class DistributionEngine:
    """
    Pays the daily reward budget to registered vaults, `count` vaults per call.

    The first call of a cycle arms it: the set of vaults, their fresh infos and the total USD
    metric are frozen until the cursor reaches the end, then the cursor and the running total
    reset and the next call arms a new cycle. Validation failures raise before touching any
    state. If the sink fails mid-slice, the vaults it already paid are committed and the cursor
    stops after the last of them, so a retry never pays a vault twice in one cycle.
    """

    def __init__(
        self,
        ctx: RewarderContext,
        *,
        sink: RewardSink | None = None,
        clock: Callable[[], int] | None = None,
        min_cycle_period: int = MIN_CYCLE_PERIOD,
        max_info_age: int = MAX_INFO_AGE,
    ) -> None:
        self._ctx = ctx
        self._sink: RewardSink = sink if sink is not None else ctx.ledger
        self._clock = clock or (lambda: int(time.time()))
        self.min_cycle_period = min_cycle_period
        self.max_info_age = max_info_age

    def distribute(self, count: int) -> DistributionStep:
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise ValidationError(f"count must be a positive integer, got {count!r}")

        now = self._clock()
        st = self._ctx.state
        arming = not st.armed

        if arming:
            self._check_not_too_early(now)
            cycle_size = self._ctx.registry.size()
            if cycle_size == 0:
                raise ValidationError("No vaults registered, nothing to distribute")
            cycle_infos = self._ctx.infos.fresh(self._ctx.registry.all(), not_before=now - self.max_info_age)
            if not cycle_infos:
                raise InfoTooOldError(
                    f"Info too old: no vault info collected within the last {format_age(self.max_info_age)}"
                )
            total = sum(info.strategy_rewards_usd for info in cycle_infos.values())
            cycle_started_at = now
            start = 0
        else:
            cycle_size = st.cycle_size
            cycle_infos = st.cycle_infos
            total = st.total_strategy_rewards_usd
            cycle_started_at = st.cycle_started_at
            start = st.last_distributed_id

        stop = min(cycle_size, start + count)
        vaults = self._ctx.registry.slice(start, stop)
        self._check_infos_fresh(vaults, cycle_infos, now)

        budget = self._ctx.config.scaled_rewards_per_day()
        payouts = tuple(Payout(vault=v, amount=self._amount(v, cycle_infos, budget, total)) for v in vaults)
        slice_total = sum(p.amount for p in payouts)
        if slice_total > self._sink.balance():
            raise InsufficientFundsError(
                f"Insufficient reward balance: slice needs {slice_total}, balance is {self._sink.balance()}"
            )

        done = 0
        try:
            for p in payouts:
                if p.amount > 0:
                    self._sink.transfer(p.vault, p.amount)
                done += 1
        finally:
            # Vaults the sink already paid stay paid even if a later transfer raised.
            if done:
                if arming:
                    st.cycle_started_at = cycle_started_at
                    st.cycle_size = cycle_size
                    st.cycle_infos = cycle_infos
                    st.total_strategy_rewards_usd = total
                    st.distributed_total = 0
                    st.paid_budgets = {}
                self._commit(payouts[:done], budget)

        completed = stop >= cycle_size
        if completed:
            self._complete()

        return DistributionStep(
            from_id=start,
            to_id=stop,
            cycle_started_at=cycle_started_at,
            armed=arming,
            completed=completed,
            payouts=payouts,
        )

    def remaining(self) -> int:
        """Vaults left to pay in the current cycle (the full registry when idle)."""
        st = self._ctx.state
        if not st.armed:
            return self._ctx.registry.size()
        return st.cycle_size - st.last_distributed_id

    def next_cycle_at(self) -> int | None:
        """Earliest timestamp a new cycle may be armed, None if there was no previous cycle."""
        last = self._ctx.state.last_cycle_started_at
        if last is None:
            return None
        return last + self.min_cycle_period

    def _check_not_too_early(self, now: int) -> None:
        earliest = self.next_cycle_at()
        if earliest is not None and now < earliest:
            raise TooEarlyError(f"Too early: next cycle can start in {format_age(earliest - now)}")

    def _check_infos_fresh(self, vaults: list[str], cycle_infos: dict[str, VaultInfo], now: int) -> None:
        # Freshness is judged on the latest collection, so re-collecting unblocks a stale cycle.
        # Shares still come from the armed snapshot.
        for vault in vaults:
            if vault_key(vault) not in cycle_infos:
                continue
            info = self._ctx.infos.last_info(vault)
            if now - info.collected_at > self.max_info_age:
                raise InfoTooOldError(
                    f"Info too old: {vault} collected {format_age(now - info.collected_at)} ago, "
                    f"max age is {format_age(self.max_info_age)}"
                )

    @staticmethod
    def _amount(vault: str, cycle_infos: dict[str, VaultInfo], budget: int, total: int) -> int:
        info = cycle_infos.get(vault_key(vault))
        if info is None:
            return 0
        return proportional_share(budget, info.strategy_rewards_usd, total)

    def _commit(self, payouts: tuple[Payout, ...], budget: int) -> None:
        st = self._ctx.state
        for p in payouts:
            key = vault_key(p.vault)
            self._ctx.last_distributed_amounts[key] = p.amount
            st.paid_budgets[key] = budget
        st.last_distributed_id += len(payouts)
        st.distributed_total += sum(p.amount for p in payouts)

    def _complete(self) -> None:
        st = self._ctx.state
        st.last_cycle_started_at = st.cycle_started_at
        st.cycle_started_at = None
        st.last_distributed_id = 0
        st.distributed_total = 0
