"""Data models for the auto rewarder."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class VaultInfo:
    """Latest collected metric snapshot for a vault."""

    vault: str
    # USD value of rewards earned by the vault's strategy, 18-decimal fixed point.
    strategy_rewards_usd: int
    # Unix timestamp (seconds) of the collection that produced this snapshot.
    collected_at: int


@dataclass(frozen=True)
class CollectionResult:
    """Outcome of collecting a single vault within a batch."""

    vault: str
    ok: bool
    error_kind: str | None = None
    error: str | None = None
    info: VaultInfo | None = None


@dataclass(frozen=True)
class Payout:
    """A single vault payout made by the distribution engine."""

    vault: str
    amount: int


@dataclass(frozen=True)
class DistributionStep:
    """Summary of one distribute() call."""

    from_id: int
    to_id: int
    cycle_started_at: int
    armed: bool
    completed: bool
    payouts: tuple[Payout, ...]

    @property
    def amount(self) -> int:
        return sum(p.amount for p in self.payouts)


@dataclass
class RewarderConfig:
    """Governance parameters consumed by the distribution engine."""

    # Nominal daily reward budget, 18-decimal fixed point.
    rewards_per_day: int = 0
    # Fraction of the nominal budget actually paid, scaled by 1e18.
    network_ratio: int = 0


@dataclass
class DistributionState:
    """Cursor and per-cycle snapshot of the distribution engine.

    `cycle_started_at` is None while the engine is idle. `last_cycle_started_at` survives the
    reset at cycle completion and drives the too-early gate.
    """

    last_distributed_id: int = 0
    distributed_total: int = 0
    cycle_started_at: int | None = None
    total_strategy_rewards_usd: int = 0
    # Number of vaults frozen at arm time; vaults registered later join the next cycle.
    cycle_size: int = 0
    # Per-vault infos frozen at arm time, keyed by vault key. Stale infos are absent.
    # Size and infos are kept after completion until the next cycle arms.
    cycle_infos: dict[str, VaultInfo] = field(default_factory=dict)
    # Budget in effect when each vault of the cycle was paid, keyed by vault key.
    paid_budgets: dict[str, int] = field(default_factory=dict)
    last_cycle_started_at: int | None = None

    @property
    def armed(self) -> bool:
        return self.cycle_started_at is not None
