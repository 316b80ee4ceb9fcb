"""Shared rewarder state passed explicitly to the collector and the engine."""

from dataclasses import dataclass, field

from auto_rewarder.config import ConfigStore
from auto_rewarder.info_store import InfoStore
from auto_rewarder.ledger import RewardLedger
from auto_rewarder.models import DistributionState
from auto_rewarder.registry import VaultRegistry


@dataclass
class RewarderContext:
    """Everything a collect/distribute step reads or writes."""

    registry: VaultRegistry = field(default_factory=VaultRegistry)
    infos: InfoStore = field(default_factory=InfoStore)
    config: ConfigStore = field(default_factory=ConfigStore)
    state: DistributionState = field(default_factory=DistributionState)
    # Overwritten every cycle, keyed by vault key.
    last_distributed_amounts: dict[str, int] = field(default_factory=dict)
    ledger: RewardLedger = field(default_factory=RewardLedger)
