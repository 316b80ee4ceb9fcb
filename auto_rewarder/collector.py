"""Paginated collection of per-vault strategy rewards."""

import json
import sys
import time
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Protocol

from tqdm import tqdm

from auto_rewarder.context import RewarderContext
from auto_rewarder.errors import ValidationError
from auto_rewarder.formatters import as_int, parse_units, vault_key
from auto_rewarder.models import CollectionResult, VaultInfo


class StrategyRewardsSource(Protocol):
    """External source of the current USD value of rewards earned by a vault's strategy."""

    def strategy_rewards_usd(self, vault: str) -> int: ...


class UnsupportedVaultError(LookupError):
    """The source has no metric for the vault."""


class StaticRewardsSource:
    """Metrics from a fixed {vault: usd} mapping (18-decimal integers)."""

    def __init__(self, rewards: Mapping[str, int]) -> None:
        self._rewards = {vault_key(k): as_int(v) for k, v in rewards.items()}

    @classmethod
    def from_json_file(cls, path: str | Path) -> "StaticRewardsSource":
        """
        Load a {vault: usd} JSON object.

        Values are human decimal USD amounts ("12.5") unless prefixed with 0x, which are taken
        as raw 18-decimal integers.
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object of vault -> usd")
        rewards: dict[str, int] = {}
        for vault, value in data.items():
            if isinstance(value, str) and value.strip().startswith("0x"):
                rewards[vault] = as_int(value)
            else:
                rewards[vault] = parse_units(value)
        return cls(rewards)

    def strategy_rewards_usd(self, vault: str) -> int:
        try:
            return self._rewards[vault_key(vault)]
        except KeyError as ex:
            raise UnsupportedVaultError(f"no strategy rewards known for {vault}") from ex


class Collector:
    """
    Refreshes InfoStore entries for a batch of vaults.

    Each vault is collected in isolation: a failing source call leaves that vault's previous
    info in place and is reported in the result list, the rest of the batch proceeds.
    Successfully collected vaults unknown to the registry are appended to it.
    """

    def __init__(
        self,
        ctx: RewarderContext,
        source: StrategyRewardsSource,
        *,
        clock: Callable[[], int] | None = None,
        verbose: bool = True,
    ) -> None:
        self._ctx = ctx
        self._source = source
        self._clock = clock or (lambda: int(time.time()))
        self._verbose = verbose

    def collect(self, vaults: Sequence[str]) -> list[CollectionResult]:
        if not vaults:
            raise ValidationError("collect requires a non-empty list of vaults")
        now = self._clock()
        results: list[CollectionResult] = []
        for vault in vaults:
            results.append(self._collect_one(vault, now))
        return results

    def _collect_one(self, vault: str, now: int) -> CollectionResult:
        try:
            vault_key(vault)
            usd = as_int(self._source.strategy_rewards_usd(vault))
            if usd < 0:
                raise ValueError(f"negative strategy rewards: {usd}")
        except Exception as ex:  # pylint: disable=broad-exception-caught
            if self._verbose:
                tqdm.write(f"⚠️  collect failed for {vault}: {ex}", file=sys.stderr)
            return CollectionResult(vault=vault, ok=False, error_kind=type(ex).__name__, error=str(ex))

        info = VaultInfo(vault=vault, strategy_rewards_usd=usd, collected_at=now)
        self._ctx.infos.put(info)
        self._ctx.registry.register(vault)
        return CollectionResult(vault=vault, ok=True, info=info)
