"""Per-vault store of the latest collected metric snapshot."""

from collections.abc import Iterable

from auto_rewarder.formatters import vault_key
from auto_rewarder.models import VaultInfo


class InfoStore:
    """Latest VaultInfo per vault. Entries are overwritten on each collection and never deleted."""

    def __init__(self, infos: Iterable[VaultInfo] = ()) -> None:
        self._infos: dict[str, VaultInfo] = {}
        for info in infos:
            self.put(info)

    def put(self, info: VaultInfo) -> None:
        if info.strategy_rewards_usd < 0:
            raise ValueError(f"negative strategy rewards for {info.vault}: {info.strategy_rewards_usd}")
        self._infos[vault_key(info.vault)] = info

    def get(self, vault: str) -> VaultInfo | None:
        return self._infos.get(vault_key(vault))

    def last_info(self, vault: str) -> VaultInfo:
        """Latest info for a vault, or a zero snapshot if it was never collected."""
        info = self.get(vault)
        if info is None:
            return VaultInfo(vault=vault, strategy_rewards_usd=0, collected_at=0)
        return info

    def fresh(self, vaults: Iterable[str], *, not_before: int) -> dict[str, VaultInfo]:
        """Infos of the given vaults collected at or after `not_before`, keyed by vault key."""
        out: dict[str, VaultInfo] = {}
        for vault in vaults:
            info = self.get(vault)
            if info is not None and info.collected_at >= not_before:
                out[vault_key(vault)] = info
        return out

    def values(self) -> list[VaultInfo]:
        return list(self._infos.values())

    def __len__(self) -> int:
        return len(self._infos)
