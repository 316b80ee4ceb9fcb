"""Ordered, append-only registry of vaults processed each cycle."""

from collections.abc import Iterable

from auto_rewarder.formatters import vault_key


class VaultRegistry:
    """
    Ordered vault list with stable indices.

    Vaults are only ever appended, so a slice [i, i+k) denotes the same vaults for the whole
    lifetime of a distribution cycle even if new vaults are registered meanwhile.
    """

    def __init__(self, vaults: Iterable[str] = ()) -> None:
        self._vaults: list[str] = []
        self._index: dict[str, int] = {}
        for vault in vaults:
            self.register(vault)

    def register(self, vault: str) -> int:
        """Append a vault if unknown. Returns its index."""
        key = vault_key(vault)
        idx = self._index.get(key)
        if idx is not None:
            return idx
        self._vaults.append(str(vault).strip())
        self._index[key] = len(self._vaults) - 1
        return self._index[key]

    def vault(self, i: int) -> str:
        if i < 0 or i >= len(self._vaults):
            raise IndexError(f"vault index {i} out of range (size={len(self._vaults)})")
        return self._vaults[i]

    def index_of(self, vault: str) -> int | None:
        return self._index.get(vault_key(vault))

    def __contains__(self, vault: object) -> bool:
        return isinstance(vault, str) and vault_key(vault) in self._index

    def size(self) -> int:
        return len(self._vaults)

    def __len__(self) -> int:
        return len(self._vaults)

    def slice(self, start: int, stop: int) -> list[str]:
        """Vaults in [start, stop), clamped to the registry bounds."""
        return self._vaults[max(0, start) : max(0, min(stop, len(self._vaults)))]

    def all(self) -> list[str]:
        return list(self._vaults)
