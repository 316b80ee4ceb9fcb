"""Reward funding and payout collaborators."""

from typing import Protocol

from auto_rewarder.formatters import vault_key


class RewardSink(Protocol):
    """Holds the reward-token balance and moves rewards to vaults."""

    def balance(self) -> int: ...

    def transfer(self, vault: str, amount: int) -> None: ...


class RewardLedger:
    """In-memory reward-token balance with per-vault credited totals."""

    def __init__(self, balance: int = 0, credited: dict[str, int] | None = None) -> None:
        if balance < 0:
            raise ValueError(f"balance must be >= 0, got {balance}")
        self._balance = balance
        self._credited: dict[str, int] = dict(credited or {})

    def fund(self, amount: int) -> None:
        """Add reward tokens (minting is external; this only records the inflow)."""
        if amount < 0:
            raise ValueError(f"fund amount must be >= 0, got {amount}")
        self._balance += amount

    def balance(self) -> int:
        return self._balance

    def transfer(self, vault: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"transfer amount must be >= 0, got {amount}")
        if amount > self._balance:
            raise ValueError(f"transfer of {amount} exceeds balance {self._balance}")
        self._balance -= amount
        key = vault_key(vault)
        self._credited[key] = self._credited.get(key, 0) + amount

    def credited(self, vault: str) -> int:
        """Total amount ever transferred to a vault."""
        return self._credited.get(vault_key(vault), 0)

    def credited_all(self) -> dict[str, int]:
        return dict(self._credited)
