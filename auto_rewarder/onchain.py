"""On-chain strategy rewards source backed by RewardCalculator/SmartVault."""

from typing import TYPE_CHECKING, Any

from auto_rewarder.constants import REWARD_CALCULATOR_MIN_ABI, REWARD_PERIOD, SMART_VAULT_MIN_ABI
from auto_rewarder.formatters import as_int

if TYPE_CHECKING:
    from web3 import Web3  # pragma: no cover


class RewardCalculatorSource:
    """
    Resolves a vault's strategy and asks the RewardCalculator for its rewards in USD.

    Reverts (e.g. an unsupported strategy) propagate to the caller, which isolates them
    per vault.
    """

    def __init__(
        self,
        w3: "Web3",
        calculator_address: str,
        *,
        period: int = REWARD_PERIOD,
        block_identifier: int | str = "latest",
    ) -> None:
        self._w3 = w3
        self._calculator = w3.eth.contract(
            address=w3.to_checksum_address(calculator_address),
            abi=REWARD_CALCULATOR_MIN_ABI,
        )
        self._period = period
        self._block_identifier = block_identifier
        self._strategies: dict[str, str] = {}

    def strategy_of(self, vault: str) -> str:
        """Strategy address of a SmartVault, memoized per run."""
        key = vault.lower()
        cached = self._strategies.get(key)
        if cached is not None:
            return cached
        contract: Any = self._w3.eth.contract(address=self._w3.to_checksum_address(vault), abi=SMART_VAULT_MIN_ABI)
        strategy = str(contract.functions.strategy().call(block_identifier=self._block_identifier))
        self._strategies[key] = strategy
        return strategy

    def strategy_rewards_usd(self, vault: str) -> int:
        strategy = self.strategy_of(vault)
        value = self._calculator.functions.strategyRewardsUsd(
            self._w3.to_checksum_address(strategy), self._period
        ).call(block_identifier=self._block_identifier)
        return as_int(value)
