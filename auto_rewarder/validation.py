"""Post-cycle checks of distributed amounts."""

from collections.abc import Mapping, Sequence

from auto_rewarder.formatters import format_units, vault_key
from auto_rewarder.models import VaultInfo


def validate_cycle_payouts(
    vaults: Sequence[str],
    amounts: Mapping[str, int],
    cycle_infos: Mapping[str, VaultInfo],
    *,
    budget: int,
    total_usd: int,
    budgets: Mapping[str, int] | None = None,
    warn_only: bool = True,
) -> list[str]:
    """
    Validate a completed cycle: conservation of the budget and per-vault proportionality.

    `amounts` and `cycle_infos` are keyed by vault key. The sum of amounts must lie within
    [budget - len(vaults), budget] (truncation dust), and each amount must equal the exact share
    rounded down. With a zero USD total every amount must be zero.

    `budgets` gives the budget in effect when each vault was paid, keyed by vault key, for cycles
    where the config changed midway. Vaults missing from it use `budget`. When the paid vaults saw
    more than one budget, only the per-vault shares are checked.

    Returns list of issues. If warn_only=False, raises ValueError on the first one.
    """
    issues: list[str] = []

    def _issue(msg: str) -> None:
        issues.append(msg)
        if not warn_only:
            raise ValueError(msg)

    paid = 0
    for vault in vaults:
        key = vault_key(vault)
        amount = int(amounts.get(key, 0))
        paid += amount
        if amount < 0:
            _issue(f"Vault {vault}: negative payout {amount}")
            continue

        info = cycle_infos.get(key)
        usd = info.strategy_rewards_usd if info is not None else 0
        if total_usd <= 0 or usd == 0:
            if amount != 0:
                _issue(f"Vault {vault}: paid {format_units(amount)} without an eligible USD share")
            continue

        vault_budget = budgets.get(key, budget) if budgets else budget
        # amount == floor(budget * usd / total)  <=>  0 <= budget*usd - amount*total < total
        remainder = vault_budget * usd - amount * total_usd
        if remainder < 0 or remainder >= total_usd:
            _issue(
                f"Vault {vault}: payout {format_units(amount)} is not proportional to its share "
                f"({format_units(usd)} of {format_units(total_usd)} USD)"
            )

    used = set(budgets.values()) if budgets else {budget}
    if total_usd <= 0 or not vaults:
        if paid != 0:
            _issue(f"Zero USD total but {format_units(paid)} was distributed")
    elif len(used) == 1:
        budget = used.pop()
        dust = budget - paid
        if dust < 0:
            _issue(f"Overpaid: distributed {format_units(paid)} > budget {format_units(budget)}")
        elif dust > len(vaults):
            _issue(f"Underpaid: distributed {paid} < budget {budget} beyond rounding tolerance of {len(vaults)}")

    return issues
