"""Console output formatting."""

from collections.abc import Sequence

from auto_rewarder.formatters import format_age, format_ratio, format_timestamp, format_units
from auto_rewarder.models import CollectionResult, DistributionStep
from auto_rewarder.rewarder import AutoRewarder


def print_status(rewarder: AutoRewarder, *, now: int) -> None:
    """Print config, cycle progress and per-vault info."""
    st = rewarder.ctx.state
    print("=" * 70)
    print("🎁 AUTO REWARDER STATUS")
    print(f"   🕐 {format_timestamp(now)}")
    print("=" * 70)

    print("\n⚙️  Config")
    print(f"   Rewards per day (nominal): {format_units(rewarder.base_rewards_per_day())}")
    print(f"   Network ratio:             {format_ratio(rewarder.network_ratio())}")
    print(f"   Rewards per day (paid):    {format_units(rewarder.rewards_per_day())}")
    print(f"   Reward balance:            {format_units(rewarder.ctx.ledger.balance())}")

    print("\n🔁 Cycle")
    if st.armed:
        print(f"   State: 🟢 Paying  •  started {format_timestamp(st.cycle_started_at)}")
        print(f"   Progress: {st.last_distributed_id}/{st.cycle_size} vaults")
        print(f"   Distributed this cycle: {format_units(st.distributed_total)}")
        print(f"   Total strategy rewards (snapshot): {format_units(st.total_strategy_rewards_usd)} USD")
    else:
        print("   State: 💤 Idle")
        next_at = rewarder.engine.next_cycle_at()
        if next_at is None:
            print("   Next cycle: any time")
        elif next_at > now:
            print(f"   Next cycle: in {format_age(next_at - now)} ({format_timestamp(next_at)})")
        else:
            print(f"   Next cycle: ready (since {format_timestamp(next_at)})")

    size = rewarder.vaults_size()
    print(f"\n🏦 Vaults ({size})")
    if not size:
        print("   (none registered, run collect first)")
    for i in range(size):
        vault = rewarder.vaults(i)
        info = rewarder.last_info(vault)
        if info.collected_at:
            age = now - info.collected_at
            fresh = "🟢" if age <= rewarder.engine.max_info_age else "🟠"
            collected = f"{fresh} {format_age(age)} ago"
        else:
            collected = "⚪ never"
        marker = "👉" if st.armed and i == st.last_distributed_id else "  "
        print(f"{marker} #{i} {vault}")
        print(
            f"      USD: {format_units(info.strategy_rewards_usd)}  •  collected: {collected}  •  "
            f"last paid: {format_units(rewarder.last_distributed_amount(vault))}"
        )
    print("")


def print_collection_results(results: Sequence[CollectionResult]) -> None:
    ok = [r for r in results if r.ok]
    failed = [r for r in results if not r.ok]
    print(f"📥 Collected {len(ok)}/{len(results)} vaults")
    for r in ok:
        usd = r.info.strategy_rewards_usd if r.info is not None else 0
        print(f"   ✅ {r.vault}: {format_units(usd)} USD")
    for r in failed:
        print(f"   ❌ {r.vault}: {r.error_kind}: {r.error}")


def print_distribution_step(step: DistributionStep) -> None:
    if step.armed:
        print(f"🚀 New cycle armed at {format_timestamp(step.cycle_started_at)}")
    print(f"💸 Paid vaults [{step.from_id}, {step.to_id}): {format_units(step.amount)} total")
    for p in step.payouts:
        print(f"   • {p.vault}: {format_units(p.amount)}")
    if step.completed:
        print("🏁 Cycle complete")
