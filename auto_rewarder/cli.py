"""CLI and main logic."""

import argparse
import os
import sys
import time
from pathlib import Path

from tqdm import tqdm

from auto_rewarder.collector import StaticRewardsSource, StrategyRewardsSource
from auto_rewarder.console import print_collection_results, print_distribution_step, print_status
from auto_rewarder.errors import ConfigurationError, RewarderError
from auto_rewarder.formatters import format_ratio, format_units, parse_units
from auto_rewarder.models import CollectionResult
from auto_rewarder.rewarder import AutoRewarder
from auto_rewarder.store import clear_state, default_state_path, load_context, save_context
from auto_rewarder.validation import validate_cycle_payouts

# Internal defaults (not exposed as CLI flags)
DEFAULT_TIMEOUT = 30


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command-line arguments."""
    p = argparse.ArgumentParser(
        description="Distribute daily rewards across vaults proportionally to their strategy rewards in USD."
    )
    p.add_argument(
        "--state-file",
        default=None,
        help="Persisted rewarder state file. Default: $AUTO_REWARDER_STATE or $XDG_STATE_HOME/auto_rewarder/state.json.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Show config, cycle progress and vault infos.")

    c = sub.add_parser("collect", help="Collect strategy rewards for vaults (all registered vaults if none given).")
    c.add_argument("vaults", nargs="*", help="Vault addresses.")
    c.add_argument("--step", type=int, default=50, help="Vaults per collect call. Default: 50.")
    c.add_argument("--rewards-file", default=None, help="JSON object {vault: usd} to use instead of on-chain data.")
    c.add_argument(
        "--rpc-url",
        default=None,
        help="RPC URL for on-chain collection. Falls back to ETH_RPC_URL environment variable.",
    )
    c.add_argument("--calculator", default=None, help="RewardCalculator address for on-chain collection.")

    d = sub.add_parser("distribute", help="Pay the next slice of vaults.")
    d.add_argument("--count", type=int, default=50, help="Vaults per distribute call. Default: 50.")
    d.add_argument("--all", action="store_true", help="Keep calling distribute until the cycle completes.")

    r = sub.add_parser("set-rewards-per-day", help="Set the nominal daily reward budget (token units).")
    r.add_argument("amount")

    n = sub.add_parser("set-network-ratio", help="Set the network ratio, a fraction in [0, 1].")
    n.add_argument("ratio")

    f = sub.add_parser("fund", help="Record reward tokens made available to the rewarder (token units).")
    f.add_argument("amount")

    sub.add_parser("clear-state", help="Delete persisted state.")
    return p.parse_args(argv)


def _state_path(args: argparse.Namespace) -> Path:
    explicit = args.state_file or os.getenv("AUTO_REWARDER_STATE")
    return Path(explicit) if explicit else default_state_path()


def _build_source(args: argparse.Namespace) -> StrategyRewardsSource:
    if args.rewards_file:
        return StaticRewardsSource.from_json_file(args.rewards_file)

    rpc_url = args.rpc_url or os.getenv("ETH_RPC_URL")
    if not rpc_url or not args.calculator:
        raise ConfigurationError("Provide --rewards-file, or --calculator with --rpc-url (or ETH_RPC_URL)")

    try:
        from web3 import Web3
    except ImportError as ex:  # pragma: no cover
        print("Missing dependency. Run: pip install web3", file=sys.stderr)
        raise SystemExit(2) from ex

    from auto_rewarder.onchain import RewardCalculatorSource

    w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": DEFAULT_TIMEOUT}))
    if not w3.is_connected():
        raise ConfigurationError(f"failed to connect to RPC at {rpc_url}")
    return RewardCalculatorSource(w3, args.calculator)


def _collect(rewarder: AutoRewarder, vaults: list[str], step: int) -> list[CollectionResult]:
    if step <= 0:
        raise ConfigurationError("--step must be > 0")
    results: list[CollectionResult] = []
    batches = [vaults[i : i + step] for i in range(0, len(vaults), step)]
    with tqdm(batches, desc="📥 Collecting strategy rewards", unit="batch", file=sys.stderr) as pbar:
        for batch in pbar:
            try:
                results.extend(rewarder.collect(batch))
            except RewarderError as ex:
                tqdm.write(f"⚠️  collect batch failed: {ex}", file=sys.stderr)
            pbar.set_postfix(collected=sum(1 for r in results if r.ok))
    return results


def _distribute(rewarder: AutoRewarder, count: int, run_all: bool, state_path: Path) -> None:
    while True:
        step = rewarder.distribute(count)
        save_context(rewarder.ctx, state_path)
        print_distribution_step(step)
        if step.completed:
            _report_cycle(rewarder)
            return
        if not run_all:
            print(f"ℹ️  {rewarder.engine.remaining()} vaults left in this cycle", file=sys.stderr)
            return


def _report_cycle(rewarder: AutoRewarder) -> None:
    st = rewarder.ctx.state
    vaults = rewarder.ctx.registry.slice(0, st.cycle_size)
    issues = validate_cycle_payouts(
        vaults,
        rewarder.ctx.last_distributed_amounts,
        st.cycle_infos,
        budget=rewarder.rewards_per_day(),
        total_usd=st.total_strategy_rewards_usd,
        budgets=st.paid_budgets,
        warn_only=True,
    )
    paid = sum(rewarder.last_distributed_amount(v) for v in vaults)
    print(f"🧾 Cycle paid {format_units(paid)} of {format_units(rewarder.rewards_per_day())} to {len(vaults)} vaults")
    if issues:
        print("⚠️  Payout validation warnings:", file=sys.stderr)
        for issue in issues:
            print(f"   {issue}", file=sys.stderr)


def main(argv: list[str]) -> int:
    """Main entry point."""
    args = parse_args(argv)
    state_path = _state_path(args)

    if args.command == "clear-state":
        clear_state(state_path)
        return 0

    try:
        ctx = load_context(state_path)
    except (OSError, ValueError) as ex:
        print(f"Error: failed to load state from {state_path}: {ex}", file=sys.stderr)
        return 2

    now = int(time.time())

    try:
        if args.command == "status":
            print_status(AutoRewarder(ctx), now=now)
            return 0

        if args.command == "set-rewards-per-day":
            rewarder = AutoRewarder(ctx)
            rewarder.set_rewards_per_day(parse_units(args.amount))
            save_context(ctx, state_path)
            print(f"✅ rewardsPerDay = {format_units(rewarder.base_rewards_per_day())}", file=sys.stderr)
            return 0

        if args.command == "set-network-ratio":
            rewarder = AutoRewarder(ctx)
            rewarder.set_network_ratio(parse_units(args.ratio))
            save_context(ctx, state_path)
            print(f"✅ networkRatio = {format_ratio(rewarder.network_ratio())}", file=sys.stderr)
            return 0

        if args.command == "fund":
            ctx.ledger.fund(parse_units(args.amount))
            save_context(ctx, state_path)
            print(f"✅ Reward balance = {format_units(ctx.ledger.balance())}", file=sys.stderr)
            return 0

        if args.command == "collect":
            rewarder = AutoRewarder(ctx, source=_build_source(args))
            vaults = list(args.vaults) or ctx.registry.all()
            if not vaults:
                print("Error: no vaults given and none registered yet.", file=sys.stderr)
                return 2
            results = _collect(rewarder, vaults, args.step)
            save_context(ctx, state_path)
            print_collection_results(results)
            return 0 if any(r.ok for r in results) else 1

        if args.command == "distribute":
            _distribute(AutoRewarder(ctx), args.count, args.all, state_path)
            return 0
    except ConfigurationError as ex:
        print(f"Error: {ex}", file=sys.stderr)
        return 2
    except RewarderError as ex:
        print(f"Error: {ex}", file=sys.stderr)
        return 1
    except ValueError as ex:
        print(f"Error: {ex}", file=sys.stderr)
        return 2

    print(f"Error: unknown command {args.command}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
