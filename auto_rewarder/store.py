"""JSON persistence of the rewarder state between CLI invocations."""

import json
import os
import shutil
import sys
from pathlib import Path
from typing import Any

from auto_rewarder.config import ConfigStore
from auto_rewarder.constants import STATE_DIR_NAME, STATE_FILE_NAME, STATE_VERSION
from auto_rewarder.context import RewarderContext
from auto_rewarder.formatters import as_int, vault_key
from auto_rewarder.info_store import InfoStore
from auto_rewarder.ledger import RewardLedger
from auto_rewarder.models import DistributionState, RewarderConfig, VaultInfo
from auto_rewarder.registry import VaultRegistry


def get_state_dir() -> Path:
    """Get the state directory path. Uses XDG_STATE_HOME if available, otherwise ~/.local/state."""
    state_home = os.getenv("XDG_STATE_HOME")
    if state_home:
        base = Path(state_home)
    else:
        base = Path.home() / ".local" / "state"
    state_dir = base / STATE_DIR_NAME
    state_dir.mkdir(parents=True, exist_ok=True)
    return state_dir


def default_state_path() -> Path:
    return get_state_dir() / STATE_FILE_NAME


def clear_state(path: Path | None = None) -> None:
    """Remove persisted state."""
    if path is None:
        state_dir = get_state_dir()
        if state_dir.exists():
            shutil.rmtree(state_dir)
            print("✅ State cleared successfully.", file=sys.stderr)
            return
    elif path.exists():
        path.unlink()
        print("✅ State cleared successfully.", file=sys.stderr)
        return
    print("ℹ️  No state found (nothing to clear).", file=sys.stderr)


def _opt_int(value: Any) -> int | None:
    return None if value is None else as_int(value)


def _info_to_dict(info: VaultInfo) -> dict[str, Any]:
    return {
        "vault": info.vault,
        "strategy_rewards_usd": str(info.strategy_rewards_usd),
        "collected_at": info.collected_at,
    }


def _info_from_dict(data: dict[str, Any]) -> VaultInfo:
    return VaultInfo(
        vault=str(data["vault"]),
        strategy_rewards_usd=as_int(data["strategy_rewards_usd"]),
        collected_at=as_int(data["collected_at"]),
    )


def context_to_dict(ctx: RewarderContext) -> dict[str, Any]:
    """Serialize a context. Big integers are written as decimal strings."""
    st = ctx.state
    return {
        "version": STATE_VERSION,
        "vaults": ctx.registry.all(),
        "infos": [_info_to_dict(i) for i in ctx.infos.values()],
        "config": {
            "rewards_per_day": str(ctx.config.rewards_per_day()),
            "network_ratio": str(ctx.config.network_ratio()),
        },
        "state": {
            "last_distributed_id": st.last_distributed_id,
            "distributed_total": str(st.distributed_total),
            "cycle_started_at": st.cycle_started_at,
            "total_strategy_rewards_usd": str(st.total_strategy_rewards_usd),
            "cycle_size": st.cycle_size,
            "cycle_infos": [_info_to_dict(i) for i in st.cycle_infos.values()],
            "paid_budgets": {k: str(v) for k, v in st.paid_budgets.items()},
            "last_cycle_started_at": st.last_cycle_started_at,
        },
        "last_distributed_amounts": {k: str(v) for k, v in ctx.last_distributed_amounts.items()},
        "ledger": {
            "balance": str(ctx.ledger.balance()),
            "credited": {k: str(v) for k, v in ctx.ledger.credited_all().items()},
        },
    }


def context_from_dict(data: dict[str, Any]) -> RewarderContext:
    """Rebuild a context from `context_to_dict` output."""
    version = data.get("version")
    if version != STATE_VERSION:
        raise ValueError(f"Unsupported state version: {version} (expected {STATE_VERSION})")

    cfg = data.get("config") or {}
    raw_state = data.get("state") or {}
    cycle_infos = [_info_from_dict(i) for i in raw_state.get("cycle_infos") or []]
    ledger = data.get("ledger") or {}

    return RewarderContext(
        registry=VaultRegistry(data.get("vaults") or []),
        infos=InfoStore(_info_from_dict(i) for i in data.get("infos") or []),
        config=ConfigStore(
            RewarderConfig(
                rewards_per_day=as_int(cfg.get("rewards_per_day")),
                network_ratio=as_int(cfg.get("network_ratio")),
            )
        ),
        state=DistributionState(
            last_distributed_id=as_int(raw_state.get("last_distributed_id")),
            distributed_total=as_int(raw_state.get("distributed_total")),
            cycle_started_at=_opt_int(raw_state.get("cycle_started_at")),
            total_strategy_rewards_usd=as_int(raw_state.get("total_strategy_rewards_usd")),
            cycle_size=as_int(raw_state.get("cycle_size")),
            cycle_infos={vault_key(i.vault): i for i in cycle_infos},
            paid_budgets={k: as_int(v) for k, v in (raw_state.get("paid_budgets") or {}).items()},
            last_cycle_started_at=_opt_int(raw_state.get("last_cycle_started_at")),
        ),
        last_distributed_amounts={k: as_int(v) for k, v in (data.get("last_distributed_amounts") or {}).items()},
        ledger=RewardLedger(
            balance=as_int(ledger.get("balance")),
            credited={k: as_int(v) for k, v in (ledger.get("credited") or {}).items()},
        ),
    )


def load_context(path: Path) -> RewarderContext:
    """Load state from disk, or a fresh context if the file doesn't exist yet."""
    if not path.exists():
        return RewarderContext()
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: unexpected state format (expected JSON object)")
    try:
        return context_from_dict(data)
    except (KeyError, TypeError, AttributeError) as ex:
        raise ValueError(f"{path}: malformed state ({type(ex).__name__}: {ex})") from ex


def save_context(ctx: RewarderContext, path: Path) -> None:
    """Write state atomically (temp file + rename)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(context_to_dict(ctx), f, ensure_ascii=False, indent=2)
    tmp.replace(path)
