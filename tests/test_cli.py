import json

from auto_rewarder.cli import main
from auto_rewarder.constants import PRECISION
from auto_rewarder.store import load_context


def _run(state, *argv: str) -> int:
    return main(["--state-file", str(state), *argv])


def test_full_cycle_via_cli(tmp_path, capsys):
    state = tmp_path / "state.json"
    rewards = tmp_path / "rewards.json"
    rewards.write_text(json.dumps({"0xA": "1", "0xB": "1", "0xC": "1"}), encoding="utf-8")

    assert _run(state, "set-rewards-per-day", "1000") == 0
    assert _run(state, "set-network-ratio", "0.231") == 0
    assert _run(state, "fund", "500") == 0
    assert _run(state, "collect", "0xA", "0xB", "0xC", "--rewards-file", str(rewards), "--step", "2") == 0

    assert _run(state, "distribute", "--count", "2") == 0
    ctx = load_context(state)
    assert ctx.state.last_distributed_id == 2

    assert _run(state, "distribute", "--count", "2") == 0
    out = capsys.readouterr().out
    assert "Cycle complete" in out
    assert "Cycle paid 231 of 231 to 3 vaults" in out

    ctx = load_context(state)
    assert ctx.state.last_distributed_id == 0
    assert ctx.last_distributed_amounts == {"0xa": 77 * PRECISION, "0xb": 77 * PRECISION, "0xc": 77 * PRECISION}
    assert ctx.ledger.balance() == (500 - 231) * PRECISION

    # Immediately re-arming is too early.
    assert _run(state, "distribute") == 1
    assert "Too early" in capsys.readouterr().err


def test_collect_reports_failures_and_recollects_registered(tmp_path, capsys):
    state = tmp_path / "state.json"
    rewards = tmp_path / "rewards.json"
    rewards.write_text(json.dumps({"0xA": "2"}), encoding="utf-8")

    assert _run(state, "collect", "0xA", "0xB", "--rewards-file", str(rewards)) == 0
    captured = capsys.readouterr()
    assert "Collected 1/2 vaults" in captured.out
    assert "❌ 0xB" in captured.out

    assert _run(state, "collect", "--rewards-file", str(rewards)) == 0
    assert load_context(state).registry.all() == ["0xA"]


def test_status_output(tmp_path, capsys):
    state = tmp_path / "state.json"
    assert _run(state, "set-network-ratio", "0.5") == 0
    assert _run(state, "status") == 0
    out = capsys.readouterr().out
    assert "AUTO REWARDER STATUS" in out
    assert "50.00%" in out
    assert "Idle" in out


def test_invalid_ratio_is_config_error(tmp_path, capsys):
    state = tmp_path / "state.json"
    assert _run(state, "set-network-ratio", "1.5") == 2
    assert "networkRatio" in capsys.readouterr().err


def test_collect_without_source_is_config_error(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("ETH_RPC_URL", raising=False)
    assert _run(tmp_path / "state.json", "collect", "0xA") == 2
    assert "--rewards-file" in capsys.readouterr().err


def test_clear_state(tmp_path, capsys):
    state = tmp_path / "state.json"
    assert _run(state, "fund", "1") == 0
    assert state.exists()
    assert _run(state, "clear-state") == 0
    assert not state.exists()
    assert "cleared" in capsys.readouterr().err


def test_malformed_state_file_exits_with_error(tmp_path, capsys):
    state = tmp_path / "state.json"
    state.write_text(json.dumps({"version": 1, "infos": [{"strategy_rewards_usd": "1"}]}), encoding="utf-8")
    assert _run(state, "status") == 2
    assert "failed to load state" in capsys.readouterr().err


def test_cycle_report_accounts_for_mid_cycle_ratio_change(tmp_path, capsys):
    state = tmp_path / "state.json"
    rewards = tmp_path / "rewards.json"
    rewards.write_text(json.dumps({"0xA": "1", "0xB": "1"}), encoding="utf-8")

    assert _run(state, "set-rewards-per-day", "1000") == 0
    assert _run(state, "set-network-ratio", "1") == 0
    assert _run(state, "fund", "2000") == 0
    assert _run(state, "collect", "0xA", "0xB", "--rewards-file", str(rewards)) == 0
    assert _run(state, "distribute", "--count", "1") == 0
    assert _run(state, "set-network-ratio", "0.5") == 0
    assert _run(state, "distribute", "--count", "1") == 0

    ctx = load_context(state)
    assert ctx.last_distributed_amounts == {"0xa": 500 * PRECISION, "0xb": 250 * PRECISION}
    captured = capsys.readouterr()
    assert "Cycle complete" in captured.out
    assert "validation warnings" not in captured.err
