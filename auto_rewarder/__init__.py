"""Proportional daily reward distribution across vaults."""

from typing import NoReturn

__version__ = "0.1.0"


def _entry_point() -> NoReturn:
    """Entry point for the auto-rewarder script."""
    import sys

    from auto_rewarder.cli import main

    raise SystemExit(main(sys.argv[1:]))


def _clear_state_entry_point() -> NoReturn:
    """Entry point for clearing persisted state."""
    from auto_rewarder.store import clear_state

    clear_state()
    raise SystemExit(0)
