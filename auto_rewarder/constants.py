"""Constants and configuration for the auto rewarder."""

from decimal import Decimal

# All token amounts and USD metrics are 18-decimal fixed-point integers (wei-style).
PRECISION = 10**18
TOKEN_UNIT = Decimal(PRECISION)

# networkRatio is a fraction scaled by PRECISION: 0 <= ratio <= 1e18.
MAX_NETWORK_RATIO = PRECISION

SECONDS_PER_DAY = 24 * 60 * 60

# A new cycle can't be armed before this much time passed since the previous cycle start.
MIN_CYCLE_PERIOD = SECONDS_PER_DAY

# Collected metrics older than this are not eligible for payout.
MAX_INFO_AGE = SECONDS_PER_DAY

# Lookback window passed to RewardCalculator.strategyRewardsUsd (one week of strategy rewards).
REWARD_PERIOD = 7 * SECONDS_PER_DAY

# Minimal ABI for SmartVault - only the strategy getter.
SMART_VAULT_MIN_ABI: list[dict] = [
    {
        "type": "function",
        "name": "strategy",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
]

# Minimal ABI for RewardCalculator - USD value of rewards earned by a strategy over a period.
REWARD_CALCULATOR_MIN_ABI: list[dict] = [
    {
        "type": "function",
        "name": "strategyRewardsUsd",
        "stateMutability": "view",
        "inputs": [
            {"name": "_strategy", "type": "address"},
            {"name": "_period", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]

# State persistence
STATE_DIR_NAME = "auto_rewarder"
STATE_FILE_NAME = "state.json"
STATE_VERSION = 1  # Increment when the persisted layout changes
