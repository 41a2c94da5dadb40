"""Configuration settings for Vector Plus."""

import os

# Supported networks
NETWORKS = ("mainnet", "polygon", "arbitrum")

# Global flag defaults (overridable from the environment)
DEFAULT_NETWORK = os.environ.get('VECTOR_PLUS_NETWORK', 'mainnet')
DEFAULT_SETTINGS_FILE = os.environ.get('VECTOR_PLUS_CONFIG', 'vector-plus.json')

# Output files
VOLATILITY_CONFIG_FILE = "volatility-config.json"
TWAP_CONFIG_FILE = "twap-config.json"
OPTION_CONFIG_FILE = "option-config.json"
COMBINED_CONFIG_FILE = "combined-strategy.json"

# Amounts are stored in minor units (wei)
WEI_PER_ETH = 10 ** 18

# A volatility config older than this is reported as stale
STALE_AFTER_SECONDS = 3600

# Volatility strategy
VOLATILITY_DEFAULTS = {
    "baseline_volatility": 300,     # bps
    "current_volatility": 350,      # bps
    "max_execution_size": 5.0,      # ETH
    "min_execution_size": 0.1,      # ETH
    "conservative_mode": False,
}

# Adjustment factor bounds, in percent
ADJUSTMENT = {
    "max_boost": 50,                # low volatility: up to 150%
    "max_reduction": 50,            # high volatility: down to 50%
    "conservative_factor": 90,      # normal volatility, conservative mode
}

# TWAP strategy
TWAP_DEFAULTS = {
    "duration": 120,                # minutes
    "intervals": 12,
    "randomize_execution": True,
    "adaptive_intervals": True,
}

# Options strategy
OPTIONS_DEFAULTS = {
    "strike_price": 2100.0,         # USDC
    "expiration_hours": 168,        # 1 week
    "premium": 50.0,                # USDC
    "implied_volatility": 8000,     # bps (80%)
    "risk_free_rate": 300,          # bps (3%)
}

# Simple premium estimate: intrinsic value plus time value per hour
TIME_VALUE_PER_HOUR = 0.1

# Combined TWAP + volatility strategy
COMBINED_DEFAULTS = {
    "twap_duration": 180,           # minutes
    "twap_intervals": 18,
    "volatility_threshold": 600,    # bps
}

# Logging
LOGGING = {
    "level": "WARNING",
    "verbose_level": "DEBUG",
    "format": "%(message)s",
    "show_path": False,
}
