"""Volatility configuration record, builder and persistence."""

import logging
from dataclasses import dataclass
from typing import Any, Dict

from config import VOLATILITY_CONFIG_FILE
from errors import MalformedConfigError, PreconditionError
from utils import Number, eth_to_wei, format_wei, parse_wei, read_json_file, to_decimal, write_json_file

logger = logging.getLogger(__name__)

INT_FIELDS = (
    "baseline_volatility",
    "current_volatility",
    "volatility_threshold",
    "emergency_threshold",
    "last_update_time",
)
SIZE_FIELDS = ("max_execution_size", "min_execution_size")


@dataclass
class VolatilityConfig:
    """Volatility-adaptive sizing parameters. Volatilities are in bps, sizes in wei."""
    baseline_volatility: int
    current_volatility: int
    max_execution_size: int
    min_execution_size: int
    volatility_threshold: int
    conservative_mode: bool
    emergency_threshold: int
    last_update_time: int  # Unix seconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseline_volatility": self.baseline_volatility,
            "current_volatility": self.current_volatility,
            "max_execution_size": format_wei(self.max_execution_size),
            "min_execution_size": format_wei(self.min_execution_size),
            "volatility_threshold": self.volatility_threshold,
            "conservative_mode": self.conservative_mode,
            "emergency_threshold": self.emergency_threshold,
            "last_update_time": self.last_update_time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VolatilityConfig':
        missing = [name for name in INT_FIELDS + SIZE_FIELDS + ("conservative_mode",) if name not in data]
        if missing:
            raise MalformedConfigError(
                f"Missing field(s): {', '.join(missing)}", details={"missing": missing}
            )

        for name in INT_FIELDS:
            value = data[name]
            # bool is an int subclass, reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise MalformedConfigError(f"Field '{name}' must be a non-negative integer, got {value!r}")

        for name in SIZE_FIELDS:
            if not isinstance(data[name], str):
                raise MalformedConfigError(f"Field '{name}' must be a string, got {data[name]!r}")

        if not isinstance(data["conservative_mode"], bool):
            raise MalformedConfigError(
                f"Field 'conservative_mode' must be a boolean, got {data['conservative_mode']!r}"
            )

        return cls(
            baseline_volatility=data["baseline_volatility"],
            current_volatility=data["current_volatility"],
            max_execution_size=parse_wei(data["max_execution_size"]),
            min_execution_size=parse_wei(data["min_execution_size"]),
            volatility_threshold=data["volatility_threshold"],
            conservative_mode=data["conservative_mode"],
            emergency_threshold=data["emergency_threshold"],
            last_update_time=data["last_update_time"],
        )


def build_config(baseline_volatility: int, current_volatility: int,
                 max_execution_size: Number, min_execution_size: Number,
                 conservative_mode: bool, now: int) -> VolatilityConfig:
    """
    Build a full volatility config from baseline inputs.

    Sizes are given in ETH and stored in wei. Thresholds are derived from
    the baseline. No max/min consistency check happens here; that is left
    to validation.
    """
    max_eth = to_decimal(max_execution_size)
    min_eth = to_decimal(min_execution_size)

    if baseline_volatility < 0 or current_volatility < 0:
        raise PreconditionError("Volatility values must be non-negative")
    if max_eth < 0 or min_eth < 0:
        raise PreconditionError("Execution sizes must be non-negative")

    config = VolatilityConfig(
        baseline_volatility=baseline_volatility,
        current_volatility=current_volatility,
        max_execution_size=eth_to_wei(max_eth),
        min_execution_size=eth_to_wei(min_eth),
        volatility_threshold=baseline_volatility * 2,
        conservative_mode=conservative_mode,
        emergency_threshold=baseline_volatility * 4,
        last_update_time=int(now),
    )
    logger.debug(f"Built volatility config: {config.to_dict()}")
    return config


def load_config(path: str = VOLATILITY_CONFIG_FILE) -> VolatilityConfig:
    """Load a volatility config from a JSON file."""
    return VolatilityConfig.from_dict(read_json_file(path))


def save_config(config: VolatilityConfig, path: str = VOLATILITY_CONFIG_FILE):
    """Save a volatility config to a JSON file."""
    write_json_file(path, config.to_dict())
