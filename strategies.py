"""TWAP, option and combined strategy records."""

import logging
from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_DOWN
from typing import Any, Dict, List

from config import TIME_VALUE_PER_HOUR, TWAP_DEFAULTS
from errors import MalformedConfigError, PreconditionError
from utils import Number, read_json_file, to_decimal, write_json_file

logger = logging.getLogger(__name__)

OPTION_TYPES = ("call", "put")


def _require(data: Dict[str, Any], fields: tuple, kind: str):
    missing = [name for name in fields if name not in data]
    if missing:
        raise MalformedConfigError(f"{kind} config missing field(s): {', '.join(missing)}")


def _check_int(data: Dict[str, Any], name: str, kind: str, minimum: int = 0) -> int:
    value = data[name]
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise MalformedConfigError(f"{kind} field '{name}' must be an integer >= {minimum}, got {value!r}")
    return value


def _check_bool(data: Dict[str, Any], name: str, kind: str) -> bool:
    value = data[name]
    if not isinstance(value, bool):
        raise MalformedConfigError(f"{kind} field '{name}' must be a boolean, got {value!r}")
    return value


@dataclass
class TwapConfig:
    """Time-weighted average price execution parameters."""
    duration_minutes: int
    intervals: int
    randomize_execution: bool
    adaptive_intervals: bool
    created_at: int  # Unix seconds

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'TwapConfig':
        _require(data, ("duration_minutes", "intervals", "randomize_execution"), "TWAP")
        data = dict(data)
        data.setdefault("adaptive_intervals", TWAP_DEFAULTS["adaptive_intervals"])
        data.setdefault("created_at", 0)
        return cls(
            duration_minutes=_check_int(data, "duration_minutes", "TWAP", minimum=1),
            intervals=_check_int(data, "intervals", "TWAP", minimum=1),
            randomize_execution=_check_bool(data, "randomize_execution", "TWAP"),
            adaptive_intervals=_check_bool(data, "adaptive_intervals", "TWAP"),
            created_at=_check_int(data, "created_at", "TWAP"),
        )


@dataclass
class TwapSlice:
    """One scheduled slice of a TWAP order."""
    index: int
    offset_seconds: int
    amount: Decimal


@dataclass
class OptionConfig:
    """An option on limit order execution rights."""
    option_type: str  # call or put
    strike_price: float
    expiration_hours: int
    premium: float
    created_at: int
    expires_at: int

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class CombinedStrategy:
    """TWAP execution gated by a volatility threshold."""
    twap: TwapConfig
    volatility_threshold: int  # bps
    created_at: int

    def to_dict(self) -> Dict:
        return {
            "twap": self.twap.to_dict(),
            "volatility_threshold": self.volatility_threshold,
            "created_at": self.created_at,
        }


def build_twap_config(duration_minutes: int, intervals: int, randomize: bool, now: int,
                      adaptive_intervals: bool = TWAP_DEFAULTS["adaptive_intervals"]) -> TwapConfig:
    """Build a TWAP config."""
    if duration_minutes <= 0:
        raise PreconditionError("Duration must be greater than zero")
    if intervals <= 0:
        raise PreconditionError("Intervals must be greater than zero")

    return TwapConfig(
        duration_minutes=duration_minutes,
        intervals=intervals,
        randomize_execution=randomize,
        adaptive_intervals=adaptive_intervals,
        created_at=int(now),
    )


def simulate_twap(config: TwapConfig, order_size: Number) -> List[TwapSlice]:
    """
    Split an order into evenly spaced slices.

    Slices are rounded down to 6 decimals and the last slice absorbs the
    remainder, so no slice is negative and the slices sum to the order size.
    """
    order_size = to_decimal(order_size)
    if order_size <= 0:
        raise PreconditionError(f"Order size must be greater than zero, got {order_size}")
    if config.intervals <= 0 or config.duration_minutes <= 0:
        raise PreconditionError("TWAP config must have a positive duration and interval count")

    spacing = config.duration_minutes * 60 // config.intervals
    slice_size = (order_size / config.intervals).quantize(Decimal("0.000001"), rounding=ROUND_DOWN)

    slices = []
    allocated = Decimal(0)
    for i in range(config.intervals):
        if i == config.intervals - 1:
            amount = order_size - allocated
        else:
            amount = slice_size
        allocated += amount
        slices.append(TwapSlice(index=i + 1, offset_seconds=i * spacing, amount=amount))

    logger.debug(f"TWAP schedule: {len(slices)} slices every {spacing}s")
    return slices


def build_option_config(option_type: str, strike_price: float, expiration_hours: int,
                        premium: float, now: int) -> OptionConfig:
    """Build a call or put option config."""
    option_type = option_type.lower()
    if option_type not in OPTION_TYPES:
        raise PreconditionError(f"Unknown option type: {option_type}. Use call or put.")
    if strike_price <= 0:
        raise PreconditionError("Strike price must be greater than zero")
    if expiration_hours <= 0:
        raise PreconditionError("Expiration must be greater than zero")
    if premium < 0:
        raise PreconditionError("Premium must be non-negative")

    return OptionConfig(
        option_type=option_type,
        strike_price=strike_price,
        expiration_hours=expiration_hours,
        premium=premium,
        created_at=int(now),
        expires_at=int(now) + expiration_hours * 3600,
    )


def estimate_premium(current_price: float, strike_price: float, hours_to_expiration: float,
                     option_type: str = "call") -> float:
    """Intrinsic value plus a flat time value per hour to expiration."""
    if option_type == "call":
        intrinsic = max(current_price - strike_price, 0.0)
    elif option_type == "put":
        intrinsic = max(strike_price - current_price, 0.0)
    else:
        raise PreconditionError(f"Unknown option type: {option_type}. Use call or put.")

    if hours_to_expiration < 0:
        raise PreconditionError("Time to expiration must be non-negative")

    return intrinsic + hours_to_expiration * TIME_VALUE_PER_HOUR


def build_combined_strategy(twap_duration: int, twap_intervals: int, volatility_threshold: int,
                            now: int) -> CombinedStrategy:
    """Build a combined TWAP + volatility strategy."""
    twap = build_twap_config(twap_duration, twap_intervals, TWAP_DEFAULTS["randomize_execution"], now)
    return CombinedStrategy(twap=twap, volatility_threshold=volatility_threshold, created_at=int(now))


def load_twap_config(path: str) -> TwapConfig:
    return TwapConfig.from_dict(read_json_file(path))


def save_strategy(strategy, path: str):
    """Save any strategy record with a to_dict() method."""
    write_json_file(path, strategy.to_dict())
