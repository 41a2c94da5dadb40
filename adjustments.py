"""Volatility config validation and execution size adjustment."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List

from config import ADJUSTMENT, STALE_AFTER_SECONDS
from errors import PreconditionError, ValidationFailedError
from utils import Number, to_decimal, wei_to_eth
from volatility import VolatilityConfig

logger = logging.getLogger(__name__)

WARN_HIGH_VOLATILITY = "Current volatility is >3x baseline - consider conservative mode"
ERR_EMERGENCY = "Current volatility exceeds emergency threshold!"
ERR_SIZE_BOUNDS = "Max execution size must be > min execution size"
WARN_STALE = "Configuration is more than 1 hour old"


@dataclass
class ValidationReport:
    """Result of validating a volatility config."""
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """Warnings alone do not fail validation."""
        return not self.errors

    @property
    def clean(self) -> bool:
        return not self.errors and not self.warnings

    def raise_for_errors(self):
        if self.errors:
            raise ValidationFailedError("Configuration validation failed", self.warnings, self.errors)


def validate_config(config: VolatilityConfig, now: int) -> ValidationReport:
    """Check a config against every rule, collecting all warnings and errors."""
    report = ValidationReport()

    if config.current_volatility > config.baseline_volatility * 3:
        report.warnings.append(WARN_HIGH_VOLATILITY)

    if config.current_volatility > config.emergency_threshold:
        report.errors.append(ERR_EMERGENCY)

    if config.max_execution_size <= config.min_execution_size:
        report.errors.append(ERR_SIZE_BOUNDS)

    # A timestamp in the future is never stale
    age = int(now) - config.last_update_time
    if age > STALE_AFTER_SECONDS:
        report.warnings.append(WARN_STALE)

    logger.debug(f"Validation: {len(report.warnings)} warning(s), {len(report.errors)} error(s)")
    return report


class CapStatus(Enum):
    """Whether the final amount was clamped to a size limit."""
    NONE = "none"
    AT_MAX = "at_max"
    AT_MIN = "at_min"


@dataclass
class AdjustmentResult:
    """Result of a volatility adjustment."""
    amount: Decimal
    adjustment_factor_percent: int
    adjusted_amount: Decimal
    final_amount: Decimal
    min_allowed: Decimal
    max_allowed: Decimal
    capped: CapStatus = CapStatus.NONE


def adjustment_factor(config: VolatilityConfig) -> int:
    """
    Percent scaling for the current volatility regime.

    Low volatility (at or below baseline) boosts up to 150%, high volatility
    (above the threshold) reduces down to 50%, anything in between is 100%,
    or 90% in conservative mode. Ratios use integer floor division.
    """
    baseline = config.baseline_volatility
    current = config.current_volatility

    if baseline == 0:
        raise PreconditionError("Baseline volatility must be greater than zero")

    if current <= baseline:
        boost = (baseline - current) * 50 // baseline
        factor = 100 + min(boost, ADJUSTMENT["max_boost"])
        regime = "low"
    elif current > config.volatility_threshold:
        reduction = (current - baseline) * 50 // baseline
        factor = 100 - min(reduction, ADJUSTMENT["max_reduction"])
        regime = "high"
    else:
        factor = ADJUSTMENT["conservative_factor"] if config.conservative_mode else 100
        regime = "normal"

    logger.debug(f"Volatility regime: {regime} ({current}bps vs {baseline}bps baseline), factor {factor}%")
    return factor


def adjust_amount(amount: Number, config: VolatilityConfig) -> AdjustmentResult:
    """Scale amount by the volatility factor and clamp it to the config's size limits."""
    amount = to_decimal(amount)
    if not amount.is_finite() or amount <= 0:
        raise PreconditionError(f"Amount must be greater than zero, got {amount}")

    factor = adjustment_factor(config)
    adjusted = amount * factor / 100
    min_allowed = wei_to_eth(config.min_execution_size)
    max_allowed = wei_to_eth(config.max_execution_size)

    final = min(max(adjusted, min_allowed), max_allowed)

    capped = CapStatus.NONE
    if final != adjusted:
        if final == max_allowed:
            capped = CapStatus.AT_MAX
        else:
            capped = CapStatus.AT_MIN
        logger.debug(f"Adjusted amount {adjusted} clamped to {final}")

    return AdjustmentResult(
        amount=amount,
        adjustment_factor_percent=factor,
        adjusted_amount=adjusted,
        final_amount=final,
        min_allowed=min_allowed,
        max_allowed=max_allowed,
        capped=capped,
    )
