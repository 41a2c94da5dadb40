from decimal import Decimal

import pytest

from adjustments import (
    ERR_EMERGENCY, ERR_SIZE_BOUNDS, WARN_HIGH_VOLATILITY, WARN_STALE,
    CapStatus, adjust_amount, adjustment_factor, validate_config,
)
from errors import PreconditionError, ValidationFailedError
from volatility import VolatilityConfig, build_config

NOW = 1_700_000_000
ETH = 10 ** 18


def make_config(**overrides) -> VolatilityConfig:
    base = {
        "baseline_volatility": 300,
        "current_volatility": 300,
        "max_execution_size": 5 * ETH,
        "min_execution_size": ETH // 10,
        "volatility_threshold": 600,
        "conservative_mode": False,
        "emergency_threshold": 1200,
        "last_update_time": NOW,
    }
    base.update(overrides)
    return VolatilityConfig(**base)


# Validation

def test_validate_clean_config():
    report = validate_config(make_config(), now=NOW)

    assert report.warnings == []
    assert report.errors == []
    assert report.valid
    assert report.clean


def test_validate_reports_warnings_and_errors_together():
    report = validate_config(make_config(current_volatility=1201), now=NOW)

    assert report.warnings == [WARN_HIGH_VOLATILITY]
    assert report.errors == [ERR_EMERGENCY]
    assert not report.valid


def test_validate_size_bounds():
    report = validate_config(make_config(max_execution_size=ETH, min_execution_size=ETH), now=NOW)
    assert report.errors == [ERR_SIZE_BOUNDS]


def test_validate_zero_sizes_fail_bounds_check():
    report = validate_config(make_config(max_execution_size=0, min_execution_size=0), now=NOW)
    assert ERR_SIZE_BOUNDS in report.errors


def test_validate_all_rules_in_order():
    config = make_config(current_volatility=1500, max_execution_size=0)
    report = validate_config(config, now=NOW + 7200)

    assert report.warnings == [WARN_HIGH_VOLATILITY, WARN_STALE]
    assert report.errors == [ERR_EMERGENCY, ERR_SIZE_BOUNDS]


def test_validate_staleness_boundary():
    assert validate_config(make_config(), now=NOW + 3600).warnings == []
    assert validate_config(make_config(), now=NOW + 3601).warnings == [WARN_STALE]


def test_validate_future_timestamp_is_not_stale():
    assert validate_config(make_config(last_update_time=NOW + 500), now=NOW).clean


def test_warnings_alone_do_not_fail():
    report = validate_config(make_config(), now=NOW + 10_000)

    assert report.valid
    assert not report.clean
    report.raise_for_errors()


def test_raise_for_errors_carries_both_lists():
    report = validate_config(make_config(current_volatility=1201), now=NOW)

    with pytest.raises(ValidationFailedError) as exc:
        report.raise_for_errors()
    assert exc.value.warnings == [WARN_HIGH_VOLATILITY]
    assert exc.value.errors == [ERR_EMERGENCY]


# Adjustment factor

@pytest.mark.parametrize("current, expected", [
    (300, 100),   # at baseline
    (299, 100),   # 50 // 300 floors to 0
    (200, 116),   # 5000 // 300 = 16
    (150, 125),
    (0, 150),
])
def test_low_volatility_boost(current, expected):
    assert adjustment_factor(make_config(current_volatility=current)) == expected


def test_high_volatility_reduction_is_clamped():
    assert adjustment_factor(make_config(current_volatility=700)) == 50


def test_high_volatility_reduction_floors():
    # custom threshold below 2x baseline: (340 - 300) * 50 // 300 = 6
    config = make_config(current_volatility=340, volatility_threshold=330)
    assert adjustment_factor(config) == 94


def test_normal_regime():
    assert adjustment_factor(make_config(current_volatility=350)) == 100
    assert adjustment_factor(make_config(current_volatility=600)) == 100
    assert adjustment_factor(make_config(current_volatility=350, conservative_mode=True)) == 90


def test_conservative_mode_does_not_affect_low_regime():
    assert adjustment_factor(make_config(current_volatility=150, conservative_mode=True)) == 125


# Adjust amount

def test_adjust_within_bounds():
    result = adjust_amount(1.0, make_config(current_volatility=150))

    assert result.adjustment_factor_percent == 125
    assert result.adjusted_amount == Decimal("1.25")
    assert result.final_amount == Decimal("1.25")
    assert result.min_allowed == Decimal("0.1")
    assert result.max_allowed == Decimal("5")
    assert result.capped == CapStatus.NONE


def test_adjust_capped_at_max():
    result = adjust_amount(10, make_config())

    assert result.adjusted_amount == Decimal("10")
    assert result.final_amount == Decimal("5")
    assert result.capped == CapStatus.AT_MAX


def test_adjust_raised_to_min():
    result = adjust_amount("0.05", make_config())

    assert result.final_amount == Decimal("0.1")
    assert result.capped == CapStatus.AT_MIN


def test_adjust_exactly_at_limit_is_not_capped():
    result = adjust_amount(5, make_config())

    assert result.final_amount == result.max_allowed
    assert result.capped == CapStatus.NONE


def test_adjust_inconsistent_limits_yield_max():
    config = make_config(max_execution_size=ETH, min_execution_size=2 * ETH)
    result = adjust_amount(1.5, config)

    assert result.final_amount == Decimal("1")
    assert result.capped == CapStatus.AT_MAX


def test_final_amount_always_within_limits():
    config = make_config(current_volatility=100)
    for amount in ("0.001", "0.09", "1", "3.99", "4.5", "100"):
        result = adjust_amount(amount, config)
        assert result.min_allowed <= result.final_amount <= result.max_allowed


def test_adjust_rejects_zero_baseline():
    config = make_config(baseline_volatility=0, volatility_threshold=0, emergency_threshold=0)
    with pytest.raises(PreconditionError):
        adjust_amount(1.0, config)


@pytest.mark.parametrize("amount", [0, -1.5, "nan"])
def test_adjust_rejects_non_positive_amount(amount):
    with pytest.raises(PreconditionError):
        adjust_amount(amount, make_config())


def test_build_validate_adjust_end_to_end():
    config = build_config(300, 350, 5.0, 0.1, False, now=NOW)

    report = validate_config(config, now=NOW + 60)
    assert report.clean

    result = adjust_amount(2.5, config)
    assert result.adjustment_factor_percent == 100
    assert result.adjusted_amount == Decimal("2.5")
    assert result.final_amount == Decimal("2.5")
    assert result.capped == CapStatus.NONE
