import json
from decimal import Decimal

import pytest

from errors import MalformedConfigError, PreconditionError
from strategies import (
    TwapConfig, build_combined_strategy, build_option_config,
    build_twap_config, estimate_premium, load_twap_config, save_strategy, simulate_twap,
)

NOW = 1_700_000_000


def test_build_twap_config():
    config = build_twap_config(120, 12, True, now=NOW)

    assert config.duration_minutes == 120
    assert config.intervals == 12
    assert config.randomize_execution is True
    assert config.created_at == NOW


@pytest.mark.parametrize("duration, intervals", [(0, 12), (120, 0), (-5, 3)])
def test_build_twap_config_rejects_non_positive(duration, intervals):
    with pytest.raises(PreconditionError):
        build_twap_config(duration, intervals, False, now=NOW)


def test_simulate_twap_schedule():
    slices = simulate_twap(build_twap_config(120, 12, False, now=NOW), 10.0)

    assert len(slices) == 12
    assert [s.offset_seconds for s in slices[:3]] == [0, 600, 1200]
    assert slices[-1].offset_seconds == 6600
    assert slices[0].amount == Decimal("0.833333")
    assert sum(s.amount for s in slices) == Decimal("10")


def test_simulate_twap_even_split():
    slices = simulate_twap(build_twap_config(60, 4, False, now=NOW), "2")
    assert [s.amount for s in slices] == [Decimal("0.5")] * 4


def test_simulate_twap_rejects_empty_order():
    with pytest.raises(PreconditionError):
        simulate_twap(build_twap_config(60, 4, False, now=NOW), 0)


def test_twap_config_file(tmp_path):
    path = str(tmp_path / "twap-config.json")
    config = build_twap_config(90, 6, False, now=NOW)

    save_strategy(config, path)

    assert load_twap_config(path) == config


def test_twap_config_missing_fields():
    with pytest.raises(MalformedConfigError):
        TwapConfig.from_dict({"duration_minutes": 60})


def test_build_call_option():
    option = build_option_config("call", 2100.0, 168, 50.0, now=NOW)

    assert option.option_type == "call"
    assert option.expires_at == NOW + 168 * 3600
    assert option.to_dict()["strike_price"] == 2100.0


def test_build_put_option_normalizes_type():
    assert build_option_config("PUT", 1900.0, 24, 12.5, now=NOW).option_type == "put"


@pytest.mark.parametrize("kwargs", [
    {"option_type": "straddle"},
    {"strike_price": 0},
    {"expiration_hours": 0},
    {"premium": -1.0},
])
def test_build_option_rejects_bad_input(kwargs):
    params = {"option_type": "call", "strike_price": 2100.0, "expiration_hours": 168, "premium": 50.0}
    params.update(kwargs)
    with pytest.raises(PreconditionError):
        build_option_config(now=NOW, **params)


def test_estimate_premium_out_of_the_money_call():
    assert estimate_premium(2000, 2100, 24) == pytest.approx(2.4)


def test_estimate_premium_in_the_money():
    assert estimate_premium(2200, 2100, 10, "call") == pytest.approx(101.0)
    assert estimate_premium(2000, 2100, 0, "put") == pytest.approx(100.0)


def test_estimate_premium_unknown_type():
    with pytest.raises(PreconditionError):
        estimate_premium(2000, 2100, 24, "binary")


def test_combined_strategy(tmp_path):
    strategy = build_combined_strategy(180, 18, 600, now=NOW)
    path = tmp_path / "combined-strategy.json"

    save_strategy(strategy, str(path))
    data = json.loads(path.read_text())

    assert data["volatility_threshold"] == 600
    assert data["twap"]["duration_minutes"] == 180
    assert data["twap"]["intervals"] == 18
    assert data["created_at"] == NOW


def test_simulate_twap_tiny_order_has_no_negative_slices():
    slices = simulate_twap(build_twap_config(120, 12, False, now=NOW), "0.00001")

    assert all(s.amount >= 0 for s in slices)
    assert sum(s.amount for s in slices) == Decimal("0.00001")


def test_simulate_twap_rounds_slices_down():
    slices = simulate_twap(build_twap_config(60, 3, False, now=NOW), "0.0000029")

    assert [s.amount for s in slices] == [Decimal("0.000000"), Decimal("0.000000"), Decimal("0.0000029")]


@pytest.mark.parametrize("field, value", [
    ("randomize_execution", "false"),
    ("adaptive_intervals", 1),
    ("intervals", "12"),
    ("duration_minutes", True),
    ("intervals", 0),
    ("created_at", -1),
])
def test_twap_config_rejects_mistyped_fields(field, value):
    data = build_twap_config(120, 12, False, now=NOW).to_dict()
    data[field] = value

    with pytest.raises(MalformedConfigError):
        TwapConfig.from_dict(data)


def test_twap_config_optional_fields_default():
    config = TwapConfig.from_dict({"duration_minutes": 60, "intervals": 4, "randomize_execution": False})

    assert config.adaptive_intervals is True
    assert config.created_at == 0
