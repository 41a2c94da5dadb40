"""Application settings file (network, contracts, per-strategy defaults)."""

import logging
import os
from dataclasses import dataclass, field, asdict
from typing import Dict, Optional

from config import (
    DEFAULT_SETTINGS_FILE, NETWORKS, OPTIONS_DEFAULTS, TWAP_DEFAULTS, VOLATILITY_DEFAULTS,
)
from errors import MalformedConfigError, PreconditionError
from utils import eth_to_wei, read_json_file, write_json_file

logger = logging.getLogger(__name__)


@dataclass
class ContractAddresses:
    """Deployed contract addresses, unset until deployment."""
    volatility_calculator: Optional[str] = None
    twap_executor: Optional[str] = None
    options_calculator: Optional[str] = None


def default_strategy_defaults() -> Dict:
    return {
        "volatility": {
            "baseline_volatility": VOLATILITY_DEFAULTS["baseline_volatility"],
            "max_execution_size": str(eth_to_wei(VOLATILITY_DEFAULTS["max_execution_size"])),
            "min_execution_size": str(eth_to_wei(VOLATILITY_DEFAULTS["min_execution_size"])),
            "conservative_mode": VOLATILITY_DEFAULTS["conservative_mode"],
        },
        "twap": {
            "duration": TWAP_DEFAULTS["duration"] * 60,  # seconds
            "intervals": TWAP_DEFAULTS["intervals"],
            "randomize_execution": TWAP_DEFAULTS["randomize_execution"],
            "adaptive_intervals": TWAP_DEFAULTS["adaptive_intervals"],
        },
        "options": {
            "default_expiration_hours": OPTIONS_DEFAULTS["expiration_hours"],
            "implied_volatility": OPTIONS_DEFAULTS["implied_volatility"],
            "risk_free_rate": OPTIONS_DEFAULTS["risk_free_rate"],
        },
    }


@dataclass
class Settings:
    """Top-level Vector Plus settings document."""
    network: str = "mainnet"
    rpc_url: Optional[str] = None
    contracts: ContractAddresses = field(default_factory=ContractAddresses)
    defaults: Dict = field(default_factory=default_strategy_defaults)

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'Settings':
        if "network" not in data:
            raise MalformedConfigError("Settings missing field: network")
        try:
            contracts = ContractAddresses(**(data.get("contracts") or {}))
        except TypeError as e:
            raise MalformedConfigError(f"Invalid contracts section: {e}")
        return cls(
            network=data["network"],
            rpc_url=data.get("rpc_url"),
            contracts=contracts,
            defaults=data.get("defaults") or default_strategy_defaults(),
        )


def init_settings(path: str = DEFAULT_SETTINGS_FILE, network: str = "mainnet",
                  force: bool = False) -> Settings:
    """Write a default settings file, refusing to overwrite unless forced."""
    if network not in NETWORKS:
        raise PreconditionError(f"Unknown network: {network}. Use one of: {', '.join(NETWORKS)}")
    if os.path.exists(path) and not force:
        raise PreconditionError(f"{path} already exists. Use --force to overwrite.")

    settings = Settings(network=network)
    write_json_file(path, settings.to_dict())
    logger.debug(f"Initialized settings for {network} at {path}")
    return settings


def load_settings(path: str = DEFAULT_SETTINGS_FILE) -> Optional[Settings]:
    """Load settings, or None if the file does not exist."""
    if not os.path.exists(path):
        return None
    return Settings.from_dict(read_json_file(path))
