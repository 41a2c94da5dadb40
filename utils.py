"""JSON file helpers and amount conversions."""

import json
import logging
import os
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Any, Dict, Union

from config import WEI_PER_ETH
from errors import ConfigNotFoundError, MalformedConfigError, PreconditionError

logger = logging.getLogger(__name__)

Number = Union[int, float, str, Decimal]


def to_decimal(value: Number) -> Decimal:
    """Convert a user-supplied number to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so 0.1 becomes Decimal('0.1'), not its binary expansion
        return Decimal(str(value))
    except InvalidOperation:
        raise PreconditionError(f"Invalid amount: {value}")


def eth_to_wei(amount: Number) -> int:
    """Convert a whole-unit amount to minor units, truncating toward zero."""
    wei = to_decimal(amount) * WEI_PER_ETH
    return int(wei.to_integral_value(rounding=ROUND_DOWN))


def wei_to_eth(wei: int) -> Decimal:
    """Convert minor units back to whole units."""
    return Decimal(wei) / WEI_PER_ETH


def parse_wei(value: str) -> int:
    """
    Parse a stored minor-unit string.

    Unparseable strings read as zero. Fractional digits left by older
    files ("5000000000000000000.000000000000000000") are truncated.
    """
    try:
        parsed = Decimal(value.strip())
    except (InvalidOperation, AttributeError):
        logger.debug(f"Unparseable amount {value!r}, treating as 0")
        return 0
    if not parsed.is_finite():
        logger.debug(f"Non-finite amount {value!r}, treating as 0")
        return 0
    return int(parsed.to_integral_value(rounding=ROUND_DOWN))


def format_wei(wei: int) -> str:
    """Format minor units for storage."""
    return str(wei)


def ensure_file_exists(path: str):
    """Raise ConfigNotFoundError if path does not exist."""
    if not os.path.exists(path):
        raise ConfigNotFoundError(f"File not found: {path}", details={"path": path})


def read_json_file(path: str) -> Dict[str, Any]:
    """Load a JSON object from path."""
    ensure_file_exists(path)
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedConfigError(f"Invalid JSON format in {path}: {e}", details={"path": path})

    if not isinstance(data, dict):
        raise MalformedConfigError(f"Expected a JSON object in {path}", details={"path": path})

    logger.debug(f"Loaded {path}")
    return data


def write_json_file(path: str, data: Dict[str, Any]):
    """Write data to path as pretty-printed JSON."""
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)
        f.write("\n")

    logger.debug(f"Wrote {path}")
