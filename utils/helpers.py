"""
Utility Helper Functions for ChainCheck
Defensive payload extraction, score rounding and timing helpers
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from functools import wraps
from typing import Any, Iterable, Optional, Union

from utils.constants import MIN_ADDRESS_LENGTH
from utils.errors import ValidationError

logger = logging.getLogger(__name__)

# ============= Decorators =============

def measure_time(func):
    """Measure execution time decorator"""
    @wraps(func)
    async def async_wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start
            logger.debug(f"{func.__name__} took {elapsed:.4f} seconds")

    @wraps(func)
    def sync_wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start
            logger.debug(f"{func.__name__} took {elapsed:.4f} seconds")

    return async_wrapper if asyncio.iscoroutinefunction(func) else sync_wrapper

# ============= Address Utilities =============

def normalize_address(address: Any) -> str:
    """
    Trim a contract address and check it is syntactically acceptable.

    Case is preserved: Sui coin types mix a hex package id with
    case-sensitive module and struct names.

    Raises:
        ValidationError: address missing or shorter than MIN_ADDRESS_LENGTH
    """
    if not isinstance(address, str):
        raise ValidationError("Contract address must be a string")

    cleaned = address.strip()
    if len(cleaned) < MIN_ADDRESS_LENGTH:
        raise ValidationError(
            f"Contract address must be at least {MIN_ADDRESS_LENGTH} characters"
        )
    return cleaned

def is_valid_address(address: Any) -> bool:
    """Check address without raising"""
    try:
        normalize_address(address)
        return True
    except ValidationError:
        return False

# ============= Payload Extraction =============

def safe_float(value: Any, default: float = 0.0) -> float:
    """Convert provider values ("12.5", 12, None, "") to float"""
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default

def safe_int(value: Any, default: int = 0) -> int:
    """Convert provider values ("1200", 1200.0, None) to int"""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default

def parse_flag(value: Any) -> Optional[bool]:
    """
    Parse a security-provider flag.

    GoPlus encodes flags as "1"/"0" strings (sometimes ints). Anything else,
    including a missing field, is unknown and returns None.
    """
    if isinstance(value, bool):
        return value
    if value in (1, "1"):
        return True
    if value in (0, "0"):
        return False
    return None

def get_nested(data: Any, *keys: str, default: Any = None) -> Any:
    """Walk nested dicts, returning default on any missing level"""
    current = data
    for key in keys:
        if not isinstance(current, dict):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current

# ============= Math Utilities =============

def round_score(value: Union[int, float, Decimal], places: int = 2) -> float:
    """Round half-up (0.125 -> 0.13), unlike round() on binary floats"""
    try:
        quantum = Decimal(1).scaleb(-places)
        return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return 0.0

def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]"""
    return max(low, min(high, value))

def mean(values: Iterable[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence"""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)

# ============= Time Utilities =============

def utc_now() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)

def isoformat_utc(dt: datetime) -> str:
    """ISO-8601 with millisecond precision and Z suffix"""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    'measure_time',
    'normalize_address', 'is_valid_address',
    'safe_float', 'safe_int', 'parse_flag', 'get_nested',
    'round_score', 'clamp', 'mean',
    'utc_now', 'isoformat_utc',
]
