"""Income range catalog service with caching."""
import logging
from typing import List, Optional

from src.models.income_range import IncomeRange
from src.services.storage_service import load_json
from src.utils.config import DEFAULT_INCOME_RANGES_FILE

logger = logging.getLogger(__name__)

# Catalog file path
INCOME_RANGES_FILE = DEFAULT_INCOME_RANGES_FILE

# Bracket pre-selected on the signup form
DEFAULT_INCOME_RANGE = "50000-100000"

_income_ranges_cache: Optional[List[IncomeRange]] = None


def _clear_cache():
    """Clear the catalog cache."""
    global _income_ranges_cache
    _income_ranges_cache = None


def set_income_ranges_file(file_path: str) -> None:
    """Point the catalog at another file, dropping the cache if it changed."""
    global INCOME_RANGES_FILE
    if file_path == INCOME_RANGES_FILE:
        return
    INCOME_RANGES_FILE = file_path
    _clear_cache()


def get_income_ranges() -> List[IncomeRange]:
    """
    Load the income range catalog.

    Returns:
        List[IncomeRange]: Brackets in display order

    Raises:
        FileNotFoundError: If the catalog file does not exist
        json.JSONDecodeError: If the catalog JSON is malformed
        ValueError: If an entry is missing a value or label, or values repeat
    """
    global _income_ranges_cache

    if _income_ranges_cache is not None:
        return _income_ranges_cache

    data = load_json(INCOME_RANGES_FILE)
    ranges = []
    seen = set()

    for entry in data.get("income_ranges", []):
        income_range = IncomeRange(value=entry["value"], label=entry["label"])
        if income_range.value in seen:
            raise ValueError(f"Duplicate income range value: {income_range.value}")
        seen.add(income_range.value)
        ranges.append(income_range)

    logger.debug(f"Loaded {len(ranges)} income ranges from {INCOME_RANGES_FILE}")
    _income_ranges_cache = ranges
    return ranges


def get_income_range_values() -> List[str]:
    """Return the allowed income range values in display order."""
    return [income_range.value for income_range in get_income_ranges()]


def get_income_range_label(value: str) -> Optional[str]:
    """
    Look up the display label of an income range.

    Returns:
        str: Label, or None if value is not in the catalog
    """
    for income_range in get_income_ranges():
        if income_range.value == value:
            return income_range.label
    return None
