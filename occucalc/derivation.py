# occucalc/derivation.py

import math
import re
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from occucalc.code_registry import normalize_type, type_list

MIN_FACTOR = 1e-6

# Plain decimal / exponent notation only: no digit separators, no non-ASCII digits
_NUMBER_RE = re.compile(r'[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?', re.ASCII)


def parse_number(value) -> Optional[float]:
    """Finite number for a loosely typed cell value, or None when it is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not _NUMBER_RE.fullmatch(text):
            return None
        number = float(text)
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
    return number if math.isfinite(number) else None


def to_number(value) -> float:
    """Like parse_number, but blanks and garbage count as 0."""
    number = parse_number(value)
    return 0.0 if number is None else number


def occupant_load(area, factor) -> int:
    """Occupants for a space: ceil(area / factor), or 0 for a blank/invalid area."""
    area_value = to_number(area)
    if area_value <= 0:
        return 0
    factor_value = to_number(factor)
    if factor_value <= 0:
        factor_value = MIN_FACTOR
    quotient = area_value / factor_value
    # area/factor can overflow to inf even when both inputs are finite
    if not math.isfinite(quotient):
        return 0
    return math.ceil(quotient)


def load_for(row, factors: Dict[str, float]) -> int:
    return occupant_load(row.area, factors.get(row.type))


def recompute_row(row, factors: Dict[str, float]):
    """Copy of `row` with its type normalized and its load recomputed."""
    occupancy_type = normalize_type(row.type, type_list(factors))
    return replace(row, type=occupancy_type, load=occupant_load(row.area, factors.get(occupancy_type)))


def reconcile(rows: List, factors: Dict[str, float]) -> List:
    return [recompute_row(row, factors) for row in rows]


def totals_by_type(rows: List, factors: Dict[str, float]) -> Tuple[Dict[str, int], int]:
    """Occupant load grouped by type (first-seen order) plus the grand total."""
    totals: Dict[str, int] = {}
    grand_total = 0
    for row in rows:
        load = load_for(row, factors)
        totals[row.type] = totals.get(row.type, 0) + load
        grand_total += load
    return totals, grand_total
