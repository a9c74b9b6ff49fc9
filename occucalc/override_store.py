# occucalc/override_store.py
"""
User factor overrides, keyed by code id.
Every mutating call returns True only when the table actually changed.
"""

import logging
from typing import Any, Dict

from occucalc.code_registry import (
    DEFAULT_NEW_TYPE_FACTOR, is_base_type, resolve_factors, type_list
)
from occucalc.derivation import to_number

logger = logging.getLogger(__name__)


def _valid_factor(value) -> bool:
    return to_number(value) > 0


class OverrideStore:
    """Holds {code_id: {occupancy_type: factor}} edits layered over the base tables."""

    def __init__(self, overrides: Dict[str, Dict[str, float]] = None):
        self._overrides: Dict[str, Dict[str, float]] = {}
        for code_id, table in (overrides or {}).items():
            self._overrides[code_id] = dict(table)

    @classmethod
    def from_dict(cls, raw: Any) -> 'OverrideStore':
        """Build from persisted JSON, dropping anything that is not a positive factor."""
        cleaned = {}
        if isinstance(raw, dict):
            for code_id, table in raw.items():
                if not isinstance(table, dict):
                    continue
                cleaned[str(code_id)] = {
                    str(t): to_number(v) for t, v in table.items() if _valid_factor(v)
                }
        return cls(cleaned)

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {code_id: dict(table) for code_id, table in self._overrides.items()}

    def for_code(self, code_id: str) -> Dict[str, float]:
        return dict(self._overrides.get(code_id, {}))

    def factors(self, code_id: str) -> Dict[str, float]:
        return resolve_factors(code_id, self._overrides)

    def set_factor(self, code_id: str, occupancy_type: str, value) -> bool:
        if not _valid_factor(value):
            logger.debug(f"Ignored factor {value!r} for '{occupancy_type}'")
            return False
        table = self._overrides.setdefault(code_id, {})
        table[occupancy_type] = to_number(value)
        return True

    def add_type(self, code_id: str, name: str) -> bool:
        name = (name or '').strip()
        if not name or name in type_list(self.factors(code_id)):
            return False
        self._overrides.setdefault(code_id, {})[name] = DEFAULT_NEW_TYPE_FACTOR
        return True

    def delete_type(self, code_id: str, occupancy_type: str) -> bool:
        # Base entries can only be shadowed, never removed
        if is_base_type(code_id, occupancy_type):
            return False
        table = self._overrides.get(code_id)
        if not table or occupancy_type not in table:
            return False
        del table[occupancy_type]
        return True

    def reset_code(self, code_id: str) -> bool:
        return self._overrides.pop(code_id, None) is not None
