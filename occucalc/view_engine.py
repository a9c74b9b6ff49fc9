# occucalc/view_engine.py
"""
Read-only projection of a row collection: type filter, search, sort.
Nothing here is stored; the view is rebuilt from its inputs every time.
"""

from dataclasses import dataclass, replace
from typing import Dict, List

from occucalc.derivation import load_for, to_number

ALL_TYPES = 'All'
ASC = 'asc'
DESC = 'desc'
SORT_KEYS = ('number', 'name', 'area', 'type', 'load')
NUMERIC_SORT_KEYS = ('area', 'load')


@dataclass(frozen=True)
class SortState:
    key: str = 'number'
    direction: str = ASC

    def toggle(self, key: str) -> 'SortState':
        """Same key flips direction; a new key always starts ascending."""
        if key not in SORT_KEYS:
            key = 'number'
        if key != self.key:
            return SortState(key, ASC)
        return SortState(key, DESC if self.direction == ASC else ASC)


def _sort_value(row, key: str):
    if key in NUMERIC_SORT_KEYS:
        return to_number(getattr(row, key))
    value = getattr(row, key, '')
    return '' if value is None else str(value)


def build_view(rows, factors: Dict[str, float], filter_type: str = ALL_TYPES,
               search: str = '', sort: SortState = None) -> List:
    """
    Filter by exact type (or pass everything for "All"), then keep rows whose
    number or name contains `search` (case-insensitive), then stable-sort.
    Returned rows are copies carrying a freshly computed load.
    """
    sort = sort or SortState()
    view = [replace(row, load=load_for(row, factors)) for row in rows]

    if filter_type and filter_type != ALL_TYPES:
        view = [row for row in view if row.type == filter_type]

    query = (search or '').strip().lower()
    if query:
        view = [
            row for row in view
            if query in str(row.number).lower() or query in str(row.name).lower()
        ]

    key = sort.key if sort.key in SORT_KEYS else 'number'
    return sorted(view, key=lambda row: _sort_value(row, key), reverse=sort.direction == DESC)


def all_visible_selected(view) -> bool:
    return bool(view) and all(row.selected for row in view)
