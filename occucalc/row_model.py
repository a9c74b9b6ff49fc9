# occucalc/row_model.py
"""
Row model shared by both input modes.

Manual entry and spreadsheet upload hold the same logical record under two
persisted shapes. Internally both are a plain `Row`; the shape only matters
at the storage / import / export boundary (see `row_to_record` and
`row_from_record`).
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from occucalc.code_registry import FALLBACK_TYPE, normalize_type, type_list
from occucalc.derivation import load_for, occupant_load, recompute_row

logger = logging.getLogger(__name__)

MANUAL = 'manual'
UPLOAD = 'upload'
MODES = (MANUAL, UPLOAD)

# Canonical spreadsheet columns
COL_NUMBER = 'Room #'
COL_NAME = 'Room Name'
COL_AREA = 'Area (m²)'
COL_TYPE = 'Occupancy Type'
COL_LOAD = 'Occupant Load'
EXPORT_COLUMNS = [COL_NUMBER, COL_NAME, COL_AREA, COL_TYPE, COL_LOAD]

EDITABLE_FIELDS = ('number', 'name', 'area', 'type')


@dataclass
class Row:
    """One occupiable space. `load` is a cached value, always re-derived."""
    id: int
    number: str = ''
    name: str = ''
    area: Any = ''  # raw text as typed; may be blank or invalid while editing
    type: str = FALLBACK_TYPE
    selected: bool = False
    load: int = 0


# ==================== MODE ADAPTERS ====================

def row_to_record(row: Row, mode: str) -> Dict[str, Any]:
    """Serialize to the persisted shape of `mode`."""
    if mode == UPLOAD:
        return {
            'id': row.id,
            'sel': row.selected,
            COL_NUMBER: row.number,
            COL_NAME: row.name,
            COL_AREA: row.area,
            COL_TYPE: row.type,
            COL_LOAD: row.load,
        }
    return {
        'id': row.id,
        'sel': row.selected,
        'number': row.number,
        'name': row.name,
        'area': row.area,
        'type': row.type,
    }


def row_from_record(record: Dict[str, Any], mode: str) -> Optional[Row]:
    """Parse one persisted record; returns None when it has no usable id."""
    try:
        row_id = int(record.get('id'))
    except (TypeError, ValueError, AttributeError):
        return None

    if mode == UPLOAD:
        number, name = record.get(COL_NUMBER, ''), record.get(COL_NAME, '')
        area, occupancy_type = record.get(COL_AREA, ''), record.get(COL_TYPE, '')
    else:
        number, name = record.get('number', ''), record.get('name', '')
        area, occupancy_type = record.get('area', ''), record.get('type', '')

    return Row(
        id=row_id,
        number='' if number is None else str(number),
        name='' if name is None else str(name),
        area='' if area is None else area,
        type='' if occupancy_type is None else str(occupancy_type),
        selected=bool(record.get('sel', False)),
    )


def row_to_export_record(row: Row, factors: Dict[str, float]) -> Dict[str, Any]:
    """Canonical 5-column shape. Load is recomputed, never taken from the row."""
    return {
        COL_NUMBER: row.number,
        COL_NAME: row.name,
        COL_AREA: row.area,
        COL_TYPE: row.type,
        COL_LOAD: load_for(row, factors),
    }


# ==================== COLLECTION ====================

class RowCollection:
    """
    Editable rows for one input mode.
    Every operation receives the current factor table explicitly so type
    normalization and load derivation always use the active code set.
    """

    def __init__(self, mode: str, rows: List[Row] = None):
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode}")
        self.mode = mode
        self.rows: List[Row] = list(rows or [])

    def __len__(self):
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    # --- persistence helpers ---
    @classmethod
    def from_records(cls, mode: str, records: Any) -> 'RowCollection':
        rows = []
        if isinstance(records, list):
            for record in records:
                row = row_from_record(record, mode) if isinstance(record, dict) else None
                if row is not None:
                    rows.append(row)
        return cls(mode, rows)

    def to_records(self) -> List[Dict[str, Any]]:
        return [row_to_record(row, self.mode) for row in self.rows]

    @classmethod
    def seeded(cls, mode: str, factors: Dict[str, float]) -> 'RowCollection':
        collection = cls(mode)
        collection.clear(factors)
        return collection

    # --- lookups ---
    def get(self, row_id: int) -> Optional[Row]:
        return next((row for row in self.rows if row.id == row_id), None)

    def next_id(self) -> int:
        return max((row.id for row in self.rows), default=0) + 1

    def selected_count(self) -> int:
        return sum(1 for row in self.rows if row.selected)

    def ids(self) -> List[int]:
        return [row.id for row in self.rows]

    # --- derivation ---
    def reconcile(self, factors: Dict[str, float]):
        """Re-normalize every row's type and recompute its load, keeping ids and order."""
        self.rows = [recompute_row(row, factors) for row in self.rows]

    # --- CRUD ---
    def add_rows(self, count: int, factors: Dict[str, float]) -> List[Row]:
        types = type_list(factors)
        first_type = normalize_type(types[0] if types else None, types)
        start = self.next_id()
        added = []
        for row_id in range(start, start + max(int(count), 0)):
            added.append(Row(
                id=row_id,
                number=str(row_id),
                name=f"Space {row_id}",
                area='',
                type=first_type,
            ))
        self.rows.extend(added)
        return added

    def add_one_per_type(self, factors: Dict[str, float]) -> List[Row]:
        row_id = self.next_id()
        added = []
        for occupancy_type in type_list(factors):
            added.append(Row(id=row_id, number=str(row_id), name=occupancy_type, area='', type=occupancy_type))
            row_id += 1
        self.rows.extend(added)
        return added

    def update_field(self, row_id: int, field_name: str, value, factors: Dict[str, float]) -> bool:
        if field_name not in EDITABLE_FIELDS:
            logger.warning(f"Refusing to edit unknown field '{field_name}'")
            return False
        row = self.get(row_id)
        if row is None:
            return False

        if field_name == 'type':
            row.type = normalize_type(value, type_list(factors))
        elif field_name == 'area':
            row.area = '' if value is None else value
        else:
            setattr(row, field_name, '' if value is None else str(value))

        if field_name in ('area', 'type'):
            row.load = occupant_load(row.area, factors.get(row.type))
        return True

    def set_selected(self, row_id: int, selected: bool) -> bool:
        row = self.get(row_id)
        if row is None:
            return False
        row.selected = bool(selected)
        return True

    def remove_row(self, row_id: int) -> bool:
        before = len(self.rows)
        self.rows = [row for row in self.rows if row.id != row_id]
        return len(self.rows) != before

    def clear(self, factors: Dict[str, float]):
        """Manual mode resets to a single seed row; upload mode empties."""
        if self.mode == MANUAL:
            types = type_list(factors)
            seed_type = normalize_type(FALLBACK_TYPE, types)
            self.rows = [Row(id=1, number='1', name='Space 1', area='', type=seed_type)]
        else:
            self.rows = []

    def replace_all(self, rows: List[Row]):
        self.rows = list(rows)

    # --- bulk ---
    def set_selection_all(self, selected: bool):
        for row in self.rows:
            row.selected = bool(selected)

    def apply_type_to_selected(self, occupancy_type: str, factors: Dict[str, float]) -> int:
        if not occupancy_type:
            return 0
        normalized = normalize_type(occupancy_type, type_list(factors))
        changed = 0
        for row in self.rows:
            if row.selected:
                row.type = normalized
                row.load = occupant_load(row.area, factors.get(normalized))
                changed += 1
        return changed

    def duplicate_selected(self) -> List[Row]:
        """Clone selected rows with fresh ids. Display numbers are kept as-is."""
        row_id = self.next_id()
        duplicates = []
        for row in self.rows:
            if row.selected:
                duplicates.append(replace(row, id=row_id, selected=False))
                row_id += 1
        self.rows.extend(duplicates)
        return duplicates

    def delete_selected(self) -> int:
        before = len(self.rows)
        self.rows = [row for row in self.rows if not row.selected]
        return before - len(self.rows)
