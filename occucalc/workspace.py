# occucalc/workspace.py
"""
OccupancyWorkspace - the one owner of calculation state.

Holds the override table, both row collections and the UI preferences.
Every mutation goes through this object, which re-runs the reconcile pass
when the factor table may have changed and then writes the touched keys
back to the state store.
"""

import logging
from typing import Dict, List, Tuple

from occucalc import excel_generator, pdf_generator
from occucalc.code_registry import CODE_SETS, code_label, is_base_type, type_list
from occucalc.data_handler import import_rows
from occucalc.derivation import totals_by_type
from occucalc.override_store import OverrideStore
from occucalc.row_model import MANUAL, MODES, UPLOAD, Row, RowCollection
from occucalc.state_handler import (
    MANUAL_ROWS_KEY, OVERRIDES_KEY, UI_PREFS_KEY, UPLOAD_ROWS_KEY, Preferences
)
from occucalc.view_engine import ALL_TYPES, SortState, build_view

logger = logging.getLogger(__name__)

ROW_KEYS = {MANUAL: MANUAL_ROWS_KEY, UPLOAD: UPLOAD_ROWS_KEY}


class OccupancyWorkspace:

    def __init__(self, store):
        self.store = store
        self.prefs = Preferences.from_dict(store.read(UI_PREFS_KEY))
        self.overrides = OverrideStore.from_dict(store.read(OVERRIDES_KEY, {}))

        factors = self.factors
        manual_records = store.read(MANUAL_ROWS_KEY)
        if manual_records is None:
            manual = RowCollection.seeded(MANUAL, factors)
        else:
            manual = RowCollection.from_records(MANUAL, manual_records)
        self.collections = {
            MANUAL: manual,
            UPLOAD: RowCollection.from_records(UPLOAD, store.read(UPLOAD_ROWS_KEY, [])),
        }
        self._reconcile()
        self._validate_filter()

    # ==================== DERIVED STATE ====================
    @property
    def mode(self) -> str:
        return self.prefs.mode

    @property
    def code_id(self) -> str:
        return self.prefs.code_id

    @property
    def filter_type(self) -> str:
        return self.prefs.filter_type

    @property
    def factors(self) -> Dict[str, float]:
        return self.overrides.factors(self.prefs.code_id)

    @property
    def types(self) -> List[str]:
        return type_list(self.factors)

    @property
    def code_label(self) -> str:
        return code_label(self.prefs.code_id)

    @property
    def active(self) -> RowCollection:
        return self.collections[self.prefs.mode]

    def is_base_type(self, occupancy_type: str) -> bool:
        return is_base_type(self.prefs.code_id, occupancy_type)

    # ==================== COMMIT / RECONCILE ====================
    def _commit_prefs(self):
        self.store.write(UI_PREFS_KEY, self.prefs.to_dict())

    def _commit_overrides(self):
        self.store.write(OVERRIDES_KEY, self.overrides.to_dict())

    def _commit_rows(self, mode: str = None):
        modes = [mode] if mode else list(MODES)
        for m in modes:
            self.store.write(ROW_KEYS[m], self.collections[m].to_records())

    def _validate_filter(self):
        if self.prefs.filter_type != ALL_TYPES and self.prefs.filter_type not in self.types:
            self.prefs.filter_type = ALL_TYPES
            return True
        return False

    def _reconcile(self):
        factors = self.factors
        for collection in self.collections.values():
            collection.reconcile(factors)

    def _factors_changed(self):
        """Type list or factors moved: re-normalize every row in both modes and persist."""
        self._reconcile()
        self._commit_rows()
        if self._validate_filter():
            self._commit_prefs()

    # ==================== PREFERENCES ====================
    def set_mode(self, mode: str) -> bool:
        if mode not in MODES or mode == self.prefs.mode:
            return False
        self.prefs.mode = mode
        self._commit_prefs()
        return True

    def set_code(self, code_id: str) -> bool:
        if code_id not in CODE_SETS or code_id == self.prefs.code_id:
            return False
        self.prefs.code_id = code_id
        self._commit_prefs()
        self._factors_changed()
        logger.info(f"Active code set: {code_id}")
        return True

    def set_filter(self, filter_type: str) -> bool:
        if filter_type != ALL_TYPES and filter_type not in self.types:
            filter_type = ALL_TYPES
        if filter_type == self.prefs.filter_type:
            return False
        self.prefs.filter_type = filter_type
        self._commit_prefs()
        return True

    # ==================== FACTOR EDITS ====================
    def set_factor(self, occupancy_type: str, value) -> bool:
        if not self.overrides.set_factor(self.prefs.code_id, occupancy_type, value):
            return False
        self._commit_overrides()
        self._factors_changed()
        return True

    def add_type(self, name: str) -> bool:
        if not self.overrides.add_type(self.prefs.code_id, name):
            return False
        self._commit_overrides()
        self._factors_changed()
        return True

    def delete_type(self, occupancy_type: str) -> bool:
        if not self.overrides.delete_type(self.prefs.code_id, occupancy_type):
            return False
        self._commit_overrides()
        self._factors_changed()
        return True

    def reset_code(self, code_id: str = None) -> bool:
        if not self.overrides.reset_code(code_id or self.prefs.code_id):
            return False
        self._commit_overrides()
        self._factors_changed()
        return True

    # ==================== ROW OPERATIONS (active mode) ====================
    def add_rows(self, count: int = 1) -> List[Row]:
        added = self.active.add_rows(count, self.factors)
        self._commit_rows(self.mode)
        return added

    def add_one_per_type(self) -> List[Row]:
        added = self.active.add_one_per_type(self.factors)
        self._commit_rows(self.mode)
        return added

    def update_field(self, row_id: int, field_name: str, value) -> bool:
        changed = self.active.update_field(row_id, field_name, value, self.factors)
        if changed:
            self._commit_rows(self.mode)
        return changed

    def set_selected(self, row_id: int, selected: bool) -> bool:
        changed = self.active.set_selected(row_id, selected)
        if changed:
            self._commit_rows(self.mode)
        return changed

    def remove_row(self, row_id: int) -> bool:
        changed = self.active.remove_row(row_id)
        if changed:
            self._commit_rows(self.mode)
        return changed

    def clear(self):
        self.active.clear(self.factors)
        self._commit_rows(self.mode)

    def set_selection_all(self, selected: bool):
        self.active.set_selection_all(selected)
        self._commit_rows(self.mode)

    def apply_type_to_selected(self, occupancy_type: str) -> int:
        changed = self.active.apply_type_to_selected(occupancy_type, self.factors)
        if changed:
            self._commit_rows(self.mode)
        return changed

    def duplicate_selected(self) -> List[Row]:
        duplicates = self.active.duplicate_selected()
        if duplicates:
            self._commit_rows(self.mode)
        return duplicates

    def delete_selected(self) -> int:
        removed = self.active.delete_selected()
        if removed:
            self._commit_rows(self.mode)
        return removed

    # ==================== IMPORT / VIEW / EXPORT ====================
    def import_file(self, file, filename: str) -> int:
        """Replace the upload-mode rows with the sheet's contents; raises ImportParseError."""
        rows = import_rows(file, filename, self.factors)
        self.collections[UPLOAD].replace_all(rows)
        self._commit_rows(UPLOAD)
        return len(rows)

    def view(self, search: str = '', sort: SortState = None) -> List[Row]:
        return build_view(self.active.rows, self.factors, self.prefs.filter_type, search, sort)

    def totals(self) -> Tuple[Dict[str, int], int]:
        return totals_by_type(self.active.rows, self.factors)

    def export_excel(self) -> bytes:
        return excel_generator.generate_occupancy_excel(self.active.rows, self.factors)

    def export_summary_pdf(self) -> bytes:
        return pdf_generator.generate_summary_pdf(self.active.rows, self.factors, self.code_label)

    def export_detailed_pdf(self) -> bytes:
        return pdf_generator.generate_detailed_pdf(self.active.rows, self.factors, self.code_label)

    @staticmethod
    def export_template() -> bytes:
        return excel_generator.generate_template_excel()
