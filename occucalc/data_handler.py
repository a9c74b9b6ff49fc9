# occucalc/data_handler.py

import logging
import math
from pathlib import Path
from typing import Dict, List

import pandas as pd

from occucalc.code_registry import normalize_type, type_list
from occucalc.derivation import occupant_load
from occucalc.row_model import COL_AREA, COL_NAME, COL_NUMBER, COL_TYPE, Row

logger = logging.getLogger(__name__)

# First header present wins
HEADER_ALIASES = {
    'number': [COL_NUMBER, 'Room Number'],
    'name': [COL_NAME, 'Name'],
    'area': [COL_AREA, 'Area'],
    'type': [COL_TYPE, 'Type'],
}


class ImportParseError(Exception):
    """The uploaded file could not be read as a spreadsheet."""


def read_sheet(file, filename: str = '') -> pd.DataFrame:
    """
    Loads the first worksheet of an .xlsx or legacy .xls workbook (or a CSV
    file) with every cell kept as-is and blanks turned into empty strings.
    Header names are stripped.
    """
    suffix = Path(filename or getattr(file, 'name', '') or '').suffix.lower()
    try:
        if suffix == '.csv':
            df = pd.read_csv(file, dtype=object, keep_default_na=False)
        else:
            engine = 'xlrd' if suffix == '.xls' else None
            df = pd.read_excel(file, sheet_name=0, engine=engine, dtype=object, keep_default_na=False)
    except Exception as e:
        logger.error(f"Could not read '{filename}': {e}")
        raise ImportParseError(f"Could not read '{filename or 'file'}' as a spreadsheet: {e}") from e

    df.columns = [str(col).strip() for col in df.columns]
    return df.fillna('')


def _cell_text(value) -> str:
    """Render a spreadsheet cell as text; integral floats lose their '.0'."""
    if value is None:
        return ''
    if isinstance(value, float):
        if not math.isfinite(value):
            return ''
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def _resolve_columns(columns) -> Dict[str, str]:
    resolved = {}
    for field_name, aliases in HEADER_ALIASES.items():
        for alias in aliases:
            if alias in columns:
                resolved[field_name] = alias
                break
    return resolved


def rows_from_dataframe(df: pd.DataFrame, factors: Dict[str, float]) -> List[Row]:
    """Map sheet records onto upload-mode rows; unrecognized columns are ignored."""
    types = type_list(factors)
    columns = _resolve_columns(list(df.columns))
    if not columns:
        logger.warning(f"No recognized headers in import: {list(df.columns)}")

    rows = []
    for i, record in enumerate(df.to_dict('records')):
        row_id = i + 1
        number = _cell_text(record[columns['number']]) if 'number' in columns else str(row_id)
        name = _cell_text(record[columns['name']]) if 'name' in columns else f"Space {row_id}"
        area = _cell_text(record[columns['area']]) if 'area' in columns else ''
        raw_type = record[columns['type']] if 'type' in columns else None
        occupancy_type = normalize_type(raw_type, types)

        rows.append(Row(
            id=row_id,
            number=number,
            name=name,
            area=area,
            type=occupancy_type,
            load=occupant_load(area, factors.get(occupancy_type)),
        ))
    return rows


def import_rows(file, filename: str, factors: Dict[str, float]) -> List[Row]:
    df = read_sheet(file, filename)
    rows = rows_from_dataframe(df, factors)
    logger.info(f"Imported {len(rows)} rows from '{filename}'")
    return rows
