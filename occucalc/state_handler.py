# occucalc/state_handler.py
# Local key-value persistence: one JSON document per key, written atomically.

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from occucalc.code_registry import CODE_SETS, DEFAULT_CODE_ID
from occucalc.row_model import MANUAL, MODES
from occucalc.view_engine import ALL_TYPES

logger = logging.getLogger(__name__)

OVERRIDES_KEY = "occuCalc.codeOverrides.v1"
MANUAL_ROWS_KEY = "occuCalc.data.manual.v1"
UPLOAD_ROWS_KEY = "occuCalc.data.upload.v1"
UI_PREFS_KEY = "occuCalc.ui.prefs.v1"


def sanitize_for_json(data):
    """
    Recursively converts NumPy and pandas values (as produced by spreadsheet
    imports) to native Python types that json can serialize.
    """
    if isinstance(data, dict):
        return {str(key): sanitize_for_json(value) for key, value in data.items()}
    elif isinstance(data, (list, tuple)):
        return [sanitize_for_json(item) for item in data]
    elif isinstance(data, np.bool_):
        return bool(data)
    elif isinstance(data, np.integer):
        return int(data)
    elif isinstance(data, np.floating):
        return None if np.isnan(data) else float(data)
    elif isinstance(data, np.ndarray):
        return sanitize_for_json(data.tolist())
    elif isinstance(data, (str, int, float, bool)) or data is None:
        return data
    elif pd.isna(data):
        return None
    else:
        return str(data)


@dataclass
class Preferences:
    """Session-continuity settings; they never affect calculated loads."""
    mode: str = MANUAL
    code_id: str = DEFAULT_CODE_ID
    filter_type: str = ALL_TYPES

    @classmethod
    def from_dict(cls, raw: Any) -> 'Preferences':
        prefs = cls()
        if not isinstance(raw, dict):
            return prefs
        if raw.get('mode') in MODES:
            prefs.mode = raw['mode']
        if raw.get('codeId') in CODE_SETS:
            prefs.code_id = raw['codeId']
        if isinstance(raw.get('filterType'), str) and raw['filterType']:
            prefs.filter_type = raw['filterType']
        return prefs

    def to_dict(self):
        data = asdict(self)
        return {'mode': data['mode'], 'codeId': data['code_id'], 'filterType': data['filter_type']}


class LocalStateStore:
    """
    Best-effort persistence. Reads fall back to the caller's default and
    writes report failure through their return value; neither raises.
    """

    def __init__(self, root):
        self.root = Path(root).expanduser()

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def read(self, key: str, default=None):
        path = self.path_for(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable state '{key}': {e}")
            return default

    def write(self, key: str, value) -> bool:
        path = self.path_for(key)
        tmp = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            data = json.dumps(sanitize_for_json(value), ensure_ascii=False, indent=2)
            fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix=".state_")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data + "\n")
            # os.replace() is atomic on the same filesystem
            os.replace(tmp, path)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Could not persist state '{key}': {e}")
            if tmp:
                Path(tmp).unlink(missing_ok=True)
            return False

    def delete(self, key: str) -> bool:
        try:
            self.path_for(key).unlink(missing_ok=True)
            return True
        except OSError as e:
            logger.warning(f"Could not delete state '{key}': {e}")
            return False


class MemoryStateStore:
    """In-process store with the same interface, for sessions without a writable disk."""

    def __init__(self, initial=None):
        self._data = {key: json.dumps(sanitize_for_json(value)) for key, value in (initial or {}).items()}

    def read(self, key: str, default=None):
        raw = self._data.get(key)
        return default if raw is None else json.loads(raw)

    def write(self, key: str, value) -> bool:
        self._data[key] = json.dumps(sanitize_for_json(value))
        return True

    def delete(self, key: str) -> bool:
        self._data.pop(key, None)
        return True
