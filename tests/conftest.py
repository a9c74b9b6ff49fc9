import pytest

from occucalc.code_registry import resolve_factors
from occucalc.row_model import Row
from occucalc.state_handler import MemoryStateStore
from occucalc.workspace import OccupancyWorkspace


@pytest.fixture
def ibc_factors():
    return resolve_factors('IBC_2024', {})


@pytest.fixture
def generic_factors():
    return resolve_factors('GENERIC', {})


@pytest.fixture
def sample_rows():
    return [
        Row(id=1, number='101', name='Open Office', area='186', type='Business/Office'),
        Row(id=2, number='102', name='Sales Floor', area='140', type='Retail / Mercantile – sales floor'),
        Row(id=3, number='103', name='Lab 1', area='56', type='Laboratory'),
        Row(id=4, number='B01', name='Plant Room', area='280', type='Mechanical / Electrical'),
    ]


@pytest.fixture
def store():
    return MemoryStateStore()


@pytest.fixture
def workspace(store):
    return OccupancyWorkspace(store)
