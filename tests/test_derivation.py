import math

import pytest

from occucalc.derivation import (
    MIN_FACTOR, occupant_load, reconcile, to_number, totals_by_type
)
from occucalc.row_model import Row


@pytest.mark.parametrize("area", ['', 'abc', None, 0, -5, '-1', 'nan', 'inf', '0'])
def test_invalid_or_non_positive_area_gives_zero(area):
    assert occupant_load(area, 9.3) == 0


@pytest.mark.parametrize("area, factor, expected", [
    (186, 9.3, 20),
    (140, 2.8, 50),
    (56, 4.6, 13),
    ('100', '10', 10),
    (1, 28, 1),
    (93, 46.5, 2),
])
def test_ceiling_division(area, factor, expected):
    assert occupant_load(area, factor) == expected


@pytest.mark.parametrize("factor", [0, -3, None, 'x', float('nan')])
def test_bad_factor_is_clamped(factor):
    assert occupant_load(1, factor) == occupant_load(1, MIN_FACTOR)
    assert occupant_load(1, factor) > 0


def test_to_number():
    assert to_number(' 12.5 ') == 12.5
    assert to_number('') == 0
    assert to_number(True) == 0
    assert to_number(float('inf')) == 0


def test_reconcile_normalizes_and_recomputes(generic_factors):
    rows = [
        Row(id=7, number='7', name='Cafe', area='14', type='Restaurant', selected=True),
        Row(id=9, number='9', name='Old', area='28', type='Classroom', load=123),
    ]
    result = reconcile(rows, generic_factors)

    assert [r.id for r in result] == [7, 9]
    assert result[0].load == 10
    assert result[0].selected is True
    assert result[1].type == 'Retail'
    assert result[1].load == math.ceil(28 / 2.8)
    # inputs untouched
    assert rows[1].type == 'Classroom'
    assert rows[1].load == 123


def test_totals_by_type(sample_rows, ibc_factors):
    totals, grand_total = totals_by_type(sample_rows, ibc_factors)
    assert totals == {
        'Business/Office': 20,
        'Retail / Mercantile – sales floor': 50,
        'Laboratory': 13,
        'Mechanical / Electrical': 10,
    }
    assert grand_total == 93


@pytest.mark.parametrize("area, factor", [
    (1e308, 0.25),
    ('1e308', 0.25),
    (1e10, 1e-300),
])
def test_overflowing_quotient_gives_zero(area, factor):
    assert occupant_load(area, factor) == 0


@pytest.mark.parametrize("text", ['1_000', '١٢', '0x10', '1,000', '12 m2', '--1'])
def test_only_plain_decimal_text_is_numeric(text):
    assert to_number(text) == 0
    assert occupant_load(text, 1) == 0


@pytest.mark.parametrize("text, expected", [('.5', 0.5), ('+3', 3), ('2.', 2), ('1E2', 100)])
def test_decimal_and_exponent_text(text, expected):
    assert to_number(text) == expected
