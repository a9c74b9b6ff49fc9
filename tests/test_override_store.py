import pytest

from occucalc.override_store import OverrideStore


@pytest.mark.parametrize("value", [0, -1, 'abc', None, float('inf'), float('nan')])
def test_set_factor_rejects_invalid_values(value):
    store = OverrideStore()
    assert store.set_factor('GENERIC', 'Retail', value) is False
    assert store.to_dict() == {}


def test_set_factor_overwrites_only_active_code():
    store = OverrideStore()
    assert store.set_factor('GENERIC', 'Retail', '5')
    assert store.factors('GENERIC')['Retail'] == 5
    assert store.factors('IBC_2024')['Business/Office'] == 9.3


def test_add_type():
    store = OverrideStore()
    assert store.add_type('GENERIC', '  ') is False
    assert store.add_type('GENERIC', 'Retail') is False
    assert store.add_type('GENERIC', ' Kiosk ') is True
    assert store.add_type('GENERIC', 'Kiosk') is False
    assert store.factors('GENERIC')['Kiosk'] == 10
    assert list(store.factors('GENERIC'))[-1] == 'Kiosk'


def test_delete_type_protects_base_entries():
    store = OverrideStore()
    store.set_factor('GENERIC', 'Retail', 4)
    store.add_type('GENERIC', 'Kiosk')

    assert store.delete_type('GENERIC', 'Retail') is False
    assert store.factors('GENERIC')['Retail'] == 4
    assert store.delete_type('GENERIC', 'Kiosk') is True
    assert 'Kiosk' not in store.factors('GENERIC')
    assert store.delete_type('GENERIC', 'Kiosk') is False


def test_reset_code_reverts_to_base():
    store = OverrideStore()
    store.set_factor('GENERIC', 'Retail', 4)
    store.set_factor('IBC_2024', 'Classroom', 3)

    assert store.reset_code('GENERIC') is True
    assert store.factors('GENERIC')['Retail'] == 2.8
    assert 'GENERIC' not in store.to_dict()
    assert store.for_code('IBC_2024') == {'Classroom': 3}
    assert store.reset_code('GENERIC') is False


def test_from_dict_drops_garbage():
    store = OverrideStore.from_dict({
        'GENERIC': {'Retail': 3, 'Bad': -1, 'Worse': 'x'},
        'IBC_2024': 'not a table',
    })
    assert store.to_dict() == {'GENERIC': {'Retail': 3.0}}
    assert OverrideStore.from_dict(None).to_dict() == {}


def test_digit_separators_are_not_factors():
    store = OverrideStore()
    assert store.set_factor('GENERIC', 'Retail', '1_000') is False
    assert store.factors('GENERIC')['Retail'] == 2.8
