import pytest

from occucalc.row_model import (
    COL_AREA, COL_LOAD, COL_NUMBER, MANUAL, UPLOAD, Row, RowCollection,
    row_from_record, row_to_export_record, row_to_record
)


def test_unknown_mode_is_rejected():
    with pytest.raises(ValueError):
        RowCollection('spreadsheet')


def test_record_shapes_per_mode():
    row = Row(id=3, number='103', name='Lab 1', area='56', type='Laboratory', selected=True, load=13)

    manual = row_to_record(row, MANUAL)
    assert manual == {'id': 3, 'sel': True, 'number': '103', 'name': 'Lab 1',
                      'area': '56', 'type': 'Laboratory'}

    upload = row_to_record(row, UPLOAD)
    assert upload[COL_NUMBER] == '103'
    assert upload[COL_AREA] == '56'
    assert upload[COL_LOAD] == 13

    assert row_from_record(manual, MANUAL) == Row(3, '103', 'Lab 1', '56', 'Laboratory', True, 0)
    assert row_from_record(upload, UPLOAD).name == 'Lab 1'


def test_records_without_id_are_skipped():
    assert row_from_record({'number': '1'}, MANUAL) is None
    collection = RowCollection.from_records(MANUAL, [{'id': 'x'}, 'junk', {'id': 2, 'name': 'ok'}])
    assert collection.ids() == [2]
    assert len(RowCollection.from_records(UPLOAD, {'not': 'a list'})) == 0


def test_export_record_recomputes_load(ibc_factors):
    row = Row(id=1, number='101', name='Open Office', area='186', type='Business/Office', load=999)
    assert row_to_export_record(row, ibc_factors)[COL_LOAD] == 20


def test_seeded_manual_collection(ibc_factors, generic_factors):
    manual = RowCollection.seeded(MANUAL, generic_factors)
    assert manual.rows == [Row(id=1, number='1', name='Space 1', area='', type='Retail')]
    # IBC has no "Retail" entry, so the seed takes the first type
    assert RowCollection.seeded(MANUAL, ibc_factors).rows[0].type == 'Assembly – fixed seats'
    assert len(RowCollection.seeded(UPLOAD, generic_factors)) == 0


def test_add_rows_continues_after_highest_id(generic_factors):
    collection = RowCollection(MANUAL, [Row(id=1), Row(id=5)])
    added = collection.add_rows(2, generic_factors)

    assert [row.id for row in added] == [6, 7]
    assert added[0].number == '6'
    assert added[0].name == 'Space 6'
    assert added[0].area == ''
    assert added[0].type == 'Retail'
    assert added[0].load == 0


def test_add_one_per_type(generic_factors):
    collection = RowCollection(UPLOAD)
    added = collection.add_one_per_type(generic_factors)
    assert [row.type for row in added] == list(generic_factors)
    assert [row.name for row in added] == list(generic_factors)
    assert collection.ids() == [1, 2, 3, 4]


def test_update_field_recomputes_load(generic_factors):
    collection = RowCollection.seeded(MANUAL, generic_factors)

    assert collection.update_field(1, 'area', '28', generic_factors)
    assert collection.get(1).load == 10
    assert collection.update_field(1, 'type', 'Mechanical', generic_factors)
    assert collection.get(1).load == 1
    assert collection.update_field(1, 'type', 'Ballroom', generic_factors)
    assert collection.get(1).type == 'Retail'
    assert collection.update_field(1, 'area', 'lots', generic_factors)
    assert collection.get(1).load == 0


def test_update_field_ignores_unknown_fields_and_rows(generic_factors):
    collection = RowCollection.seeded(MANUAL, generic_factors)
    assert collection.update_field(1, 'load', 50, generic_factors) is False
    assert collection.update_field(1, 'id', 9, generic_factors) is False
    assert collection.update_field(42, 'name', 'x', generic_factors) is False
    assert collection.get(1).load == 0


def test_remove_row_and_clear(generic_factors):
    collection = RowCollection(MANUAL, [Row(id=1), Row(id=2)])
    assert collection.remove_row(2)
    assert not collection.remove_row(2)
    collection.add_rows(3, generic_factors)
    collection.clear(generic_factors)
    assert collection.ids() == [1]


def test_bulk_type_change_only_touches_selected(generic_factors):
    collection = RowCollection(MANUAL, [
        Row(id=1, area='28', type='Retail', selected=True),
        Row(id=2, area='28', type='Retail'),
    ])
    assert collection.apply_type_to_selected('Mechanical', generic_factors) == 1
    assert collection.get(1).type == 'Mechanical'
    assert collection.get(1).load == 1
    assert collection.get(2).type == 'Retail'
    assert collection.apply_type_to_selected('', generic_factors) == 0


def test_duplicate_keeps_numbers_and_clears_selection():
    collection = RowCollection(MANUAL, [
        Row(id=1, number='101', name='A', area='10', selected=True),
        Row(id=2, number='102', name='B'),
        Row(id=3, number='103', name='C', selected=True),
    ])
    duplicates = collection.duplicate_selected()

    assert [row.id for row in duplicates] == [4, 5]
    assert [row.number for row in duplicates] == ['101', '103']
    assert not any(row.selected for row in duplicates)
    assert collection.get(1).selected
    assert collection.ids() == [1, 2, 3, 4, 5]


def test_delete_selected():
    collection = RowCollection(UPLOAD, [Row(id=1, selected=True), Row(id=2), Row(id=3, selected=True)])
    assert collection.selected_count() == 2
    assert collection.delete_selected() == 2
    assert collection.ids() == [2]
    collection.set_selection_all(True)
    assert collection.selected_count() == 1


def test_huge_area_does_not_break_later_derivations(ibc_factors):
    collection = RowCollection.seeded(MANUAL, ibc_factors)
    assert collection.update_field(1, 'type', 'Stair', ibc_factors)
    assert collection.update_field(1, 'area', '1e308', ibc_factors)

    assert collection.get(1).load == 0
    collection.reconcile(ibc_factors)
    assert collection.get(1).load == 0
