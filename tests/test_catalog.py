import json

import pytest
from careersql.catalog.catalog import Catalog
from careersql.catalog.schema import CatalogError, TableSchema
from careersql.types.value import Type

@pytest.fixture
def catalog():
    return Catalog.from_file()

def test_bundled_dataset(catalog):
    assert catalog.list_databases() == ['career_db', 'private_db']
    assert catalog.list_tables('career_db') == ['engineers', 'skills', 'projects']
    assert catalog.list_tables('private_db') == ['games', 'anime', 'books']
    assert catalog.list_columns('career_db', 'skills') == ['id', 'engineer_id', 'skill_name', 'years_used']

def test_missing_lookups(catalog):
    assert catalog.get_database(None) is None
    assert catalog.list_tables('nope') == []
    assert catalog.get_table('career_db', 'nope') is None
    assert catalog.list_columns('nope', 'engineers') == []
    assert not catalog.has_database('nope')

def test_structure_omits_rows(catalog):
    structure = catalog.structure('career_db')
    assert structure['engineers'] == {'columns': ['id', 'name', 'years_of_experience', 'current_position']}
    assert catalog.structure('nope') == {}

def test_round_trip_dict(catalog):
    data = catalog.to_dict()
    assert data['databases']['private_db']['tables']['anime']['data'][0][1] == '葬送のフリーレン'
    assert Catalog.from_dict(data).list_databases() == catalog.list_databases()

def test_column_type_inference(catalog):
    table = catalog.get_table('career_db', 'engineers')
    assert table.column_type('id') == Type.INTEGER
    assert table.column_type('name') == Type.TEXT
    assert TableSchema('empty', ['a']).column_type('a') == Type.TEXT
    assert TableSchema('nulls', ['a'], [[None]]).column_type('a') == Type.TEXT
    assert TableSchema('floats', ['a'], [[1.5]]).column_type('a') == Type.NUMERIC

def test_row_length_is_validated():
    with pytest.raises(CatalogError):
        TableSchema('bad', ['a', 'b'], [[1]])

def test_duplicate_columns_are_rejected():
    with pytest.raises(CatalogError):
        TableSchema('bad', ['a', 'a'])

def test_from_dict_rejects_bad_shape():
    with pytest.raises(CatalogError):
        Catalog.from_dict({'tables': {}})
    with pytest.raises(CatalogError):
        Catalog.from_dict({'databases': {'db': {}}})
    with pytest.raises(CatalogError):
        Catalog.from_dict({'databases': {'db': {'tables': {'t': {'data': []}}}}})

def test_from_file(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps({'databases': {'db': {'tables': {
        't': {'columns': ['id'], 'data': [[1], [2]]}}}}}), encoding='utf-8')
    catalog = Catalog.from_file(path)
    assert catalog.get_table('db', 't').rows == [[1], [2]]

def test_from_file_errors(tmp_path):
    with pytest.raises(CatalogError):
        Catalog.from_file(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding='utf-8')
    with pytest.raises(CatalogError):
        Catalog.from_file(broken)

@pytest.mark.parametrize("data", [
    {'databases': {'db': ['not', 'a', 'mapping']}},
    {'databases': {'db': None}},
    {'databases': {'db': {'tables': {'t': ['id']}}}},
    {'databases': {'db': {'tables': {'t': None}}}},
])
def test_from_dict_rejects_non_mapping_entries(data):
    with pytest.raises(CatalogError):
        Catalog.from_dict(data)
