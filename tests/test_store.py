"""Tests for listarr/store.py - JSON list storage"""

import json

import pytest
from unittest.mock import patch

from listarr.errors import ListStoreError
from listarr.models import Source
from listarr.store import ListStore, load_json_document, save_json_document


@pytest.fixture
def store(tmp_path):
    return ListStore(str(tmp_path / 'lists.json'))


class TestJsonDocuments:
    """Tests for load_json_document / save_json_document"""

    def test_missing_file_is_none(self, tmp_path):
        assert load_json_document(str(tmp_path / 'missing.json')) is None

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / 'lists.json'
        path.write_text('{not json')
        with pytest.raises(ListStoreError, match="Could not read"):
            load_json_document(str(path))

    def test_save_creates_directories(self, tmp_path):
        path = tmp_path / 'nested' / 'dir' / 'lists.json'

        save_json_document(str(path), {'lists': {}})

        assert json.loads(path.read_text()) == {'lists': {}}
        assert [p.name for p in path.parent.iterdir()] == ['lists.json']

    def test_save_failure_raises_store_error(self, tmp_path):
        with patch('listarr.store.os.replace', side_effect=OSError("disk full")):
            with pytest.raises(ListStoreError, match="disk full"):
                save_json_document(str(tmp_path / 'lists.json'), {'lists': {}})
        assert list(tmp_path.iterdir()) == []


class TestListStore:
    """Tests for ListStore"""

    def test_empty_store(self, store):
        assert store.list_names() == []

    def test_create_list(self, store):
        store.create_list('weekend')

        assert store.list_names() == ['weekend']
        assert store.get_items('weekend') == ()

    def test_create_duplicate_raises(self, store):
        store.create_list('weekend')
        with pytest.raises(ListStoreError, match="already exists"):
            store.create_list('weekend')

    def test_create_blank_name_raises(self, store):
        with pytest.raises(ListStoreError, match="name required"):
            store.create_list('   ')

    def test_add_items_keeps_order(self, store):
        store.create_list('weekend')
        store.add_item('weekend', 'imdb:tt0111161', added_by='ana')
        store.add_item('weekend', 'tmdb:550')
        store.add_item('weekend', 'tt0903747')

        items = store.get_items('weekend')

        assert [i.spec for i in items] == ['imdb:tt0111161', 'tmdb:550', 'imdb:tt0903747']
        assert items[0].added_by == 'ana'
        assert items[1].source is Source.TMDB

    def test_add_to_missing_list_raises(self, store):
        with pytest.raises(ListStoreError, match="List not found"):
            store.add_item('missing', 'imdb:tt1')

    def test_add_bad_spec_raises(self, store):
        store.create_list('weekend')
        with pytest.raises(ValueError):
            store.add_item('weekend', 'netflix:80100172')
        assert store.get_items('weekend') == ()

    def test_remove_item(self, store):
        store.create_list('weekend')
        store.add_item('weekend', 'imdb:tt1')
        store.add_item('weekend', 'imdb:tt2')

        removed = store.remove_item('weekend', 1)

        assert removed.external_id == 'tt1'
        assert [i.external_id for i in store.get_items('weekend')] == ['tt2']

    @pytest.mark.parametrize("index", [0, 3, -1])
    def test_remove_out_of_range(self, store, index):
        store.create_list('weekend')
        store.add_item('weekend', 'imdb:tt1')
        store.add_item('weekend', 'imdb:tt2')

        with pytest.raises(ListStoreError, match="No item"):
            store.remove_item('weekend', index)

    def test_unreadable_items_skipped(self, tmp_path):
        path = tmp_path / 'lists.json'
        path.write_text(json.dumps({'lists': {'old': [
            {'source': 'imdb', 'id': 'tt1', 'date': '2022-01-01'},
            {'source': 'netflix', 'id': '80100172'},
            {'source': 'tmdb'},
            {'source': 'tmdb', 'id': '550'},
        ]}}))

        items = ListStore(str(path)).get_items('old')

        assert [i.spec for i in items] == ['imdb:tt1', 'tmdb:550']
        assert items[0].added_at == '2022-01-01'

    def test_remove_unreadable_item(self, tmp_path):
        path = tmp_path / 'lists.json'
        path.write_text(json.dumps({'lists': {'old': [{'source': 'netflix', 'id': 'x'}]}}))
        store = ListStore(str(path))

        assert store.remove_item('old', 1) is None
        assert store.get_items('old') == ()

    def test_persisted_format(self, store):
        store.create_list('weekend')
        store.add_item('weekend', 'tmdb:278', added_by='sam')

        with open(store.path, encoding='utf-8') as f:
            data = json.load(f)

        entry = data['lists']['weekend'][0]
        assert entry['source'] == 'tmdb'
        assert entry['id'] == '278'
        assert entry['added_by'] == 'sam'
        assert 'added_at' in entry

    @pytest.mark.parametrize("content", [
        '{not json',
        json.dumps(['not', 'a', 'dict']),
        json.dumps({'lists': ['weekend']}),
        'null',
    ])
    def test_unparseable_file_raises_and_is_kept(self, tmp_path, content):
        path = tmp_path / 'lists.json'
        path.write_text(content)
        store = ListStore(str(path))

        with pytest.raises(ListStoreError, match="Could not read"):
            store.list_names()
        with pytest.raises(ListStoreError):
            store.create_list('weekend')
        with pytest.raises(ListStoreError):
            store.add_item('weekend', 'imdb:tt1')

        assert path.read_text() == content
        assert [p.name for p in tmp_path.iterdir()] == ['lists.json']

    def test_missing_file_is_empty_store(self, tmp_path):
        store = ListStore(str(tmp_path / 'lists.json'))

        assert store.list_names() == []
        store.create_list('weekend')
        assert store.list_names() == ['weekend']
