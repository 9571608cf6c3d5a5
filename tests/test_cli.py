"""
Tests for the command line interface.
"""
import io
import json
from unittest.mock import Mock, patch

import indexbridgecli
from indexbridge.component.group import IDENTIFIER_HEADER, BASE_URL_HEADER, IndexerGroup


def test_events():
    group = Mock()
    headers = {IDENTIFIER_HEADER: '/a', BASE_URL_HEADER: 'http://r/'}
    events_file = io.StringIO(json.dumps(headers) + '\n\nnot json\n' + json.dumps(headers) + '\n')

    count = indexbridgecli.events(group, events_file)

    assert count == 2
    assert group.on_event.call_count == 2
    group.on_event.assert_called_with(headers)


def test_events_unreadable_line(repository, rdf_indexer):
    repository.add_resource('http://r/a')
    group = IndexerGroup('http://r/', [rdf_indexer], session=repository)
    headers = {IDENTIFIER_HEADER: 'a', BASE_URL_HEADER: 'http://r/'}
    events_file = io.StringIO('[1]\n42\n' + json.dumps(headers) + '\n')

    count = indexbridgecli.events(group, events_file)

    assert count == 1
    assert rdf_indexer.updated() == ['http://r/a']


@patch('indexbridgecli.Reindexer')
def test_reindex_all(reindexer):
    group = Mock()
    reindexer.return_value.reindex_all.return_value = ['http://r/']

    assert indexbridgecli.reindex(group) == ['http://r/']
    reindexer.return_value.reindex.assert_not_called()


@patch('indexbridgecli.Reindexer')
def test_reindex_uri(reindexer):
    group = Mock()
    reindexer.return_value.reindex.return_value = ['http://r/a']

    indexbridgecli.reindex(group, 'http://r/a', False)

    reindexer.return_value.reindex.assert_called_once_with('http://r/a', False)


@patch('indexbridgecli.IndexerGroup')
@patch('indexbridgecli.Reindexer')
def test_main_reindex(reindexer, indexer_group, tmp_path):
    reindexer.return_value.reindex.return_value = []

    code = indexbridgecli.main(['-c', str(tmp_path / 'config.cfg'), 'reindex', 'http://r/a',
                                '--no-recursive'])

    assert code == 0
    reindexer.return_value.reindex.assert_called_once_with('http://r/a', False)
    indexer_group.from_config.return_value.close.assert_called_once_with()


def test_main_unknown_command(tmp_path):
    assert indexbridgecli.main(['-c', str(tmp_path / 'config.cfg'), 'dance']) == 1
