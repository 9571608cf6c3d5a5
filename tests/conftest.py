"""
Shared fixtures: an in-memory repository standing for the requests session
and indexers recording the calls they receive.
"""
import json

import pytest

from indexbridge.component.group import IndexerGroup
from indexbridge.storage.indexer import Indexer, IndexerType
from indexbridge.util.namespaces import INDEXABLE, INDEXING_TRANSFORM, HAS_CHILD, DATASTREAM

REPOSITORY_URL = 'http://r/'


class FakeResponse(object):
    def __init__(self, status_code, text, content_type):
        self.status_code = status_code
        self.text = text
        self.headers = {'Content-Type': content_type}

    @property
    def ok(self):
        return self.status_code < 400


class FakeRepository(object):
    """Answers GET requests from a dictionary of documents."""

    def __init__(self):
        self.documents = {}
        self.requested = []
        self.closed = False

    def add(self, uri, body, content_type='text/turtle'):
        self.documents[uri] = (body, content_type)

    def add_resource(self, uri, indexable=True, datastream=False,
                     transform=None, children=(), title='A title'):
        """Add the Turtle description of a resource."""
        lines = ['<{}> <http://purl.org/dc/elements/1.1/title> "{}" .'.format(uri, title)]
        if indexable:
            lines.append('<{}> a <{}> .'.format(uri, INDEXABLE))
        if datastream:
            lines.append('<{}> a <{}> .'.format(uri, DATASTREAM))
        if transform is not None:
            if transform.startswith('http'):
                lines.append('<{}> <{}> <{}> .'.format(uri, INDEXING_TRANSFORM, transform))
            else:
                lines.append('<{}> <{}> "{}" .'.format(uri, INDEXING_TRANSFORM, transform))
        for child in children:
            lines.append('<{}> <{}> <{}> .'.format(uri, HAS_CHILD, child))
        self.add(uri, '\n'.join(lines))

    def add_fields(self, uri, key, fields):
        """Add the answer of the server side transform "key" for uri."""
        self.add('{}/fcr:transform/{}'.format(uri, key), json.dumps([fields]),
                 'application/json')

    def get(self, uri, headers=None):
        self.requested.append(uri)
        if uri not in self.documents:
            return FakeResponse(404, 'Not Found', 'text/plain')
        (body, content_type) = self.documents[uri]
        return FakeResponse(200, body, content_type)

    def count(self, uri):
        return self.requested.count(uri)

    def close(self):
        self.closed = True


class RecordingIndexer(Indexer):
    """Keeps track of the calls, optionally failing on every one of them."""

    def __init__(self, indexer_type, fail=False):
        self.INDEXER_TYPE = indexer_type
        self.fail = fail
        self.calls = []

    def _update(self, uri, content):
        self.calls.append(('update', uri, content))
        if self.fail:
            raise RuntimeError('update failed')

    def remove(self, uri):
        self.calls.append(('remove', uri))
        if self.fail:
            raise RuntimeError('remove failed')

    def updated(self):
        return [call[1] for call in self.calls if call[0] == 'update']

    def removed(self):
        return [call[1] for call in self.calls if call[0] == 'remove']


@pytest.fixture
def repository():
    return FakeRepository()


@pytest.fixture
def rdf_indexer():
    return RecordingIndexer(IndexerType.RDF)


@pytest.fixture
def fields_indexer():
    return RecordingIndexer(IndexerType.NAMEDFIELDS)


@pytest.fixture
def other_indexer():
    return RecordingIndexer(IndexerType.OTHER)


@pytest.fixture
def group(repository, rdf_indexer, fields_indexer):
    return IndexerGroup(REPOSITORY_URL, [rdf_indexer, fields_indexer], session=repository)
