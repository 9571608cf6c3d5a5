'''
Created on 18 Oct 2026

Interface implemented by all the indexers fed by the IndexerGroup
'''
from enum import Enum
from collections.abc import Mapping

from rdflib.graph import Graph

import logging
logger = logging.getLogger(__name__)


class IndexBridgeError(Exception):
    '''
    Base class for the errors raised by the bridge
    '''


class IndexerError(IndexBridgeError):
    '''
    Raised by an indexer which failed to update or remove a resource
    '''


class IndexerType(Enum):
    '''
    Shape of the content an indexer expects to receive
    '''
    RDF = 'rdf'
    NAMEDFIELDS = 'namedfields'
    OTHER = 'other'


class NamedFields(dict):
    '''
    Mapping from a field name to the list of values for that field, as
    produced by an indexing transformation
    '''


class Indexer(object):
    '''
    Base class for the indexers. Sub classes set INDEXER_TYPE and implement
    _update() and remove(). The content given to update() is checked
    against the declared type before _update() is called:

    * RDF: an rdflib Graph
    * NAMEDFIELDS: a mapping of field names to lists of values
    * OTHER: None, the indexer works from the URI alone

    Indexers are shared by concurrent dispatches and must be safe to call
    from several threads.
    '''
    INDEXER_TYPE = IndexerType.OTHER

    def type(self):
        return self.INDEXER_TYPE

    def update(self, uri, content):
        '''
        Create or update the index entry for uri

        @param uri: the resource URI
        @param content: the content to index, depends on type()
        '''
        self._check_content(content)
        self._update(uri, content)

    def _update(self, uri, content):
        raise NotImplementedError()

    def remove(self, uri):
        '''
        Remove the index entry for uri
        '''
        raise NotImplementedError()

    def _check_content(self, content):
        indexer_type = self.type()
        if indexer_type == IndexerType.RDF and isinstance(content, Graph):
            return
        if indexer_type == IndexerType.NAMEDFIELDS and isinstance(content, Mapping):
            return
        if indexer_type == IndexerType.OTHER and content is None:
            return
        raise IndexerError('{} expects {} content, got {}'.format(
            self, indexer_type.name, type(content).__name__))

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, self.type().name)
