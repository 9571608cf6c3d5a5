'''
Created on 18 Oct 2026

Receives the events emitted by the repository, retrieves the content of the
affected resources and sends it to all the indexers. Each indexer gets the
content in the shape it declared: the RDF of the resource, the named fields
obtained from its indexing transformation, or nothing at all.
'''
from rdflib.namespace import RDF
from rdflib.term import URIRef

from indexbridge.util.memoize import memoize
from indexbridge.util.namespaces import REPOSITORY, INDEXABLE, DATASTREAM
from indexbridge.component.fetch import (RdfRetriever, NamedFieldsRetriever,
                                         RetrievalError, AbsentTransform,
                                         create_session)
from indexbridge.storage.indexer import IndexerType, IndexBridgeError

import logging
logger = logging.getLogger(__name__)

# Message headers
IDENTIFIER_HEADER = REPOSITORY + "identifier"
BASE_URL_HEADER = REPOSITORY + "baseURL"
EVENT_TYPE_HEADER = REPOSITORY + "eventType"
PROPERTIES_HEADER = REPOSITORY + "properties"

# Event types
REMOVAL_EVENT = REPOSITORY + "NODE_REMOVED"
REINDEX_EVENT = REPOSITORY + "NODE_REINDEXED"
UPDATE_EVENT = "NODE_UPDATED"

# Datastreams under this path are not cascaded to their parent
SYSTEM_PATH = "/fedora:system/"


class UnreadableMessage(IndexBridgeError):
    '''
    Raised when the headers of a message can not be read
    '''


class IndexerGroup(object):
    '''
    Dispatch repository events to a set of indexers
    '''
    def __init__(self, repository_url, indexers, session=None,
                 username=None, password=None):
        '''
        Constructor

        @param repository_url: the root of the repository
        @param indexers: the indexers to feed, at least one
        @param session: the requests session to use, created from the
        repository URL and the credentials if not given
        @param username: optional user for the repository
        @param password: optional password for the repository
        '''
        if repository_url is None:
            raise ValueError('A repository URL is required')
        if len(indexers) == 0:
            raise ValueError('At least one indexer is required')

        self.repository_url = repository_url
        self.indexers = tuple(indexers)
        if session is None:
            session = create_session(repository_url, username, password)
        self.session = session
        logger.debug('Created {}'.format(self))

    @classmethod
    def from_config(cls, config):
        '''
        Create a group from a Config object
        '''
        credentials = config.credentials() or (None, None)
        return cls(config.repository_url(), config.indexers(),
                   username=credentials[0], password=credentials[1])

    def close(self):
        '''
        Close the HTTP session
        '''
        self.session.close()

    def on_event(self, message):
        '''
        Handle a message representing a resource update or removal. The
        message is either a mapping of headers or an object with a
        "headers" mapping.

        @raise UnreadableMessage: if the headers could not be read
        '''
        try:
            headers = getattr(message, 'headers', message)
            event_type = headers.get(EVENT_TYPE_HEADER)
            identifier = headers.get(IDENTIFIER_HEADER)
            base_url = headers.get(BASE_URL_HEADER)
            properties = headers.get(PROPERTIES_HEADER)
        except (AttributeError, TypeError) as e:
            logger.error('Received unintelligible message: {}'.format(e))
            raise UnreadableMessage(str(e)) from e

        logger.debug('Discovered id: {} in message.'.format(identifier))
        logger.debug('Discovered event type: {} in message.'.format(event_type))
        logger.debug('Discovered baseURL: {} in message.'.format(base_url))
        logger.debug('Discovered properties: {} in message.'.format(properties))

        if identifier is None or base_url is None:
            logger.warning('Dropping message without identifier or baseURL: {}'.format(headers))
            return

        self.dispatch(base_url + identifier, event_type)

    def dispatch(self, uri, event_type):
        '''
        Index a resource, or remove it from the indexes

        @param uri: the resource URI
        @param event_type: the type of the event, None is an update
        '''
        removal = event_type == REMOVAL_EVENT
        logger.debug('It is {} that {} is a removal.'.format(removal, uri))

        # Nothing is retrieved until an indexer needs it
        rdf = memoize(RdfRetriever(uri, self.session))
        fields = memoize(NamedFieldsRetriever(uri, self.session, rdf))

        indexable = False
        if not removal:
            try:
                model = rdf.get()
            except RetrievalError as e:
                logger.error('Could not retrieve {}, not indexed: {}'.format(uri, e))
                return

            subject = URIRef(uri)
            indexable = (subject, RDF.type, INDEXABLE) in model
            logger.debug('Resource {} retrieved {} indexable type.'.format(
                uri, 'with' if indexable else 'without'))

            # If this is a datastream, also index the parent object
            if (subject, RDF.type, DATASTREAM) in model and SYSTEM_PATH not in uri:
                parent = uri[:uri.rfind('/')]
                logger.info('Datastream found, also indexing parent {}'.format(parent))
                self.dispatch(parent, UPDATE_EVENT)

        for indexer in self.indexers:
            if removal:
                self._remove(indexer, uri)
            elif indexable:
                self._update(indexer, uri, rdf, fields)

    def _remove(self, indexer, uri):
        logger.debug('Executing removal of {} to {}'.format(uri, indexer))
        try:
            indexer.remove(uri)
        except Exception:
            logger.exception('Error removing {} from {}'.format(uri, indexer))

    def _update(self, indexer, uri, rdf, fields):
        '''
        Send the content of uri to one indexer, retrieving it if needed
        '''
        logger.debug('Operating for indexer: {}'.format(indexer))
        try:
            indexer_type = indexer.type()
            if indexer_type == IndexerType.RDF:
                logger.debug('Retrieving RDF for {} (may be cached)'.format(uri))
                content = rdf.get()
            elif indexer_type == IndexerType.NAMEDFIELDS:
                logger.debug('Retrieving named fields for {} (may be cached)'.format(uri))
                content = fields.get()
            else:
                content = None
        except AbsentTransform:
            logger.error('No indexing transformation for {}, skipping {}'.format(uri, indexer))
            return
        except Exception:
            logger.exception('Unable to retrieve content of {} for {}'.format(uri, indexer))
            return

        logger.debug('Executing update of {} to {}'.format(uri, indexer))
        try:
            indexer.update(uri, content)
        except Exception:
            logger.exception('Error indexing {} to {}'.format(uri, indexer))

    def __repr__(self):
        return 'IndexerGroup({}, {})'.format(self.repository_url, list(self.indexers))
