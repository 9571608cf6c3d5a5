'''
Created on 18 Oct 2026

Depth first walk of the repository tree, sending every resource found to
the IndexerGroup as a reindex event
'''
from rdflib.term import URIRef

from indexbridge.util.memoize import memoize
from indexbridge.util.namespaces import HAS_CHILD
from indexbridge.component.fetch import RdfRetriever, RetrievalError
from indexbridge.component.group import REINDEX_EVENT

import logging
logger = logging.getLogger(__name__)

class Reindexer(object):
    '''
    Reindex a resource and, optionally, all its descendants. Every call to
    reindex() keeps its own set of visited resources so several reindex
    can run at the same time on the same group.
    '''
    def __init__(self, group):
        '''
        Constructor

        @param group: the IndexerGroup to dispatch the resources to
        '''
        self.group = group

    def reindex_all(self):
        '''
        Reindex all the content of the repository
        '''
        return self.reindex(self.group.repository_url, True)

    def reindex(self, uri, recursive=True):
        '''
        Reindex a resource

        @param uri: the resource to reindex
        @param recursive: if True, also reindex all the children
        @return: the list of the URIs dispatched, in the order of the visit
        '''
        logger.info('Reindexing {}, recursive: {}'.format(uri, recursive))
        reindexed = self._walk(uri, recursive)
        logger.info('Reindexed {} resource(s) from {}'.format(len(reindexed), uri))
        return reindexed

    def _walk(self, uri, recursive):
        '''
        Depth first walk from uri with an explicit stack, the children of a
        resource are visited in the order the RDF lists them
        '''
        reindexed = []
        visited = set()
        stack = [uri]
        while stack:
            uri = stack.pop()
            if uri in visited:
                continue
            logger.debug('Reindexing {}, recursive: {}'.format(uri, recursive))

            # The group checks if the resource is indexable
            self.group.dispatch(uri, REINDEX_EVENT)
            reindexed.append(uri)
            visited.add(uri)

            if not recursive:
                break

            # Get the children from a fresh copy of the RDF
            rdf = memoize(RdfRetriever(uri, self.group.session))
            try:
                model = rdf.get()
            except RetrievalError as e:
                logger.error('Could not list the children of {}: {}'.format(uri, e))
                continue

            children = [str(child) for child in model.objects(URIRef(uri), HAS_CHILD)]
            for child in reversed(children):
                if child not in visited:
                    stack.append(child)
        return reindexed
