#encoding: utf-8
'''
Created on 18 Oct 2026

Triple store indexer
'''
from rdflib.graph import Graph
from rdflib.term import URIRef, BNode, Literal
from rdflib.plugins.stores.sparqlstore import SPARQLUpdateStore
import threading

from indexbridge.storage.indexer import Indexer, IndexerType

import logging
logger = logging.getLogger(__name__)

# The blank nodes hanging from the resource go first, while they can still
# be reached from it
DELETE_QUERY = """
    DELETE { ?b ?q ?x } WHERE {
        ?s ?p ?b .
        ?b ?q ?x .
        FILTER(isBlank(?b) && (?s = __SUBJECT__ || STRSTARTS(STR(?s), __PREFIX__)))
    };
    DELETE WHERE { __SUBJECT__ ?p ?o };
    DELETE { ?s ?p ?o } WHERE {
        ?s ?p ?o .
        FILTER(STRSTARTS(STR(?s), __PREFIX__))
    }
"""

INSERT_QUERY = """
    INSERT DATA { __PAYLOAD__ }
"""

def delete_query(uri):
    '''
    Build the query removing the description of uri. URIRef.n3() refuses
    URIs which can not be written between angle brackets.
    '''
    return DELETE_QUERY.replace("__SUBJECT__", URIRef(uri).n3()) \
                       .replace("__PREFIX__", Literal(uri + '#').n3())

def description_of(uri, graph):
    '''
    Extract from graph the triples about uri, its hash URIs and all the
    blank nodes reachable from them
    '''
    description = Graph()
    pending = []
    for (s, p, o) in graph:
        if isinstance(s, URIRef) and (s == URIRef(uri) or s.startswith(uri + '#')):
            description.add((s, p, o))
            pending.append(o)
    seen = set()
    while pending:
        node = pending.pop()
        if not isinstance(node, BNode) or node in seen:
            continue
        seen.add(node)
        for (p, o) in graph.predicate_objects(node):
            description.add((node, p, o))
            pending.append(o)
    return description

class SparqlIndexer(Indexer):
    '''
    Keep a triple store in sync with the RDF of the repository resources.
    The triples indexed for a resource are the ones having the resource, or
    one of its hash URIs, as a subject, plus the blank nodes they describe.
    '''
    INDEXER_TYPE = IndexerType.RDF
    
    def __init__(self, update_url):
        '''
        Constructor
        
        @param update_url: location of the SPARQL update end point
        '''
        self.sparul = update_url
        self._store = SPARQLUpdateStore(update_endpoint=update_url)
        # The store accumulates edits until they are committed
        self._lock = threading.Lock()
        
    def _update(self, uri, graph):
        description = description_of(uri, graph)
        payload = description.serialize(format="nt")
        
        # Replace the previous description by the new one
        logger.info("Storing {} triples for <{}>".format(len(description), uri))
        query = delete_query(uri) + ";"
        query = query + INSERT_QUERY.replace("__PAYLOAD__", payload)
        self._execute(query)
    
    def remove(self, uri):
        logger.info("Removing triples for <{}>".format(uri))
        self._execute(delete_query(uri))
        
    def _execute(self, query):
        with self._lock:
            try:
                self._store.update(query)
            except Exception:
                # Do not resend the failed edit with the next one
                self._store.rollback()
                raise
        
    def __repr__(self):
        return 'SparqlIndexer({})'.format(self.sparul)
