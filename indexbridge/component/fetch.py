'''
Created on 18 Oct 2026

Retrieval of the content to index from the repository. The retrievers
are callables meant to be wrapped into a MemoizedSupplier so that the
repository is only queried once per dispatch.
'''
import json
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from requests.auth import HTTPBasicAuth
from rdflib.graph import Graph
from rdflib.term import URIRef, Literal
from rdflib.plugins.sparql.processor import prepareQuery

from indexbridge.util.namespaces import INDEXING_TRANSFORM
from indexbridge.storage.indexer import NamedFields, IndexBridgeError

import logging
logger = logging.getLogger(__name__)

# Map from the media type announced by the repository to the rdflib parser
MIME_TO_FORMAT = {
    "text/turtle": "turtle",
    "application/x-turtle": "turtle",
    "application/n-triples": "nt",
    "text/n3": "n3",
    "text/rdf+n3": "n3",
    "application/rdf+xml": "xml",
    "application/ld+json": "json-ld"
}

RDF_ACCEPT = "text/turtle, application/n-triples;q=0.9, application/rdf+xml;q=0.8"

# Variable bound to the resource URI when applying a SPARQL transform
RESOURCE_VARIABLE = "resource"


class RetrievalError(IndexBridgeError):
    '''
    Raised when the RDF of a resource or its transform could not be
    retrieved or parsed
    '''
    def __init__(self, uri, message):
        super().__init__('{}: {}'.format(uri, message))
        self.uri = uri


class AbsentTransform(RetrievalError):
    '''
    Raised when a resource does not declare an indexing transformation
    '''
    def __init__(self, uri):
        super().__init__(uri, 'no indexing transformation declared')


class ScopedBasicAuth(HTTPBasicAuth):
    '''
    HTTP Basic authentication only sent to one host and port
    '''
    def __init__(self, url, username, password):
        super().__init__(username, password)
        self.scope = _host_and_port(url)

    def __call__(self, r):
        if _host_and_port(r.url) == self.scope:
            return super().__call__(r)
        return r


def _host_and_port(url):
    parsed = urlparse(url)
    port = parsed.port
    if port is None:
        port = 443 if parsed.scheme == 'https' else 80
    return (parsed.hostname, port)


def create_session(repository_url, username=None, password=None):
    '''
    Create the HTTP session shared by all the dispatches. Requests are never
    retried and the connection pool does not block when it is exhausted.

    @param repository_url: the root of the repository, used to scope the
    credentials
    @param username: optional user for HTTP Basic authentication
    @param password: optional password for HTTP Basic authentication
    '''
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=100, pool_maxsize=100,
                          max_retries=0, pool_block=False)
    session.mount('http://', adapter)
    session.mount('https://', adapter)

    # If the repository requires authentication, set it up here
    if username and password:
        logger.debug('Adding BASIC credentials to the session for {}'.format(repository_url))
        session.auth = ScopedBasicAuth(repository_url, username, password)

    return session


def _get(session, uri, accept):
    '''
    Issue a GET and return the response, raising RetrievalError for network
    failures and non success statuses
    '''
    try:
        response = session.get(uri, headers={'Accept': accept})
    except requests.RequestException as e:
        raise RetrievalError(uri, 'request failed ({})'.format(e)) from e
    if not response.ok:
        raise RetrievalError(uri, 'HTTP status {}'.format(response.status_code))
    return response


class RdfRetriever(object):
    '''
    Retrieve the RDF description of a resource from the repository
    '''
    def __init__(self, uri, session):
        self.uri = uri
        self.session = session

    def __call__(self):
        logger.debug('Retrieving RDF for {}'.format(self.uri))
        response = _get(self.session, self.uri, RDF_ACCEPT)

        # Pick the parser from the content type, default to Turtle
        mimetype = response.headers.get('Content-Type', '').split(';')[0].strip()
        rdf_format = MIME_TO_FORMAT.get(mimetype, 'turtle')

        graph = Graph()
        try:
            graph.parse(data=response.text, format=rdf_format, publicID=self.uri)
        except Exception as e:
            raise RetrievalError(self.uri, 'could not parse {} ({})'.format(mimetype, e)) from e
        logger.debug('Retrieved {} triples for {}'.format(len(graph), self.uri))
        return graph


class NamedFieldsRetriever(object):
    '''
    Retrieve the named fields of a resource by applying its indexing
    transformation. The transformation is either a key naming a transform
    applied by the repository itself (a literal) or the URI of a SPARQL
    SELECT query which is run locally against the RDF of the resource.
    '''
    def __init__(self, uri, session, rdf_supplier):
        '''
        Constructor

        @param uri: the resource to get the fields for
        @param session: the HTTP session
        @param rdf_supplier: callable returning the RDF of the resource
        '''
        self.uri = uri
        self.session = session
        self.rdf_supplier = rdf_supplier

    def __call__(self):
        graph = self.rdf_supplier()
        transform = graph.value(URIRef(self.uri), INDEXING_TRANSFORM)
        if transform is None:
            raise AbsentTransform(self.uri)

        if isinstance(transform, Literal):
            return self._server_transform(transform.toPython())
        return self._query_transform(graph, str(transform))

    def _server_transform(self, key):
        '''
        Ask the repository to apply the transform named "key"
        '''
        transform_uri = '{}/fcr:transform/{}'.format(self.uri, key)
        logger.debug('Retrieving named fields from {}'.format(transform_uri))
        response = _get(self.session, transform_uri, 'application/json')
        try:
            data = json.loads(response.text)
        except ValueError as e:
            raise RetrievalError(transform_uri, 'invalid JSON ({})'.format(e)) from e

        # The repository returns a list with one object per resource
        if isinstance(data, list):
            data = data[0] if len(data) > 0 else {}
        if not isinstance(data, dict):
            raise RetrievalError(transform_uri, 'expected a JSON object of fields')

        fields = NamedFields()
        for (name, values) in data.items():
            if not isinstance(values, list):
                values = [values]
            fields[name] = [str(v) for v in values]
        return fields

    def _query_transform(self, graph, transform_uri):
        '''
        Get the SPARQL query at transform_uri and run it against the graph.
        Each projected variable becomes a field.
        '''
        logger.debug('Retrieving transform {}'.format(transform_uri))
        response = _get(self.session, transform_uri,
                        'application/sparql-query, text/plain;q=0.5')
        try:
            query = prepareQuery(response.text)
            result = graph.query(query,
                                 initBindings={RESOURCE_VARIABLE: URIRef(self.uri)})
        except Exception as e:
            raise RetrievalError(transform_uri, 'could not apply transform ({})'.format(e)) from e
        if result.type != 'SELECT':
            raise RetrievalError(transform_uri, 'transform is not a SELECT query')

        # Build the fields, keeping the values in the order of the results
        fields = NamedFields()
        for var in result.vars:
            fields[str(var)] = []
        for row in result:
            for var in result.vars:
                value = row[var]
                if value is None:
                    continue
                value = str(value)
                if value not in fields[str(var)]:
                    fields[str(var)].append(value)
        return fields
