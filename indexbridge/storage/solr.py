'''
Created on 18 Oct 2026

Search engine indexer posting the named fields of the resources to Solr
'''
import json
import requests

from indexbridge.storage.indexer import Indexer, IndexerType, IndexerError

import logging
logger = logging.getLogger(__name__)

class SolrIndexer(Indexer):
    '''
    Index the named fields of a resource as one Solr document, identified
    by the URI of the resource
    '''
    INDEXER_TYPE = IndexerType.NAMEDFIELDS
    
    def __init__(self, url):
        '''
        Constructor
        
        @param url: the location of the Solr core, ending with a slash
        '''
        self.url = url
        
    def _update(self, uri, fields):
        document = dict(fields)
        document['id'] = uri
        logger.debug('Posting {} field(s) for {}'.format(len(fields), uri))
        self._post([document])
    
    def remove(self, uri):
        logger.debug('Deleting {}'.format(uri))
        self._post({'delete': {'id': uri}})
        
    def _post(self, payload):
        response = requests.post(self.url + 'update',
                                 params={'commit': 'true'},
                                 data=json.dumps(payload),
                                 headers={'Content-Type': 'application/json'})
        if not response.ok:
            raise IndexerError('Solr answered {}: {}'.format(
                response.status_code, response.text))
            
    def __repr__(self):
        return 'SolrIndexer({})'.format(self.url)
