#encoding: utf-8
'''
Created on 18 Oct 2026

Wrapper around the INI configuration file of the bridge
'''
from configparser import ConfigParser

from indexbridge.storage.sparql import SparqlIndexer
from indexbridge.storage.solr import SolrIndexer
from indexbridge.storage.serializer import FileSerializer

import logging
logger = logging.getLogger(__name__)

class Config(object):
    '''
    Interface around the configuration file
    '''
    def __init__(self, file_name):
        '''
        Constructor
        '''
        self.config = ConfigParser()
        self.config.read(file_name)
        logger.debug(self.config.sections())
        
    def repository_url(self):
        '''
        Return the root URL of the repository
        '''
        return self.config.get('repository', 'url')
    
    def credentials(self):
        '''
        Return a (username, password) pair or None if the repository does
        not need authentication
        '''
        username = self.config.get('repository', 'username', fallback='').strip()
        password = self.config.get('repository', 'password', fallback='').strip()
        if username == '' or password == '':
            return None
        return (username, password)
    
    def debug(self):
        return self.config.getboolean('repository', 'debug', fallback=False)
    
    def sparql_update_url(self):
        '''
        Get the location of the SPARQL update end point
        '''
        return self.config.get('sparql', 'update')
    
    def solr_url(self):
        '''
        Get the location of the Solr core, always ending with a slash
        '''
        url = self.config.get('solr', 'url')
        if not url.endswith('/'):
            url = url + '/'
        return url
    
    def serializer_path(self):
        return self.config.get('serializer', 'path')
    
    def indexers(self):
        '''
        Instantiate one indexer per configured back end
        
        @raise ValueError: if no back end is configured
        '''
        indexers = []
        if self.config.has_section('sparql'):
            indexers.append(SparqlIndexer(self.sparql_update_url()))
        if self.config.has_section('solr'):
            indexers.append(SolrIndexer(self.solr_url()))
        if self.config.has_section('serializer'):
            indexers.append(FileSerializer(self.serializer_path()))
            
        if len(indexers) == 0:
            raise ValueError('No indexer configured, add a [sparql], [solr] '
                             'or [serializer] section')
        logger.info('Configured {} indexer(s)'.format(len(indexers)))
        return indexers
