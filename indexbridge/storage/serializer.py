'''
Created on 18 Oct 2026
'''
import os
import json
import hashlib

from indexbridge.storage.indexer import Indexer, IndexerType

import logging
logger = logging.getLogger(__name__)

def get_file_name(uri):
    '''
    Utility function to turn a URI into a file name
    '''
    return hashlib.sha256(uri.encode()).hexdigest() + '.json'

class FileSerializer(Indexer):
    '''
    Write the named fields of every resource as a JSON file in a directory
    '''
    INDEXER_TYPE = IndexerType.NAMEDFIELDS
    
    def __init__(self, path):
        self.path = path
        os.makedirs(self.path, exist_ok=True)
        
    def _update(self, uri, fields):
        document = {'@id': uri, 'fields': dict(fields)}
        file_name = os.path.join(self.path, get_file_name(uri))
        logger.debug('Writing {}'.format(file_name))
        with open(file_name, 'w') as output:
            json.dump(document, output, indent=2)
    
    def remove(self, uri):
        file_name = os.path.join(self.path, get_file_name(uri))
        if os.path.exists(file_name):
            logger.debug('Deleting {}'.format(file_name))
            os.remove(file_name)
            
    def __repr__(self):
        return 'FileSerializer({})'.format(self.path)
