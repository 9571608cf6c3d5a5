# coding=utf8
import threading

from flask import jsonify, request
from indexbridge.app import application, configuration
from indexbridge.component.group import IndexerGroup
from indexbridge.component.reindex import Reindexer

logger = application.logger

# The group is shared by all the requests and created on first use
_group = None
_group_lock = threading.Lock()

def get_group():
    '''
    Return the IndexerGroup built from the configuration file
    '''
    global _group
    with _group_lock:
        if _group is None:
            _group = IndexerGroup.from_config(configuration)
    return _group

def parse_boolean(value):
    return value.lower() not in ['false', '0', 'no', 'off']

@application.route('/', methods=['GET'])
def home():
    '''
    Describe the repository being indexed
    '''
    return jsonify({'repository': get_group().repository_url})

@application.route('/reindex/', methods=['POST'])
@application.route('/reindex/<path:path>', methods=['POST'])
def reindex(path=''):
    '''
    Reindex the resource at path, relative to the repository root, and by
    default all its children
    '''
    group = get_group()
    uri = group.repository_url
    if path != '':
        uri = uri.rstrip('/') + '/' + path
    recursive = parse_boolean(request.args.get('recursive', 'true'))
    
    logger.info('Reindex requested for {}'.format(uri))
    reindexed = Reindexer(group).reindex(uri, recursive)
    return jsonify({'uri': uri,
                    'recursive': recursive,
                    'reindexed': reindexed})
