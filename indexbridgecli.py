#!/usr/bin/python3
'''
Created on 18 Oct 2026

Command line interface to the index bridge. Let admins reindex the content
of the repository, replay events saved to a file or start the web
application
'''
import argparse
import json
import os
import sys
from argparse import RawTextHelpFormatter

import logging
logger = logging.getLogger(__file__)

from indexbridge.util.config import Config
from indexbridge.component.group import IndexerGroup, UnreadableMessage
from indexbridge.component.reindex import Reindexer

COMMANDS="""
Commands:
    reindex [URI]
        Reindex URI and its children, or the whole repository
    events FILE.JSONL
        Dispatch the events in FILE.JSONL, one JSON object of headers per line
    serve
        Start the web application
"""

def init_login(debug=False):
    LOG_FORMAT = "%(asctime)-15s [%(levelname)-7s] %(name)s : %(message)s"
    logging.basicConfig(format=LOG_FORMAT, level=logging.DEBUG if debug else logging.INFO)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("rdflib").setLevel(logging.WARNING)

def reindex(group, uri=None, recursive=True):
    '''
    Reindex a resource

    @param uri: the resource to reindex, the whole repository if None
    @param recursive: if True also reindex the children
    '''
    reindexer = Reindexer(group)
    if uri is None:
        reindexed = reindexer.reindex_all()
    else:
        reindexed = reindexer.reindex(uri, recursive)
    logger.info('{} resource(s) reindexed'.format(len(reindexed)))
    return reindexed

def events(group, events_file):
    '''
    Read the events stored in a file and dispatch them one after the other

    @param events_file: an open file with one JSON object per line
    @return: the number of events dispatched
    '''
    count = 0
    for (line_number, line) in enumerate(events_file, 1):
        line = line.strip()
        if line == '':
            continue
        try:
            headers = json.loads(line)
        except ValueError as e:
            logger.error('Skipping line {}: {}'.format(line_number, e))
            continue
        try:
            group.on_event(headers)
        except UnreadableMessage as e:
            logger.error('Skipping line {}: {}'.format(line_number, e))
            continue
        count = count + 1
    logger.info('{} event(s) dispatched'.format(count))
    return count

def main(argv=None):
    # Parse the command line arguments
    parser = argparse.ArgumentParser(
        description='Command line interface to the index bridge',
        epilog=COMMANDS,
        formatter_class=RawTextHelpFormatter)
    parser.add_argument('command', type=str, nargs=1, help='command to perform')
    parser.add_argument('param', type=str, nargs='*',
                        help='parameters to use for the command')
    parser.add_argument('-c', dest='file', default='config.cfg',
                        help='configuration file')
    parser.add_argument('--no-recursive', dest='recursive', action='store_false',
                        help='Only reindex the given resource, not its children')
    parser.add_argument('--debug', action='store_true',
                        help='Switch debugging on (overrides the config file value)')
    args = parser.parse_args(argv)

    # Load the configuration file
    config = Config(args.file)
    init_login(args.debug or config.debug())

    # Execute the command
    if args.command[0] == 'reindex':
        group = IndexerGroup.from_config(config)
        try:
            reindex(group, args.param[0] if args.param else None, args.recursive)
        finally:
            group.close()
    elif args.command[0] == 'events' and args.param:
        group = IndexerGroup.from_config(config)
        try:
            with open(args.param[0]) as events_file:
                events(group, events_file)
        finally:
            group.close()
    elif args.command[0] == 'serve':
        os.environ['INDEXBRIDGE_CONFIG'] = args.file
        from indexbridge.app import application
        application.run()
    else:
        parser.print_help()
        return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
