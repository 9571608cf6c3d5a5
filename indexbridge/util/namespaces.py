from rdflib.namespace import Namespace

REPOSITORY = Namespace("http://fedora.info/definitions/v4/repository#")
RESTAPI = Namespace("http://fedora.info/definitions/v4/rest-api#")
INDEXING = Namespace("http://fedora.info/definitions/v4/indexing#")

# Terms looked up in the RDF of each resource
INDEXABLE = INDEXING.indexable
INDEXING_TRANSFORM = INDEXING.hasIndexingTransformation
HAS_CHILD = REPOSITORY.hasChild
DATASTREAM = RESTAPI.datastream
