"""Well-known IRIs and prefix maps of the CloudObjects vocabularies."""

CO = "coid://cloudobjects.io/"
COMMON = "coid://common.cloudobjects.io/"
JSON = "coid://json.cloudobjects.io/"
WEBAPIS = "coid://webapis.co-n.net/"
OAUTH2 = "coid://oauth2.co-n.net/"
ACCOUNT_GATEWAYS = "coid://accountgateways.cloudobjects.io/"
RDFS = "http://www.w3.org/2000/01/rdf-schema#"

REVISION_PROPERTY = CO + "isAtRevision"

JSONLD_MEDIA_TYPE = "application/ld+json"
