__version__ = "0.1.0"

from lnd_credentials import config, crypto, graph, loaders, macaroons, nodes
from lnd_credentials.credentials import (
    CredentialRequest,
    CredentialResolver,
    Credentials,
    DefaultProfile,
    NamedProfile,
    ResolvedCredentials,
    Sources,
    get_credentials,
    lnd_credentials,
)
from lnd_credentials.errors import (
    CredentialsError,
    DecryptionFailed,
    EncryptionFailed,
    LoaderFailed,
    ProfileNotFound,
    RestrictionFailed,
)
from lnd_credentials.graph import GraphError, TaskGraph
from lnd_credentials.nodes import NodeProfile, NodeStore
