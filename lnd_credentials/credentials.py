"""Assemble the cert, macaroon and socket needed to connect to an LND node.

Credentials come either from the local node (the default profile) or from a saved
node profile, then the macaroon is optionally restricted to an expiry date and
optionally encrypted to a public key so it can be handed to a remote party.
"""
import functools
import inspect
import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional, Union

import trio

from lnd_credentials import config, crypto, graph, loaders, macaroons, nodes
from lnd_credentials.errors import ProfileNotFound
from lnd_credentials.util import CustomAdapter, node_key

logger = CustomAdapter(logging.getLogger("credentials"), None)


@dataclass(frozen=True)
class DefaultProfile:
    """The local node, read from the LND directory.
    """


@dataclass(frozen=True)
class NamedProfile:
    """A node with saved credentials.
    """

    name: str


Profile = Union[DefaultProfile, NamedProfile]


@dataclass(frozen=True)
class CredentialRequest:
    expiry: Optional[str] = None
    key: Optional[str] = None
    node: Optional[str] = None
    logger: Optional[Any] = None

    @property
    def profile(self) -> Profile:
        return NamedProfile(self.node) if self.node else DefaultProfile()


@dataclass(frozen=True)
class Credentials:
    cert: Optional[str]
    macaroon: Optional[str]
    socket: Optional[str]


@dataclass(frozen=True)
class ResolvedCredentials:
    """Credentials ready to use.

    Without an encryption key `macaroon` is set, with one `encrypted_macaroon` and
    `external_socket` are set instead.
    """

    cert: Optional[str]
    socket: Optional[str]
    macaroon: Optional[str] = None
    encrypted_macaroon: Optional[str] = None
    external_socket: Optional[str] = None

    def to_dict(self) -> dict:
        return {name: value for name, value in asdict(self).items() if value is not None}


class Sources:
    """Where credentials are read from and how macaroons are transformed.

    Defaults read the local filesystem; pass replacements (sync or async callables)
    to read credentials from somewhere else.
    """

    def __init__(
        self,
        get_cert=None,
        get_macaroon=None,
        get_socket=None,
        get_node=None,
        restrict_macaroon=None,
        decrypt_ciphertext=None,
    ):
        self.get_cert = get_cert or loaders.get_cert
        self.get_macaroon = get_macaroon or loaders.get_macaroon
        self.get_socket = get_socket or loaders.get_socket
        self.get_node = get_node or nodes.NodeStore().get
        self.restrict_macaroon = restrict_macaroon or macaroons.restrict_macaroon
        self.decrypt_ciphertext = decrypt_ciphertext or crypto.decrypt_ciphertext


async def _call(func, *args):
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class CredentialResolver:
    """Resolves one CredentialRequest by running the credential task graph.
    """

    def __init__(
        self, request: CredentialRequest, sources: Sources = None, default_socket=None
    ):
        self.request = request
        self.profile = request.profile
        self.sources = sources or Sources()
        self.default_socket = default_socket or config.DEFAULT_SOCKET
        self.logger = request.logger or logger

    @property
    def named(self) -> bool:
        return isinstance(self.profile, NamedProfile)

    def tasks(self) -> dict:
        return {
            "get_cert": ((), self.get_cert),
            "get_macaroon": ((), self.get_macaroon),
            "get_socket": ((), self.get_socket),
            "get_node_profile": ((), self.get_node_profile),
            "node_credentials": (("get_node_profile",), self.node_credentials),
            "credentials": (
                ("get_cert", "get_macaroon", "node_credentials"),
                self.credentials,
            ),
            "macaroon": (("credentials",), self.macaroon),
            "final_credentials": (
                ("credentials", "get_socket", "macaroon"),
                self.final_credentials,
            ),
        }

    async def resolve(self) -> ResolvedCredentials:
        token = node_key.set(self.profile.name) if self.named else None
        try:
            return await graph.run(self.tasks(), of="final_credentials")
        finally:
            if token is not None:
                node_key.reset(token)

    # Default profile cert and macaroon are skipped for saved nodes, the graph keeps
    # the same shape either way.
    async def get_cert(self):
        if self.named:
            return None
        return await _call(self.sources.get_cert)

    async def get_macaroon(self):
        if self.named:
            return None
        return await _call(self.sources.get_macaroon)

    async def get_socket(self):
        return await _call(self.sources.get_socket)

    async def get_node_profile(self):
        if not self.named:
            return None
        return await _call(self.sources.get_node, self.profile.name)

    async def node_credentials(self, get_node_profile):
        if not self.named:
            return None
        name = self.profile.name
        if get_node_profile is None:
            raise ProfileNotFound(f"No saved credentials for node {name}", node=name)
        profile = get_node_profile

        if not profile.encrypted_macaroon:
            return Credentials(profile.cert, profile.macaroon, profile.socket)

        self.logger.info(f"Decrypting credentials for node {name}")
        clear = await _call(self.sources.decrypt_ciphertext, profile.encrypted_macaroon)
        return Credentials(profile.cert, clear, profile.socket)

    def credentials(self, get_cert, get_macaroon, node_credentials) -> Credentials:
        if not self.named:
            return Credentials(get_cert, get_macaroon, self.default_socket)
        return node_credentials

    async def macaroon(self, credentials: Credentials):
        if not self.request.expiry:
            return credentials.macaroon
        return await _call(
            self.sources.restrict_macaroon, credentials.macaroon, self.request.expiry
        )

    def final_credentials(
        self, credentials: Credentials, get_socket, macaroon
    ) -> ResolvedCredentials:
        if not self.request.key:
            return ResolvedCredentials(
                cert=credentials.cert, socket=credentials.socket, macaroon=macaroon
            )

        return ResolvedCredentials(
            cert=credentials.cert,
            socket=credentials.socket,
            encrypted_macaroon=crypto.encrypt_macaroon(macaroon, self.request.key),
            external_socket=get_socket,
        )


async def lnd_credentials(
    expiry: str = None,
    key: str = None,
    logger=None,
    node: str = None,
    *,
    sources: Sources = None,
    default_socket: str = None,
) -> ResolvedCredentials:
    """Get the credentials to connect to an LND node.

    :param expiry: ISO 8601 date after which the macaroon stops working
    :param key: hex DER public key to encrypt the macaroon to
    :param logger: logger for informational events, defaults to this module's
    :param node: saved node name, defaults to the local node
    :param sources: where credentials are read from, see Sources
    :param default_socket: socket used for the local node, defaults to config
    """
    request = CredentialRequest(expiry=expiry, key=key, node=node, logger=logger)
    return await CredentialResolver(request, sources, default_socket).resolve()


def get_credentials(**kwargs) -> ResolvedCredentials:
    """Blocking lnd_credentials() for callers not already running trio.
    """
    return trio.run(functools.partial(lnd_credentials, **kwargs))
