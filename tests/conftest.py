import base64

import pytest
import trio
from Crypto.PublicKey import RSA
from pymacaroons import Macaroon
from pymacaroons.macaroon import MACAROON_V2

from lnd_credentials import NodeProfile, Sources
from lnd_credentials.util import b64decode, b64encode

DEFAULT_CERT = base64.b64encode(b"-----BEGIN CERTIFICATE-----default").decode()
EXTERNAL_SOCKET = "203.0.113.7:10009"


def new_macaroon(location="lnd", root_key="root key") -> str:
    """A v2 macaroon as standard base64, the way LND macaroons are handed around.
    """
    macaroon = Macaroon(
        location=location,
        identifier=b"\x03" + bytes(range(32)),
        key=root_key,
        version=MACAROON_V2,
    )
    return b64encode(b64decode(macaroon.serialize()))


DEFAULT_MACAROON = new_macaroon()


@pytest.fixture(scope="session")
def rsa_key():
    return RSA.generate(2048)


@pytest.fixture(scope="session")
def public_key_hex(rsa_key):
    return rsa_key.publickey().export_key(format="DER").hex()


@pytest.fixture
def alice():
    return NodeProfile(
        "alice",
        cert=base64.b64encode(b"alice cert").decode(),
        macaroon=new_macaroon(location="alice"),
        socket="alice.example.com:10009",
    )


@pytest.fixture
def bob():
    return NodeProfile(
        "bob",
        cert=base64.b64encode(b"bob cert").decode(),
        encrypted_macaroon="c1f3e5",
        encrypted_to="bob@example.com",
        socket="bob.example.com:10009",
    )


class FakeSources(Sources):
    """Sources that never touch the filesystem, counting every call made.
    """

    def __init__(self, profiles=(), clear=None, delays=None, fail=None, **kwargs):
        self.profiles = {profile.name: profile for profile in profiles}
        self.clear = clear or new_macaroon(location="decrypted")
        self.delays = delays or {}
        self.fail = fail or {}
        self.calls = []
        super().__init__(
            get_cert=self._get_cert,
            get_macaroon=self._get_macaroon,
            get_socket=self._get_socket,
            get_node=self._get_node,
            decrypt_ciphertext=self._decrypt,
            **kwargs
        )

    async def _step(self, name, value):
        self.calls.append(name)
        await trio.sleep(self.delays.get(name, 0))
        if name in self.fail:
            raise self.fail[name]
        return value

    async def _get_cert(self):
        return await self._step("get_cert", DEFAULT_CERT)

    async def _get_macaroon(self):
        return await self._step("get_macaroon", DEFAULT_MACAROON)

    async def _get_socket(self):
        return await self._step("get_socket", EXTERNAL_SOCKET)

    async def _get_node(self, name):
        return await self._step("get_node", self.profiles.get(name))

    async def _decrypt(self, cipher):
        return await self._step(f"decrypt:{cipher}", self.clear)


@pytest.fixture
def fake_sources():
    return FakeSources
