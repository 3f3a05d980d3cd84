import json
import logging
import pathlib
from typing import List, Optional

import trio

from lnd_credentials import config
from lnd_credentials.errors import LoaderFailed
from lnd_credentials.util import CustomAdapter

logger = CustomAdapter(logging.getLogger("nodes"), None)


class NodeProfile:
    """Saved credentials for a named node.
    """

    def __init__(
        self,
        name: str,
        cert: str = None,
        macaroon: str = None,
        socket: str = None,
        encrypted_macaroon: str = None,
        encrypted_to: str = None,
    ):
        self.name = name
        self.cert = cert
        self.macaroon = macaroon
        self.socket = socket
        self.encrypted_macaroon = encrypted_macaroon
        self.encrypted_to = encrypted_to

    def __str__(self):
        return (
            f"Node: {self.name}, socket: {self.socket}, "
            f"encrypted: {self.encrypted}"
        )

    def __repr__(self):
        return (
            f'{self.__class__.__name__}(name="{self.name}", socket="{self.socket}", '
            f"encrypted={self.encrypted})"
        )

    def __eq__(self, other):
        return isinstance(other, NodeProfile) and vars(self) == vars(other)

    @property
    def encrypted(self) -> bool:
        return bool(self.encrypted_macaroon)

    @classmethod
    def from_dict(cls, name: str, data: dict) -> "NodeProfile":
        if not isinstance(data, dict):
            raise LoaderFailed(f"Expected JSON object for node {name}", node=name)
        if not data.get("macaroon") and not data.get("encrypted_macaroon"):
            raise LoaderFailed(f"Expected macaroon for node {name}", node=name)
        return cls(
            name,
            cert=data.get("cert"),
            macaroon=data.get("macaroon"),
            socket=data.get("socket"),
            encrypted_macaroon=data.get("encrypted_macaroon"),
            encrypted_to=data.get("encrypted_to"),
        )


class NodeStore:
    """Saved node credentials, one directory per node holding a credentials.json.
    """

    def __init__(self, data_dir=None):
        data_dir = data_dir or config.user["nodes"].get("DATA_DIR")
        self.data_dir = pathlib.Path(data_dir).expanduser()

    def __str__(self):
        return f"NodeStore at {self.data_dir}"

    @staticmethod
    def is_valid_name(name: str) -> bool:
        return bool(name) and name not in (".", "..") and pathlib.PurePath(name).name == name

    def path(self, name: str) -> pathlib.Path:
        return self.data_dir / name / config.CREDENTIALS_FILENAME

    async def get(self, name: str) -> Optional[NodeProfile]:
        """Returns the saved profile for node `name`, or None if there isn't one.
        """
        if not self.is_valid_name(name):
            logger.warning(f"Ignoring invalid node name {name!r}")
            return None
        path = trio.Path(self.path(name))
        if not await path.is_file():
            logger.debug(f"No saved credentials at {path}")
            return None
        try:
            data = json.loads(await path.read_text())
        except (OSError, UnicodeDecodeError, ValueError) as e:
            raise LoaderFailed(
                f"Failed to read saved credentials at {path}: {e}", node=name
            )
        profile = NodeProfile.from_dict(name, data)
        logger.debug(f"Loaded {profile}")
        return profile

    async def names(self) -> List[str]:
        """Names of all nodes with saved credentials.
        """
        data_dir = trio.Path(self.data_dir)
        if not await data_dir.is_dir():
            return []
        names = []
        for entry in await data_dir.iterdir():
            if await trio.Path(self.path(entry.name)).is_file():
                names.append(entry.name)
        return sorted(names)
