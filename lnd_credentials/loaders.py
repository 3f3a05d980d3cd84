"""Default credentials of the local LND node, read from its data directory.
"""
import configparser
import logging
import os
import pathlib
import sys
from typing import Optional

import trio

from lnd_credentials import config
from lnd_credentials.errors import LoaderFailed
from lnd_credentials.util import CustomAdapter, b64encode

logger = CustomAdapter(logging.getLogger("loaders"), None)


def lnd_directory() -> pathlib.Path:
    """Returns the LND directory set in config.ini, or the platform default.
    """
    lnd_dir = config.user["lnd"].get("LND_DIR")
    if lnd_dir:
        return pathlib.Path(lnd_dir).expanduser()
    if sys.platform == "darwin":
        return pathlib.Path.home() / "Library" / "Application Support" / "Lnd"
    if sys.platform == "win32":
        local_app_data = os.environ.get("LOCALAPPDATA", pathlib.Path.home())
        return pathlib.Path(local_app_data) / "Lnd"
    return pathlib.Path.home() / ".lnd"


def macaroon_path(lnd_dir: pathlib.Path, network: str = None) -> pathlib.Path:
    network = network or config.user["lnd"].get("NETWORK")
    return (
        lnd_dir / "data" / "chain" / "bitcoin" / network / config.MACAROON_FILENAME
    )


async def _read_base64(path: pathlib.Path, what: str) -> str:
    try:
        data = await trio.Path(path).read_bytes()
    except OSError as e:
        raise LoaderFailed(f"Failed to read {what} at {path}: {e}", path=str(path))
    if not data:
        raise LoaderFailed(f"Empty {what} at {path}", path=str(path))
    logger.debug(f"Read {len(data)}B {what} from {path}")
    return b64encode(data)


async def get_cert(lnd_dir: pathlib.Path = None) -> str:
    """Base64 of the node's TLS certificate file.
    """
    lnd_dir = lnd_dir or lnd_directory()
    return await _read_base64(lnd_dir / config.CERT_FILENAME, "TLS cert")


async def get_macaroon(lnd_dir: pathlib.Path = None, network: str = None) -> str:
    """Base64 of the node's admin macaroon.
    """
    lnd_dir = lnd_dir or lnd_directory()
    return await _read_base64(macaroon_path(lnd_dir, network), "macaroon")


def parse_socket(conf: str) -> Optional[str]:
    """Returns the externally reachable RPC socket described by lnd.conf text, if any.
    """
    # lnd.conf allows repeated keys and options before the first section header
    parser = configparser.ConfigParser(
        strict=False, allow_no_value=True, interpolation=None
    )
    parser.read_string(f"[{config.CONF_SECTION}]\n{conf}")
    options = parser[config.CONF_SECTION]

    host = next(
        (
            options.get(name)
            for name in ("externalip", "tlsextraip", "tlsextradomain")
            if options.get(name)
        ),
        None,
    )
    if not host:
        return None
    # Drop any port that came with the external ip, the RPC port is what we want
    host = host.rsplit(":", 1)[0] if host.count(":") == 1 else host

    port = config.DEFAULT_RPC_PORT
    rpclisten = options.get("rpclisten")
    if rpclisten and ":" in rpclisten:
        port = int(rpclisten.rsplit(":", 1)[1])
    return f"{host}:{port}"


async def get_socket(lnd_dir: pathlib.Path = None) -> Optional[str]:
    """The external RPC socket set in lnd.conf, or None when it isn't configured.
    """
    lnd_dir = lnd_dir or lnd_directory()
    path = trio.Path(lnd_dir / config.CONF_FILENAME)
    if not await path.exists():
        logger.debug(f"No {config.CONF_FILENAME} found in {lnd_dir}")
        return None
    try:
        return parse_socket(await path.read_text())
    except (OSError, UnicodeDecodeError, configparser.Error, ValueError) as e:
        raise LoaderFailed(f"Failed to read socket from {path}: {e}", path=str(path))
