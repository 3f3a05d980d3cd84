"""Print the credentials needed to connect to an LND node as JSON.
"""
import argparse
import functools
import json
import logging
import sys

import trio

from lnd_credentials import config
from lnd_credentials.credentials import lnd_credentials
from lnd_credentials.errors import CredentialsError
from lnd_credentials.nodes import NodeStore

logger = logging.getLogger("lnd_credentials")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="lnd-credentials", description="Get credentials to connect to LND"
    )
    parser.add_argument("-n", "--node", help="saved node name, defaults to local node")
    parser.add_argument(
        "-e", "--expiry", help="ISO 8601 date after which the macaroon expires"
    )
    parser.add_argument(
        "-k", "--key", help="hex DER RSA public key to encrypt the macaroon to"
    )
    parser.add_argument(
        "--nodes", action="store_true", help="list saved node names and exit"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=config.log_level, format=config.log_fmt)

    if args.nodes:
        print(json.dumps(trio.run(NodeStore().names), indent=2))
        return 0

    try:
        creds = trio.run(
            functools.partial(
                lnd_credentials,
                expiry=args.expiry,
                key=args.key,
                logger=logger,
                node=args.node,
            )
        )
    except CredentialsError as e:
        logger.debug(f"Failed to get credentials: {e!r}")
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        return 1
    print(json.dumps(creds.to_dict(), indent=2))
    return 0
