"""Restrict macaroons with first-party caveats understood by LND.
"""
import logging
from typing import List, Optional

from pymacaroons import Macaroon

from lnd_credentials.errors import RestrictionFailed
from lnd_credentials.util import CustomAdapter, b64decode, b64encode

logger = CustomAdapter(logging.getLogger("macaroons"), None)

EXPIRY_CAVEAT = "time-before"


def _deserialize(macaroon: str) -> Macaroon:
    try:
        return Macaroon.deserialize(macaroon)
    except Exception as e:
        raise RestrictionFailed(f"Failed to decode macaroon: {e}")


def restrict_macaroon(macaroon: str, expires_at: str) -> str:
    """Derive a new macaroon that LND will refuse after `expires_at`.

    The input macaroon is left as it was. Returns standard (padded) base64, the
    same encoding the loaders produce, whatever encoding the input used.
    """
    if not expires_at:
        raise RestrictionFailed("Expected expiry date to restrict macaroon")
    restricted = _deserialize(macaroon)
    restricted.add_first_party_caveat(f"{EXPIRY_CAVEAT} {expires_at}")
    logger.debug(f"Added {EXPIRY_CAVEAT} {expires_at} caveat to macaroon")
    return b64encode(b64decode(restricted.serialize()))


def caveats(macaroon: str) -> List[str]:
    """All first-party caveat conditions of a macaroon, oldest first.
    """
    conditions = []
    for caveat in _deserialize(macaroon).first_party_caveats():
        condition = caveat.caveat_id
        if isinstance(condition, bytes):
            condition = condition.decode("utf-8")
        conditions.append(condition)
    return conditions


def expiry(macaroon: str) -> Optional[str]:
    """The time of the most recently added expiry caveat, if there is one.
    """
    prefix = f"{EXPIRY_CAVEAT} "
    times = [c[len(prefix) :] for c in caveats(macaroon) if c.startswith(prefix)]
    return times[-1] if times else None
