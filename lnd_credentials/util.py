import base64
import binascii
import contextvars
import logging
from typing import Union

# Context variable for per-node log messages
node_key = contextvars.ContextVar("node_key")


class CustomAdapter(logging.LoggerAdapter):
    """
    Prepends contextvar to the log if one exists.
    """

    def process(self, msg, kwargs):
        try:
            return f"NODE:{node_key.get()} | {msg}", kwargs
        # contextvar doesn't exist
        except (LookupError, NameError):
            return f"{msg}", kwargs


logger = CustomAdapter(logging.getLogger("util"), None)


def b64decode(data: Union[str, bytes]) -> bytes:
    """Decode standard or url-safe base64, with or without padding.
    """
    if isinstance(data, bytes):
        data = data.decode("ascii")
    data = data.strip()
    data += "=" * (-len(data) % 4)
    try:
        return base64.urlsafe_b64decode(data)
    except (binascii.Error, ValueError):
        logger.debug(f"Could not base64 decode {len(data)} chars")
        raise


def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")
