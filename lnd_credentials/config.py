"""USER VALUES SHOULD BE CHANGED IN CONFIG.INI FILE, NOT IN HERE
"""

# User config import
import configparser
import os
from logging import DEBUG, ERROR, INFO, WARNING

user = configparser.ConfigParser()
user.read_dict(
    {
        "lnd_credentials": {"DEBUG_LEVEL": "info"},
        "lnd": {"LND_DIR": "", "NETWORK": "mainnet", "DEFAULT_SOCKET": "localhost:10009"},
        "nodes": {"DATA_DIR": "~/.bos"},
        "gpg": {"GPG_PATH": "gpg"},
    }
)
config_path = os.path.join(os.path.abspath(os.path.dirname(__file__)), "config.ini")
user.read(config_path)

log_levels = {
    "debug": DEBUG,
    "info": INFO,
    "warning": WARNING,
    "error": ERROR,
}

# --------------------------------------------------------------------------------------
"""Logging
"""
log_level = log_levels[user["lnd_credentials"].get("DEBUG_LEVEL").lower()]
log_fmt = "%(name)7s | %(levelname)8s | %(message)s"
# --------------------------------------------------------------------------------------
"""LND
"""
# Socket used for the local node when no saved node is requested
DEFAULT_SOCKET: str = user["lnd"].get("DEFAULT_SOCKET")
DEFAULT_RPC_PORT: int = 10009
CERT_FILENAME = "tls.cert"
MACAROON_FILENAME = "admin.macaroon"
CONF_FILENAME = "lnd.conf"
CONF_SECTION = "Application Options"
# --------------------------------------------------------------------------------------
"""Saved nodes
"""
CREDENTIALS_FILENAME = "credentials.json"
# --------------------------------------------------------------------------------------
"""Crypto
"""
PEM_LINE_LEN: int = 64
