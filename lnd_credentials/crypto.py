"""Macaroon encryption for handing credentials to a remote party, and decryption of
macaroons saved encrypted with GPG.

Encryption is RSA with PKCS#1 OAEP padding (SHA-1 digest), so the holder of the
matching private key can recover the exact macaroon bytes.
"""

import binascii
import logging
import textwrap

import trio
from Crypto.Cipher import PKCS1_OAEP
from Crypto.PublicKey import RSA

from lnd_credentials import config
from lnd_credentials.errors import DecryptionFailed, EncryptionFailed
from lnd_credentials.util import CustomAdapter, b64decode, b64encode

logger = CustomAdapter(logging.getLogger("crypto"), None)

__all__ = ["der_as_pem", "encrypt_macaroon", "decrypt_ciphertext"]


def der_as_pem(key: str) -> str:
    """
    Convert a DER encoded public key to PEM

    Parameters
    ----------
    key: str
        Public key DER bytes as a hex string

    Returns
    -------
    str
        PEM encoded public key
    """
    try:
        der = bytes.fromhex(key)
    except (TypeError, ValueError):
        raise EncryptionFailed("Expected hex encoded DER public key")
    if not der:
        raise EncryptionFailed("Expected hex encoded DER public key")
    body = "\n".join(textwrap.wrap(b64encode(der), config.PEM_LINE_LEN))
    return f"-----BEGIN PUBLIC KEY-----\n{body}\n-----END PUBLIC KEY-----\n"


def encrypt_macaroon(macaroon: str, key: str) -> str:
    """
    Encrypt a macaroon to an RSA public key

    Parameters
    ----------
    macaroon: str
        Base64 macaroon, the decoded bytes are what get encrypted
    key: str
        Receiver's public key (DER hex string)

    Returns
    -------
    str
        Base64 ciphertext
    """
    pem = der_as_pem(key)
    try:
        public_key = RSA.import_key(pem)
    except (ValueError, IndexError, TypeError) as e:
        raise EncryptionFailed(f"Invalid RSA public key: {e}")

    try:
        macaroon_data = b64decode(macaroon)
    except (binascii.Error, ValueError) as e:
        raise EncryptionFailed(f"Expected base64 macaroon: {e}")

    try:
        encrypted = PKCS1_OAEP.new(public_key).encrypt(macaroon_data)
    except (ValueError, TypeError) as e:
        # OAEP can only encrypt messages a little shorter than the key size
        raise EncryptionFailed(
            f"Failed to encrypt {len(macaroon_data)}B macaroon to "
            f"{public_key.size_in_bits()} bit key: {e}"
        )
    logger.debug(f"Encrypted macaroon to {public_key.size_in_bits()} bit key")
    return b64encode(encrypted)


async def decrypt_ciphertext(cipher: str, gpg_path: str = None) -> str:
    """
    Decrypt a GPG ciphertext using the local GPG keyring

    Parameters
    ----------
    cipher: str
        GPG encrypted message as a hex string
    gpg_path: str
        gpg binary to run, defaults to the configured GPG_PATH

    Returns
    -------
    str
        Clear text as base64
    """
    gpg = gpg_path or config.user["gpg"].get("GPG_PATH")
    try:
        cipher_bytes = bytes.fromhex(cipher)
    except (TypeError, ValueError):
        raise DecryptionFailed("Expected hex encoded ciphertext")

    logger.debug(f"Decrypting {len(cipher_bytes)}B ciphertext with {gpg}")
    try:
        process = await trio.run_process(
            [gpg, "--decrypt"],
            stdin=cipher_bytes,
            capture_stdout=True,
            capture_stderr=True,
            check=False,
        )
    except OSError as e:
        raise DecryptionFailed(f"Failed to run {gpg}: {e}")

    if process.returncode != 0:
        stderr = process.stderr.decode(errors="replace").strip()
        logger.error(f"{gpg} exited with code {process.returncode}: {stderr}")
        raise DecryptionFailed(
            f"{gpg} exited with code {process.returncode}",
            returncode=process.returncode,
        )
    if not process.stdout:
        raise DecryptionFailed(f"{gpg} returned no clear text")
    return b64encode(process.stdout)
