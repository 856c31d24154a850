"""
keys.py - RSA key pair generation and PEM loading.

Key material format: RSA 4096-bit, e = 65537, private key PEM PKCS8 (no
encryption), public key PEM SubjectPublicKeyInfo.
"""

import os
from typing import Tuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .errors import InvalidKey

DEFAULT_KEY_SIZE = 4096
PUBLIC_EXPONENT = 65537


def generate_rsa_keypair(key_size: int = DEFAULT_KEY_SIZE) -> Tuple[bytes, bytes]:
    """
    Generate a fresh RSA key pair.

    Returns:
        (private_pem, public_pem)
    """
    private_key = rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=key_size)
    return private_key_to_pem(private_key), public_key_to_pem(private_key.public_key())


def private_key_to_pem(private_key) -> bytes:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def public_key_to_pem(public_key) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def write_keypair(private_path: str, public_path: str, key_size: int = DEFAULT_KEY_SIZE) -> None:
    """
    Generate a key pair and write both PEM files.

    The private key file is created with mode 0600.
    """
    private_pem, public_pem = generate_rsa_keypair(key_size)

    fd = os.open(private_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(private_pem)
    # O_CREAT mode does not apply to an existing file
    os.chmod(private_path, 0o600)

    with open(public_path, "wb") as f:
        f.write(public_pem)


# --- Loading ---------------------------------------------------------------
def load_private_key_pem(data: bytes):
    """Parse a PEM RSA private key; InvalidKey if it is anything else."""
    try:
        key = serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidKey(f"Cannot parse private key: {e}") from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise InvalidKey("Private key is not an RSA key")
    return key


def load_public_key_pem(data: bytes):
    """Parse a PEM RSA public key; InvalidKey if it is anything else."""
    try:
        key = serialization.load_pem_public_key(data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise InvalidKey(f"Cannot parse public key: {e}") from e
    if not isinstance(key, rsa.RSAPublicKey):
        raise InvalidKey("Public key is not an RSA key")
    return key


def load_private_key(path: str):
    """
    Read and parse a PEM private key file.

    Raises:
        FileNotFoundError / OSError: file cannot be read
        InvalidKey: content is not an RSA private key
    """
    with open(path, "rb") as f:
        return load_private_key_pem(f.read())


def load_public_key(path: str):
    with open(path, "rb") as f:
        return load_public_key_pem(f.read())


def describe_public_key(public_key) -> dict:
    """Key type and modulus size, e.g. {'type': 'rsa', 'bits': 4096}."""
    return {"type": "rsa", "bits": public_key.key_size}
