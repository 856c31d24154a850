"""
asymmetric.py - RSA primitives used by the seed and commit-proof protocols.

Fixed parameters (both sides of every exchange must agree on them):

- Encryption: RSA/OAEP, hash SHA-256, MGF1(SHA-256), no label.
- Signature:  RSA-PSS, hash SHA-256, MGF1(SHA-256), maximum salt length
              (modulus_bytes - 32 - 2).

Functions here are pure: no file I/O, no printing. Key loading from PEM lives
in keys.py.
"""

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .errors import (
    DecryptionFailed,
    InvalidKey,
    MalformedSignature,
    PlaintextTooLarge,
)

HASH_LEN = 32  # SHA-256 digest size


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


def _pss() -> padding.PSS:
    return padding.PSS(
        mgf=padding.MGF1(hashes.SHA256()),
        salt_length=padding.PSS.MAX_LENGTH,
    )


def modulus_bytes(key) -> int:
    """Size of the RSA modulus in bytes (512 for a 4096-bit key)."""
    return (key.key_size + 7) // 8


def oaep_capacity(public_key) -> int:
    """Largest plaintext OAEP-SHA256 can carry under this key."""
    return modulus_bytes(public_key) - 2 * HASH_LEN - 2


def _require_public(key) -> rsa.RSAPublicKey:
    if not isinstance(key, rsa.RSAPublicKey):
        raise InvalidKey("Expected an RSA public key")
    return key


def _require_private(key) -> rsa.RSAPrivateKey:
    if not isinstance(key, rsa.RSAPrivateKey):
        raise InvalidKey("Expected an RSA private key")
    return key


# --- OAEP --------------------------------------------------------------------
def encrypt(plaintext: bytes, public_key) -> bytes:
    """
    Encrypt `plaintext` for the holder of `public_key`.

    Raises:
        InvalidKey: key is not an RSA public key
        PlaintextTooLarge: len(plaintext) > modulus_bytes - 2*32 - 2
    """
    key = _require_public(public_key)
    capacity = oaep_capacity(key)
    if len(plaintext) > capacity:
        raise PlaintextTooLarge(
            f"Plaintext is {len(plaintext)} bytes, OAEP capacity for a "
            f"{key.key_size}-bit key is {capacity} bytes"
        )
    return key.encrypt(bytes(plaintext), _oaep())


def decrypt(ciphertext: bytes, private_key) -> bytes:
    """
    Decrypt an OAEP ciphertext.

    Every failure is reported as the same DecryptionFailed, without the
    underlying cause attached.

    Raises:
        InvalidKey: key is not an RSA private key
        DecryptionFailed: anything else
    """
    key = _require_private(private_key)
    try:
        return key.decrypt(bytes(ciphertext), _oaep())
    except (ValueError, TypeError):
        raise DecryptionFailed() from None


# --- PSS ---------------------------------------------------------------------
def sign(message: bytes, private_key) -> bytes:
    """
    Detached RSA-PSS signature over `message`.

    `message` must be the bytes of the textual form being attested (the ASCII
    characters of a hex commit id), never a re-encoded binary form.
    """
    key = _require_private(private_key)
    return key.sign(bytes(message), _pss(), hashes.SHA256())


def verify(message: bytes, signature: bytes, public_key) -> bool:
    """
    Check a PSS signature.

    Returns False for any well-formed signature that does not match. Only
    structurally invalid input raises.

    Raises:
        InvalidKey: key is not an RSA public key
        MalformedSignature: signature is not bytes or has the wrong length
    """
    key = _require_public(public_key)
    if not isinstance(signature, (bytes, bytearray)):
        raise MalformedSignature("Signature must be bytes")
    if len(signature) != modulus_bytes(key):
        raise MalformedSignature(
            f"Signature is {len(signature)} bytes, expected {modulus_bytes(key)}"
        )
    try:
        key.verify(bytes(signature), bytes(message), _pss(), hashes.SHA256())
    except InvalidSignature:
        return False
    return True
