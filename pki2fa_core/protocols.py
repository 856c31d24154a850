"""
protocols.py - Seed provisioning and commit proof.

Seed provisioning:
    ciphertext --OAEP decrypt--> UTF-8 text --length check--> charset check
    --> lowercase 64-char hex seed

Commit proof:
    40-hex commit id --PSS sign (ASCII bytes)--> signature
    --OAEP encrypt (instructor key)--> base64 --> CommitProof
"""

import base64
import binascii
import json
import re
from dataclasses import asdict, dataclass

from . import asymmetric
from .errors import (
    InvalidCommitIdentifier,
    InvalidSeedFormat,
    InvalidSeedLength,
    MalformedInput,
)

SEED_HEX_LENGTH = 64
_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_COMMIT_RE = re.compile(r"[0-9a-fA-F]{40}")


# --- Seed provisioning ------------------------------------------------------
def validate_seed(text: str) -> str:
    """
    Check the 64-hex-character seed contract and return the lowercase form.

    The length check runs before the charset check, so a 63-char string with
    a 'g' in it is reported as InvalidSeedLength.
    """
    if len(text) != SEED_HEX_LENGTH:
        raise InvalidSeedLength(
            f"Invalid seed length: expected {SEED_HEX_LENGTH}, got {len(text)}"
        )
    if not _HEX_RE.fullmatch(text):
        raise InvalidSeedFormat("Invalid seed format: must be 64 hexadecimal characters")
    return text.lower()


def provision_seed(ciphertext: bytes, private_key) -> str:
    """
    Recover the hex seed from an OAEP ciphertext.

    Bytes that are not valid UTF-8 decode to U+FFFD and then fail the charset
    check.

    Raises:
        DecryptionFailed, InvalidSeedLength, InvalidSeedFormat
    """
    plaintext = asymmetric.decrypt(ciphertext, private_key)
    return validate_seed(plaintext.decode("utf-8", errors="replace"))


def provision_seed_b64(encrypted_seed_b64: str, private_key) -> str:
    """provision_seed for the base64 text the instructor API hands out."""
    try:
        ciphertext = base64.b64decode(encrypted_seed_b64.strip(), validate=True)
    except (binascii.Error, ValueError, AttributeError) as e:
        raise MalformedInput("encrypted_seed is not valid base64") from e
    return provision_seed(ciphertext, private_key)


# --- Commit proof -----------------------------------------------------------
@dataclass(frozen=True)
class CommitProof:
    commit_hash: str
    encrypted_signature: str

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: dict) -> "CommitProof":
        return cls(
            commit_hash=data["commit_hash"],
            encrypted_signature=data["encrypted_signature"],
        )


def _validate_commit_hash(commit_hash) -> str:
    if not isinstance(commit_hash, str) or not _COMMIT_RE.fullmatch(commit_hash):
        raise InvalidCommitIdentifier("Invalid commit hash format: expected 40 hex characters")
    return commit_hash


def generate_commit_proof(commit_hash: str, signer_private_key, encryption_public_key) -> CommitProof:
    """
    Sign the commit id and encrypt the signature for the verifier.

    The signed message is the ASCII text of the commit id, not its binary
    decoding; the verifier hashes the same characters.

    Raises:
        InvalidCommitIdentifier, InvalidKey, PlaintextTooLarge
    """
    commit_hash = _validate_commit_hash(commit_hash)
    signature = asymmetric.sign(commit_hash.encode("ascii"), signer_private_key)
    encrypted = asymmetric.encrypt(signature, encryption_public_key)
    return CommitProof(
        commit_hash=commit_hash,
        encrypted_signature=base64.b64encode(encrypted).decode("ascii"),
    )


def verify_commit_proof(proof: CommitProof, decryption_private_key, signer_public_key) -> bool:
    """
    Inverse of generate_commit_proof, run by the holder of the encryption key.

    Raises:
        InvalidCommitIdentifier, MalformedInput, DecryptionFailed, InvalidKey,
        MalformedSignature
    """
    commit_hash = _validate_commit_hash(proof.commit_hash)
    try:
        encrypted = base64.b64decode(proof.encrypted_signature, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedInput("encrypted_signature is not valid base64") from e
    signature = asymmetric.decrypt(encrypted, decryption_private_key)
    return asymmetric.verify(commit_hash.encode("ascii"), signature, signer_public_key)
