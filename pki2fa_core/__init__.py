"""
pki2fa_core package
===================

PKI-based 2FA: an RSA/OAEP-provisioned seed drives TOTP codes (RFC 4226 &
RFC 6238), and an RSA-PSS signature over a commit id proves who pushed it.

──────────────────────────────────────────────
Core algorithms
──────────────────────────────────────────────
- Seed transport: RSA/OAEP, SHA-256, MGF1(SHA-256), no label.
  The plaintext is a 64-char hex string (32 bytes of entropy).

- HOTP: code = Truncate(HMAC-SHA1(key=seed bytes, msg=counter)) mod 10^6

- TOTP: HOTP with counter = floor(timestamp / 30); verification accepts
  +/- 1 step of clock skew.

- Commit proof: RSA-PSS(SHA-256, MGF1, max salt) over the ASCII commit id,
  then RSA/OAEP-SHA256 under the instructor key, then base64.

──────────────────────────────────────────────
Quick example
──────────────────────────────────────────────
>>> import time
>>> from pki2fa_core import keys, provision_seed_b64, generate_totp_code
>>> private_key = keys.load_private_key("student_private.pem")
>>> seed = provision_seed_b64(open("encrypted_seed.txt").read(), private_key)
>>> code, valid_for = generate_totp_code(seed, time.time())
"""

from .errors import (
    DecryptionFailed,
    InvalidCommitIdentifier,
    InvalidKey,
    InvalidSeedFormat,
    InvalidSeedLength,
    MalformedInput,
    MalformedSignature,
    PlaintextTooLarge,
    SeedRequestError,
    TwoFactorError,
)
from .otp_core import (
    VerifyResult,
    generate_totp_code,
    hotp,
    remaining_seconds,
    totp,
    verify_totp,
    verify_totp_code,
)
from .protocols import (
    CommitProof,
    generate_commit_proof,
    provision_seed,
    provision_seed_b64,
    validate_seed,
    verify_commit_proof,
)

__version__ = "1.0.0"
