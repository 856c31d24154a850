"""
errors.py - Typed failures raised by the 2FA core.

Every class carries a `kind` string so the HTTP / CLI layers can map a failure
to a response without matching on messages. Validation failures also subclass
ValueError, the same way `hotp` used to raise ValueError for a bad secret.
"""


class TwoFactorError(Exception):
    """Base class for every failure raised by pki2fa_core."""

    kind = "TwoFactorError"


class MalformedInput(TwoFactorError, ValueError):
    """Base32 text with characters outside the alphabet, undecodable base64, ..."""

    kind = "MalformedInput"


class InvalidKey(TwoFactorError, ValueError):
    """Key material cannot be parsed or is the wrong type for the operation."""

    kind = "InvalidKey"


class DecryptionFailed(TwoFactorError):
    """
    OAEP decryption could not recover a plaintext.

    Always raised with the same message: wrong key, bad padding and wrong
    ciphertext length are not told apart.
    """

    kind = "DecryptionFailed"

    def __init__(self, message: str = "Decryption failed"):
        super().__init__(message)


class PlaintextTooLarge(TwoFactorError, ValueError):
    kind = "PlaintextTooLarge"


class MalformedSignature(TwoFactorError, ValueError):
    kind = "MalformedSignature"


class InvalidSeedLength(TwoFactorError, ValueError):
    kind = "InvalidSeedLength"


class InvalidSeedFormat(TwoFactorError, ValueError):
    kind = "InvalidSeedFormat"


class InvalidCommitIdentifier(TwoFactorError, ValueError):
    kind = "InvalidCommitIdentifier"


class SeedRequestError(TwoFactorError):
    """The instructor API refused the seed request or answered garbage."""

    kind = "SeedRequestError"
