"""
Keystore error taxonomy.

All errors derive from KeystoreError, itself a ValueError, so callers that
only catch ValueError keep working. None of these are retried internally.
"""


class KeystoreError(ValueError):
    """Base class for every keystore failure."""


# Random source
class EntropyUnavailable(KeystoreError):
    """The operating system's secure random source could not be read."""


class EntropyExhausted(KeystoreError):
    """The random source kept producing invalid private keys."""


# Incompatible or malformed records
class InvalidKdfParameters(KeystoreError):
    pass


class UnsupportedKdf(KeystoreError):
    pass


class UnsupportedCipher(KeystoreError):
    pass


class UnsupportedVersion(KeystoreError):
    pass


class MalformedRecord(KeystoreError):
    pass


# Cipher adapter misuse
class InvalidKeyLength(KeystoreError):
    pass


class InvalidIvLength(KeystoreError):
    pass


# Keys
class InvalidPrivateKey(KeystoreError):
    pass


class AuthenticationFailed(KeystoreError):
    """
    MAC mismatch.

    Raised for both a wrong passphrase and a tampered record; the two cases
    are deliberately reported with the same message.
    """