from typing import Union
from Crypto.Protocol.KDF import scrypt
from secretstore.exceptions import InvalidKdfParameters, UnsupportedKdf
from secretstore.models import KDF_NAME, KdfParams

Passphrase = Union[str, bytes]

# -----------------------------
# Key Derivation
# -----------------------------
def encode_passphrase(passphrase: Passphrase) -> bytes:
    """Passphrases are hashed as their UTF-8 bytes."""
    if isinstance(passphrase, str):
        return passphrase.encode("utf-8")
    if isinstance(passphrase, (bytes, bytearray)):
        return bytes(passphrase)
    raise TypeError(f"Passphrase must be str or bytes, not {type(passphrase).__name__}")

def validate_scrypt_params(n: int, r: int, p: int, dklen: int):
    for name, value in (("n", n), ("r", r), ("p", p), ("dklen", dklen)):
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise InvalidKdfParameters(f"scrypt parameter {name} must be a positive integer, got {value!r}")
    # scrypt's cost factor is a power of two greater than one
    if n < 2 or n & (n - 1):
        raise InvalidKdfParameters(f"scrypt parameter n must be a power of two greater than 1, got {n}")

def derive_key(passphrase: Passphrase, salt: bytes, n: int, r: int, p: int, dklen: int) -> bytes:
    """
    Stretch a passphrase into dklen bytes of key material with scrypt.

    scrypt is memory-hard: every guess costs 128 * r * n bytes of memory,
    which makes brute forcing a passphrase deliberately expensive. The
    output depends only on the inputs, so decrypting a record re-derives
    exactly the buffer that encrypted it.

    Args:
        passphrase: User passphrase (str is UTF-8 encoded)
        salt: Random per-record salt
        n, r, p: scrypt cost factors
        dklen: Output length in bytes

    Returns:
        Derived key bytes of length dklen

    Raises:
        InvalidKdfParameters: If a cost factor or dklen is unusable
    """
    validate_scrypt_params(n, r, p, dklen)
    secret = encode_passphrase(passphrase)
    # No cap on N relative to r, so records from any V3 writer derive
    try:
        return scrypt(secret, bytes(salt), dklen, N=n, r=r, p=p)
    except (ValueError, MemoryError) as e:
        raise InvalidKdfParameters(f"scrypt rejected parameters n={n} r={r} p={p}: {e}") from e

def derive_with(kdf_name: str, passphrase: Passphrase, kdfparams: KdfParams) -> bytes:
    """
    Derive key material for a stored record, dispatching on its KDF name.

    Only scrypt is implemented; any other identifier is rejected rather than
    replaced with a different function.
    """
    if kdf_name != KDF_NAME:
        raise UnsupportedKdf(f"Unsupported KDF: {kdf_name}")
    return derive_key(passphrase, kdfparams.salt, kdfparams.n, kdfparams.r, kdfparams.p, kdfparams.dklen)
