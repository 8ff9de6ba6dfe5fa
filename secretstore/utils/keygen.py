import logging
from typing import Callable, Union
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from secretstore.exceptions import EntropyExhausted, InvalidPrivateKey
from secretstore.models import ADDRESS_SIZE, PRIVATE_KEY_SIZE, KeyPair
from secretstore.utils.encryption import keccak256
from secretstore.utils.entropy import random_bytes

logger = logging.getLogger(__name__)

# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# A valid draw is rejected with probability ~2^-128, so hitting this bound
# means the random source is broken.
MAX_KEYGEN_ATTEMPTS = 128

# -----------------------------
# Key Validity and Derivation
# -----------------------------
def is_valid_private_key(private_key: bytes) -> bool:
    """A secp256k1 private key is 32 bytes encoding an integer in [1, n-1]."""
    if len(private_key) != PRIVATE_KEY_SIZE:
        return False
    return 0 < int.from_bytes(private_key, "big") < SECP256K1_N

def private_key_to_public_key(private_key: bytes) -> bytes:
    """
    Compute the public point d*G on secp256k1.

    Returns:
        64-byte uncompressed point (x || y) without the 0x04 prefix
    """
    secret = ec.derive_private_key(int.from_bytes(private_key, "big"), ec.SECP256K1())
    point = secret.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )
    return point[1:]

def public_key_to_address(public_key: bytes) -> bytes:
    """Ethereum address: last 20 bytes of keccak256 of the 64-byte public key."""
    return keccak256(public_key)[-ADDRESS_SIZE:]

def _coerce_private_key(private_key: Union[bytes, str]) -> bytes:
    if isinstance(private_key, str):
        text = private_key.strip()
        if text[:2].lower() == "0x":
            text = text[2:]
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise InvalidPrivateKey("Private key is not valid hex") from e
    return bytes(private_key)

def keypair_from_private_key(private_key: Union[bytes, str]) -> KeyPair:
    """
    Build a KeyPair from an existing private key.

    Args:
        private_key: 32 raw bytes, or hex with or without a 0x prefix

    Raises:
        InvalidPrivateKey: If the key is not a valid secp256k1 scalar
    """
    key = _coerce_private_key(private_key)
    if not is_valid_private_key(key):
        raise InvalidPrivateKey("Private key must be 32 bytes in the range [1, n-1] of secp256k1")
    public_key = private_key_to_public_key(key)
    return KeyPair(private_key=key, public_key=public_key, address=public_key_to_address(public_key))

# -----------------------------
# Key Generation
# -----------------------------
def generate_keypair(rng: Callable[[int], bytes] = random_bytes,
                     max_attempts: int = MAX_KEYGEN_ATTEMPTS) -> KeyPair:
    """
    Generate a fresh secp256k1 key pair.

    Rejection sampling over 32-byte draws:
    - A draw is accepted only if it is nonzero and below the curve order
    - Invalid draws are discarded, never reduced modulo n (that would bias keys)
    - The loop is bounded so a broken source fails instead of spinning

    Args:
        rng: Source of random bytes
        max_attempts: Number of draws before giving up

    Returns:
        KeyPair with public key and address derived from the accepted draw

    Raises:
        EntropyExhausted: If no valid key was drawn within max_attempts
    """
    for attempt in range(1, max_attempts + 1):
        candidate = rng(PRIVATE_KEY_SIZE)
        if is_valid_private_key(candidate):
            keypair = keypair_from_private_key(candidate)
            logger.debug("Generated key for address %s after %d draw(s)", keypair.address_hex, attempt)
            return keypair
    raise EntropyExhausted(f"No valid private key after {max_attempts} draws; random source is not usable")
