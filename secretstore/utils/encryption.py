from Crypto.Hash import keccak
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from secretstore.exceptions import InvalidIvLength, InvalidKeyLength
from secretstore.models import IV_SIZE, SUBKEY_SIZE

# -----------------------------
# Hashing
# -----------------------------
def keccak256(data: bytes) -> bytes:
    """
    Keccak-256 as used by Ethereum (original Keccak padding, not FIPS SHA3-256).

    Used for the keystore MAC and for address derivation.
    """
    h = keccak.new(digest_bits=256)
    h.update(bytes(data))
    return h.digest()

# -----------------------------
# AES-128-CTR
# -----------------------------
def _check_key_iv(key: bytes, iv: bytes):
    if len(key) != SUBKEY_SIZE:
        raise InvalidKeyLength(f"AES-128 key must be {SUBKEY_SIZE} bytes, got {len(key)}")
    if len(iv) != IV_SIZE:
        raise InvalidIvLength(f"CTR initialization vector must be {IV_SIZE} bytes, got {len(iv)}")

def aes_ctr_encrypt(key: bytes, iv: bytes, plaintext: bytes) -> bytes:
    """
    Encrypt with AES-128 in counter mode.

    CTR turns the block cipher into a keystream XORed with the data:
    - No padding, ciphertext length equals plaintext length
    - The (key, iv) pair must never be reused for different plaintexts
    - Running the same operation again with the same (key, iv) inverts it

    Args:
        key: 16-byte encryption key
        iv: 16-byte initial counter block
        plaintext: Data to encrypt

    Returns:
        Ciphertext bytes
    """
    _check_key_iv(key, iv)
    encryptor = Cipher(algorithms.AES(bytes(key)), modes.CTR(bytes(iv))).encryptor()
    return encryptor.update(bytes(plaintext)) + encryptor.finalize()

def aes_ctr_decrypt(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """Inverse of aes_ctr_encrypt under the same key and IV."""
    _check_key_iv(key, iv)
    decryptor = Cipher(algorithms.AES(bytes(key)), modes.CTR(bytes(iv))).decryptor()
    return decryptor.update(bytes(ciphertext)) + decryptor.finalize()
