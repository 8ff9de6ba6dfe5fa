import hmac
import logging
import uuid
from typing import Callable, Optional, Union

from secretstore.exceptions import (
    AuthenticationFailed, InvalidKdfParameters, UnsupportedCipher,
    UnsupportedKdf, UnsupportedVersion
)
from secretstore.models import (
    CIPHER_NAME, IV_SIZE, KDF_NAME, KEYSTORE_VERSION, SALT_SIZE, SUBKEY_SIZE,
    CipherParams, CryptoParams, KdfParams, KeyPair, KeystoreRecord, ScryptParams
)
from secretstore.utils.codec import deserialize, record_from_dict
from secretstore.utils.encryption import aes_ctr_decrypt, aes_ctr_encrypt, keccak256
from secretstore.utils.entropy import random_bytes
from secretstore.utils.kdf import Passphrase, derive_key, derive_with
from secretstore.utils.keygen import is_valid_private_key, keypair_from_private_key

logger = logging.getLogger(__name__)

RecordLike = Union[KeystoreRecord, dict, str, bytes]

# -----------------------------
# Helpers
# -----------------------------
def _wipe(buf: bytearray):
    for i in range(len(buf)):
        buf[i] = 0

def _mac(mac_key: bytes, ciphertext: bytes) -> bytes:
    return keccak256(bytes(mac_key) + bytes(ciphertext))

def _as_record(record: RecordLike) -> KeystoreRecord:
    if isinstance(record, KeystoreRecord):
        return record
    if isinstance(record, dict):
        return record_from_dict(record)
    return deserialize(record)

def _label(record: KeystoreRecord) -> str:
    return record.address.hex() if record.address is not None else "<no address>"

def _check_supported(record: KeystoreRecord):
    if record.version != KEYSTORE_VERSION:
        raise UnsupportedVersion(f"Keystore version must be {KEYSTORE_VERSION}, got {record.version}")
    if record.crypto.cipher != CIPHER_NAME:
        raise UnsupportedCipher(f"Cipher not supported: {record.crypto.cipher}")
    if record.crypto.kdf != KDF_NAME:
        raise UnsupportedKdf(f"Unsupported KDF: {record.crypto.kdf}")
    if record.crypto.kdfparams.dklen < 2 * SUBKEY_SIZE:
        raise InvalidKdfParameters(
            f"dklen must be at least {2 * SUBKEY_SIZE} to hold the encryption and MAC keys, "
            f"got {record.crypto.kdfparams.dklen}"
        )

# -----------------------------
# Encrypt
# -----------------------------
def encrypt(keypair: KeyPair, passphrase: Passphrase, params: ScryptParams = ScryptParams(),
            rng: Callable[[int], bytes] = random_bytes) -> KeystoreRecord:
    """
    Encrypt a private key into a V3 keystore record.

    Web3 Secret Storage construction:
    - Fresh random salt and IV per call (an IV is never reused under a key)
    - scrypt stretches the passphrase into a 32-byte buffer
    - First half keys AES-128-CTR, second half keys the MAC
    - mac = keccak256(mac_key || ciphertext) detects wrong passphrases and tampering

    Args:
        keypair: Key pair whose private key is encrypted
        passphrase: User passphrase
        params: scrypt cost parameters stored in the record
        rng: Source of random bytes for salt and IV

    Returns:
        KeystoreRecord ready for serialization
    """
    if params.dklen < 2 * SUBKEY_SIZE:
        raise InvalidKdfParameters(f"dklen must be at least {2 * SUBKEY_SIZE}, got {params.dklen}")
    salt = rng(SALT_SIZE)
    iv = rng(IV_SIZE)

    logger.debug("Encrypting key for %s with scrypt n=%d r=%d p=%d",
                 keypair.address_hex, params.n, params.r, params.p)
    derived = bytearray(derive_key(passphrase, salt, params.n, params.r, params.p, params.dklen))
    try:
        enc_key = bytes(derived[:SUBKEY_SIZE])
        mac_key = bytes(derived[SUBKEY_SIZE:2 * SUBKEY_SIZE])
        ciphertext = aes_ctr_encrypt(enc_key, iv, keypair.private_key)
        mac = _mac(mac_key, ciphertext)
    finally:
        _wipe(derived)

    return KeystoreRecord(
        address=keypair.address,
        crypto=CryptoParams(
            cipher=CIPHER_NAME,
            ciphertext=ciphertext,
            cipherparams=CipherParams(iv=iv),
            kdf=KDF_NAME,
            kdfparams=KdfParams(dklen=params.dklen, n=params.n, r=params.r, p=params.p, salt=salt),
            mac=mac,
        ),
        version=KEYSTORE_VERSION,
        id=str(uuid.UUID(bytes=rng(16), version=4)),
    )

# -----------------------------
# Decrypt
# -----------------------------
def decrypt(record: RecordLike, passphrase: Passphrase) -> bytes:
    """
    Recover the private key from a keystore record.

    Version, cipher and KDF are checked before any derivation. The MAC is
    verified in constant time before the ciphertext is decrypted, so a wrong
    passphrase never yields plaintext. Wrong passphrase and tampered data
    raise the same AuthenticationFailed error.

    Args:
        record: KeystoreRecord, decoded JSON object or JSON text
        passphrase: User passphrase

    Returns:
        Raw private key bytes

    Raises:
        UnsupportedVersion, UnsupportedCipher, UnsupportedKdf: Incompatible record
        InvalidKdfParameters: Stored cost parameters are unusable
        MalformedRecord: Record text or object cannot be parsed
        AuthenticationFailed: MAC mismatch, or the key does not own the stored address
    """
    record = _as_record(record)
    _check_supported(record)
    crypto = record.crypto

    derived = bytearray(derive_with(crypto.kdf, passphrase, crypto.kdfparams))
    try:
        mac_key = bytes(derived[SUBKEY_SIZE:2 * SUBKEY_SIZE])
        if not hmac.compare_digest(_mac(mac_key, crypto.ciphertext), crypto.mac):
            logger.warning("MAC mismatch for keystore %s", _label(record))
            raise AuthenticationFailed("could not decrypt key with given passphrase")
        enc_key = bytes(derived[:SUBKEY_SIZE])
        private_key = aes_ctr_decrypt(enc_key, crypto.cipherparams.iv, crypto.ciphertext)
    finally:
        _wipe(derived)

    # The MAC does not cover the IV, so the key must also own the stored address
    if not is_valid_private_key(private_key) or (
            record.address is not None and keypair_from_private_key(private_key).address != record.address):
        logger.warning("Decrypted key does not own address of keystore %s", _label(record))
        raise AuthenticationFailed("could not decrypt key with given passphrase")
    return private_key

def unlock(record: RecordLike, passphrase: Passphrase) -> KeyPair:
    """Decrypt a record and rebuild its KeyPair."""
    return keypair_from_private_key(decrypt(record, passphrase))

def change_passphrase(record: RecordLike, old_passphrase: Passphrase, new_passphrase: Passphrase,
                      params: Optional[ScryptParams] = None,
                      rng: Callable[[int], bytes] = random_bytes) -> KeystoreRecord:
    """Re-encrypt a record under a new passphrase, keeping its cost parameters unless overridden."""
    record = _as_record(record)
    keypair = unlock(record, old_passphrase)
    if params is None:
        params = record.crypto.kdfparams.scrypt
    return encrypt(keypair, new_passphrase, params, rng=rng)
