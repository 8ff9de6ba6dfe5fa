"""
secretstore - Web3 Secret Storage (V3) keystores

Encrypted private-key storage compatible with Ethereum keystore files.

Key Derivation:

scrypt (memory-hard, tunable cost) stretches the passphrase into 32 bytes
Cost parameters (N, r, p, dklen) are stored with each record
Default cost N = 2^18, r = 8, p = 1, overridable per call via ScryptParams

Encryption:

AES-128-CTR keyed by the first 16 derived bytes
Fresh 32-byte salt and 16-byte IV for every record

Integrity:

mac = keccak256(second 16 derived bytes || ciphertext)
The MAC is checked in constant time before anything is decrypted
Wrong passphrase and tampered data produce the same AuthenticationFailed error

Keys:

secp256k1 private keys drawn by rejection sampling from the OS CSPRNG
Address = last 20 bytes of keccak256 of the uncompressed public key
"""
from secretstore.exceptions import (
    KeystoreError, EntropyUnavailable, EntropyExhausted, InvalidKdfParameters, UnsupportedKdf,
    UnsupportedCipher, UnsupportedVersion, MalformedRecord, InvalidKeyLength, InvalidIvLength,
    InvalidPrivateKey, AuthenticationFailed
)
from secretstore.models import (
    KeyPair, KeystoreRecord, CryptoParams, CipherParams, KdfParams, ScryptParams
)
from secretstore.utils.keygen import generate_keypair, keypair_from_private_key
from secretstore.utils.keystore import encrypt, decrypt, unlock, change_passphrase
from secretstore.utils.codec import serialize, deserialize, record_to_dict, record_from_dict

__version__ = "0.1.0"

__all__ = [
    "generate_keypair", "keypair_from_private_key",
    "encrypt", "decrypt", "unlock", "change_passphrase",
    "serialize", "deserialize", "record_to_dict", "record_from_dict",
    "KeyPair", "KeystoreRecord", "CryptoParams", "CipherParams", "KdfParams", "ScryptParams",
    "KeystoreError", "EntropyUnavailable", "EntropyExhausted", "InvalidKdfParameters",
    "UnsupportedKdf", "UnsupportedCipher", "UnsupportedVersion", "MalformedRecord",
    "InvalidKeyLength", "InvalidIvLength", "InvalidPrivateKey", "AuthenticationFailed",
]
