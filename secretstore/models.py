from dataclasses import dataclass, field
from typing import Optional

# -----------------------------
# CLI Colors
# -----------------------------
class bcolors:
    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    GREY = '\033[90m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    UNDERLINE = '\033[4m'

# -----------------------------
# Format Constants
# -----------------------------
KEYSTORE_VERSION = 3
CIPHER_NAME = "aes-128-ctr"
KDF_NAME = "scrypt"

PRIVATE_KEY_SIZE = 32
ADDRESS_SIZE = 20
SALT_SIZE = 32
IV_SIZE = 16
SUBKEY_SIZE = 16  # Encryption key and MAC key are each half of a 32-byte buffer

# -----------------------------
# KDF Cost Parameters
# -----------------------------
@dataclass(frozen=True)
class ScryptParams:
    """
    Cost parameters for scrypt key derivation.

    Passed explicitly into encryption so callers choose their own cost:
    - n: CPU/memory cost (power of two, memory use is 128 * r * n bytes)
    - r: block size factor
    - p: parallelization factor
    - dklen: length of the derived buffer, split into two 16-byte sub-keys

    The defaults match the strong setting used by Ethereum clients for new
    keystores (N = 2^18, r = 8, p = 1).
    """
    n: int = 1 << 18
    r: int = 8
    p: int = 1
    dklen: int = 32

    @classmethod
    def light(cls) -> "ScryptParams":
        """Cheap parameters (N = 2^12, p = 6) for tests and interactive use."""
        return cls(n=1 << 12, r=8, p=6, dklen=32)

# -----------------------------
# Key Pair
# -----------------------------
@dataclass(frozen=True)
class KeyPair:
    """
    secp256k1 key pair with its Ethereum address.

    public_key is the 64-byte uncompressed point without the 0x04 prefix and
    address is the last 20 bytes of keccak256(public_key). Both are derived
    from private_key and never set independently.
    """
    private_key: bytes = field(repr=False)
    public_key: bytes
    address: bytes

    @property
    def address_hex(self) -> str:
        return self.address.hex()

# -----------------------------
# Keystore Record
# -----------------------------
@dataclass(frozen=True)
class CipherParams:
    iv: bytes


@dataclass(frozen=True)
class KdfParams:
    """Stored scrypt parameters; kept with the ciphertext so old records stay decryptable."""
    dklen: int
    n: int
    r: int
    p: int
    salt: bytes

    @property
    def scrypt(self) -> ScryptParams:
        return ScryptParams(n=self.n, r=self.r, p=self.p, dklen=self.dklen)


@dataclass(frozen=True)
class CryptoParams:
    cipher: str
    ciphertext: bytes
    cipherparams: CipherParams
    kdf: str
    kdfparams: KdfParams
    mac: bytes


@dataclass(frozen=True)
class KeystoreRecord:
    """
    Web3 Secret Storage V3 record.

    Plain data with no behavior: produced by encrypt, consumed by decrypt,
    rendered to and from JSON by the codec. The mac binds the ciphertext to
    the passphrase-derived MAC key, so a mismatch on verification means the
    passphrase is wrong or the record was modified.
    """
    address: Optional[bytes]  # Some writers omit it; new records always carry it
    crypto: CryptoParams
    version: int = KEYSTORE_VERSION
    id: Optional[str] = None
