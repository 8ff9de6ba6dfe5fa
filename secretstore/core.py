import logging
import os
from datetime import datetime, timezone
from typing import Optional, Tuple, Union

from secretstore.models import KeyPair, KeystoreRecord, ScryptParams
from secretstore.utils.codec import deserialize, serialize
from secretstore.utils.kdf import Passphrase
from secretstore.utils.keygen import generate_keypair, keypair_from_private_key
from secretstore.utils.keystore import change_passphrase, encrypt, unlock

logger = logging.getLogger(__name__)

# -----------------------------
# Keystore Files
# -----------------------------
def keystore_filename(address: bytes, when: Optional[datetime] = None) -> str:
    """
    Conventional keystore file name: UTC--<timestamp>--<address hex>.

    Colons are replaced so the name is valid on every filesystem.
    """
    when = when or datetime.now(timezone.utc)
    stamp = when.astimezone(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S.%f000Z")
    return f"UTC--{stamp}--{address.hex()}"

def write_keystore(record: KeystoreRecord, path: str) -> str:
    with open(path, "w") as f:
        f.write(serialize(record, indent=2))
    # Owner read/write only; ignored where the platform has no POSIX modes
    os.chmod(path, 0o600)
    logger.info("Keystore for %s written to %s", record.address.hex(), path)
    return path

def read_keystore(path: str) -> KeystoreRecord:
    with open(path, "r") as f:
        return deserialize(f.read())

# -----------------------------
# Account Operations
# -----------------------------
def _store(keypair: KeyPair, passphrase: Passphrase, directory: str,
           params: ScryptParams) -> Tuple[str, KeystoreRecord]:
    record = encrypt(keypair, passphrase, params)
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, keystore_filename(record.address))
    return write_keystore(record, path), record

def create_keystore(passphrase: Passphrase, directory: str = ".",
                    params: ScryptParams = ScryptParams()) -> Tuple[str, KeystoreRecord]:
    """
    Generate a new key and store it encrypted in directory.

    Returns:
        Tuple of (keystore_path, record)
    """
    return _store(generate_keypair(), passphrase, directory, params)

def import_private_key(private_key: Union[bytes, str], passphrase: Passphrase, directory: str = ".",
                       params: ScryptParams = ScryptParams()) -> Tuple[str, KeystoreRecord]:
    """Encrypt an existing private key (raw bytes or hex) into a new keystore file."""
    return _store(keypair_from_private_key(private_key), passphrase, directory, params)

def unlock_keystore(passphrase: Passphrase, keystore_file: str) -> KeyPair:
    """Load a keystore file and return its decrypted KeyPair."""
    return unlock(read_keystore(keystore_file), passphrase)

def update_keystore_passphrase(keystore_file: str, old_passphrase: Passphrase,
                               new_passphrase: Passphrase) -> KeystoreRecord:
    """Re-encrypt a keystore file in place under a new passphrase."""
    record = change_passphrase(read_keystore(keystore_file), old_passphrase, new_passphrase)
    write_keystore(record, keystore_file)
    return record
