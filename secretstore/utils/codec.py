import json
from typing import Any, Optional, Union
from secretstore.exceptions import MalformedRecord, UnsupportedKdf, UnsupportedVersion
from secretstore.models import (
    ADDRESS_SIZE, IV_SIZE, KDF_NAME, KEYSTORE_VERSION, CipherParams, CryptoParams, KdfParams,
    KeystoreRecord
)

# -----------------------------
# Field Helpers
# -----------------------------
def _field(data: dict, key: str, where: str) -> Any:
    if not isinstance(data, dict):
        raise MalformedRecord(f"{where} must be an object")
    if key not in data:
        raise MalformedRecord(f"Missing field {where}.{key}")
    return data[key]

def _hex(data: dict, key: str, where: str) -> bytes:
    value = _field(data, key, where)
    if not isinstance(value, str):
        raise MalformedRecord(f"{where}.{key} must be a hex string")
    text = value[2:] if value[:2].lower() == "0x" else value
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise MalformedRecord(f"{where}.{key} is not valid hex") from e

def _int(data: dict, key: str, where: str) -> int:
    value = _field(data, key, where)
    if isinstance(value, bool):
        raise MalformedRecord(f"{where}.{key} must be an integer")
    if isinstance(value, int):
        return value
    # Some writers quote numbers ("version": "3")
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdecimal():
        return int(value)
    raise MalformedRecord(f"{where}.{key} must be an integer")

def _str(data: dict, key: str, where: str) -> str:
    value = _field(data, key, where)
    if not isinstance(value, str):
        raise MalformedRecord(f"{where}.{key} must be a string")
    return value

def _sized_hex(data: dict, key: str, where: str, size: int) -> bytes:
    value = _hex(data, key, where)
    if len(value) != size:
        raise MalformedRecord(f"{where}.{key} must be {size} bytes, got {len(value)}")
    return value

# -----------------------------
# Dict <-> Record
# -----------------------------
def record_to_dict(record: KeystoreRecord) -> dict:
    """Render a record in the Web3 Secret Storage V3 layout (lowercase hex, no 0x)."""
    crypto = record.crypto
    data = {}
    if record.address is not None:
        data["address"] = record.address.hex()
    data["crypto"] = {
        "cipher": crypto.cipher,
        "ciphertext": crypto.ciphertext.hex(),
        "cipherparams": {"iv": crypto.cipherparams.iv.hex()},
        "kdf": crypto.kdf,
        "kdfparams": {
            "dklen": crypto.kdfparams.dklen,
            "n": crypto.kdfparams.n,
            "r": crypto.kdfparams.r,
            "p": crypto.kdfparams.p,
            "salt": crypto.kdfparams.salt.hex(),
        },
        "mac": crypto.mac.hex(),
    }
    if record.id is not None:
        data["id"] = record.id
    data["version"] = record.version
    return data

def record_from_dict(data: dict) -> KeystoreRecord:
    """
    Parse a decoded V3 keystore object.

    The version is read first: a document of another version has a different
    layout and is rejected as unsupported rather than misparsed. The KDF name
    is checked before its parameters for the same reason. Unknown cipher names
    are kept so the engine can reject them explicitly.

    Raises:
        MalformedRecord: Missing fields, bad hex, wrong-length iv or address,
            non-integer parameters
        UnsupportedVersion: version is not 3
        UnsupportedKdf: kdf is not scrypt
    """
    version = _int(data, "version", "keystore")
    if version != KEYSTORE_VERSION:
        raise UnsupportedVersion(f"Keystore version must be {KEYSTORE_VERSION}, got {version}")

    crypto = _field(data, "crypto", "keystore")
    kdf = _str(crypto, "kdf", "crypto")
    if kdf != KDF_NAME:
        raise UnsupportedKdf(f"Unsupported KDF: {kdf}")
    kdfparams = _field(crypto, "kdfparams", "crypto")
    cipherparams = _field(crypto, "cipherparams", "crypto")

    record_id: Optional[str] = data.get("id")
    if record_id is not None and not isinstance(record_id, str):
        raise MalformedRecord("keystore.id must be a string")

    address = None
    if data.get("address") is not None:
        address = _sized_hex(data, "address", "keystore", ADDRESS_SIZE)

    return KeystoreRecord(
        address=address,
        crypto=CryptoParams(
            cipher=_str(crypto, "cipher", "crypto"),
            ciphertext=_hex(crypto, "ciphertext", "crypto"),
            cipherparams=CipherParams(iv=_sized_hex(cipherparams, "iv", "cipherparams", IV_SIZE)),
            kdf=kdf,
            kdfparams=KdfParams(
                dklen=_int(kdfparams, "dklen", "kdfparams"),
                n=_int(kdfparams, "n", "kdfparams"),
                r=_int(kdfparams, "r", "kdfparams"),
                p=_int(kdfparams, "p", "kdfparams"),
                salt=_hex(kdfparams, "salt", "kdfparams"),
            ),
            mac=_hex(crypto, "mac", "crypto"),
        ),
        version=version,
        id=record_id,
    )

# -----------------------------
# Text <-> Record
# -----------------------------
def serialize(record: KeystoreRecord, indent: Optional[int] = None) -> str:
    return json.dumps(record_to_dict(record), indent=indent)

def deserialize(text: Union[str, bytes]) -> KeystoreRecord:
    """Parse keystore JSON text into a KeystoreRecord."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedRecord(f"Keystore is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedRecord("Keystore must be a JSON object")
    return record_from_dict(data)
