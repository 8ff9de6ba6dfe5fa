"""
secretstore Test Fixtures
"""

import json
import pytest

from secretstore.models import ScryptParams
from secretstore.utils.keygen import generate_keypair, keypair_from_private_key
from secretstore.utils.keystore import encrypt
from secretstore.utils.codec import record_to_dict


PASSPHRASE = "correct horse battery staple"

# Published Web3 Secret Storage scrypt test vector (password "testpassword")
SCRYPT_VECTOR = {
    "crypto": {
        "cipher": "aes-128-ctr",
        "cipherparams": {"iv": "83dbcc02d8ccb40e466191a123791e0e"},
        "ciphertext": "d172bf743a674da9cdad04534d56926ef8358534d458fffccd4e6ad2fbde479c",
        "kdf": "scrypt",
        "kdfparams": {
            "dklen": 32,
            "n": 262144,
            "r": 1,
            "p": 8,
            "salt": "ab0c7876052600dd703518d6fc3fe8984592145b591fc8fb5c6d43190334ba19",
        },
        "mac": "2103ac29920d71da29f15d75b4a16dbe95cfd7ff8faea1056c33131d846e3097",
    },
    "id": "3198bc9c-6672-5ab3-d995-4942343ae5b6",
    "version": 3,
}
SCRYPT_VECTOR_PASSWORD = "testpassword"
SCRYPT_VECTOR_PRIVATE_KEY = "7a28b5ba57c53603b0b07b56bba752f7784bf506fa95edc395f5cf6c7514fe9d"


@pytest.fixture
def light_params() -> ScryptParams:
    """Cheap scrypt costs so the suite runs quickly."""
    return ScryptParams.light()


@pytest.fixture
def keypair():
    """Freshly generated keypair."""
    return generate_keypair()


@pytest.fixture
def known_keypair():
    """Keypair for private key 1, whose public key is the secp256k1 generator."""
    return keypair_from_private_key(bytes(31) + b"\x01")


@pytest.fixture
def record(keypair, light_params):
    """Keypair encrypted under PASSPHRASE with light costs."""
    return encrypt(keypair, PASSPHRASE, light_params)


@pytest.fixture
def record_dict(record) -> dict:
    """Record as a mutable JSON object (deep copy)."""
    return json.loads(json.dumps(record_to_dict(record)))


@pytest.fixture
def scrypt_vector() -> dict:
    return json.loads(json.dumps(SCRYPT_VECTOR))
