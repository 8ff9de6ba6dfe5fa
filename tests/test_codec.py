"""
Keystore codec tests
"""

import json
import pytest

from secretstore.exceptions import MalformedRecord, UnsupportedKdf, UnsupportedVersion
from secretstore.utils.codec import deserialize, record_from_dict, record_to_dict, serialize
from secretstore.utils.keystore import decrypt

from conftest import PASSPHRASE


class TestSerialize:
    """Tests for rendering records."""

    def test_layout(self, record):
        data = json.loads(serialize(record))
        assert set(data) == {"address", "crypto", "id", "version"}
        assert set(data["crypto"]) == {"cipher", "ciphertext", "cipherparams", "kdf", "kdfparams", "mac"}
        assert set(data["crypto"]["kdfparams"]) == {"dklen", "n", "r", "p", "salt"}
        assert data["version"] == 3
        assert data["crypto"]["kdfparams"]["dklen"] == 32

    def test_hex_encoding(self, record):
        data = record_to_dict(record)
        assert data["address"] == record.address.hex()
        assert not data["address"].startswith("0x")
        assert data["crypto"]["cipherparams"]["iv"] == record.crypto.cipherparams.iv.hex()
        assert data["crypto"]["kdfparams"]["salt"] == data["crypto"]["kdfparams"]["salt"].lower()
        assert len(data["crypto"]["kdfparams"]["salt"]) == 64

    def test_indent(self, record):
        assert "\n" in serialize(record, indent=2)
        assert "\n" not in serialize(record)


class TestDeserialize:
    """Tests for parsing records."""

    def test_round_trip(self, record):
        assert deserialize(serialize(record)) == record
        assert record_from_dict(record_to_dict(record)) == record

    def test_bytes_input(self, record):
        assert deserialize(serialize(record).encode("utf-8")) == record

    def test_external_record(self, scrypt_vector):
        """A record without address keeps its id and parameters."""
        record = deserialize(json.dumps(scrypt_vector))
        assert record.address is None
        assert record.id == "3198bc9c-6672-5ab3-d995-4942343ae5b6"
        assert record.crypto.kdfparams.n == 262144
        assert record.crypto.kdfparams.r == 1
        assert record.crypto.kdfparams.p == 8
        assert "address" not in record_to_dict(record)

    def test_prefixed_hex(self, record, record_dict):
        record_dict["address"] = "0x" + record_dict["address"]
        record_dict["crypto"]["mac"] = "0x" + record_dict["crypto"]["mac"]
        assert record_from_dict(record_dict) == record

    def test_version_string(self, record, record_dict):
        record_dict["version"] = "3"
        assert record_from_dict(record_dict) == record

    def test_unknown_cipher_parses(self, record_dict):
        record_dict["crypto"]["cipher"] = "aes-128-cbc"
        assert record_from_dict(record_dict).crypto.cipher == "aes-128-cbc"

    def test_extra_fields_ignored(self, record, record_dict):
        record_dict["meta"] = {"label": "savings"}
        assert record_from_dict(record_dict) == record

    @pytest.mark.parametrize("version", [1, 2, 4, "1"])
    def test_unsupported_version(self, record_dict, version):
        record_dict["version"] = version
        with pytest.raises(UnsupportedVersion):
            record_from_dict(record_dict)

    def test_unsupported_kdf(self, record_dict):
        record_dict["crypto"]["kdf"] = "pbkdf2"
        with pytest.raises(UnsupportedKdf):
            record_from_dict(record_dict)


class TestMalformed:
    """Codec-level parse failures."""

    @pytest.mark.parametrize("text", ["", "{", "not json", "[1, 2]", "3", "null"])
    def test_not_an_object(self, text):
        with pytest.raises(MalformedRecord):
            deserialize(text)

    def test_missing_version(self, record_dict):
        del record_dict["version"]
        with pytest.raises(MalformedRecord):
            record_from_dict(record_dict)

    @pytest.mark.parametrize("version", [True, 3.0, "three", None, "\u00b3", "\u0663", "-3"])
    def test_bad_version_type(self, record_dict, version):
        record_dict["version"] = version
        with pytest.raises(MalformedRecord):
            record_from_dict(record_dict)

    @pytest.mark.parametrize("path", [
        ("crypto",),
        ("crypto", "cipher"),
        ("crypto", "ciphertext"),
        ("crypto", "cipherparams"),
        ("crypto", "cipherparams", "iv"),
        ("crypto", "kdf"),
        ("crypto", "kdfparams"),
        ("crypto", "kdfparams", "salt"),
        ("crypto", "kdfparams", "n"),
        ("crypto", "kdfparams", "dklen"),
        ("crypto", "mac"),
    ])
    def test_missing_field(self, record_dict, path):
        target = record_dict
        for key in path[:-1]:
            target = target[key]
        del target[path[-1]]
        with pytest.raises(MalformedRecord):
            record_from_dict(record_dict)

    @pytest.mark.parametrize("path", [
        ("address",),
        ("crypto", "ciphertext"),
        ("crypto", "cipherparams", "iv"),
        ("crypto", "kdfparams", "salt"),
        ("crypto", "mac"),
    ])
    def test_non_hex(self, record_dict, path):
        target = record_dict
        for key in path[:-1]:
            target = target[key]
        target[path[-1]] = "xyz123"
        with pytest.raises(MalformedRecord):
            record_from_dict(record_dict)

    @pytest.mark.parametrize("iv", ["", "00" * 15, "00" * 17, "00" * 32])
    def test_wrong_iv_length(self, record_dict, iv):
        record_dict["crypto"]["cipherparams"]["iv"] = iv
        with pytest.raises(MalformedRecord):
            record_from_dict(record_dict)

    @pytest.mark.parametrize("address", ["", "0x", "11" * 19, "11" * 21, "11" * 32])
    def test_wrong_address_length(self, record_dict, address):
        record_dict["address"] = address
        with pytest.raises(MalformedRecord):
            record_from_dict(record_dict)

    def test_wrong_iv_length_in_decrypt(self, record_dict):
        """Records handed to decrypt as dicts fail at parse time."""
        record_dict["crypto"]["cipherparams"]["iv"] = record_dict["crypto"]["cipherparams"]["iv"][:-2]
        with pytest.raises(MalformedRecord):
            decrypt(record_dict, PASSPHRASE)

    def test_hex_not_string(self, record_dict):
        record_dict["crypto"]["mac"] = 1234
        with pytest.raises(MalformedRecord):
            record_from_dict(record_dict)

    @pytest.mark.parametrize("value", ["eight", "\u00b2", "8.0", ""])
    def test_non_integer_cost(self, record_dict, value):
        record_dict["crypto"]["kdfparams"]["r"] = value
        with pytest.raises(MalformedRecord):
            record_from_dict(record_dict)

    def test_crypto_not_object(self, record_dict):
        record_dict["crypto"] = "aes"
        with pytest.raises(MalformedRecord):
            record_from_dict(record_dict)

    def test_id_not_string(self, record_dict):
        record_dict["id"] = 42
        with pytest.raises(MalformedRecord):
            record_from_dict(record_dict)
