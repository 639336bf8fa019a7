import json

import pytest

from securecrypt.errors import InvalidFormatError, ParameterOutOfRangeError
from securecrypt.models import ITERATION_CEILING, ITERATION_FLOOR, DerivationParams, EncryptedEnvelope
from securecrypt.utils.content import decrypted_filename, encrypted_filename, from_text_safe, to_text_safe
from securecrypt.utils.encryption import normalize_params, pad_pkcs7, unpad_pkcs7
from securecrypt.utils.envelope import (
    coerce_envelope, decode_fields, embedded_params, envelope_from_dict, envelope_to_dict,
    parse_envelope, serialize_envelope
)

IV = "00" * 16
SALT = "11" * 16
CIPHERTEXT = "22" * 32


def make_envelope(**overrides) -> EncryptedEnvelope:
    fields = dict(ciphertext=CIPHERTEXT, iv=IV, salt=SALT, iterations=150000, key_length_bits=256, mac="ab" * 32)
    fields.update(overrides)
    return EncryptedEnvelope(**fields)


# -----------------------------
# Wire format
# -----------------------------
def test_wire_field_names():
    record = envelope_to_dict(make_envelope())
    assert record == {
        "encryptedContent": CIPHERTEXT,
        "iv": IV,
        "salt": SALT,
        "iterations": 150000,
        "keyLength": 256,
        "mac": "ab" * 32,
    }


def test_legacy_envelope_serializes_three_fields():
    envelope = EncryptedEnvelope(ciphertext=CIPHERTEXT, iv=IV, salt=SALT)
    assert list(envelope_to_dict(envelope)) == ["encryptedContent", "iv", "salt"]
    assert envelope.params is None


def test_file_metadata_is_carried_through():
    envelope = make_envelope(filename="taxes.xlsx", mime_type="application/vnd.ms-excel", size=1234)
    parsed = parse_envelope(serialize_envelope(envelope, indent=2))

    assert parsed == envelope
    record = json.loads(serialize_envelope(envelope))
    assert record["filename"] == "taxes.xlsx"
    assert record["mimeType"] == "application/vnd.ms-excel"
    assert record["size"] == 1234


def test_aliases_accepted_on_read():
    record = {"ciphertext": CIPHERTEXT, "iv": IV, "salt": SALT, "type": "text/plain", "keyLengthBits": 128}
    envelope = envelope_from_dict(record)

    assert envelope.ciphertext == CIPHERTEXT
    assert envelope.mime_type == "text/plain"
    assert envelope.key_length_bits == 128


def test_coerce_envelope_accepts_all_forms():
    envelope = make_envelope()
    text = serialize_envelope(envelope)

    assert coerce_envelope(envelope) is envelope
    assert coerce_envelope(text) == envelope
    assert coerce_envelope(text.encode()) == envelope
    assert coerce_envelope(json.loads(text)) == envelope


@pytest.mark.parametrize("source", [
    "not json at all",
    "[1, 2, 3]",
    json.dumps({"iv": IV, "salt": SALT}),
    json.dumps({"encryptedContent": CIPHERTEXT, "salt": SALT}),
    json.dumps({"encryptedContent": 42, "iv": IV, "salt": SALT}),
    json.dumps({"encryptedContent": CIPHERTEXT, "iv": IV, "salt": SALT, "iterations": "150000"}),
    json.dumps({"encryptedContent": CIPHERTEXT, "iv": IV, "salt": SALT, "mac": 7}),
    12345,
])
def test_unparsable_envelopes(source):
    with pytest.raises(InvalidFormatError):
        coerce_envelope(source)


# -----------------------------
# Field decoding
# -----------------------------
def test_decode_fields():
    ciphertext, iv, salt = decode_fields(make_envelope())
    assert ciphertext == b"\x22" * 32
    assert iv == b"\x00" * 16
    assert salt == b"\x11" * 16


@pytest.mark.parametrize("overrides", [
    {"ciphertext": "zz" * 16},
    {"ciphertext": ""},
    {"ciphertext": "22" * 15},
    {"iv": "00" * 8},
    {"iv": "not hex"},
    {"salt": "11" * 32},
    {"mac": "xyz"},
    {"mac": "ab" * 5},
    {"mac": ""},
    {"iv": "00 " * 16},
    {"salt": " " + "11" * 16},
])
def test_decode_fields_rejects(overrides):
    with pytest.raises(InvalidFormatError):
        decode_fields(make_envelope(**overrides))


def test_embedded_params():
    assert embedded_params(make_envelope()) == DerivationParams(iterations=150000, key_length_bits=256)
    assert embedded_params(make_envelope(iterations=None, key_length_bits=None)) is None


@pytest.mark.parametrize("overrides", [
    {"iterations": None},
    {"key_length_bits": None},
    {"key_length_bits": 512},
    {"iterations": ITERATION_FLOOR - 1},
    {"iterations": ITERATION_CEILING + 1},
    {"iterations": 2**70},
])
def test_embedded_params_rejects(overrides):
    with pytest.raises(InvalidFormatError):
        embedded_params(make_envelope(**overrides))


# -----------------------------
# Engine helpers
# -----------------------------
def test_normalize_params_defaults_and_clamp():
    assert normalize_params(None) == DerivationParams(iterations=150000, key_length_bits=256)
    assert normalize_params(DerivationParams(iterations=5, key_length_bits=128)) == DerivationParams(
        iterations=ITERATION_FLOOR, key_length_bits=128
    )
    high = DerivationParams(iterations=600000, key_length_bits=192)
    assert normalize_params(high) is high


@pytest.mark.parametrize("length", [0, 1, 15, 16, 17, 31, 32])
def test_pkcs7_padding(length):
    data = b"x" * length
    padded = pad_pkcs7(data)

    assert len(padded) % 16 == 0
    assert 1 <= len(padded) - length <= 16
    assert padded[-1] == len(padded) - length
    assert unpad_pkcs7(padded) == data


def test_unpad_rejects_invalid_padding():
    with pytest.raises(ValueError):
        unpad_pkcs7(b"A" * 15 + b"\x00")


def test_content_adapter():
    data = b"\x00\x01binary\xff"
    assert from_text_safe(to_text_safe(data)) == data
    with pytest.raises(InvalidFormatError):
        from_text_safe("***")


def test_output_filenames():
    assert encrypted_filename("notes.txt") == "notes.txt.encrypted"
    assert decrypted_filename("notes.txt.encrypted") == "notes.txt"
    assert decrypted_filename("notes.json") == "decrypted_notes.json"
    assert decrypted_filename(".encrypted") == "decrypted_.encrypted"


def test_normalize_params_rejects_above_ceiling():
    at_ceiling = DerivationParams(iterations=ITERATION_CEILING)
    assert normalize_params(at_ceiling) is at_ceiling
    with pytest.raises(ParameterOutOfRangeError):
        normalize_params(DerivationParams(iterations=ITERATION_CEILING + 1))
