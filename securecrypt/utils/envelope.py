import json
import re
from typing import Optional, Union

from securecrypt.errors import InvalidFormatError
from securecrypt.models import (
    ALLOWED_KEY_LENGTHS, ITERATION_CEILING, ITERATION_FLOOR, IV_BYTES, MAC_BYTES, SALT_BYTES,
    DerivationParams, EncryptedEnvelope
)

BLOCK_BYTES = 16

# Wire field names, in serialization order
CIPHERTEXT_FIELD = "encryptedContent"
_ALIASES = {
    CIPHERTEXT_FIELD: ("ciphertext",),
    "mimeType": ("type",),
    "keyLength": ("keyLengthBits",),
}

EnvelopeLike = Union[EncryptedEnvelope, str, bytes, dict]

# -----------------------------
# Serialization
# -----------------------------
def envelope_to_dict(envelope: EncryptedEnvelope) -> dict:
    """
    Wire representation of an envelope.

    The three required text fields come first; derivation parameters, MAC and
    caller metadata are only written when present.
    """
    record = {
        CIPHERTEXT_FIELD: envelope.ciphertext,
        "iv": envelope.iv,
        "salt": envelope.salt,
    }
    optional = {
        "iterations": envelope.iterations,
        "keyLength": envelope.key_length_bits,
        "mac": envelope.mac,
        "filename": envelope.filename,
        "mimeType": envelope.mime_type,
        "size": envelope.size,
    }
    record.update({k: v for k, v in optional.items() if v is not None})
    return record

def serialize_envelope(envelope: EncryptedEnvelope, indent: Optional[int] = None) -> str:
    return json.dumps(envelope_to_dict(envelope), indent=indent)

# -----------------------------
# Deserialization
# -----------------------------
def _lookup(record: dict, name: str):
    if name in record:
        return record[name]
    for alias in _ALIASES.get(name, ()):
        if alias in record:
            return record[alias]
    return None

def _require_text(record: dict, name: str) -> str:
    value = _lookup(record, name)
    if value is None:
        raise InvalidFormatError(f"Envelope is missing field '{name}'")
    if not isinstance(value, str):
        raise InvalidFormatError(f"Envelope field '{name}' must be a string")
    return value

def _optional_int(record: dict, name: str) -> Optional[int]:
    value = _lookup(record, name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFormatError(f"Envelope field '{name}' must be an integer")
    return value

def envelope_from_dict(record: dict) -> EncryptedEnvelope:
    """
    Rebuild an envelope from its wire record.

    Accepts the legacy three-field form as well as envelopes carrying
    derivation parameters, MAC and file metadata. File metadata is carried
    through unchecked.

    Raises:
        InvalidFormatError: If the record is not an object or a field is
            missing or of the wrong type
    """
    if not isinstance(record, dict):
        raise InvalidFormatError("Envelope must be a JSON object")

    mac = _lookup(record, "mac")
    if mac is not None and not isinstance(mac, str):
        raise InvalidFormatError("Envelope field 'mac' must be a string")

    return EncryptedEnvelope(
        ciphertext=_require_text(record, CIPHERTEXT_FIELD),
        iv=_require_text(record, "iv"),
        salt=_require_text(record, "salt"),
        iterations=_optional_int(record, "iterations"),
        key_length_bits=_optional_int(record, "keyLength"),
        mac=mac,
        filename=_lookup(record, "filename"),
        mime_type=_lookup(record, "mimeType"),
        size=_lookup(record, "size"),
    )

def parse_envelope(text: Union[str, bytes]) -> EncryptedEnvelope:
    try:
        record = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidFormatError(f"Envelope is not valid JSON: {exc}") from exc
    return envelope_from_dict(record)

def coerce_envelope(source: EnvelopeLike) -> EncryptedEnvelope:
    if isinstance(source, EncryptedEnvelope):
        return source
    if isinstance(source, dict):
        return envelope_from_dict(source)
    if isinstance(source, (str, bytes)):
        return parse_envelope(source)
    raise InvalidFormatError(f"Unsupported envelope type: {type(source).__name__}")

# -----------------------------
# Field Decoding
# -----------------------------
_HEX = re.compile(r"(?:[0-9a-fA-F]{2})*")

def _unhex(value: str, name: str) -> bytes:
    # bytes.fromhex alone also skips whitespace between digits
    if not isinstance(value, str) or not _HEX.fullmatch(value):
        raise InvalidFormatError(f"Envelope field '{name}' is not valid hex")
    return bytes.fromhex(value)

def decode_fields(envelope: EncryptedEnvelope) -> tuple[bytes, bytes, bytes]:
    """
    Decode and structurally validate ciphertext, IV, salt and MAC.

    Returns:
        Tuple of (ciphertext, iv, salt) bytes

    Raises:
        InvalidFormatError: On bad hex, wrong IV/salt/MAC length, or a
            ciphertext that is not a positive multiple of the AES block size
    """
    ciphertext = _unhex(envelope.ciphertext, CIPHERTEXT_FIELD)
    iv = _unhex(envelope.iv, "iv")
    salt = _unhex(envelope.salt, "salt")

    if len(iv) != IV_BYTES:
        raise InvalidFormatError(f"IV must be {IV_BYTES} bytes, got {len(iv)}")
    if len(salt) != SALT_BYTES:
        raise InvalidFormatError(f"Salt must be {SALT_BYTES} bytes, got {len(salt)}")
    if not ciphertext or len(ciphertext) % BLOCK_BYTES:
        raise InvalidFormatError(
            f"Ciphertext length {len(ciphertext)} is not a positive multiple of {BLOCK_BYTES}"
        )
    if envelope.mac is not None:
        mac = _unhex(envelope.mac, "mac")
        if len(mac) != MAC_BYTES:
            raise InvalidFormatError(f"MAC must be {MAC_BYTES} bytes, got {len(mac)}")
    return ciphertext, iv, salt

def embedded_params(envelope: EncryptedEnvelope) -> Optional[DerivationParams]:
    """
    Derivation parameters recorded in the envelope, or None for legacy
    envelopes that carry neither field.

    Raises:
        InvalidFormatError: If only one parameter is present or either is
            outside what the engine could have produced
    """
    if envelope.iterations is None and envelope.key_length_bits is None:
        return None
    if envelope.iterations is None or envelope.key_length_bits is None:
        raise InvalidFormatError("Envelope carries only one of 'iterations' and 'keyLength'")
    if envelope.key_length_bits not in ALLOWED_KEY_LENGTHS:
        raise InvalidFormatError(f"Envelope key length {envelope.key_length_bits} is not supported")
    if envelope.iterations < ITERATION_FLOOR:
        raise InvalidFormatError(
            f"Envelope iteration count {envelope.iterations} is below the floor of {ITERATION_FLOOR}"
        )
    if envelope.iterations > ITERATION_CEILING:
        raise InvalidFormatError(
            f"Envelope iteration count {envelope.iterations} exceeds the ceiling of {ITERATION_CEILING}"
        )
    return envelope.params
