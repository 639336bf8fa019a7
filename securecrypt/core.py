import logging
import secrets
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional, Union

from securecrypt.errors import IncorrectPasswordError, InvalidFormatError
from securecrypt.models import (
    IV_BYTES, SALT_BYTES, DecryptedFile, DerivationParams, EncryptedEnvelope, OperationEvent
)
from securecrypt.utils.content import from_text_safe, read_file, to_text_safe
from securecrypt.utils.encryption import (
    compute_mac, decrypt_cbc, derive_key, derive_mac_key, encrypt_cbc, normalize_params,
    unpad_pkcs7, verify_mac
)
from securecrypt.utils.envelope import EnvelopeLike, coerce_envelope, decode_fields, embedded_params

logger = logging.getLogger(__name__)

Observer = Callable[[OperationEvent], None]

# -----------------------------
# Encryption/Decryption
# -----------------------------

def _notify(observer: Optional[Observer], event: OperationEvent):
    """
    Report a completed operation to an optional observer.

    The result of the operation is already final at this point, so an
    observer failure is logged and never turns a success into an error.
    """
    if observer is None:
        return
    try:
        observer(event)
    except Exception:
        logger.warning("Operation observer failed for %s/%s", event.operation, event.kind, exc_info=True)

def _encrypt_text(text: str, password: str, params: DerivationParams) -> EncryptedEnvelope:
    # Fresh salt and IV on every call; never reused
    salt = secrets.token_bytes(SALT_BYTES)
    iv = secrets.token_bytes(IV_BYTES)

    key = derive_key(password, salt, params.iterations, params.key_length_bits)
    ciphertext = encrypt_cbc(text.encode("utf-8"), key, iv)
    mac = compute_mac(derive_mac_key(key), params, iv, ciphertext)

    logger.debug(
        "Encrypted %d bytes with %d-bit key, %d iterations",
        len(ciphertext), params.key_length_bits, params.iterations
    )
    return EncryptedEnvelope(
        ciphertext=ciphertext.hex(),
        iv=iv.hex(),
        salt=salt.hex(),
        iterations=params.iterations,
        key_length_bits=params.key_length_bits,
        mac=mac,
    )

def encrypt(content: Union[str, bytes], password: str, options: Optional[DerivationParams] = None,
            observer: Optional[Observer] = None) -> EncryptedEnvelope:
    """
    Password-based encryption of text or raw bytes.

    Pipeline:
    1. Normalize derivation parameters (iteration floor, key length check)
    2. Draw a fresh 128-bit salt and 128-bit IV from the OS CSPRNG
    3. Derive the AES key with PBKDF2-HMAC-SHA256
    4. Encrypt with AES-CBC and PKCS#7 padding
    5. Tag parameters, IV and ciphertext with HMAC-SHA256

    Raw bytes are transcoded to base64 text first, so the engine only ever
    encrypts text-safe buffers; decrypt() then returns that base64 text.

    Args:
        content: Plaintext string or raw bytes (e.g. file data)
        password: User password; emptiness is not checked here
        options: Derivation parameters, defaults to DerivationParams()
        observer: Optional callable receiving an OperationEvent

    Returns:
        EncryptedEnvelope with hex fields and embedded parameters

    Raises:
        ParameterOutOfRangeError: If the key length or iteration type is invalid
    """
    params = normalize_params(options)
    kind = "file" if isinstance(content, (bytes, bytearray)) else "text"
    text = to_text_safe(bytes(content)) if kind == "file" else content

    envelope = _encrypt_text(text, password, params)
    _notify(observer, OperationEvent(operation="encrypt", kind=kind))
    return envelope

def _decrypt_text(source: EnvelopeLike, password: str, options: Optional[DerivationParams]) -> str:
    requested = normalize_params(options)
    envelope = coerce_envelope(source)
    ciphertext, iv, salt = decode_fields(envelope)

    params = embedded_params(envelope)
    if params is None:
        params = requested
    elif params != requested and options is not None:
        logger.debug("Envelope carries its own derivation parameters; caller options ignored")

    key = derive_key(password, salt, params.iterations, params.key_length_bits)

    # With a MAC, a wrong password is detected before any padding is examined,
    # and anything that goes wrong afterwards means the data itself is bad.
    authenticated = envelope.mac is not None
    if authenticated and not verify_mac(derive_mac_key(key), params, iv, ciphertext, envelope.mac):
        raise IncorrectPasswordError()

    padded = decrypt_cbc(ciphertext, key, iv)
    try:
        plaintext = unpad_pkcs7(padded).decode("utf-8")
    except (ValueError, UnicodeDecodeError) as exc:
        if authenticated:
            raise InvalidFormatError("Authenticated envelope holds invalid plaintext") from exc
        raise IncorrectPasswordError() from exc

    # Legacy envelopes: an empty result is the only remaining wrong-key signal
    if not plaintext and not authenticated:
        raise IncorrectPasswordError()
    return plaintext

def decrypt(envelope: EnvelopeLike, password: str, options: Optional[DerivationParams] = None,
            observer: Optional[Observer] = None) -> str:
    """
    Decrypt an envelope back to its plaintext.

    Accepts an EncryptedEnvelope, its JSON text, or its decoded dict. The
    derivation parameters embedded in the envelope always win; options are
    only used for legacy envelopes that carry none, and must then match what
    was used at encryption time.

    Error classification:
    - IncorrectPasswordError: MAC mismatch, or for legacy envelopes without a
      MAC, a padding failure, non-UTF-8 output or an empty result
    - InvalidFormatError: unparsable envelope, bad hex, wrong IV/salt size,
      ciphertext not block-aligned, or bad plaintext behind a valid MAC

    Raises:
        IncorrectPasswordError, InvalidFormatError, ParameterOutOfRangeError
    """
    plaintext = _decrypt_text(envelope, password, options)
    _notify(observer, OperationEvent(operation="decrypt", kind="text"))
    return plaintext

# -----------------------------
# File Encryption/Decryption
# -----------------------------

def encrypt_file(path: Union[str, Path], password: str, options: Optional[DerivationParams] = None,
                 observer: Optional[Observer] = None) -> EncryptedEnvelope:
    """
    Encrypt a whole file held in memory.

    The file bytes go through the base64 content adapter, then the result is
    extended with filename, guessed MIME type and original size.
    """
    params = normalize_params(options)
    data, filename, mime_type = read_file(path)

    envelope = _encrypt_text(to_text_safe(data), password, params)
    envelope = replace(envelope, filename=filename, mime_type=mime_type, size=len(data))
    logger.info("Encrypted file %s (%d bytes)", filename, len(data))
    _notify(observer, OperationEvent(operation="encrypt", kind="file"))
    return envelope

def decrypt_file(envelope: EnvelopeLike, password: str, options: Optional[DerivationParams] = None,
                 observer: Optional[Observer] = None) -> DecryptedFile:
    """
    Reverse of encrypt_file: decrypt, then decode the base64 content.

    Raises:
        InvalidFormatError: If the decrypted text is not base64 file data
    """
    envelope = coerce_envelope(envelope)
    data = from_text_safe(_decrypt_text(envelope, password, options))
    if envelope.size is not None and envelope.size != len(data):
        logger.warning("Decrypted %d bytes but envelope metadata records %s", len(data), envelope.size)
    _notify(observer, OperationEvent(operation="decrypt", kind="file"))
    return DecryptedFile(
        data=data,
        filename=envelope.filename,
        mime_type=envelope.mime_type,
        size=envelope.size,
    )
