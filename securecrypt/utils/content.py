import binascii
import mimetypes
from base64 import b64decode, b64encode
from pathlib import Path
from typing import Union

from securecrypt.errors import InvalidFormatError

ENCRYPTED_SUFFIX = ".encrypted"
DEFAULT_MIME_TYPE = "application/octet-stream"

# -----------------------------
# Content-to-bytes Adapter
# -----------------------------
def to_text_safe(data: bytes) -> str:
    """Base64 text form of raw content, ready to be treated as plaintext."""
    return b64encode(data).decode("ascii")

def from_text_safe(text: str) -> bytes:
    """
    Reverse of to_text_safe.

    Raises:
        InvalidFormatError: If the text is not strict base64
    """
    try:
        return b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidFormatError("Decrypted content is not valid base64 file data") from exc

def read_file(path: Union[str, Path]) -> tuple[bytes, str, str]:
    """
    Load a file fully into memory.

    Returns:
        Tuple of (data, basename, guessed mime type)
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Input file not found: {path}")
    data = path.read_bytes()
    mime_type, _ = mimetypes.guess_type(path.name)
    return data, path.name, mime_type or DEFAULT_MIME_TYPE

def encrypted_filename(name: str) -> str:
    return name + ENCRYPTED_SUFFIX

def decrypted_filename(name: str) -> str:
    if name.endswith(ENCRYPTED_SUFFIX) and len(name) > len(ENCRYPTED_SUFFIX):
        return name[: -len(ENCRYPTED_SUFFIX)]
    return "decrypted_" + name
