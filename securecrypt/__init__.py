"""
SecureCrypt - password-based local encryption

Key Cryptographic Principles:

Password-Based Key Derivation:

PBKDF2-HMAC-SHA256 stretches the password into a 128, 192 or 256-bit AES key
A fresh 128-bit random salt per encryption defeats precomputed dictionaries
Iteration counts are never honored below a floor of 100,000

Symmetric Encryption:

AES in Cipher Block Chaining (CBC) mode with PKCS#7 padding
A fresh 128-bit random IV per encryption, so equal plaintexts never repeat

Envelope Format:

Ciphertext, IV and salt travel together as hex strings in a JSON record
The derivation parameters are stored alongside so decryption needs only the
password
An HMAC-SHA256 tag over parameters, IV and ciphertext (sub-key expanded with
HKDF) separates "wrong password" from "corrupted data" deterministically

Advisory Tooling:

A keyword-based sensitivity analyzer and a password strength meter help the
user decide what to encrypt; neither influences the cipher.
"""
from securecrypt.core import decrypt, decrypt_file, encrypt, encrypt_file
from securecrypt.errors import (
    IncorrectPasswordError, InvalidFormatError, ParameterOutOfRangeError, SecureCryptError
)
from securecrypt.models import (
    AnalysisResult, DecryptedFile, DerivationParams, EncryptedEnvelope, OperationEvent, RiskLevel
)
from securecrypt.utils.analyzer import analyze_content, analyze_filename
from securecrypt.utils.encryption import derive_key
from securecrypt.utils.envelope import parse_envelope, serialize_envelope
from securecrypt.utils.stats import EncryptionStats
from securecrypt.utils.strength import evaluate_password_strength

__all__ = [
    "AnalysisResult",
    "DecryptedFile",
    "DerivationParams",
    "EncryptedEnvelope",
    "EncryptionStats",
    "IncorrectPasswordError",
    "InvalidFormatError",
    "OperationEvent",
    "ParameterOutOfRangeError",
    "RiskLevel",
    "SecureCryptError",
    "analyze_content",
    "analyze_filename",
    "decrypt",
    "decrypt_file",
    "derive_key",
    "encrypt",
    "encrypt_file",
    "evaluate_password_strength",
    "parse_envelope",
    "serialize_envelope",
]
