import hashlib
import hmac
import logging
from typing import Optional

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from securecrypt.errors import ParameterOutOfRangeError
from securecrypt.models import ALLOWED_KEY_LENGTHS, ITERATION_CEILING, ITERATION_FLOOR, DerivationParams

logger = logging.getLogger(__name__)

BLOCK_BITS = algorithms.AES.block_size  # 128
MAC_INFO = b"securecrypt envelope mac v1"

# -----------------------------
# Parameter Normalization
# -----------------------------
def normalize_params(options: Optional[DerivationParams] = None) -> DerivationParams:
    """
    Apply the security floor and validate key length before any derivation.

    Iteration counts below ITERATION_FLOOR are clamped up to the floor rather
    than honored. Iteration counts above ITERATION_CEILING or not integers
    are rejected, as are key lengths outside ALLOWED_KEY_LENGTHS.

    Args:
        options: Caller-supplied parameters, or None for defaults

    Returns:
        DerivationParams safe to hand to derive_key

    Raises:
        ParameterOutOfRangeError: If key length is invalid, or iterations are
            not an integer or exceed ITERATION_CEILING
    """
    options = options or DerivationParams()
    iterations = options.iterations
    key_length_bits = options.key_length_bits

    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise ParameterOutOfRangeError(f"Iterations must be an integer, got {iterations!r}")
    if iterations > ITERATION_CEILING:
        raise ParameterOutOfRangeError(
            f"Iterations must not exceed {ITERATION_CEILING}, got {iterations}"
        )
    if isinstance(key_length_bits, bool) or key_length_bits not in ALLOWED_KEY_LENGTHS:
        raise ParameterOutOfRangeError(
            f"Key length must be one of {ALLOWED_KEY_LENGTHS} bits, got {key_length_bits!r}"
        )

    if iterations < ITERATION_FLOOR:
        logger.warning("Requested %d PBKDF2 iterations, clamping to floor of %d", iterations, ITERATION_FLOOR)
        iterations = ITERATION_FLOOR

    if iterations == options.iterations:
        return options
    return DerivationParams(iterations=iterations, key_length_bits=key_length_bits)

# -----------------------------
# Key Derivation
# -----------------------------
def derive_key(password: str, salt: bytes, iterations: int, key_length_bits: int) -> bytes:
    """
    PBKDF2-HMAC-SHA256 password stretching.

    Same (password, salt, iterations, key_length_bits) always yields the same
    key, which is what lets decryption rebuild the key without storing it.
    Callers are expected to pass parameters through normalize_params first.

    Args:
        password: User password, any length (empty allowed)
        salt: Random per-encryption salt
        iterations: PBKDF2 iteration count
        key_length_bits: Output key size in bits

    Returns:
        Derived key of key_length_bits // 8 bytes
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=key_length_bits // 8,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))

def derive_mac_key(key: bytes) -> bytes:
    """
    Expand an independent 256-bit authentication sub-key from the cipher key.

    HKDF domain separation keeps the MAC key distinct from the AES key even
    though both come from a single PBKDF2 run.
    """
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=32,
        salt=None,
        info=MAC_INFO,
    )
    return hkdf.derive(key)

def compute_mac(mac_key: bytes, params: DerivationParams, iv: bytes, ciphertext: bytes) -> str:
    """
    HMAC-SHA256 over the derivation parameters, IV and ciphertext.

    Binding the parameters means an edited iteration count or key length in a
    stored envelope fails verification instead of deriving a different key.
    """
    header = params.iterations.to_bytes(8, "big") + params.key_length_bits.to_bytes(2, "big")
    return hmac.new(mac_key, header + iv + ciphertext, hashlib.sha256).hexdigest()

def verify_mac(mac_key: bytes, params: DerivationParams, iv: bytes, ciphertext: bytes, mac_value: str) -> bool:
    # Constant-time comparison
    return hmac.compare_digest(compute_mac(mac_key, params, iv, ciphertext), mac_value.lower())

# -----------------------------
# Padding
# -----------------------------
def pad_pkcs7(data: bytes) -> bytes:
    """
    PKCS#7 padding to the AES block size.

    Always adds between 1 and 16 bytes, each equal to the pad length, so an
    exact multiple of the block size gains a full block of padding.
    """
    padder = padding.PKCS7(BLOCK_BITS).padder()
    return padder.update(data) + padder.finalize()

def unpad_pkcs7(padded: bytes) -> bytes:
    """
    Remove PKCS#7 padding.

    Raises:
        ValueError: If the trailing bytes are not valid PKCS#7 padding
    """
    unpadder = padding.PKCS7(BLOCK_BITS).unpadder()
    return unpadder.update(padded) + unpadder.finalize()

# -----------------------------
# AES-CBC
# -----------------------------
def encrypt_cbc(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """
    Cipher Block Chaining (CBC) mode encryption with PKCS#7 padding.

    CBC Mode: C[i] = AES(P[i] ⊕ C[i-1]), where C[0] = IV

    Security properties:
    - Identical plaintexts under fresh IVs produce different ciphertexts
    - Confidentiality only; integrity comes from the envelope MAC
    """
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(pad_pkcs7(plaintext)) + encryptor.finalize()

def decrypt_cbc(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """
    CBC mode decryption: P[i] = AES^-1(C[i]) ⊕ C[i-1]

    Returns the still-padded plaintext; unpadding is left to the caller so a
    padding failure can be classified separately from a cipher failure.
    """
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    return decryptor.update(ciphertext) + decryptor.finalize()
