from dataclasses import dataclass
from enum import Enum
from typing import Optional

# -----------------------------
# CLI Colors
# -----------------------------
class bcolors:
    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    GREY = '\033[90m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    UNDERLINE = '\033[4m'

# -----------------------------
# Core Parameters
# -----------------------------
ITERATION_FLOOR = 100_000
ITERATION_CEILING = 10_000_000
ALLOWED_KEY_LENGTHS = (128, 192, 256)
SALT_BYTES = 16  # 128-bit salt
IV_BYTES = 16    # 128-bit IV, one AES block
MAC_BYTES = 32   # HMAC-SHA256 tag

@dataclass(frozen=True)
class DerivationParams:
    """
    Password-based key derivation parameters.

    - iterations: PBKDF2 work factor, never honored below ITERATION_FLOOR,
      rejected above ITERATION_CEILING
    - key_length_bits: AES key size, one of ALLOWED_KEY_LENGTHS
    """
    iterations: int = 150_000
    key_length_bits: int = 256

# -----------------------------
# Encrypted Envelope
# -----------------------------
@dataclass(frozen=True)
class EncryptedEnvelope:
    """
    Self-describing result of one encryption call.

    ciphertext, iv, salt and mac are hex strings. The derivation parameters
    actually used are carried along so decryption needs only the password.
    filename, mime_type and size are caller-attached file metadata; the
    cipher engine neither produces nor validates them.
    """
    ciphertext: str
    iv: str
    salt: str
    iterations: Optional[int] = None
    key_length_bits: Optional[int] = None
    mac: Optional[str] = None
    filename: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None

    @property
    def params(self) -> Optional[DerivationParams]:
        if self.iterations is None or self.key_length_bits is None:
            return None
        return DerivationParams(iterations=self.iterations, key_length_bits=self.key_length_bits)

@dataclass(frozen=True)
class DecryptedFile:
    data: bytes
    filename: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None

# -----------------------------
# Advisory Analysis
# -----------------------------
class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

@dataclass(frozen=True)
class AnalysisResult:
    """Advisory classification of content; UI hints only."""
    should_encrypt: bool = False
    confidence_score: int = 0  # 0-100
    reason: str = ""
    detected_keywords: tuple[str, ...] = ()
    category: Optional[str] = None
    detailed_explanation: str = ""
    risk_level: RiskLevel = RiskLevel.LOW

@dataclass(frozen=True)
class PasswordStrength:
    score: int  # 0 (very weak) to 4 (very strong)
    feedback: str

# -----------------------------
# Operation Events
# -----------------------------
@dataclass(frozen=True)
class OperationEvent:
    """Reported to an optional observer after a successful encrypt/decrypt."""
    operation: str  # "encrypt" | "decrypt"
    kind: str       # "text" | "file"
