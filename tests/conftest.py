import pytest

from securecrypt.models import ITERATION_FLOOR, DerivationParams
from securecrypt.utils.stats import EncryptionStats


@pytest.fixture
def vp() -> DerivationParams:
    # Lowest honored work factor keeps the suite fast
    return DerivationParams(iterations=ITERATION_FLOOR, key_length_bits=256)


@pytest.fixture
def password() -> str:
    return "correct-horse"


@pytest.fixture
def stats() -> EncryptionStats:
    return EncryptionStats()
