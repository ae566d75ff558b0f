import pytest

from pad_dragger.algorithm.xor_engine import xor_bytes
from pad_dragger.models.cipher_bytes import CiphertextSet

KEY = bytes(range(0x10, 0x1F))  # 15 bytes
PLAINTEXTS = (
    b"HELLO WORLD!!!!",
    b"GOODBYE CRUEL X",
    b"SECRET MEETING!",
)


@pytest.fixture
def key() -> bytes:
    return KEY


@pytest.fixture
def plaintexts() -> tuple:
    return PLAINTEXTS


@pytest.fixture
def ciphertexts() -> CiphertextSet:
    return CiphertextSet.of(xor_bytes(p, KEY) for p in PLAINTEXTS)
