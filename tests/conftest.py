import sys
from pathlib import Path

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pki2fa_core import keys  # noqa: E402
from pki2fa_store import MemorySeedStore  # noqa: E402

SEED = "3f1a9c0e7b2d4f6a8c0e1b3d5f7a9c2e4b6d8f0a1c3e5b7d9f2a4c6e8b0d1f35"
FIXED_TIME = 1_700_000_025  # 15s into a 30s period


def _rsa(bits):
    return rsa.generate_private_key(public_exponent=65537, key_size=bits)


@pytest.fixture(scope="session")
def student_key():
    """Signer / seed recipient. 2048 bits keeps the suite fast."""
    return _rsa(2048)


@pytest.fixture(scope="session")
def instructor_key():
    """Large enough to OAEP-encrypt a 256-byte signature (capacity 318)."""
    return _rsa(3072)


@pytest.fixture(scope="session")
def other_key():
    return _rsa(2048)


@pytest.fixture
def seed():
    return SEED


@pytest.fixture
def key_files(tmp_path, student_key, instructor_key):
    paths = {
        "student_private": tmp_path / "student_private.pem",
        "student_public": tmp_path / "student_public.pem",
        "instructor_public": tmp_path / "instructor_public.pem",
        "instructor_private": tmp_path / "instructor_private.pem",
    }
    paths["student_private"].write_bytes(keys.private_key_to_pem(student_key))
    paths["student_public"].write_bytes(keys.public_key_to_pem(student_key.public_key()))
    paths["instructor_public"].write_bytes(keys.public_key_to_pem(instructor_key.public_key()))
    paths["instructor_private"].write_bytes(keys.private_key_to_pem(instructor_key))
    return {name: str(path) for name, path in paths.items()}


@pytest.fixture
def seed_store():
    return MemorySeedStore()


@pytest.fixture
def clock():
    class Clock:
        now = FIXED_TIME

        def __call__(self):
            return self.now

    return Clock()


@pytest.fixture
def app(student_key, seed_store, clock):
    from pki2fa_backend import create_app

    app = create_app({
        "TESTING": True,
        "PRIVATE_KEY": student_key,
        "SEED_STORE": seed_store,
        "CLOCK": clock,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()

