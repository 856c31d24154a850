"""
seed_store.py - Where the provisioned seed lives between requests.

Contract for every store:
- get() returns the full seed or None, never a partially written value.
- a put() that has returned is visible to every later get().

FileSeedStore gets there with a temp file in the same directory, fsync and
os.replace (atomic on POSIX), plus a lock so concurrent writers in one process
do not interleave.
"""

import os
import tempfile
import threading
from typing import Optional

from pki2fa_core.errors import InvalidSeedFormat
from pki2fa_core.protocols import validate_seed

DOCKER_DATA_DIR = "/data"
SEED_FILENAME = "seed.txt"


def default_seed_path() -> str:
    """/data/seed.txt inside the container (volume mounted), ./seed.txt otherwise."""
    if os.path.isdir(DOCKER_DATA_DIR):
        return os.path.join(DOCKER_DATA_DIR, SEED_FILENAME)
    return SEED_FILENAME


class SeedStore:
    """Interface: get() -> Optional[str], put(seed)."""

    def get(self) -> Optional[str]:
        raise NotImplementedError

    def put(self, seed: str) -> None:
        raise NotImplementedError


class MemorySeedStore(SeedStore):
    def __init__(self, seed: Optional[str] = None):
        self._lock = threading.Lock()
        self._seed = validate_seed(seed) if seed is not None else None

    def get(self) -> Optional[str]:
        with self._lock:
            return self._seed

    def put(self, seed: str) -> None:
        seed = validate_seed(seed)
        with self._lock:
            self._seed = seed


class FileSeedStore(SeedStore):
    """
    Seed kept in a text file: the 64-char lowercase hex string, mode 0600.

    get() tolerates a trailing newline (files written by hand or by other
    tools) but rejects anything else that breaks the seed contract.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path or default_seed_path()
        self._lock = threading.Lock()

    def get(self) -> Optional[str]:
        """
        Raises:
            InvalidSeedLength / InvalidSeedFormat: file content is corrupt
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise InvalidSeedFormat("Invalid seed format: file is not UTF-8 text") from e
        return validate_seed(content.rstrip("\r\n"))

    def put(self, seed: str) -> None:
        seed = validate_seed(seed)
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        with self._lock:
            fd, tmp_path = tempfile.mkstemp(prefix=".seed-", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    # owner read/write only
                    os.fchmod(f.fileno(), 0o600)
                    f.write(seed)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
