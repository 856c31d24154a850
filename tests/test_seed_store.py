import os
import stat
import sys
import threading

import pytest

from pki2fa_core.errors import InvalidSeedFormat, InvalidSeedLength
from pki2fa_store import FileSeedStore, MemorySeedStore, seed_store


def test_missing_file_reads_as_none(tmp_path):
    assert FileSeedStore(str(tmp_path / "seed.txt")).get() is None


def test_put_then_get(tmp_path, seed):
    path = tmp_path / "seed.txt"
    store = FileSeedStore(str(path))
    store.put(seed.upper())
    assert store.get() == seed
    assert path.read_text(encoding="utf-8") == seed


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permissions")
def test_seed_file_is_owner_only(tmp_path, seed):
    path = tmp_path / "seed.txt"
    FileSeedStore(str(path)).put(seed)
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600


def test_put_creates_missing_directory(tmp_path, seed):
    path = tmp_path / "data" / "seed.txt"
    FileSeedStore(str(path)).put(seed)
    assert path.exists()


def test_put_rejects_invalid_seed_and_keeps_old_value(tmp_path, seed):
    store = FileSeedStore(str(tmp_path / "seed.txt"))
    store.put(seed)
    with pytest.raises(InvalidSeedLength):
        store.put(seed[:-1])
    with pytest.raises(InvalidSeedFormat):
        store.put("z" * 64)
    assert store.get() == seed


def test_put_leaves_no_temp_files(tmp_path, seed):
    store = FileSeedStore(str(tmp_path / "seed.txt"))
    store.put(seed)
    store.put("0" * 64)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["seed.txt"]
    assert store.get() == "0" * 64


def test_get_tolerates_trailing_newline(tmp_path, seed):
    path = tmp_path / "seed.txt"
    path.write_text(seed + "\n", encoding="utf-8")
    assert FileSeedStore(str(path)).get() == seed


def test_get_rejects_corrupt_file(tmp_path, seed):
    path = tmp_path / "seed.txt"
    path.write_text(seed + " trailing", encoding="utf-8")
    with pytest.raises(InvalidSeedLength):
        FileSeedStore(str(path)).get()


def test_concurrent_writers_never_leave_partial_seed(tmp_path):
    store = FileSeedStore(str(tmp_path / "seed.txt"))
    values = [f"{i:x}" * 64 for i in range(8)]
    seen = []

    def writer(value):
        for _ in range(5):
            store.put(value)
            seen.append(store.get())

    threads = [threading.Thread(target=writer, args=(v,)) for v in values]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.get() in values
    assert all(value in values for value in seen)


def test_memory_store(seed):
    store = MemorySeedStore()
    assert store.get() is None
    store.put(seed.upper())
    assert store.get() == seed
    with pytest.raises(InvalidSeedLength):
        MemorySeedStore("abc")


def test_default_seed_path(monkeypatch, tmp_path):
    monkeypatch.setattr(seed_store, "DOCKER_DATA_DIR", str(tmp_path))
    assert seed_store.default_seed_path() == os.path.join(str(tmp_path), "seed.txt")
    monkeypatch.setattr(seed_store, "DOCKER_DATA_DIR", str(tmp_path / "missing"))
    assert seed_store.default_seed_path() == "seed.txt"


def test_get_rejects_non_utf8_file(tmp_path):
    path = tmp_path / "seed.txt"
    path.write_bytes(b"\xff" * 64)
    with pytest.raises(InvalidSeedFormat):
        FileSeedStore(str(path)).get()
