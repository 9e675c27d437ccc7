from __future__ import annotations

import asyncio
import gc
import json
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from jsonstore import AsyncJSONStore, JSONStore, KeyNotFoundError, open_store
from jsonstore.codec import StoreDocument
from jsonstore.locks import PathLockRegistry, RWLock


def test_concurrent_sets_on_distinct_keys_lose_nothing():
    s = JSONStore()
    n = 64
    barrier = threading.Barrier(n)

    def worker(i: int) -> None:
        barrier.wait()
        s.set(f"site:{i}", {"id": i, "body": "x" * i})

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(s.keys()) == n
    assert s.get("site:17") == {"id": 17, "body": "x" * 17}


def test_mixed_readers_and_writers_worker_pool():
    s = JSONStore()
    s.set("shared", 0)

    def job(i: int) -> None:
        s.set(f"k:{i}", i)
        assert s.get(f"k:{i}") == i
        s.get("shared")
        s.keys()
        if i % 2:
            s.delete(f"k:{i}")

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(job, range(400)))

    keys = s.keys()
    assert len(keys) == 201
    assert all(int(k.split(":")[1]) % 2 == 0 for k in keys if k.startswith("k:"))
    with pytest.raises(KeyNotFoundError):
        s.get("k:1")


def test_slow_save_cannot_overwrite_a_later_persist(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "race.json"
    s = JSONStore(path)
    s.set("k1", 1)

    original = StoreDocument.from_entries
    snapshot_taken = threading.Event()
    resume = threading.Event()
    calls = {"n": 0}

    def paused_from_entries(cls, entries):
        calls["n"] += 1
        doc = original(entries)
        if calls["n"] == 1:
            snapshot_taken.set()
            resume.wait(5)
        return doc

    monkeypatch.setattr(StoreDocument, "from_entries", classmethod(paused_from_entries))

    first = threading.Thread(target=s.save)
    first.start()
    assert snapshot_taken.wait(5)

    second = threading.Thread(target=s.set_and_persist, args=("k3", 3))
    second.start()
    # the write has to wait for the in-flight save
    second.join(timeout=0.2)
    assert second.is_alive()

    resume.set()
    first.join(timeout=5)
    second.join(timeout=5)
    assert not first.is_alive() and not second.is_alive()

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk == {"k1": "1", "k3": "3"}
    assert s.keys() == ["k1", "k3"]


def test_path_lock_registry_forgets_unused_paths(tmp_path: Path):
    registry = PathLockRegistry()
    lock = registry.lock_for(tmp_path / "a.json")
    assert registry.lock_for(tmp_path / "a.json") is lock
    assert registry.lock_for(tmp_path / "." / "a.json") is lock
    assert len(registry) == 1

    del lock
    gc.collect()
    assert len(registry) == 0


def test_concurrent_saves_leave_a_readable_file(tmp_path: Path):
    path = tmp_path / "pool.json.gz"
    s = JSONStore(path)

    def job(i: int) -> None:
        s.set(f"k:{i}", i)
        s.save()

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(job, range(50)))
    s.save()

    assert len(open_store(path)) == 50


def test_rwlock_allows_concurrent_readers():
    lock = RWLock()
    both_in = threading.Barrier(2, timeout=5)
    errors: list[BaseException] = []

    def reader() -> None:
        with lock.read():
            try:
                both_in.wait()
            except threading.BrokenBarrierError as e:
                errors.append(e)

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
    assert not any(t.is_alive() for t in threads)
    assert errors == []


def test_rwlock_writer_waits_for_reader():
    lock = RWLock()
    wrote = threading.Event()

    def writer() -> None:
        with lock.write():
            wrote.set()

    lock.acquire_read()
    t = threading.Thread(target=writer)
    t.start()
    assert not wrote.wait(0.2)
    lock.release_read()
    assert wrote.wait(5)
    t.join(timeout=5)


def test_rwlock_unbalanced_release():
    lock = RWLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()


def test_async_wrapper_fan_out(tmp_path: Path):
    async def _run():
        repo = AsyncJSONStore(JSONStore(tmp_path / "async.json"))

        await asyncio.gather(*(repo.set(f"human:{i}", {"n": i}) for i in range(25)))
        keys = await repo.keys()
        assert len(keys) == 25

        assert await repo.get("human:3") == {"n": 3}
        expected = {f"human:{i}": {"n": i} for i in (1, *range(10, 20))}
        assert await repo.query("human:1*") == expected
        assert list(await repo.get_all(r"^human:2\d$")) == [f"human:{i}" for i in range(20, 25)]

        await repo.delete("human:3")
        with pytest.raises(KeyNotFoundError):
            await repo.get("human:3")

        await repo.save()
        fresh = AsyncJSONStore(JSONStore())
        await fresh.load(tmp_path / "async.json")
        assert len(await fresh.keys()) == 24

        await fresh.set_and_persist("late", True)
        assert open_store(tmp_path / "async.json").get("late") is True

    asyncio.run(_run())
