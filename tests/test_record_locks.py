"""레코드별 잠금 테스트."""

import threading
import time

from service.record_locks import RecordLockArena


def test_lock_created_lazily_and_reclaimed():
    arena = RecordLockArena()
    assert len(arena) == 0

    with arena.hold(7):
        assert 7 in arena
        assert len(arena) == 1

    assert 7 not in arena
    assert len(arena) == 0


def test_same_record_is_serialized():
    """같은 레코드의 임계 구역은 겹치지 않는다."""
    arena = RecordLockArena()
    active = 0
    max_active = 0
    counter_lock = threading.Lock()

    def worker():
        nonlocal active, max_active
        with arena.hold(1):
            with counter_lock:
                active += 1
                max_active = max(max_active, active)
            time.sleep(0.01)
            with counter_lock:
                active -= 1

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert max_active == 1
    assert len(arena) == 0


def test_different_records_do_not_block():
    """다른 레코드 잠금을 잡고 있어도 바로 진입할 수 있다."""
    arena = RecordLockArena()
    entered = threading.Event()

    def other():
        with arena.hold(2):
            entered.set()

    with arena.hold(1):
        t = threading.Thread(target=other)
        t.start()
        assert entered.wait(timeout=1)
        t.join()


def test_entry_released_on_exception():
    arena = RecordLockArena()
    try:
        with arena.hold(3):
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert 3 not in arena
