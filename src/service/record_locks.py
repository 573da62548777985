"""레코드별 잠금.

같은 레코드에 대한 처리/삭제는 한 번에 하나만 상태를 읽고 쓰게 한다.
서로 다른 레코드끼리는 막지 않는다.
잠금은 처음 필요할 때 만들고, 마지막 사용자가 나가면 지운다.
"""

import threading
from contextlib import contextmanager


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class RecordLockArena:
    def __init__(self):
        self._guard = threading.Lock()
        self._entries: dict[int, _Entry] = {}

    @contextmanager
    def hold(self, record_id: int):
        with self._guard:
            entry = self._entries.get(record_id)
            if entry is None:
                entry = self._entries[record_id] = _Entry()
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[record_id]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def __contains__(self, record_id: int) -> bool:
        with self._guard:
            return record_id in self._entries


record_locks = RecordLockArena()
