"""로컬 디스크 바이트 저장소.

키는 저장소가 직접 발급한다 (uuid + 확장자). 사용자 파일명은 키에 쓰지 않는다.
"""

import contextlib
import os
import uuid
from pathlib import Path

from core.config import settings


class LocalByteStore:
    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _resolve(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if path.parent != self.root.resolve():
            raise ValueError(f"invalid storage key: {key!r}")
        return path

    def put(self, data: bytes, suffix: str = "") -> str:
        """바이트를 저장하고 키를 반환한다.

        임시 파일에 다 쓴 뒤 rename하므로 일부만 쓰인 파일은 보이지 않는다.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        key = f"{uuid.uuid4().hex}{suffix}"
        path = self._resolve(key)
        tmp = path.with_name(f".{key}.tmp")
        try:
            tmp.write_bytes(data)
            os.replace(tmp, path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        return key

    def get(self, key: str) -> bytes:
        return self._resolve(key).read_bytes()

    def delete(self, key: str | None) -> None:
        """키에 해당하는 파일을 지운다. 이미 없으면 아무것도 하지 않는다."""
        if not key:
            return
        with contextlib.suppress(FileNotFoundError):
            self._resolve(key).unlink()

    def exists(self, key: str) -> bool:
        return self._resolve(key).is_file()


def original_store() -> LocalByteStore:
    return LocalByteStore(settings.UPLOAD_DIR)


def processed_store() -> LocalByteStore:
    return LocalByteStore(settings.OUTPUT_DIR)
