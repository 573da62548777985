from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class ImageStatus(StrEnum):
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ImageRecord(SQLModel, table=True):
    """업로드된 이미지 한 장의 메타데이터.

    - original_*: 업로드 시 한 번만 기록되고 이후 변경하지 않는다.
    - processed_*: 처리 성공 시 한 번의 커밋으로 함께 기록된다.
    - operations: 가장 최근 처리 시도에 사용한 옵션 스냅샷 (이력 아님, 매번 덮어씀).
    """

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    original_name: str
    original_path: str
    original_size: int
    original_format: str
    width: int
    height: int

    processed_path: str | None = None
    processed_size: int | None = None
    processed_format: str | None = None
    processed_width: int | None = None
    processed_height: int | None = None

    operations: dict | None = Field(default=None, sa_column=Column(JSON))
    status: ImageStatus = Field(default=ImageStatus.UPLOADED)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)

    @property
    def is_processed(self) -> bool:
        return self.processed_path is not None

    @property
    def compression_ratio(self) -> float | None:
        """(1 - 처리 후 크기 / 원본 크기) * 100, 소수점 한 자리."""
        if self.processed_size is None or not self.original_size:
            return None
        return round((1 - self.processed_size / self.original_size) * 100, 1)

    @property
    def saved_bytes(self) -> int | None:
        if self.processed_size is None:
            return None
        return self.original_size - self.processed_size
