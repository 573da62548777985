"""사용자별 대시보드 통계."""

from pydantic import BaseModel
from sqlmodel import Session, func, select

from model.image import ImageRecord, ImageStatus


class ImageStats(BaseModel):
    total_images: int
    completed_images: int
    failed_images: int
    total_original_size: int
    total_processed_size: int
    total_saved: int


def clamp_saved(original: int, processed: int) -> int:
    """절약된 바이트. 결과가 원본보다 커져도 음수로 표시하지 않는다."""
    return max(0, original - processed)


def _count(session: Session, *conditions) -> int:
    return session.exec(select(func.count(ImageRecord.id)).where(*conditions)).one()


def compute_stats(user_id: int, session: Session) -> ImageStats:
    owned = ImageRecord.user_id == user_id

    original_sum, processed_sum = session.exec(
        select(
            func.coalesce(func.sum(ImageRecord.original_size), 0),
            func.coalesce(func.sum(ImageRecord.processed_size), 0),
        ).where(owned)
    ).one()

    return ImageStats(
        total_images=_count(session, owned),
        completed_images=_count(session, owned, ImageRecord.status == ImageStatus.COMPLETED),
        failed_images=_count(session, owned, ImageRecord.status == ImageStatus.FAILED),
        total_original_size=original_sum,
        total_processed_size=processed_sum,
        total_saved=clamp_saved(original_sum, processed_sum),
    )
