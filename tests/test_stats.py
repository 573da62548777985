"""통계 집계 테스트."""

import pytest

from model.image import ImageRecord, ImageStatus
from service.stats_service import clamp_saved, compute_stats


@pytest.mark.parametrize(
    "original,processed,expected",
    [(1000, 400, 600), (400, 1000, 0), (0, 0, 0), (500, 500, 0), (0, 10, 0)],
)
def test_saved_bytes_never_negative(original, processed, expected):
    assert clamp_saved(original, processed) == expected


def _add(session, user_id, original_size, processed_size=None, status=ImageStatus.UPLOADED):
    record = ImageRecord(
        user_id=user_id,
        original_name="x.png",
        original_path="x.png",
        original_size=original_size,
        original_format="png",
        width=1,
        height=1,
        processed_path="y.jpg" if processed_size is not None else None,
        processed_size=processed_size,
        processed_format="jpeg" if processed_size is not None else None,
        status=status,
    )
    session.add(record)
    session.commit()


def test_empty_owner(session, owner):
    stats = compute_stats(owner.id, session)

    assert stats.total_images == 0
    assert stats.total_original_size == 0
    assert stats.total_processed_size == 0
    assert stats.total_saved == 0


def test_counts_and_sums_scoped_to_owner(session, owner, other_owner):
    _add(session, owner.id, 1000, 300, ImageStatus.COMPLETED)
    _add(session, owner.id, 2000, 500, ImageStatus.COMPLETED)
    _add(session, owner.id, 700, None, ImageStatus.FAILED)
    _add(session, owner.id, 100)
    _add(session, other_owner.id, 99999, 1, ImageStatus.COMPLETED)

    stats = compute_stats(owner.id, session)

    assert stats.total_images == 4
    assert stats.completed_images == 2
    assert stats.failed_images == 1
    assert stats.total_original_size == 3800
    assert stats.total_processed_size == 800
    assert stats.total_saved == 3000


def test_expanded_output_is_clamped(session, owner):
    """결과가 원본보다 커도 total_saved는 0."""
    _add(session, owner.id, 100, 5000, ImageStatus.COMPLETED)

    stats = compute_stats(owner.id, session)
    assert stats.total_processed_size == 5000
    assert stats.total_saved == 0
