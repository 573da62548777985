"""이미지 레코드 생명주기.

uploaded → processing → completed / failed
완료·실패한 레코드도 다시 처리하면 processing으로 돌아간다.

조회·처리·삭제는 모두 (레코드 id, 소유자 id)로 찾는다.
다른 사용자의 레코드는 없는 레코드와 똑같이 ImageNotFound로 응답한다.
"""

import math
import os

from loguru import logger
from sqlmodel import Session, col, func, select

from core.config import settings
from core.exceptions import ImageNotFound, ImageNotProcessed, PayloadTooLarge, ProcessingError
from model.image import ImageRecord, ImageStatus
from processor import codec, runner
from processor.options import ProcessingOptions
from service.byte_store import original_store, processed_store
from service.record_locks import record_locks

MAX_FILENAME_LENGTH = 255


def _safe_filename(filename: str | None) -> str:
    """사용자가 보낸 파일명에서 경로 부분을 떼어낸다. 표시용으로만 쓴다."""
    name = os.path.basename((filename or "").replace("\\", "/")).strip()
    return name[:MAX_FILENAME_LENGTH] or "unknown"


def _extension(fmt: str) -> str:
    return ".jpg" if fmt == "jpeg" else f".{fmt}"


def save_upload(
    data: bytes, filename: str | None, user_id: int, session: Session
) -> ImageRecord:
    """원본을 저장하고 uploaded 상태의 레코드를 만든다.

    1. 크기 제한 확인 (PayloadTooLarge)
    2. 헤더만 읽어서 형식/크기 확인 (UnsupportedFormat)
    3. 바이트 저장 → 레코드 커밋. 커밋이 실패하면 저장한 바이트를 지운다.
    """
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise PayloadTooLarge

    info = codec.probe(data)

    store = original_store()
    key = store.put(data, suffix=_extension(info.format))
    record = ImageRecord(
        user_id=user_id,
        original_name=_safe_filename(filename),
        original_path=key,
        original_size=len(data),
        original_format=info.format,
        width=info.width,
        height=info.height,
    )
    try:
        session.add(record)
        session.commit()
    except Exception:
        session.rollback()
        store.delete(key)
        raise
    session.refresh(record)

    logger.info(
        f"Image {record.id} uploaded by user {user_id}: "
        f"{info.format} {info.width}x{info.height}, {len(data)} bytes"
    )
    return record


def get_image_or_raise(image_id: int, user_id: int, session: Session) -> ImageRecord:
    """소유자 범위 안에서 레코드를 찾는다. 없거나 남의 것이면 ImageNotFound."""
    record = session.exec(
        select(ImageRecord).where(
            ImageRecord.id == image_id, ImageRecord.user_id == user_id
        )
    ).first()
    if not record:
        raise ImageNotFound
    return record


def _load_source(record: ImageRecord) -> bytes:
    try:
        return original_store().get(record.original_path)
    except (OSError, ValueError) as e:
        raise ProcessingError("load", "원본 이미지를 읽을 수 없습니다") from e


def _mark_failed(record: ImageRecord, session: Session, error: Exception):
    record.status = ImageStatus.FAILED
    session.add(record)
    session.commit()
    logger.warning(f"Image {record.id} processing failed: {error}")


def process_image(
    image_id: int, options: ProcessingOptions, user_id: int, session: Session
) -> ImageRecord:
    """파이프라인을 실행하고 결과를 레코드에 반영한다.

    레코드 잠금 안에서:
    1. status=processing, operations 스냅샷 커밋
    2. 원본 로드 → 파이프라인 실행 (타임아웃 적용)
    3. 결과 바이트 저장 → 처리 결과 필드 + status=completed를 한 번에 커밋
    실패하면 처리 결과 필드는 이전 값 그대로 두고 status=failed로 바꾼 뒤 예외를 다시 던진다.
    """
    with record_locks.hold(image_id):
        record = get_image_or_raise(image_id, user_id, session)
        previous_output = record.processed_path

        record.status = ImageStatus.PROCESSING
        record.operations = options.snapshot()
        session.add(record)
        session.commit()
        logger.info(f"Image {record.id} processing started: {record.operations}")

        outputs = processed_store()
        output_key = None
        try:
            source = _load_source(record)
            result = runner.run(source, options, timeout=settings.PROCESSING_TIMEOUT_SECONDS)

            output_key = outputs.put(result.data, suffix=result.format.extension)
            record.processed_path = output_key
            record.processed_size = result.size
            record.processed_format = result.format.value
            record.processed_width = result.width
            record.processed_height = result.height
            record.status = ImageStatus.COMPLETED
            session.add(record)
            session.commit()
        except Exception as e:
            session.rollback()
            outputs.delete(output_key)
            _mark_failed(record, session, e)
            raise

        session.refresh(record)
        if previous_output and previous_output != output_key:
            outputs.delete(previous_output)

    logger.info(
        f"Image {record.id} completed: {record.original_size} → {record.processed_size} bytes "
        f"({record.compression_ratio}%)"
    )
    return record


def read_processed(
    image_id: int, user_id: int, session: Session
) -> tuple[ImageRecord, bytes]:
    """처리 결과 바이트를 레코드와 함께 읽는다.

    재처리/삭제와 같은 레코드 잠금을 잡고 읽으므로, 레코드가 가리키는 파일이
    읽는 도중에 지워지지 않는다.
    """
    with record_locks.hold(image_id):
        record = get_image_or_raise(image_id, user_id, session)
        if not record.is_processed:
            raise ImageNotProcessed
        data = processed_store().get(record.processed_path)
    return record, data


def list_history(
    user_id: int, page: int, limit: int, session: Session
) -> tuple[list[ImageRecord], int]:
    """최신순 페이지와 전체 개수를 반환한다."""
    owned = ImageRecord.user_id == user_id
    total = session.exec(select(func.count(ImageRecord.id)).where(owned)).one()
    records = session.exec(
        select(ImageRecord)
        .where(owned)
        .order_by(col(ImageRecord.created_at).desc(), col(ImageRecord.id).desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return list(records), total


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


def delete_image(image_id: int, user_id: int, session: Session) -> bool:
    """레코드를 먼저 지우고 커밋한 뒤 원본/결과 바이트를 지운다."""
    with record_locks.hold(image_id):
        record = get_image_or_raise(image_id, user_id, session)
        keys = (record.original_path, record.processed_path)

        session.delete(record)
        session.commit()

        original_key, processed_key = keys
        original_store().delete(original_key)
        processed_store().delete(processed_key)

    logger.info(f"Image {image_id} deleted by user {user_id}")
    return True
