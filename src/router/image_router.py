from datetime import datetime
from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, UploadFile, status
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field
from sqlmodel import Session

from core.config import settings
from core.dependencies import get_current_user
from model.database import get_session
from model.image import ImageStatus
from model.user import User
from processor.options import DEFAULT_QUALITY, OutputFormat, ProcessingOptions, ResizeTarget
from service import image_service, stats_service

router = APIRouter(prefix="/api/images", tags=["images"])


# --- 요청/응답 스키마 ---

class ProcessRequest(BaseModel):
    # removeBackground(camelCase)와 remove_background 둘 다 받는다.
    model_config = ConfigDict(populate_by_name=True)

    enhance: bool = False
    filters: list[str] = []
    resize: ResizeTarget | None = None
    rotate: int = 0
    remove_background: bool = Field(default=False, alias="removeBackground")
    format: str | None = None
    quality: int | None = None

    def to_options(self) -> ProcessingOptions:
        """요청 본문을 파이프라인 옵션으로 바꾼다. 알 수 없는 format은 UnsupportedFormat."""
        return ProcessingOptions(
            enhance=self.enhance,
            filters=list(self.filters),
            resize=self.resize,
            rotate=self.rotate,
            remove_background=self.remove_background,
            format=OutputFormat.parse(self.format),
            quality=DEFAULT_QUALITY if self.quality is None else self.quality,
        )


class UploadResponse(BaseModel):
    id: int
    original_name: str
    original_size: int
    format: str
    width: int
    height: int
    status: ImageStatus


class ProcessResponse(BaseModel):
    id: int
    original_size: int
    processed_size: int
    compression_ratio: float
    format: str
    width: int
    height: int
    status: ImageStatus


class ImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    original_name: str
    original_size: int
    original_format: str
    width: int
    height: int
    processed_size: int | None
    processed_format: str | None
    processed_width: int | None
    processed_height: int | None
    compression_ratio: float | None
    operations: dict | None
    status: ImageStatus
    created_at: datetime


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class HistoryResponse(BaseModel):
    data: list[ImageResponse]
    pagination: Pagination


# --- 엔드포인트 ---

@router.post("/upload", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
def upload_image(
    file: UploadFile,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """이미지 업로드. 제한보다 1바이트 더 읽어서 초과 여부만 판단한다."""
    data = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    record = image_service.save_upload(data, file.filename, current_user.id, session)
    return UploadResponse(
        id=record.id,
        original_name=record.original_name,
        original_size=record.original_size,
        format=record.original_format,
        width=record.width,
        height=record.height,
        status=record.status,
    )


@router.get("/history", response_model=HistoryResponse)
def get_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    records, total = image_service.list_history(current_user.id, page, limit, session)
    return HistoryResponse(
        data=[ImageResponse.model_validate(r) for r in records],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=image_service.page_count(total, limit),
        ),
    )


@router.get("/stats", response_model=stats_service.ImageStats)
def get_stats(
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return stats_service.compute_stats(current_user.id, session)


@router.get("/{image_id}", response_model=ImageResponse)
def get_image(
    image_id: int,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    record = image_service.get_image_or_raise(image_id, current_user.id, session)
    return ImageResponse.model_validate(record)


@router.post("/{image_id}/process", response_model=ProcessResponse)
def process_image(
    image_id: int,
    req: ProcessRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    record = image_service.process_image(
        image_id, req.to_options(), current_user.id, session
    )
    return ProcessResponse(
        id=record.id,
        original_size=record.original_size,
        processed_size=record.processed_size,
        compression_ratio=record.compression_ratio,
        format=record.processed_format,
        width=record.processed_width,
        height=record.processed_height,
        status=record.status,
    )


@router.get("/{image_id}/download")
def download_image(
    image_id: int,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """처리 결과 다운로드.

    바이트는 레코드 잠금 안에서 메모리로 읽어 둔다. 응답을 보내는 도중에
    재처리나 삭제가 파일을 지워도 이미 읽은 결과를 그대로 보낸다.
    """
    record, data = image_service.read_processed(image_id, current_user.id, session)

    fmt = OutputFormat.parse(record.processed_format)
    stem = Path(record.original_name).stem or "image"
    filename = quote(f"{stem}_processed{fmt.extension}")
    return Response(
        content=data,
        media_type=f"image/{fmt.value}",
        headers={"Content-Disposition": f"attachment; filename*=utf-8''{filename}"},
    )


@router.delete("/{image_id}")
def delete_image(
    image_id: int,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    image_service.delete_image(image_id, current_user.id, session)
    return {"detail": "Deleted"}
