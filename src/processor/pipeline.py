"""이미지 변환 파이프라인.

단계 순서는 고정이다:
    decode → enhance → filters(grayscale → blur → sepia) → resize → rotate → flatten → encode

앞 단계의 결과(선명화, 필터)를 뒤의 기하/색 단계가 보고,
손실 압축(encode)은 항상 마지막에 한 번만 일어난다.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from enum import StrEnum

from loguru import logger
from PIL import Image

from core.exceptions import ProcessingError, UnsupportedFormat
from processor import codec
from processor.options import (
    BLUR_RADIUS,
    ENHANCE_SIGMA,
    FILTER_ORDER,
    FLATTEN_BACKGROUND,
    SEPIA_TINT,
    Filter,
    OutputFormat,
    ProcessingOptions,
)
from utility.timer import timer


class Stage(StrEnum):
    DECODE = "decode"
    ENHANCE = "enhance"
    FILTERS = "filters"
    RESIZE = "resize"
    ROTATE = "rotate"
    FLATTEN = "flatten"
    ENCODE = "encode"


@dataclass(frozen=True)
class PipelineResult:
    data: bytes
    format: OutputFormat
    width: int
    height: int

    @property
    def size(self) -> int:
        return len(self.data)


@contextmanager
def _stage(stage: Stage):
    """단계 실행을 감싼다. 형식 오류는 그대로, 나머지는 ProcessingError(stage)로 바꾼다."""
    with timer(f"pipeline:{stage}"):
        try:
            yield
        except UnsupportedFormat:
            raise
        except Exception as e:
            logger.warning(f"Pipeline stage '{stage}' failed: {e!r}")
            raise ProcessingError(stage.value) from e


def _apply_filters(image: Image.Image, options: ProcessingOptions) -> Image.Image:
    for name in FILTER_ORDER:
        if not options.wants(name):
            continue
        if name is Filter.GRAYSCALE:
            image = codec.to_grayscale(image)
        elif name is Filter.BLUR:
            image = codec.blur(image, BLUR_RADIUS)
        else:
            # 세피아 = 흑백 변환 + 색조. grayscale과 함께 요청돼도 흑백 변환을 생략하지 않는다.
            image = codec.tint(codec.to_grayscale(image), SEPIA_TINT)
    return image


def process(source: bytes, options: ProcessingOptions | None = None) -> PipelineResult:
    """원본 바이트에 옵션을 순서대로 적용하고 인코딩된 결과를 반환한다.

    어느 단계에서든 실패하면 부분 결과 없이 예외가 전파된다.
    원본 바이트는 읽기만 한다.
    """
    options = options or ProcessingOptions()

    with _stage(Stage.DECODE):
        image, _, _, _ = codec.decode(source)

    if options.enhance:
        with _stage(Stage.ENHANCE):
            image = codec.sharpen(image, ENHANCE_SIGMA)

    if any(options.wants(name) for name in FILTER_ORDER):
        with _stage(Stage.FILTERS):
            image = _apply_filters(image, options)

    if options.resize is not None and options.resize.is_set:
        with _stage(Stage.RESIZE):
            image = codec.resize_exact(image, options.resize.width, options.resize.height)

    if options.rotate:
        with _stage(Stage.ROTATE):
            image = codec.rotate(image, options.rotate)

    if options.remove_background:
        with _stage(Stage.FLATTEN):
            image = codec.flatten(image, FLATTEN_BACKGROUND)

    with _stage(Stage.ENCODE):
        data = codec.encode(image, options.format, options.quality)

    return PipelineResult(data=data, format=options.format, width=image.width, height=image.height)
