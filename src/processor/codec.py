"""Pillow 기반 이미지 코덱 어댑터.

디코드/인코드와 픽셀 연산을 PIL.Image 핸들 위의 순수 함수로 감싼다.
모든 변환 함수는 PIL.Image를 받아서 새 PIL.Image를 반환한다.
"""

import io
from dataclasses import dataclass

from PIL import Image, ImageFilter, ImageOps

from core.exceptions import UnsupportedFormat
from processor.options import OutputFormat

# 파이프라인이 그대로 다루는 모드. 나머지(P, CMYK, I;16 ...)는 디코드 시 변환한다.
_NATIVE_MODES = ("L", "LA", "RGB", "RGBA")
_DECODE_ERRORS = (OSError, ValueError, SyntaxError, Image.DecompressionBombError)

# JPEG 저장 시 투명 영역을 합성할 배경색
JPEG_MATTE = (0, 0, 0)


@dataclass(frozen=True)
class ImageInfo:
    format: str
    width: int
    height: int


def _format_name(img: Image.Image) -> str:
    return (img.format or "unknown").lower()


def has_alpha(image: Image.Image) -> bool:
    return any(band in ("A", "a") for band in image.getbands()) or (
        "transparency" in image.info
    )


def _normalize_mode(image: Image.Image) -> Image.Image:
    if image.mode in _NATIVE_MODES and "transparency" not in image.info:
        return image
    return image.convert("RGBA" if has_alpha(image) else "RGB")


def probe(data: bytes) -> ImageInfo:
    """헤더만 읽어서 형식과 크기를 확인한다. 픽셀 전체를 디코드하지 않는다."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return ImageInfo(format=_format_name(img), width=img.width, height=img.height)
    except _DECODE_ERRORS as e:
        raise UnsupportedFormat from e


def decode(data: bytes) -> tuple[Image.Image, str, int, int]:
    """바이트를 완전히 디코드해서 (핸들, 형식, 너비, 높이)를 반환한다."""
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except _DECODE_ERRORS as e:
        raise UnsupportedFormat from e

    fmt = _format_name(img)
    img = _normalize_mode(img)
    return img, fmt, img.width, img.height


def sharpen(image: Image.Image, sigma: float) -> Image.Image:
    return image.filter(ImageFilter.UnsharpMask(radius=sigma, percent=150, threshold=0))


def to_grayscale(image: Image.Image) -> Image.Image:
    return image.convert("LA" if has_alpha(image) else "L")


def blur(image: Image.Image, radius: float) -> Image.Image:
    return image.filter(ImageFilter.GaussianBlur(radius=radius))


def tint(image: Image.Image, rgb: tuple[int, int, int]) -> Image.Image:
    """밝기는 유지하고 색조만 rgb로 바꾼다 (검정→검정, 중간 회색→rgb, 흰색→흰색)."""
    alpha = image.getchannel("A") if "A" in image.getbands() else None
    tinted = ImageOps.colorize(
        image.convert("L"), black=(0, 0, 0), white=(255, 255, 255), mid=rgb
    )
    if alpha is not None:
        tinted.putalpha(alpha)
    return tinted


def resize_exact(
    image: Image.Image, width: int | None = None, height: int | None = None
) -> Image.Image:
    """지정한 크기로 정확히 맞춘다 (비율이 다르면 왜곡된다).

    한쪽 축이 None이면 원본 비율로 그 축을 계산한다.
    """
    if width is None and height is None:
        return image
    if (width is not None and width <= 0) or (height is not None and height <= 0):
        raise ValueError(f"invalid resize target: {width}x{height}")

    src_w, src_h = image.size
    if width is None:
        width = max(1, round(src_w * height / src_h))
    if height is None:
        height = max(1, round(src_h * width / src_w))
    return image.resize((width, height), Image.LANCZOS)


def rotate(image: Image.Image, degrees: int) -> Image.Image:
    """시계 방향으로 회전한다. 캔버스는 회전된 경계에 맞게 넓어진다.

    새로 생긴 영역은 알파가 있으면 투명, 없으면 검정으로 채워진다.
    """
    bands = len(image.getbands())
    fill = 0 if bands == 1 else (0,) * bands
    return image.rotate(-degrees, resample=Image.BICUBIC, expand=True, fillcolor=fill)


def flatten(image: Image.Image, background: tuple[int, int, int]) -> Image.Image:
    """투명 영역을 단색 배경 위에 합성한다. 불투명 이미지는 그대로 둔다."""
    if not has_alpha(image):
        return image
    rgba = image.convert("RGBA")
    canvas = Image.new("RGB", rgba.size, background)
    canvas.paste(rgba, mask=rgba.getchannel("A"))
    return canvas


def encode(image: Image.Image, fmt: OutputFormat, quality: int) -> bytes:
    """선택한 형식으로 인코딩한다.

    JPEG은 quality를 검증 없이 그대로 넘기고, PNG는 무손실이라 quality를 쓰지 않는다.
    JPEG은 알파를 담을 수 없으므로 투명 영역을 검정 위에 합성한다.
    """
    if not isinstance(fmt, OutputFormat):
        raise UnsupportedFormat(f"지원하지 않는 출력 형식입니다: {fmt}")

    buf = io.BytesIO()
    if fmt is OutputFormat.JPEG:
        if has_alpha(image):
            image = flatten(image, JPEG_MATTE)
        image.save(buf, format=fmt.pil_format, quality=quality, optimize=True)
    else:
        image.save(buf, format=fmt.pil_format, compress_level=9)
    return buf.getvalue()
