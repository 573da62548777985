"""처리 옵션 타입.

ProcessingOptions는 파이프라인 입력이자 ImageRecord.operations에 저장되는
스냅샷의 형태다. 저장과 재처리 모두 이 한 가지 모양만 읽는다.
"""

from enum import StrEnum

from pydantic import BaseModel, Field

from core.exceptions import UnsupportedFormat

ENHANCE_SIGMA = 1.5
BLUR_RADIUS = 3
SEPIA_TINT = (112, 66, 20)
FLATTEN_BACKGROUND = (255, 255, 255)
DEFAULT_QUALITY = 85


class OutputFormat(StrEnum):
    JPEG = "jpeg"
    PNG = "png"

    @classmethod
    def parse(cls, value: "str | OutputFormat | None") -> "OutputFormat":
        """요청 문자열을 출력 형식으로 변환한다.

        값이 없으면 명시적 기본값(JPEG). 알 수 없는 값은 기본값으로
        대체하지 않고 UnsupportedFormat을 던진다.
        """
        if value is None or value == "":
            return DEFAULT_FORMAT
        if isinstance(value, OutputFormat):
            return value
        name = str(value).strip().lower()
        if name == "jpg":
            return cls.JPEG
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedFormat(f"지원하지 않는 출력 형식입니다: {value}") from None

    @property
    def extension(self) -> str:
        return ".jpg" if self is OutputFormat.JPEG else ".png"

    @property
    def pil_format(self) -> str:
        return self.value.upper()


DEFAULT_FORMAT = OutputFormat.JPEG


class Filter(StrEnum):
    GRAYSCALE = "grayscale"
    BLUR = "blur"
    SEPIA = "sepia"


# 요청 순서와 무관하게 항상 이 순서로 적용한다.
FILTER_ORDER = (Filter.GRAYSCALE, Filter.BLUR, Filter.SEPIA)


class ResizeTarget(BaseModel):
    width: int | None = None
    height: int | None = None

    @property
    def is_set(self) -> bool:
        return self.width is not None or self.height is not None


class ProcessingOptions(BaseModel):
    enhance: bool = False
    # 목록에 없는 필터 이름은 거부하지 않고 그대로 기록만 한다.
    filters: list[str] = Field(default_factory=list)
    resize: ResizeTarget | None = None
    rotate: int = 0
    remove_background: bool = False
    format: OutputFormat = DEFAULT_FORMAT
    # 1~100 범위를 검증하지 않고 인코더에 그대로 넘긴다.
    quality: int = DEFAULT_QUALITY

    def wants(self, name: Filter) -> bool:
        return name.value in self.filters

    def snapshot(self) -> dict:
        return self.model_dump(mode="json")
