"""처리 옵션 타입 테스트."""

import pytest

from core.exceptions import UnsupportedFormat
from processor.options import (
    DEFAULT_FORMAT,
    Filter,
    OutputFormat,
    ProcessingOptions,
    ResizeTarget,
)


class TestOutputFormat:
    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_uses_named_default(self, value):
        assert OutputFormat.parse(value) is DEFAULT_FORMAT
        assert DEFAULT_FORMAT is OutputFormat.JPEG

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("jpeg", OutputFormat.JPEG),
            ("JPG", OutputFormat.JPEG),
            (" png ", OutputFormat.PNG),
            (OutputFormat.PNG, OutputFormat.PNG),
        ],
    )
    def test_known_names(self, value, expected):
        assert OutputFormat.parse(value) is expected

    @pytest.mark.parametrize("value", ["webp", "gif", "jpeg2000"])
    def test_unknown_is_rejected(self, value):
        """알 수 없는 형식은 JPEG으로 대체하지 않고 거부한다."""
        with pytest.raises(UnsupportedFormat):
            OutputFormat.parse(value)

    def test_extension(self):
        assert OutputFormat.JPEG.extension == ".jpg"
        assert OutputFormat.PNG.extension == ".png"


class TestProcessingOptions:
    def test_defaults(self):
        opts = ProcessingOptions()

        assert opts.enhance is False
        assert opts.filters == []
        assert opts.resize is None
        assert opts.rotate == 0
        assert opts.remove_background is False
        assert opts.format is OutputFormat.JPEG
        assert opts.quality == 85

    def test_quality_and_filters_are_not_validated(self):
        """범위 밖 quality, 목록에 없는 필터도 그대로 받아들인다."""
        opts = ProcessingOptions(quality=250, filters=["vintage", "sepia"])

        assert opts.quality == 250
        assert opts.filters == ["vintage", "sepia"]
        assert opts.wants(Filter.SEPIA)
        assert not opts.wants(Filter.GRAYSCALE)

    def test_snapshot_round_trip(self):
        """스냅샷은 JSON으로 저장 가능한 dict이고 다시 같은 옵션으로 읽힌다."""
        opts = ProcessingOptions(
            enhance=True,
            filters=["blur"],
            resize=ResizeTarget(width=320),
            rotate=90,
            format=OutputFormat.PNG,
            quality=70,
        )
        snap = opts.snapshot()

        assert snap["format"] == "png"
        assert snap["resize"] == {"width": 320, "height": None}
        assert ProcessingOptions.model_validate(snap) == opts

    def test_resize_target_is_set(self):
        assert not ResizeTarget().is_set
        assert ResizeTarget(height=10).is_set
        assert ResizeTarget(width=0).is_set
