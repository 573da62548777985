"""파이프라인 실행 러너.

이미지 처리는 CPU-bound라 호출 스레드에서 직접 돌리지 않고
전용 스레드풀에 위임한 뒤 타임아웃까지만 기다린다.

타임아웃이 나도 실행 중인 코덱 호출은 강제로 끊지 않는다.
워커에서 끝까지 실행되고, 그 결과는 버려진다.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

from loguru import logger

from core.config import settings
from core.exceptions import ProcessingError
from processor import pipeline
from processor.options import ProcessingOptions

_executor: ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=settings.PROCESSING_WORKERS,
                thread_name_prefix="pipeline",
            )
        return _executor


def run(
    source: bytes, options: ProcessingOptions, timeout: float | None = None
) -> pipeline.PipelineResult:
    """스레드풀에서 파이프라인을 실행하고 결과를 기다린다.

    timeout(초)을 넘기면 ProcessingError(stage="timeout")를 던진다.
    """
    future = _get_executor().submit(pipeline.process, source, options)
    try:
        return future.result(timeout=timeout)
    except TimeoutError:
        logger.warning(f"Pipeline exceeded {timeout}s, abandoning result")
        raise ProcessingError("timeout", "이미지 처리 시간이 초과되었습니다") from None


def shutdown():
    """앱 종료 시 호출. 대기 중인 작업은 취소하고 실행 중인 작업은 끝나게 둔다."""
    global _executor
    with _executor_lock:
        if _executor is not None:
            _executor.shutdown(wait=False, cancel_futures=True)
            _executor = None
