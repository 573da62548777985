"""앱 전역 커스텀 예외 클래스.

AppException을 상속하면 전역 핸들러(error_handlers.py)가 자동으로
{"error_code": "...", "message": "..."} 형식의 JSON 응답을 생성한다.
"""


class AppException(Exception):
    """앱 전역 베이스 예외.

    서브클래스에서 status_code, error_code, message를 클래스 변수로 정의하면
    전역 핸들러가 해당 값을 읽어 HTTP 응답을 생성한다.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    message: str = "서버 내부 오류가 발생했습니다"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)

    def to_content(self) -> dict:
        return {"error_code": self.error_code, "message": self.message}


# --- 인증 관련 ---


class Unauthorized(AppException):
    status_code = 401
    error_code = "UNAUTHORIZED"
    message = "인증 토큰이 필요합니다"


class InvalidToken(Unauthorized):
    error_code = "INVALID_TOKEN"
    message = "유효하지 않거나 만료된 토큰입니다"


class InvalidCredentials(AppException):
    status_code = 401
    error_code = "INVALID_CREDENTIALS"
    message = "이메일 또는 패스워드가 올바르지 않습니다"


class DuplicateEmail(AppException):
    status_code = 409
    error_code = "DUPLICATE_EMAIL"
    message = "이미 등록된 이메일입니다"


# --- 이미지 관련 ---


class ImageNotFound(AppException):
    """레코드가 없거나 다른 사용자의 레코드인 경우 모두 이 예외로 응답한다."""

    status_code = 404
    error_code = "IMAGE_NOT_FOUND"
    message = "이미지를 찾을 수 없습니다"


class ImageNotProcessed(AppException):
    status_code = 400
    error_code = "IMAGE_NOT_PROCESSED"
    message = "아직 처리되지 않은 이미지입니다"


class UnsupportedFormat(AppException):
    status_code = 415
    error_code = "UNSUPPORTED_FORMAT"
    message = "지원하지 않는 이미지 형식입니다"


class PayloadTooLarge(AppException):
    status_code = 413
    error_code = "PAYLOAD_TOO_LARGE"
    message = "업로드 가능한 최대 크기를 초과했습니다"


class ProcessingError(AppException):
    """파이프라인 단계 실패. 어느 단계에서 실패했는지 stage에 담는다."""

    status_code = 422
    error_code = "PROCESSING_ERROR"
    message = "이미지 처리 중 오류가 발생했습니다"

    def __init__(self, stage: str, message: str | None = None):
        self.stage = stage
        super().__init__(message or f"{self.message} (stage: {stage})")

    def to_content(self) -> dict:
        return {**super().to_content(), "stage": self.stage}
