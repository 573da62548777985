import sys

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 앱 설정
    APP_NAME: str = "imagelab"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # DB 설정
    DATABASE_URL: str = "sqlite:///./imagelab.db"

    # 파일 저장 경로 (원본 / 처리 결과)
    UPLOAD_DIR: str = "/app/uploads"
    OUTPUT_DIR: str = "/app/outputs"

    # 업로드 제한 (바이트)
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # 파이프라인 실행 설정
    PROCESSING_TIMEOUT_SECONDS: float = 60.0
    PROCESSING_WORKERS: int = 4

    # JWT 설정
    JWT_SECRET_KEY: str = "dev-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 30

    @property
    def python_version(self) -> str:
        return f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
