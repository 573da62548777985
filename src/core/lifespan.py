from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from core.config import settings
from model.database import create_db_and_tables
from processor import runner
from utility.logger import setup_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    # === 시작 ===
    setup_logger(settings.LOG_LEVEL)
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} (Python {settings.python_version})")

    create_db_and_tables()
    logger.info(f"Database ready ({settings.DATABASE_URL})")
    logger.info(f"Storage: uploads={settings.UPLOAD_DIR} outputs={settings.OUTPUT_DIR}")

    app.state.settings = settings

    yield

    # === 종료 ===
    runner.shutdown()
    logger.info("Shutting down")
