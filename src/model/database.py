from sqlmodel import Session, SQLModel, create_engine

from core.config import settings

# SQLite는 FastAPI 스레드풀에서 커넥션을 공유하므로 check_same_thread를 끈다.
connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)


def create_db_and_tables():
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
