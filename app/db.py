# app/db.py

from sqlmodel import SQLModel, create_engine, Session

from app.config import get_settings

settings = get_settings()

# SQLite needs this to share a connection across FastAPI threads
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# Engine = connection to the database
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    connect_args=connect_args,
)


def init_db(bind=None):
    # import so every table is registered on the metadata
    from app import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
