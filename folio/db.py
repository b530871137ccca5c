from sqlmodel import create_engine, SQLModel, Session
import logging

from folio.core.config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL

if DATABASE_URL.startswith("sqlite"):
    # Local development only
    engine = create_engine(
        DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
    )
else:
    # Hosted Postgres; the pooler drops idle connections
    engine = create_engine(
        DATABASE_URL,
        echo=False,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=300,
        pool_timeout=30,
        connect_args={
            "connect_timeout": 10,
            "keepalives": 1,
            "keepalives_idle": 30,
            "keepalives_interval": 10,
            "keepalives_count": 5,
        },
    )


def get_session():
    with Session(engine) as session:
        yield session


def session_factory() -> Session:
    """Plain session constructor for the functions, which run outside FastAPI's DI."""
    return Session(engine)


def create_db_and_tables():
    logger.info("Creating tables at %s", engine.url.render_as_string(hide_password=True))
    SQLModel.metadata.create_all(engine)
