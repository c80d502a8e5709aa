from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from invoicepro.core.config import settings


def make_engine(url: str):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


engine = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)

Base = declarative_base()


def init_engine(url: str = None):
    """Bind the session factory to ``url`` (defaults to DATABASE_URL) and create tables."""
    global engine
    # Ensure models are imported so Base knows them
    import invoicepro.models.record  # noqa: F401

    engine = make_engine(url or settings.DATABASE_URL)
    SessionLocal.configure(bind=engine)
    Base.metadata.create_all(bind=engine)
    return engine
