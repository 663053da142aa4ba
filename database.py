from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import get_settings

# --- CONFIGURATION ---
DATABASE_URL = get_settings().database_url

# Fix for Render/Heroku: SQLAlchemy requires postgresql://, but Render might provide postgres://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)


def make_engine(url: str):
    """Build an engine for `url`, pooled for PostgreSQL, thread-shareable for SQLite."""
    if url.startswith("postgresql"):
        return create_engine(
            url,
            pool_size=20,
            max_overflow=10,
            pool_timeout=30,
            pool_recycle=1800
        )
    return create_engine(
        url,
        connect_args={"check_same_thread": False}
    )


# --- ENGINE & SESSION ---
engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None):
    """Create missing tables. Safe to call repeatedly."""
    import models_orm  # noqa: F401  registers the tables on Base
    Base.metadata.create_all(bind=bind or engine)

