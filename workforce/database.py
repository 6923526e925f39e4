from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from workforce.config import settings

# SQLite uses its own pool classes which reject the sizing arguments
is_sqlite = settings.DATABASE_URL.startswith("sqlite")
engine_kwargs = (
    {"connect_args": {"check_same_thread": False}}
    if is_sqlite
    else {"pool_size": settings.DB_POOL_SIZE, "max_overflow": settings.DB_MAX_OVERFLOW}
)

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    **engine_kwargs,
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """
    FastAPI dependency for database sessions.

    Yields a database session and ensures it's closed after use.
    One session is shared by every dependency of a request, so the acting
    account and the records it mutates live in the same unit of work.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
