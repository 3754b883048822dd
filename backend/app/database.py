from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.config import settings


def build_engine(url: str):
    """Engine with connection pooling config for PostgreSQL; SQLite keeps its default pool."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True
    )


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Airports/airlines live in a separate static database in production
if settings.reference_database_url:
    reference_engine = build_engine(settings.reference_database_url)
else:
    reference_engine = engine
ReferenceSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=reference_engine)

# Centralized base for Alembic migrations
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
