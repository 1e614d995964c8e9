"""Database configuration and session management."""

from enum import Enum as PyEnum

from sqlalchemy import Enum, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from skillmetrics.config import settings

DATABASE_URL: str = settings.database_url

# check_same_thread is a SQLite-only connect argument
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Create SQLAlchemy engine
engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    echo=settings.sql_echo,
)

# Create SessionLocal class for database sessions
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for declarative models
Base = declarative_base()


def enum_column(enum_cls: type[PyEnum], name: str) -> Enum:
    """
    Build an enum-constrained column type that stores the enum *values*.

    Args:
        enum_cls: Python Enum class (e.g. SkillLevel)
        name: Database type name (e.g. "skill_level")

    Returns:
        SQLAlchemy Enum type
    """
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


def get_db():
    """
    Dependency function to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
