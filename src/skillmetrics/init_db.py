"""Database initialization script."""

from skillmetrics.config import settings
from skillmetrics.database import Base, SessionLocal, engine
from skillmetrics import models  # noqa: F401  (registers every table on Base.metadata)
from skillmetrics.services.user_service import UserService


def init_database():
    """
    Initialize the database by creating all tables.

    This function creates all tables defined in the models if they don't exist.
    It's safe to run multiple times as it won't recreate existing tables.
    """
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Database tables created successfully!")
    print(f"Tables created: {', '.join(Base.metadata.tables.keys())}")


def seed_admin(email: str | None = None, password: str | None = None) -> bool:
    """
    Create the first admin account from ADMIN_EMAIL / ADMIN_PASSWORD.

    Does nothing when either value is missing or the email is already registered.

    Returns:
        True if an admin account was created
    """
    email = email or settings.admin_email
    password = password or settings.admin_password
    if not email or not password:
        print("ADMIN_EMAIL/ADMIN_PASSWORD not set; skipping admin seed")
        return False

    db = SessionLocal()
    try:
        users = UserService(db)
        if users.get_by_email(email) is not None:
            print(f"User {email} already exists; skipping admin seed")
            return False
        users.create_user(email, password, is_admin=True)
        print(f"Created admin account {email}")
        return True
    finally:
        db.close()


if __name__ == "__main__":
    init_database()
    seed_admin()
