"""Initialize the database schema and an optional bootstrap admin account."""

import repositories.db_models  # noqa: F401 - registers tables on Base.metadata
from models.config import Settings, settings
from models.exceptions import DomainException
from repositories.database import Base, SessionLocal, engine
from repositories.user_repository import UserRepository
from services.user_service import UserService


def init_db(config: Settings = settings) -> bool:
    """Create all tables, then the admin account described by ``ADMIN_*`` settings.

    The admin is skipped when ``ADMIN_EMAIL``/``ADMIN_PASSWORD`` are unset or
    when an account with that email or username already exists.

    Returns:
        True if an admin account was created.
    """
    Base.metadata.create_all(bind=engine)
    print("[OK] Database tables created")

    if not config.ADMIN_EMAIL or not config.ADMIN_PASSWORD:
        print("[SKIP] ADMIN_EMAIL/ADMIN_PASSWORD not set; no admin account created")
        return False

    db = SessionLocal()
    try:
        users = UserRepository(db)
        if users.get_by_email(config.ADMIN_EMAIL) or users.get_by_username(
            config.ADMIN_USERNAME
        ):
            print("[SKIP] Admin account already exists")
            return False

        UserService(db).create(
            {
                "username": config.ADMIN_USERNAME,
                "email": config.ADMIN_EMAIL,
                "password": config.ADMIN_PASSWORD,
                "role": "admin",
                "is_active": True,
            }
        )
        print("[OK] Admin user created")
        print(f"  Username: {config.ADMIN_USERNAME}")
        print(f"  Email: {config.ADMIN_EMAIL}")
        print("  Password: (from ADMIN_PASSWORD in .env)")
        print("  IMPORTANT: Change this password in production!")
        return True

    except DomainException as e:
        print(f"Error creating admin account: {e.message}")
        db.rollback()
        return False
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
    print("\n[OK] Database initialization complete!")
