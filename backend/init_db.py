"""Initialize the database schema and, optionally, a bootstrap admin user."""

from authentication.auth import get_password_hash
from models.config import settings
from repositories.database import Base, SessionLocal, engine
from repositories.db_models import User, UserRole


def init_db() -> None:
    # Create tables
    Base.metadata.create_all(bind=engine)
    print("[OK] Tables created")

    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        print("[SKIP] ADMIN_EMAIL / ADMIN_PASSWORD not set; no admin created")
        print("\n[OK] Database initialization complete!")
        return

    db = SessionLocal()

    try:
        email = settings.ADMIN_EMAIL.lower()
        existing_admin = db.query(User).filter(User.email == email).first()
        if not existing_admin:
            admin = User(
                name="Administrator",
                email=email,
                hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
                role=UserRole.ADMIN,
            )
            db.add(admin)
            db.commit()
            print("[OK] Admin user created")
            print(f"  Email: {email}")
            print("  Password: (from ADMIN_PASSWORD in .env)")
            print("  IMPORTANT: Change this password in production!")

        print("\n[OK] Database initialization complete!")

    except Exception as e:
        print(f"Error initializing database: {e}")
        db.rollback()
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
