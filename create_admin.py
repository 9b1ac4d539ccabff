import sys

from college_api.core.security import get_password_hash
from college_api.database import SessionLocal, engine
from college_api.models import Base, User

DEFAULT_ADMIN = {
    "username": "admin",
    "email": "admin@college.com",
    "password": "admin123",
    "first_name": "System",
    "last_name": "Administrator",
}


def create_admin():
    """Create the default administrator unless it already exists"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.email == DEFAULT_ADMIN["email"]).first()
        if existing:
            print("⚠️  Admin user already exists")
            print(f"📧 Email: {existing.email}")
            print(f"👤 Role: {existing.role}")
            return True

        admin = User(
            username=DEFAULT_ADMIN["username"],
            email=DEFAULT_ADMIN["email"],
            password_hash=get_password_hash(DEFAULT_ADMIN["password"]),
            first_name=DEFAULT_ADMIN["first_name"],
            last_name=DEFAULT_ADMIN["last_name"],
            role="admin",
            is_active=True,
        )
        db.add(admin)
        db.commit()

        print("✅ Admin user created successfully!")
        print(f"📧 Email: {DEFAULT_ADMIN['email']}")
        print(f"🔑 Password: {DEFAULT_ADMIN['password']}")
        print("⚠️  Please change the password after first login!")
        return True

    except Exception as e:
        db.rollback()
        print(f"❌ Error creating admin: {e}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    success = create_admin()
    sys.exit(0 if success else 1)
