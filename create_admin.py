"""
Bootstrap an admin employee.

Reads ADMIN_EMAIL, ADMIN_PASSWORD and ADMIN_NAME from the environment (or .env).
Running it again is safe: an existing employee with that email is promoted to
admin instead of being created twice.
"""
import logging
import os
import sys

from dotenv import load_dotenv

from auth import hash_password
from db import SessionLocal, engine
from models import Base, Employee, Role
from utils import normalize_email

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("create_admin")


def create_admin(db, email: str, password: str, name: str = "System Administrator") -> Employee:
    email = normalize_email(email)
    existing = db.query(Employee).filter(Employee.email == email).first()
    if existing:
        if existing.role != Role.ADMIN.value:
            existing.role = Role.ADMIN.value
            db.commit()
            logger.info(f"Promoted existing employee {email} to admin")
        else:
            logger.info(f"Admin {email} already exists")
        return existing

    admin = Employee(
        name=name,
        email=email,
        hashed_password=hash_password(password),
        role=Role.ADMIN.value,
        department="Administration",
        position="Administrator",
        contact_number="N/A",
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Admin {email} created with id={admin.id}")
    return admin


def main() -> int:
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    name = os.getenv("ADMIN_NAME", "System Administrator")
    if not email or not password:
        logger.error("ADMIN_EMAIL and ADMIN_PASSWORD must be set")
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        create_admin(db, email, password, name)
    except Exception:
        db.rollback()
        logger.exception("Admin bootstrap failed")
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
