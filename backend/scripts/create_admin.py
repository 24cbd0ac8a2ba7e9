#!/usr/bin/env python3
"""
Create the first admin account, or reset an existing admin's password.

Usage examples:
  python scripts/create_admin.py --username admin --password 'change-me'
  python scripts/create_admin.py --username admin --password 'new-pass' --reset
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Allow imports from backend/ when run from anywhere
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import models  # noqa: F401  registers every table on Base.metadata
from database import Base, SessionLocal, engine
from models.users import User, UserRole
from utils.auth_utils import hash_password

logger = logging.getLogger("create_admin")
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def create_admin(username: str, password: str, full_name: str, reset: bool = False) -> bool:
    """Return True when a user was created or updated."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.username == username).first()
        if user and not reset:
            logger.error("User '%s' already exists; pass --reset to overwrite its password", username)
            return False

        if user:
            user.hashed_password = hash_password(password)
            user.role = UserRole.ADMIN
            user.assigned_farm_id = None
            user.is_active = True
            user.updated_by = "create_admin"
            logger.info("Reset password and admin role for '%s'", username)
        else:
            db.add(User(
                username=username,
                hashed_password=hash_password(password),
                full_name=full_name,
                role=UserRole.ADMIN,
                is_active=True,
                created_by="create_admin",
            ))
            logger.info("Created admin user '%s'", username)
        db.commit()
        return True
    except Exception:
        db.rollback()
        logger.exception("Failed to create admin user '%s'", username)
        raise
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create or reset an admin user")
    parser.add_argument("--username", type=str, default="admin")
    parser.add_argument("--password", type=str, required=True)
    parser.add_argument("--full-name", type=str, default="مدیر سیستم")
    parser.add_argument("--reset", action="store_true", help="Overwrite the password of an existing user")

    args = parser.parse_args()
    if len(args.password) < 6:
        parser.error("password must be at least 6 characters")

    ok = create_admin(args.username, args.password, args.full_name, reset=args.reset)
    sys.exit(0 if ok else 1)


if __name__ == '__main__':
    main()
