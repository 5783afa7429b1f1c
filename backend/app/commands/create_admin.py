#!/usr/bin/env python
# backend/app/commands/create_admin.py
"""
Create an administrator account.

Admins cannot sign up through the API; this command is the only way in.

Usage:
    python -m app.commands.create_admin admin@example.com --password 's3cretpass'
    ADMIN_PASSWORD=... python -m app.commands.create_admin admin@example.com
"""

import argparse
import getpass
import logging
import os
import sys

from app.core.exceptions import DomainException
from app.database import SessionLocal
from app.services.auth_service import AuthService

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_admin(email: str, password: str) -> int:
    """Create the admin; returns a process exit code."""
    db = SessionLocal()
    try:
        user = AuthService(db).create_admin(email, password)
    except DomainException as e:
        logger.error(f"Could not create admin: {e.message}")
        return 1
    finally:
        db.close()
    logger.info(f"Admin created with id {user.id}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a BookAPro administrator account")
    parser.add_argument("email", help="Admin email address")
    parser.add_argument(
        "--password",
        help="Admin password (defaults to $ADMIN_PASSWORD, else prompts)",
    )
    args = parser.parse_args(argv)

    password = args.password or os.getenv("ADMIN_PASSWORD") or getpass.getpass("Password: ")
    return create_admin(args.email, password)


if __name__ == "__main__":
    sys.exit(main())
