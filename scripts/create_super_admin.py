#!/usr/bin/env python3
# scripts/create_super_admin.py
"""
Provision the platform super_admin profile.
This script is safe to run many times (idempotent).

The identity itself (and its credentials) is owned by the identity provider;
this script only makes sure a profile row with role super_admin exists for
that identity id.

Behavior:
- profile exists -> role forced to super_admin, hospital/department cleared,
  re-activated; email/full name filled in when missing
- profile missing -> created

Examples:
  python -m scripts.create_super_admin --user-id 2f1c0b7e-...-... --email admin@platform.local

  # email / full name read from env (SUPER_ADMIN_EMAIL, SUPER_ADMIN_FULL_NAME)
  python -m scripts.create_super_admin --user-id 2f1c0b7e-...-...
"""

from __future__ import annotations

import argparse
import logging
from uuid import UUID

from sqlalchemy.orm import Session

from hwms.core.config import get_settings
from hwms.core.database import SessionLocal
from hwms.models.profile import Profile, UserRole

logger = logging.getLogger(__name__)


def ensure_super_admin(
    db: Session,
    *,
    user_id: UUID,
    email: str | None,
    full_name: str,
) -> Profile:
    existing = db.get(Profile, user_id)

    if existing:
        existing.role = UserRole.SUPER_ADMIN
        existing.hospital_id = None
        existing.department_id = None
        existing.is_active = True
        existing.email = existing.email or email
        existing.full_name = existing.full_name or full_name

        db.commit()
        print(f"SUPER_ADMIN ensured (updated if needed): {user_id}")
        return existing

    profile = Profile(
        id=user_id,
        email=email,
        full_name=full_name,
        role=UserRole.SUPER_ADMIN,
        hospital_id=None,
        department_id=None,
        is_active=True,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    print(f"SUPER_ADMIN created: {user_id}")
    return profile


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Ensure the platform super_admin profile exists")
    p.add_argument("--user-id", type=UUID, required=True, help="Identity id issued by the identity provider")
    p.add_argument("--email", type=str, help="Profile email (or use env SUPER_ADMIN_EMAIL)")
    p.add_argument("--full-name", type=str, default=None, help="Default: env SUPER_ADMIN_FULL_NAME")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    settings = get_settings()
    email = args.email or settings.super_admin_email
    full_name = args.full_name or settings.super_admin_full_name

    db: Session = SessionLocal()
    try:
        ensure_super_admin(db, user_id=args.user_id, email=email, full_name=full_name)
    except Exception:
        db.rollback()
        logger.exception("Super admin provisioning failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
