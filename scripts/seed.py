#!/usr/bin/env python3
"""Seed the database with an admin, a supervisor and a few members.

Every seeded account uses the password ``password123``. Existing usernames
are left untouched, so the script is safe to run repeatedly.
"""
from typing import Optional

from membership import models  # noqa: F401
from membership.auth import get_password_hash
from membership.database import Base, SessionLocal, engine
from membership.models import LiveModeEnum, RoleEnum, User

SEED_PASSWORD = "password123"

SEED_USERS = [
    # username, contact number, live mode, role, supervised by
    ("admin", "+1234567890", LiveModeEnum.VIDEO, RoleEnum.ADMIN, None),
    ("incharge_one", "+1234567895", LiveModeEnum.VIDEO, RoleEnum.INCHARGE, None),
    ("john_doe", "+1234567891", LiveModeEnum.AUDIO, RoleEnum.MEMBER, "incharge_one"),
    ("jane_smith", "+1234567892", LiveModeEnum.VIDEO, RoleEnum.MEMBER, "incharge_one"),
    ("bob_audio", "+1234567893", LiveModeEnum.AUDIO, RoleEnum.MEMBER, None),
    ("alice_video", "+1234567894", LiveModeEnum.VIDEO, RoleEnum.MEMBER, None),
]


def seed() -> int:
    """Create missing seed users and return how many were created."""
    Base.metadata.create_all(bind=engine)
    hashed_password = get_password_hash(SEED_PASSWORD)
    created = 0
    with SessionLocal() as db:
        for username, contact_number, live_mode, role, incharge_username in SEED_USERS:
            if db.query(User).filter(User.username == username).first():
                print(f"User already exists: {username}")
                continue
            incharge_id: Optional[int] = None
            if incharge_username:
                incharge = db.query(User).filter(User.username == incharge_username).first()
                incharge_id = incharge.id if incharge else None
            db.add(
                User(
                    username=username,
                    password=hashed_password,
                    contact_number=contact_number,
                    live_mode=live_mode,
                    role=role,
                    incharge_id=incharge_id,
                )
            )
            db.commit()
            created += 1
            print(f"Created user: {username} ({role.value})")
        total = db.query(User).count()
    print(f"Seed completed. Total users in database: {total}")
    return created


if __name__ == "__main__":
    seed()
