"""Plain-text CSV export and import of the user roster.

The format is a fixed five-column layout split naively on commas; values
containing a comma are not supported. Exports carry the stored password
hash, and imports hash whatever is in the password column, so re-importing
an export leaves those accounts with a password nobody knows.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from . import auth, policy
from .models import LiveModeEnum, RoleEnum, User
from .schemas import ImportResult, TokenData
from .users import find_by_username

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("username", "password", "contactNumber", "liveMode", "role")
CSV_HEADER = ",".join(CSV_COLUMNS)
MISSING_FIELDS = "Missing required fields (username, password, contactNumber, liveMode)"


def export_users_csv(db: Session) -> str:
    users = db.query(User).order_by(User.username.asc()).all()
    rows = [
        ",".join((user.username, user.password, user.contact_number, user.live_mode.value, user.role.value))
        for user in users
    ]
    return CSV_HEADER + "\n" + "\n".join(rows)


def split_line(line: str) -> Tuple[str, str, str, str, str]:
    """Split one data line into its five columns, padding absent trailing ones."""
    values = [value.strip() for value in line.split(",")]
    values += [""] * (len(CSV_COLUMNS) - len(values))
    username, password, contact_number, live_mode, role = values[: len(CSV_COLUMNS)]
    return username, password, contact_number, live_mode, role


def _import_line(db: Session, line: str, principal: TokenData) -> Optional[str]:
    """Create the user described by ``line``; return an error message or ``None``."""
    username, password, contact_number, live_mode, role = split_line(line)

    if not username or not password or not contact_number or not live_mode:
        return MISSING_FIELDS
    if find_by_username(db, username):
        return f"User {username} already exists"

    role_value = role or RoleEnum.MEMBER.value
    if role_value not in RoleEnum.__members__:
        return f"Invalid role {role_value}"
    decision = policy.can_create_user(principal, RoleEnum(role_value))
    if not decision.allowed:
        return decision.reason
    if live_mode not in {mode.value for mode in LiveModeEnum}:
        return f"Invalid liveMode {live_mode}"

    db.add(
        User(
            username=username,
            password=auth.get_password_hash(password),
            contact_number=contact_number,
            live_mode=LiveModeEnum(live_mode),
            role=RoleEnum(role_value),
            watch_live_enabled=True,
            submit_feedback_enabled=True,
            submit_accountability_enabled=True,
        )
    )
    db.commit()
    return None


def import_users_csv(db: Session, content: str, principal: TokenData) -> ImportResult:
    """Create users from ``content`` line by line, collecting per-line errors.

    The first non-blank line is the header. Line numbers in error messages
    count non-blank lines starting at 1 for the header.
    """
    lines = [line for line in content.split("\n") if line.strip()]
    errors: List[str] = []
    imported = 0

    for index, raw in enumerate(lines[1:], start=2):
        try:
            error = _import_line(db, raw.strip(), principal)
        except Exception as exc:  # noqa: BLE001
            db.rollback()
            error = str(exc)
        if error is None:
            imported += 1
        else:
            errors.append(f"Line {index}: {error}")

    logger.info(
        "CSV import by user_id=%s: imported=%s errors=%s", principal.id, imported, len(errors)
    )
    return ImportResult(imported=imported, errors=errors)
