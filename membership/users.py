"""User persistence helpers shared by the auth, users and CSV routes."""
import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from . import auth, policy
from .models import RoleEnum, User
from .schemas import RegisterRequest, TokenData, UserCreate, UserRead

logger = logging.getLogger(__name__)

# attributes copied verbatim from an update payload when present
_UPDATABLE_FIELDS = (
    "contact_number",
    "live_mode",
    "role",
    "watch_live_enabled",
    "submit_feedback_enabled",
    "submit_accountability_enabled",
    "incharge_id",
)


def find_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).options(joinedload(User.incharge)).filter(User.id == user_id).first()


def list_users(db: Session, principal: TokenData) -> List[User]:
    query = db.query(User).options(joinedload(User.incharge))
    scope = policy.user_scope(principal)
    if scope is not None:
        query = query.filter(scope)
    return query.order_by(User.username.asc()).all()


def create_user(db: Session, user_in: UserCreate | RegisterRequest) -> User:
    if find_by_username(db, user_in.username):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")

    data = user_in.model_dump(exclude_unset=True, exclude_none=True)
    user = User(
        username=user_in.username,
        password=auth.get_password_hash(user_in.password),
        contact_number=user_in.contact_number,
        live_mode=user_in.live_mode,
        role=data.get("role", RoleEnum.MEMBER),
        watch_live_enabled=data.get("watch_live_enabled", True),
        submit_feedback_enabled=data.get("submit_feedback_enabled", True),
        submit_accountability_enabled=data.get("submit_accountability_enabled", True),
        incharge_id=data.get("incharge_id"),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user id=%s username=%s role=%s", user.id, user.username, user.role.value)
    return user


def update_user(db: Session, user: User, changes: dict) -> User:
    """Apply ``changes`` (a ``model_dump(exclude_unset=True)`` dict) to ``user``."""
    if changes.get("password"):
        user.password = auth.get_password_hash(changes["password"])
    for field in _UPDATABLE_FIELDS:
        if field not in changes:
            continue
        value = changes[field]
        # only the supervisor link can be cleared; other columns are required
        if value is None and field != "incharge_id":
            continue
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    logger.info("Updated user id=%s fields=%s", user.id, sorted(changes))
    return user


def delete_user(db: Session, user: User) -> UserRead:
    snapshot = UserRead.model_validate(user)
    db.delete(user)
    db.commit()
    logger.info("Deleted user id=%s username=%s", snapshot.id, snapshot.username)
    return snapshot
