"""Scoped CRUD shared by the Accountability and Feedback resources.

Both tables have the same shape, so the functions take the model class and
apply the visibility rules from :mod:`membership.policy`.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from . import policy
from .models import User
from .policy import RecordModel
from .schemas import RecordRead, TokenData

logger = logging.getLogger(__name__)


def create_record(db: Session, model: RecordModel, owner: User, content: str):
    record = model(user_id=owner.id, content=content)
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("%s %s created by user_id=%s", model.__tablename__, record.id, owner.id)
    return record


def list_records(db: Session, model: RecordModel, principal: TokenData) -> List:
    query = db.query(model).options(joinedload(model.user))
    scope = policy.record_scope(model, principal)
    if scope is not None:
        query = query.filter(scope)
    return query.order_by(model.created_at.desc(), model.id.desc()).all()


def get_record(db: Session, model: RecordModel, record_id: int, principal: TokenData):
    """Return the record if it exists and is visible to ``principal``, else ``None``."""
    record = db.query(model).options(joinedload(model.user)).filter(model.id == record_id).first()
    if record is None:
        return None
    if not policy.can_read_record(principal, record.user_id, record.user.incharge_id):
        return None
    return record


def delete_record(db: Session, model: RecordModel, record_id: int, principal: TokenData) -> Optional[RecordRead]:
    record = get_record(db, model, record_id, principal)
    if record is None or not policy.can_delete_record(principal, record.user_id):
        return None
    snapshot = RecordRead.model_validate(record)
    db.delete(record)
    db.commit()
    logger.info("%s %s deleted by user_id=%s", model.__tablename__, record_id, principal.id)
    return snapshot
