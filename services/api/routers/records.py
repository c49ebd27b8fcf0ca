"""Route factory for the append-only, owner-scoped record resources."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from membership import policy, records
from membership.database import get_db
from membership.dependencies import get_current_principal, get_current_user
from membership.models import User
from membership.policy import RecordModel
from membership.schemas import RecordCreate, RecordRead, TokenData


def build_record_router(model: RecordModel, prefix: str, label: str) -> APIRouter:
    """Build list/create/read/delete routes for ``model``.

    ``label`` is the human-readable name used in error details, e.g.
    ``"feedback"`` or ``"accountability record"``.
    """
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])

    @router.post("", response_model=RecordRead, status_code=status.HTTP_201_CREATED)
    def create(
        record_in: RecordCreate,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ):
        decision = policy.can_submit(current_user, model)
        if not decision.allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=decision.reason)
        return records.create_record(db, model, current_user, record_in.content)

    @router.get("", response_model=List[RecordRead])
    def list_all(principal: TokenData = Depends(get_current_principal), db: Session = Depends(get_db)):
        return records.list_records(db, model, principal)

    @router.get("/{record_id}", response_model=RecordRead)
    def read_one(record_id: int, principal: TokenData = Depends(get_current_principal), db: Session = Depends(get_db)):
        record = records.get_record(db, model, record_id, principal)
        if record is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{label.capitalize()} not found or access denied",
            )
        return record

    @router.delete("/{record_id}", response_model=RecordRead)
    def delete(
        record_id: int,
        principal: TokenData = Depends(get_current_principal),
        db: Session = Depends(get_db),
    ) -> RecordRead:
        deleted = records.delete_record(db, model, record_id, principal)
        if deleted is None:
            # absent, invisible and not-owned all look the same to the caller
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Cannot delete this {label}")
        return deleted

    return router
