from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile, status
from sqlalchemy.orm import Session

from membership import policy, transfer, users
from membership.database import get_db
from membership.dependencies import allow_roles, get_current_user
from membership.models import RoleEnum, User
from membership.rate_limit import limiter
from membership.schemas import ImportResult, ProfileUpdate, TokenData, UserCreate, UserRead, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])

managers_only = allow_roles(RoleEnum.ADMIN, RoleEnum.INCHARGE)


def _load_target(db: Session, user_id: int) -> User:
    user = users.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _enforce(decision: policy.Decision) -> None:
    if not decision.allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=decision.reason)


@router.get("/profile", response_model=UserRead)
def get_profile(current_user: User = Depends(get_current_user)) -> User:
    return current_user


@router.put("/profile", response_model=UserRead)
@limiter.limit("20/minute")
def update_profile(
    request: Request,
    profile_update: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    return users.update_user(db, current_user, profile_update.model_dump(exclude_unset=True))


@router.get("/export/csv")
def export_csv(_: TokenData = Depends(managers_only), db: Session = Depends(get_db)) -> Response:
    return Response(
        content=transfer.export_users_csv(db),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=users.csv"},
    )


@router.post("/import/csv", response_model=ImportResult)
@limiter.limit("5/minute")
def import_csv(
    request: Request,
    file: Optional[UploadFile] = File(None),
    principal: TokenData = Depends(managers_only),
    db: Session = Depends(get_db),
) -> ImportResult:
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    try:
        content = file.file.read().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File is not valid UTF-8 text") from exc
    return transfer.import_users_csv(db, content, principal)


@router.get("", response_model=List[UserRead])
def list_users(principal: TokenData = Depends(managers_only), db: Session = Depends(get_db)) -> List[User]:
    return users.list_users(db, principal)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_user(
    request: Request,
    user_in: UserCreate,
    principal: TokenData = Depends(managers_only),
    db: Session = Depends(get_db),
) -> User:
    if user_in.role is None:
        user_in.role = RoleEnum.MEMBER
    _enforce(policy.can_create_user(principal, user_in.role))
    return users.create_user(db, user_in)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, _: TokenData = Depends(managers_only), db: Session = Depends(get_db)) -> User:
    return _load_target(db, user_id)


@router.put("/{user_id}", response_model=UserRead)
@limiter.limit("30/minute")
def update_user(
    request: Request,
    user_id: int,
    user_update: UserUpdate,
    principal: TokenData = Depends(managers_only),
    db: Session = Depends(get_db),
) -> User:
    target = _load_target(db, user_id)
    _enforce(policy.can_edit_user(principal, target, user_update.role))
    return users.update_user(db, target, user_update.model_dump(exclude_unset=True))


@router.delete("/{user_id}", response_model=UserRead)
@limiter.limit("30/minute")
def delete_user(
    request: Request,
    user_id: int,
    principal: TokenData = Depends(managers_only),
    db: Session = Depends(get_db),
) -> UserRead:
    target = _load_target(db, user_id)
    _enforce(policy.can_delete_user(principal, target))
    return users.delete_user(db, target)
