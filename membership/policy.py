"""Role-based visibility and permission rules.

Every authorization decision in the API goes through this module so the
routes never compare role strings on their own. Read rules hand back a
SQLAlchemy filter that scopes a query; write rules hand back a ``Decision``.

Visibility, shared by Accountability, Feedback and the user listing:

* ADMIN sees everything.
* INCHARGE sees rows owned by users whose ``incharge_id`` is the requester.
* MEMBER sees only rows they own.
"""
from __future__ import annotations

from typing import NamedTuple, Optional, Type, Union

from sqlalchemy import false
from sqlalchemy.sql.elements import ColumnElement

from .models import Accountability, Feedback, RoleEnum, User
from .schemas import TokenData

RecordModel = Union[Type[Accountability], Type[Feedback]]


class Decision(NamedTuple):
    allowed: bool
    reason: Optional[str] = None


ALLOW = Decision(True)


def deny(reason: str) -> Decision:
    return Decision(False, reason)


# -- records (Accountability / Feedback) ---------------------------------------


def record_scope(model: RecordModel, principal: TokenData) -> Optional[ColumnElement[bool]]:
    """Filter restricting ``model`` to the rows ``principal`` may list.

    ``None`` means unrestricted.
    """
    if principal.role == RoleEnum.ADMIN:
        return None
    if principal.role == RoleEnum.INCHARGE:
        return model.user.has(User.incharge_id == principal.id)
    return model.user_id == principal.id


def can_read_record(principal: TokenData, owner_id: int, owner_incharge_id: Optional[int]) -> bool:
    if principal.role == RoleEnum.ADMIN:
        return True
    if principal.role == RoleEnum.INCHARGE and owner_incharge_id == principal.id:
        return True
    return owner_id == principal.id


def can_delete_record(principal: TokenData, owner_id: int) -> bool:
    # supervisors can read their members' records but never delete them
    return principal.role == RoleEnum.ADMIN or owner_id == principal.id


def can_submit(user: User, model: RecordModel) -> Decision:
    if model is Feedback and not user.submit_feedback_enabled:
        return deny("Feedback submission is disabled for this user")
    if model is Accountability and not user.submit_accountability_enabled:
        return deny("Accountability submission is disabled for this user")
    return ALLOW


# -- users -----------------------------------------------------------------


def user_scope(principal: TokenData) -> Optional[ColumnElement[bool]]:
    """Filter restricting the user listing; MEMBER sees an empty set."""
    if principal.role == RoleEnum.ADMIN:
        return None
    if principal.role == RoleEnum.INCHARGE:
        return User.incharge_id == principal.id
    return false()


def can_create_user(principal: TokenData, role: RoleEnum) -> Decision:
    if principal.role == RoleEnum.ADMIN:
        return ALLOW
    if principal.role == RoleEnum.INCHARGE and role == RoleEnum.MEMBER:
        return ALLOW
    if principal.role == RoleEnum.INCHARGE:
        return deny("Incharge can only create members")
    return deny("Insufficient permissions")


def can_edit_user(principal: TokenData, target: User, new_role: Optional[RoleEnum] = None) -> Decision:
    if principal.role == RoleEnum.MEMBER:
        return deny("Members cannot edit profiles")
    if principal.role == RoleEnum.ADMIN:
        return ALLOW
    if target.role != RoleEnum.MEMBER:
        return deny("Incharge can only edit member profiles")
    if new_role is not None and new_role != target.role:
        return deny("Incharge cannot change user roles")
    return ALLOW


def can_delete_user(principal: TokenData, target: User) -> Decision:
    if principal.role == RoleEnum.ADMIN:
        return ALLOW
    if principal.role == RoleEnum.INCHARGE and target.role == RoleEnum.MEMBER:
        return ALLOW
    if principal.role == RoleEnum.INCHARGE:
        return deny("Incharge can only delete members")
    return deny("Insufficient permissions")


# -- UI affordances ----------------------------------------------------------
# These mirror what the member-management screens offer, which is stricter
# than what the API allows an ADMIN to do.


def can_manage_members(role: RoleEnum) -> bool:
    return role in (RoleEnum.ADMIN, RoleEnum.INCHARGE)


def can_change_roles(role: RoleEnum) -> bool:
    return role == RoleEnum.ADMIN


def offers_edit(actor_role: RoleEnum, target_role: RoleEnum) -> bool:
    if actor_role == RoleEnum.ADMIN:
        return target_role in (RoleEnum.INCHARGE, RoleEnum.MEMBER)
    if actor_role == RoleEnum.INCHARGE:
        return target_role == RoleEnum.MEMBER
    return False


def offers_delete(actor_id: int, actor_role: RoleEnum, target_id: int, target_role: RoleEnum) -> bool:
    if actor_id == target_id:
        return False
    return offers_edit(actor_role, target_role)
