"""HTTP client for the membership API with an explicit session object.

The caller owns a :class:`ClientSession` and passes it to every call instead
of relying on a process-wide "current user". :meth:`MembershipClient.can_activate`
is the navigation guard: a session with a token is only admitted once its
profile has loaded, and a profile that fails to load within the configured
timeout signs the session out. The profile request always carries that
timeout, including on an injected ``httpx.Client``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from . import policy
from .config import get_settings
from .models import RoleEnum

logger = logging.getLogger(__name__)


@dataclass
class ClientSession:
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def role(self) -> Optional[RoleEnum]:
        if not self.user:
            return None
        return RoleEnum(self.user["role"])

    def clear(self) -> None:
        self.token = None
        self.user = None

    def can_manage_members(self) -> bool:
        return self.role is not None and policy.can_manage_members(self.role)

    def can_change_roles(self) -> bool:
        return self.role is not None and policy.can_change_roles(self.role)

    def can_edit(self, target: Dict[str, Any]) -> bool:
        if self.role is None:
            return False
        return policy.offers_edit(self.role, RoleEnum(target["role"]))

    def can_delete(self, target: Dict[str, Any]) -> bool:
        if self.role is None or self.user is None:
            return False
        return policy.offers_delete(self.user["id"], self.role, target["id"], RoleEnum(target["role"]))


class MembershipClient:
    """Thin wrapper over ``httpx.Client``; raises ``httpx.HTTPStatusError`` on API errors."""

    def __init__(self, base_url: str = "", http: Optional[httpx.Client] = None, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else get_settings().client_profile_timeout
        self.http = http or httpx.Client(base_url=base_url, timeout=self.timeout)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "MembershipClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -- plumbing ---------------------------------------------------------

    @staticmethod
    def _headers(session: ClientSession) -> Dict[str, str]:
        if not session.token:
            return {}
        return {"Authorization": f"Bearer {session.token}"}

    def _request(self, session: ClientSession, method: str, url: str, **kwargs: Any) -> httpx.Response:
        response = self.http.request(method, url, headers=self._headers(session), **kwargs)
        response.raise_for_status()
        return response

    def _start_session(self, session: ClientSession, payload: Dict[str, Any]) -> ClientSession:
        session.token = payload["access_token"]
        session.user = payload["user"]
        return session

    # -- auth -------------------------------------------------------------

    def login(self, session: ClientSession, username: str, password: str) -> ClientSession:
        response = self._request(session, "POST", "/auth/login", json={"username": username, "password": password})
        return self._start_session(session, response.json())

    def register(
        self, session: ClientSession, username: str, password: str, contact_number: str, live_mode: str
    ) -> ClientSession:
        response = self._request(
            session,
            "POST",
            "/auth/register",
            json={"username": username, "password": password, "contactNumber": contact_number, "liveMode": live_mode},
        )
        return self._start_session(session, response.json())

    def logout(self, session: ClientSession) -> None:
        session.clear()

    def load_profile(self, session: ClientSession) -> Dict[str, Any]:
        # httpx applies the timeout per phase (connect, read, write, pool),
        # not as a total deadline; a body that keeps trickling in can take longer
        response = self._request(session, "GET", "/users/profile", timeout=self.timeout)
        session.user = response.json()
        return session.user

    def ensure_user_loaded(self, session: ClientSession) -> bool:
        """Load the profile if the session has a token but no user yet.

        Any failure, including a timeout, clears the session.
        """
        if session.user is not None:
            return True
        if not session.is_authenticated:
            return False
        try:
            self.load_profile(session)
        except httpx.HTTPError as exc:
            logger.info("Profile load failed, signing out: %s", exc)
            session.clear()
            return False
        return True

    def can_activate(self, session: ClientSession) -> bool:
        if not session.is_authenticated:
            return False
        return self.ensure_user_loaded(session)

    # -- profile ----------------------------------------------------------

    def update_profile(self, session: ClientSession, **changes: Any) -> Dict[str, Any]:
        session.user = self._request(session, "PUT", "/users/profile", json=changes).json()
        return session.user

    # -- users ------------------------------------------------------------

    def list_users(self, session: ClientSession) -> List[Dict[str, Any]]:
        return self._request(session, "GET", "/users").json()

    def get_user(self, session: ClientSession, user_id: int) -> Dict[str, Any]:
        return self._request(session, "GET", f"/users/{user_id}").json()

    def create_user(self, session: ClientSession, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(session, "POST", "/users", json=data).json()

    def update_user(self, session: ClientSession, user_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request(session, "PUT", f"/users/{user_id}", json=data).json()

    def delete_user(self, session: ClientSession, user_id: int) -> Dict[str, Any]:
        return self._request(session, "DELETE", f"/users/{user_id}").json()

    def export_users_csv(self, session: ClientSession) -> str:
        return self._request(session, "GET", "/users/export/csv").text

    def import_users_csv(self, session: ClientSession, content: str, filename: str = "users.csv") -> Dict[str, Any]:
        files = {"file": (filename, content.encode("utf-8"), "text/csv")}
        return self._request(session, "POST", "/users/import/csv", files=files).json()

    # -- records ----------------------------------------------------------

    def submit(self, session: ClientSession, resource: str, content: str) -> Dict[str, Any]:
        """Submit a record to ``resource`` (``"feedback"`` or ``"accountability"``)."""
        return self._request(session, "POST", f"/{resource}", json={"content": content}).json()

    def list_records(self, session: ClientSession, resource: str) -> List[Dict[str, Any]]:
        return self._request(session, "GET", f"/{resource}").json()

    def get_record(self, session: ClientSession, resource: str, record_id: int) -> Dict[str, Any]:
        return self._request(session, "GET", f"/{resource}/{record_id}").json()

    def delete_record(self, session: ClientSession, resource: str, record_id: int) -> Dict[str, Any]:
        return self._request(session, "DELETE", f"/{resource}/{record_id}").json()
