"""Admin roles and the permission gate.

The caller's identity travels as an explicit :class:`AdminSession` handed to
every gated operation; nothing here reads a global "current user".
"""
import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from prep_admin.errors import PermissionDeniedError

logger = logging.getLogger(__name__)


class AdminRole(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


_ROLE_NAMES = {
    AdminRole.PRIMARY: "Primary Admin",
    AdminRole.SECONDARY: "Secondary Admin",
}


@dataclass(frozen=True)
class AdminSession:
    """Authenticated caller; `role` is None when the uid is not on any allow-list."""

    uid: str
    email: str = ""
    role: AdminRole | None = None
    is_temporary: bool = False

    @property
    def is_authorized(self) -> bool:
        return self.role is not None


class AdminDirectory:
    """Static role assignments plus the process-local temporary allow-list."""

    def __init__(
        self,
        roles: dict[str, AdminRole] | None = None,
        temporary: Iterable[str] = (),
    ) -> None:
        self._roles = dict(roles or {})
        self._temporary = set(temporary)
        self._lock = threading.Lock()

    @classmethod
    def from_uids(cls, primary: Iterable[str], secondary: Iterable[str]) -> "AdminDirectory":
        roles = {uid: AdminRole.SECONDARY for uid in secondary}
        roles.update({uid: AdminRole.PRIMARY for uid in primary})
        return cls(roles)

    def role_for(self, uid: str | None) -> AdminRole | None:
        if not uid:
            return None
        role = self._roles.get(uid)
        if role is not None:
            return role
        with self._lock:
            if uid in self._temporary:
                return AdminRole.SECONDARY
        return None

    def is_temporary(self, uid: str) -> bool:
        with self._lock:
            return uid in self._temporary and uid not in self._roles

    def add_temporary(self, uid: str) -> None:
        with self._lock:
            self._temporary.add(uid)
        logger.info(f"Added temporary admin {uid}")

    def remove_temporary(self, uid: str) -> None:
        with self._lock:
            self._temporary.discard(uid)

    def clear_temporary(self) -> None:
        with self._lock:
            self._temporary.clear()

    def open_session(self, uid: str, email: str = "") -> AdminSession:
        return AdminSession(
            uid=uid,
            email=email,
            role=self.role_for(uid),
            is_temporary=self.is_temporary(uid),
        )


def has_permission(session: AdminSession | None, action: Action | str) -> bool:
    """Create/read/update for any admin; delete only for primary admins."""
    if session is None or not session.is_authorized:
        return False
    try:
        action = Action(action)
    except ValueError:
        return False
    if action is Action.DELETE:
        return session.role is AdminRole.PRIMARY
    return True


def can_use_ai(session: AdminSession | None) -> bool:
    return session is not None and session.is_authorized


def require_permission(session: AdminSession | None, action: Action | str) -> None:
    if not has_permission(session, action):
        uid = session.uid if session else None
        logger.warning(f"Permission denied: uid={uid} action={action}")
        name = action.value if isinstance(action, Action) else action
        raise PermissionDeniedError(f"Not allowed to {name}")


def role_display_name(session: AdminSession | None) -> str:
    if session is None or session.role is None:
        return "Admin"
    return _ROLE_NAMES[session.role]
