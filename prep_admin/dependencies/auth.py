"""Authentication dependencies for FastAPI."""
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session as DbSession

from prep_admin.database import get_db
from prep_admin.errors import PermissionDeniedError
from prep_admin.services.auth_service import get_account_by_uid, verify_token
from prep_admin.services.permission_service import AdminDirectory, AdminSession

# HTTP Bearer scheme for JWT
security = HTTPBearer(auto_error=False)


def get_directory(request: Request) -> AdminDirectory:
    return request.app.state.directory


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_authenticated_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
    directory: Annotated[AdminDirectory, Depends(get_directory)],
) -> AdminSession:
    """Session for a valid token, whether or not the account is on an allow-list.

    Raises:
        HTTPException: 401 if not authenticated or token is invalid.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    payload = verify_token(credentials.credentials)
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    uid = payload.get("sub")
    if not uid:
        raise _unauthorized("Invalid token payload")

    account = get_account_by_uid(db, uid)
    if account is None:
        raise _unauthorized("Account not found")
    if not account.is_active:
        raise _unauthorized("Account is inactive")

    return directory.open_session(account.uid, account.email)


def get_current_session(
    session: Annotated[AdminSession, Depends(get_authenticated_session)],
) -> AdminSession:
    """Session of an authorized admin.

    Raises:
        PermissionDeniedError: 403 if the uid is on no allow-list.
    """
    if not session.is_authorized:
        raise PermissionDeniedError("Not an authorized admin")
    return session


CurrentSession = Annotated[AdminSession, Depends(get_current_session)]
