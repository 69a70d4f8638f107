"""Authentication routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session as DbSession

from prep_admin.database import get_db
from prep_admin.dependencies.auth import get_authenticated_session, get_directory
from prep_admin.models.auth import (
    AdminBootstrap,
    AdminLogin,
    AdminProfile,
    MessageResponse,
    TokenResponse,
)
from prep_admin.services.auth_service import (
    authenticate,
    create_access_token,
    create_account,
    has_accounts,
)
from prep_admin.services.permission_service import (
    Action,
    AdminDirectory,
    AdminSession,
    can_use_ai,
    has_permission,
    role_display_name,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _profile(session: AdminSession) -> AdminProfile:
    return AdminProfile(
        uid=session.uid,
        email=session.email,
        role=session.role.value if session.role else None,
        role_name=role_display_name(session),
        is_temporary=session.is_temporary,
        can_create=has_permission(session, Action.CREATE),
        can_read=has_permission(session, Action.READ),
        can_update=has_permission(session, Action.UPDATE),
        can_delete=has_permission(session, Action.DELETE),
        can_use_ai=can_use_ai(session),
    )


@router.post("/login", response_model=TokenResponse)
def login(
    data: AdminLogin,
    db: Annotated[DbSession, Depends(get_db)],
) -> TokenResponse:
    """Login and get JWT token."""
    account = authenticate(db, data.email, data.password)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    token, expires_in = create_access_token(account.uid, account.email)
    return TokenResponse(access_token=token, expires_in=expires_in)


@router.post("/bootstrap", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def bootstrap(
    data: AdminBootstrap,
    request: Request,
    db: Annotated[DbSession, Depends(get_db)],
    directory: Annotated[AdminDirectory, Depends(get_directory)],
) -> TokenResponse:
    """Create the first account and grant it temporary admin access."""
    if not request.app.state.bootstrap_enabled:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Bootstrap is disabled",
        )
    if has_accounts(db):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Bootstrap is only available before the first account exists",
        )
    account = create_account(db, data.email, data.password, data.display_name)
    directory.add_temporary(account.uid)
    token, expires_in = create_access_token(account.uid, account.email)
    return TokenResponse(access_token=token, expires_in=expires_in)


@router.get("/me", response_model=AdminProfile)
def get_me(
    session: Annotated[AdminSession, Depends(get_authenticated_session)],
) -> AdminProfile:
    """Current account with its role and capabilities."""
    return _profile(session)


@router.post("/logout", response_model=MessageResponse)
def logout(
    session: Annotated[AdminSession, Depends(get_authenticated_session)],
) -> MessageResponse:
    """Tokens are stateless; the client discards its copy."""
    return MessageResponse(message="Successfully logged out")
