"""Admin accounts and JWT handling."""
import logging
import uuid
from datetime import timedelta

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session as DbSession

from prep_admin.config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from prep_admin.errors import ValidationError
from prep_admin.models.db.user import AdminAccount
from prep_admin.utils.time_utils import utc_datetime

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )


def create_access_token(uid: str, email: str) -> tuple[str, int]:
    """Create a JWT access token.

    Returns:
        Tuple of (token, lifetime in seconds)
    """
    expire = utc_datetime() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": uid,
        "email": email,
        "exp": expire,
        "jti": str(uuid.uuid4()),
    }
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt, ACCESS_TOKEN_EXPIRE_MINUTES * 60


def verify_token(token: str) -> dict | None:
    """Verify and decode a JWT token.

    Returns:
        Decoded token payload or None if invalid.
    """
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def get_account_by_email(db: DbSession, email: str) -> AdminAccount | None:
    return db.query(AdminAccount).filter(AdminAccount.email == email.lower()).first()


def get_account_by_uid(db: DbSession, uid: str) -> AdminAccount | None:
    return db.query(AdminAccount).filter(AdminAccount.uid == uid).first()


def has_accounts(db: DbSession) -> bool:
    return db.query(AdminAccount.id).first() is not None


def create_account(
    db: DbSession,
    email: str,
    password: str,
    display_name: str | None = None,
    uid: str | None = None,
) -> AdminAccount:
    """Create a new admin account with a generated uid."""
    if get_account_by_email(db, email) is not None:
        raise ValidationError("Email already registered", {"email": "Already registered"})
    account = AdminAccount(
        uid=uid or uuid.uuid4().hex[:28],
        email=email.lower(),
        hashed_password=hash_password(password),
        display_name=display_name,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    logger.info(f"Created account {account.uid}")
    return account


def authenticate(db: DbSession, email: str, password: str) -> AdminAccount | None:
    """Return the active account matching the credentials."""
    account = get_account_by_email(db, email)
    if account is None or not account.is_active:
        return None
    if not verify_password(password, account.hashed_password):
        return None
    return account
