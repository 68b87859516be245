"""Authentication service: users, bearer sessions and the authorization gate."""

import logging
import secrets
from datetime import UTC, datetime, timedelta

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config import get_settings
from src.errors import Conflict
from src.models.enums import AuthFailure
from src.models.user import AuthSession, User

logger = logging.getLogger(__name__)

# Salted PBKDF2; the per-user salt is embedded in the stored hash string
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

BEARER_PREFIX = "bearer "


def normalize_email(email: str) -> str:
    """Lower-case and trim an email address."""
    return email.strip().lower()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


# --- Users ---


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email (case-insensitive)."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Get a user by id."""
    return db.query(User).filter(User.id == user_id).first()


def create_user(
    db: Session,
    email: str,
    name: str | None = None,
    password: str | None = None,
    is_admin: bool = False,
    is_nutritionist: bool = False,
) -> User:
    """Create a new user.

    Raises:
        Conflict: if the email is already registered.
    """
    email = normalize_email(email)
    if get_user_by_email(db, email):
        raise Conflict("Email already registered")

    user = User(
        email=email,
        name=name,
        password_hash=get_password_hash(password) if password else None,
        is_admin=is_admin,
        is_nutritionist=is_nutritionist,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        raise Conflict("Email already registered") from e
    db.refresh(user)
    logger.info(f"Created user {user.id} ({email})")
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user or not user.password_hash:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


# --- Sessions ---


def create_session(db: Session, user: User, ttl: timedelta | None = None) -> str:
    """Issue a new bearer token for a user."""
    if ttl is None:
        ttl = timedelta(days=get_settings().session_ttl_days)

    token = secrets.token_urlsafe(32)
    now = datetime.now(UTC)
    db.add(AuthSession(id=token, user_id=user.id, issued_at=now, expires_at=now + ttl))
    db.commit()
    return token


def resolve_session(db: Session, token: str | None) -> User | None:
    """Resolve a bearer token to its user.

    Returns None when the token is absent, unknown or expired.
    """
    if not token:
        return None
    return (
        db.query(User)
        .join(AuthSession, AuthSession.user_id == User.id)
        .filter(AuthSession.id == token, AuthSession.expires_at > datetime.now(UTC))
        .first()
    )


def delete_session(db: Session, token: str) -> None:
    """Delete a session. Deleting an unknown token is a no-op."""
    db.query(AuthSession).filter(AuthSession.id == token).delete(synchronize_session=False)
    db.commit()


# --- Authorization gate ---


def parse_bearer(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX) :].strip()
    return token or None


def authenticate(db: Session, authorization: str | None) -> User | AuthFailure:
    """Resolve the Authorization header to a user, or say why not."""
    user = resolve_session(db, parse_bearer(authorization))
    if user is None:
        return AuthFailure.UNAUTHORIZED
    return user


def authorize_admin(user: User) -> AuthFailure | None:
    """Return FORBIDDEN unless the user carries the admin flag."""
    if not user.is_admin:
        return AuthFailure.FORBIDDEN
    return None
