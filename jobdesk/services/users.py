"""
User accounts: bootstrap seeding, authentication and administration
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobdesk.core.config import Settings
from jobdesk.core.database import is_valid_id
from jobdesk.core.errors import (
    AuthorizationError, ConflictError, NotFoundError, ValidationError
)
from jobdesk.core.permissions import (
    Capability, DEFAULT_ROLE, Role, has_permission, parse_role
)
from jobdesk.core.security import (
    TokenClaims, create_access_token, hash_password, verify_password
)
from jobdesk.models.user import User

logger = logging.getLogger(__name__)


def require_capability(actor: TokenClaims, capability: Capability) -> None:
    if not has_permission(actor.role, capability):
        logger.warning(
            "Permission denied",
            extra={"user_id": actor.id, "user_role": actor.raw_role, "capability": capability.value},
        )
        raise AuthorizationError("You don't have permission to perform this action")


def seed_default_admin(db: Session, settings: Settings) -> Optional[User]:
    """
    Create the bootstrap IT Admin when no IT Admin exists.
    Returns the new account, or None when nothing had to be created.
    """
    existing = db.query(User).filter(User.role == Role.IT_ADMIN.value).first()
    if existing:
        return None

    admin = User(
        username=settings.DEFAULT_ADMIN_USERNAME,
        email=settings.DEFAULT_ADMIN_EMAIL.strip().lower(),
        password=hash_password(settings.DEFAULT_ADMIN_PASSWORD, rounds=settings.BCRYPT_ROUNDS),
        role=Role.IT_ADMIN.value,
    )
    db.add(admin)
    try:
        db.commit()
    except IntegrityError:
        # the seed email or username already belongs to a non-admin account
        db.rollback()
        logger.error(
            "Could not create default admin account",
            extra={"admin_email": admin.email, "admin_username": admin.username},
        )
        return None
    db.refresh(admin)
    logger.info("Default admin account created", extra={"user_id": admin.id})
    return admin


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def authenticate(db: Session, email: str, password: str, settings: Settings) -> dict:
    """Check credentials and issue a token; 400 on any mismatch"""
    user = get_user_by_email(db, email or "")
    if not user or not verify_password(password or "", user.password):
        logger.warning("Failed login attempt", extra={"login_email": (email or "").strip().lower()})
        raise ValidationError("Invalid credentials")

    token = create_access_token(
        user.id,
        user.email,
        user.role,
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expires_minutes=settings.JWT_EXPIRE_MINUTES,
    )
    logger.info("User logged in", extra={"user_id": user.id, "user_role": user.role})
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "token": token,
    }


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def _ensure_unique(db: Session, username: str, email: str) -> None:
    if get_user_by_email(db, email):
        raise ConflictError("User with this email already exists", field="email")
    if db.query(User).filter(User.username == username).first():
        raise ConflictError("Username is already taken", field="username")


def _insert_user(db: Session, username: str, email: str, password: str, role: Role, settings: Settings) -> User:
    user = User(
        username=username,
        email=email,
        password=hash_password(password, rounds=settings.BCRYPT_ROUNDS),
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def register_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: Optional[str],
    actor: Optional[TokenClaims],
    settings: Settings,
) -> User:
    """
    Registration: the requested role only applies when the caller can
    manage users; everyone else gets the default role.
    """
    _ensure_unique(db, username, email)

    assigned = DEFAULT_ROLE
    if role and actor is not None and has_permission(actor.role, Capability.MANAGE_USERS):
        parsed = parse_role(role)
        if parsed is None:
            raise ValidationError("Invalid role specified", field="role")
        assigned = parsed

    user = _insert_user(db, username, email, password, assigned, settings)
    logger.info("New user registered", extra={"user_id": user.id, "user_role": user.role})
    return user


def list_users(db: Session, actor: TokenClaims) -> List[User]:
    require_capability(actor, Capability.MANAGE_USERS)
    return db.query(User).order_by(User.createdAt).all()


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: Optional[str],
    actor: TokenClaims,
    settings: Settings,
) -> User:
    require_capability(actor, Capability.MANAGE_USERS)
    parsed = parse_role(role)
    if parsed is None:
        raise ValidationError("Invalid role specified", field="role")
    _ensure_unique(db, username, email)

    user = _insert_user(db, username, email, password, parsed, settings)
    logger.info(
        "New user created by admin",
        extra={"admin_id": actor.id, "new_user_id": user.id, "new_user_role": user.role},
    )
    return user


def delete_user(db: Session, user_id: str, actor: TokenClaims) -> dict:
    """
    Delete a non-admin account. The lookup runs before the id format check
    so that legacy ids still resolve.
    """
    require_capability(actor, Capability.MANAGE_USERS)
    user_id = (user_id or "").strip()

    target = db.query(User).filter(User.id == user_id).first()
    if target is None and not is_valid_id(user_id):
        raise ValidationError("Invalid user ID format or user not found", field="id")
    if target is None:
        logger.warning("Delete attempt on non-existent user", extra={"admin_id": actor.id, "target_id": user_id})
        raise NotFoundError("User not found")

    if parse_role(target.role) is Role.IT_ADMIN:
        logger.warning(
            "Attempt to delete IT Admin user",
            extra={"admin_id": actor.id, "target_id": target.id},
        )
        raise ValidationError("IT Admin users cannot be deleted for security reasons")

    # Capture before the commit expires the instance
    deleted = {"id": target.id, "username": target.username, "email": target.email}
    db.delete(target)
    db.commit()
    logger.info("User deleted", extra={"admin_id": actor.id, "deleted_user_id": deleted["id"]})
    return deleted
