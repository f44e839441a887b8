"""
Password hashing (bcrypt) and bearer tokens (JWT)
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from jobdesk.core.permissions import Role, parse_role


@dataclass
class TokenClaims:
    """Identity carried by a verified bearer token"""
    id: str
    email: str
    role: Optional[Role]  # None when the token carries an unknown role
    raw_role: str


def _password_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:72]


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    user_id: str,
    email: str,
    role: str,
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = 60,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> TokenClaims:
    """
    Verify signature and expiry.
    Raises jwt.InvalidTokenError (ExpiredSignatureError included) on failure.
    """
    payload = jwt.decode(token, secret, algorithms=[algorithm], options={"require": ["exp"]})
    user_id = payload.get("id")
    if not user_id:
        raise jwt.InvalidTokenError("Token has no subject")
    raw_role = str(payload.get("role") or "")
    return TokenClaims(
        id=str(user_id),
        email=str(payload.get("email") or ""),
        role=parse_role(raw_role),
        raw_role=raw_role,
    )
