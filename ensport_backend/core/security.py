# ensport_backend/core/security.py
# Password hashing and signed session tokens

import hashlib
import hmac
import time
from dataclasses import dataclass
from typing import Optional

from passlib.context import CryptContext

from ensport_backend.core.config import SECRET_KEY, SESSION_MAX_AGE_SECONDS, BCRYPT_ROUNDS
from ensport_backend.models.user_model import User, UserRole

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


# ============================
# Session tokens
# ============================
# Format: "<user_id>:<issued_at>:<hex hmac-sha256 of 'user_id:issued_at'>"

def _get_hmac(secret: str, message: str) -> str:
    return hmac.new(secret.encode("utf-8"), msg=message.encode("utf-8"), digestmod=hashlib.sha256).hexdigest()


def create_session_token(user_id: str, secret: str = SECRET_KEY, issued_at: Optional[int] = None) -> str:
    issued_at = int(time.time()) if issued_at is None else issued_at
    payload = f"{user_id}:{issued_at}"
    return f"{payload}:{_get_hmac(secret, payload)}"


def read_session_token(token: Optional[str], secret: str = SECRET_KEY,
                       max_age: int = SESSION_MAX_AGE_SECONDS) -> Optional[str]:
    """Return the user id of a valid, unexpired token, or None."""
    if not token:
        return None

    # Reject badly formatted tokens.
    try:
        user_id, issued_at, digest = token.rsplit(":", 2)
        int_issued_at = int(issued_at)
    except ValueError:
        return None

    # Reject outdated tokens.
    if time.time() - int_issued_at > max_age:
        return None

    expected = _get_hmac(secret, f"{user_id}:{issued_at}")
    if not hmac.compare_digest(expected, digest):
        return None
    return user_id


def secrets_match(provided: Optional[str], expected: str) -> bool:
    return provided is not None and hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


# ============================
# Operator: the authenticated caller
# ============================

@dataclass(frozen=True)
class Operator:
    """
    Typed identity of the caller, built once per request from the User row.
    sport_type is only meaningful for SPORT_MANAGER; other roles carry None.
    """
    id: str
    username: str
    role: UserRole
    sport_type: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "Operator":
        role = UserRole(user.role)
        scope = user.sport_type if role == UserRole.SPORT_MANAGER and user.sport_type else None
        return cls(id=user.id, username=user.username, role=role, sport_type=scope)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def can_manage_sport(self, sport_type: str) -> bool:
        """Admins manage every sport, sport managers only their own."""
        if self.is_admin:
            return True
        return self.role == UserRole.SPORT_MANAGER and self.sport_type is not None \
            and self.sport_type == sport_type
