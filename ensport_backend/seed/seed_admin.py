"""
seed_admin.py
-------------
Creates the initial ADMIN account from DEFAULT_ADMIN_USERNAME / DEFAULT_ADMIN_PASSWORD.

Skipped when no password is configured or the account already exists.
"""

from typing import Optional

from sqlmodel import Session, select

from ensport_backend.core.config import DEFAULT_ADMIN_USERNAME, DEFAULT_ADMIN_PASSWORD
from ensport_backend.core.database import sync_engine
from ensport_backend.core.security import hash_password
from ensport_backend.models.user_model import User, UserRole


def seed_admin(session: Optional[Session] = None, username: str = DEFAULT_ADMIN_USERNAME,
               password: str = DEFAULT_ADMIN_PASSWORD) -> bool:
    """Returns True when an admin was created."""
    if not password:
        print("⚠️  DEFAULT_ADMIN_PASSWORD not set. Skipping admin seeding.")
        return False

    own_session = session is None
    session = session or Session(sync_engine)
    try:
        if session.exec(select(User).where(User.username == username)).first():
            print(f"✅ Admin already exists: {username}")
            return False

        print(f"👤 Creating admin account: {username}")
        session.add(User(username=username, password_hash=hash_password(password), role=UserRole.ADMIN))
        session.commit()
        return True
    finally:
        if own_session:
            session.close()


if __name__ == "__main__":
    seed_admin()
