# seed_all.py
# Orchestrates all seed scripts in order.

from typing import Optional

from sqlmodel import Session

from ensport_backend.seed.seed_sports import seed_sports
from ensport_backend.seed.seed_admin import seed_admin


def seed_all(session: Optional[Session] = None):
    print("\n🌱 Starting database seeding...\n")

    print("➡️  Step 1: Seeding sports...")
    seed_sports(session)

    print("➡️  Step 2: Seeding admin account...")
    seed_admin(session)

    print("\n✅ Database seeding complete.\n")


if __name__ == "__main__":
    from sqlmodel import SQLModel
    from ensport_backend import models  # noqa: F401
    from ensport_backend.core.database import sync_engine

    SQLModel.metadata.create_all(sync_engine)
    seed_all()
