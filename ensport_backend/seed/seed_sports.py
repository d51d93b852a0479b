"""
seed_sports.py
--------------
Seeds the sports catalogue shown in filters and the subscription form.

✅ Delta seeding: only inserts sports whose code is missing, safe to run repeatedly.

Usage:
    python -m ensport_backend.seed.seed_sports
"""

from typing import Optional

from sqlmodel import Session, select

from ensport_backend.core.database import sync_engine
from ensport_backend.models.sport_model import Sport

SPORTS = [
    {"name": "Football", "code": "FB", "description": "Football", "icon": "⚽"},
    {"name": "Basketball", "code": "BB", "description": "Basketball", "icon": "🏀"},
    {"name": "Badminton", "code": "BD", "description": "Badminton", "icon": "🏸"},
    {"name": "Sepak Takraw", "code": "ST", "description": "Sepak takraw", "icon": "🥎"},
    {"name": "Chess", "code": "CH", "description": "Chess", "icon": "♟️"},
    {"name": "Table Tennis", "code": "TT", "description": "Table tennis", "icon": "🏓"},
    {"name": "Volleyball", "code": "VB", "description": "Volleyball", "icon": "🏐"},
]


def seed_sports(session: Optional[Session] = None) -> int:
    """Insert missing sports. Returns how many were added."""
    own_session = session is None
    session = session or Session(sync_engine)
    added = 0
    try:
        existing_codes = set(session.exec(select(Sport.code)).all())
        for sport_data in SPORTS:
            if sport_data["code"] in existing_codes:
                print(f"✅ Sport already exists: {sport_data['name']}")
                continue
            print(f"➕ Adding sport: {sport_data['name']} ({sport_data['code']})")
            session.add(Sport(**sport_data, is_active=True))
            added += 1
        session.commit()
    finally:
        if own_session:
            session.close()
    return added


if __name__ == "__main__":
    seed_sports()
