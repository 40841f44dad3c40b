"""
Seed initial data: tables, weekly due settings, the unit president.

Usage:
    python scripts/seed_data.py --unit 12 --phone 9876543210 --name "Lakshmi Nair" --weekly-amount 100
"""
import sys
import argparse
from pathlib import Path
from datetime import datetime
from decimal import Decimal

# Add project root to Python path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from app.db.base import Base, SessionLocal, engine
from app import models  # noqa: F401
from app.models.member import KMember, MemberRole, MemberStatus
from app.services.member import normalize_member_id
from app.services.savings import get_weekly_settings, set_weekly_amount


def seed_tables():
    """Create any missing tables."""
    print("Creating tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables ready")


def seed_weekly_due(db, amount: Decimal):
    """Seed the weekly due amount unless the president already set one."""
    print("Seeding weekly due settings...")
    if get_weekly_settings(db):
        print("Weekly due settings already present, leaving them unchanged")
        return
    set_weekly_amount(db, amount, "Weekly savings contribution", updated_by="seed")
    print(f"Weekly due set to {amount}")


def seed_president(db, unit_number: str, phone: str, name: str):
    """Seed the unit president as an approved member."""
    print("Seeding president...")
    member_id = normalize_member_id(phone)
    existing = db.query(KMember).filter(KMember.id == member_id).first()
    if existing:
        print(f"Member {member_id} already exists")
        return

    first_name, _, last_name = name.partition(" ")
    db.add(KMember(
        id=member_id,
        first_name=first_name,
        last_name=last_name or None,
        phone=member_id,
        unit_number=unit_number,
        role=MemberRole.PRESIDENT,
        status=MemberStatus.APPROVED,
        joined_at=datetime.utcnow(),
    ))
    db.commit()
    print(f"President {name} seeded for unit {unit_number}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed a Kudumbashree unit")
    parser.add_argument("--unit", required=True, help="Unit number")
    parser.add_argument("--phone", required=True, help="President's phone number")
    parser.add_argument("--name", required=True, help="President's full name")
    parser.add_argument("--weekly-amount", type=Decimal, default=Decimal("100"), help="Weekly due amount")
    args = parser.parse_args()

    seed_tables()
    db = SessionLocal()
    try:
        seed_weekly_due(db, args.weekly_amount)
        seed_president(db, args.unit, args.phone, args.name)
        print("\nSeed data complete!")
    except Exception as e:
        db.rollback()
        print(f"Error seeding data: {e}")
        raise
    finally:
        db.close()
