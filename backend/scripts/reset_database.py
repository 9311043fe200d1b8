"""
Reset database and add a demo user.

This script:
1. Deletes all data from all tables
2. Creates a verified demo user with a Health ID and emergency info
3. Confirms deletion and creation

Usage:
    python scripts/reset_database.py
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import Session

from healthvault.core.config import get_settings
from healthvault.core.database import (
    build_engine,
    build_session_factory,
    init_db,
    session_scope,
)
from healthvault.core.security import PasswordHasher
from healthvault.models import (
    EmergencyInfo,
    HealthIdentifier,
    MedicalRecord,
    OneTimeCode,
    Reminder,
    User,
)
from healthvault.utils.codes import generate_health_code

DEMO_EMAIL = "demo@healthvault.app"
DEMO_PASSWORD = "demo-password"

# Child tables first, users last
TABLES = {
    "reminders": Reminder,
    "medical_records": MedicalRecord,
    "emergency_info": EmergencyInfo,
    "health_ids": HealthIdentifier,
    "otp_codes": OneTimeCode,
    "users": User,
}


def count_records(db: Session):
    """Count records in all tables."""
    return {name: db.query(model).count() for name, model in TABLES.items()}


def print_counts(title: str, counts: dict):
    """Print table counts."""
    print(f"\n{'=' * 60}")
    print(f"{title}")
    print(f"{'=' * 60}")
    total = 0
    for table, count in counts.items():
        print(f"  {table:<25} {count:>6} records")
        total += count
    print(f"{'=' * 60}")
    print(f"  {'TOTAL':<25} {total:>6} records")
    print(f"{'=' * 60}\n")


def create_demo_user(db: Session, hasher: PasswordHasher) -> User:
    user = User(
        email=DEMO_EMAIL,
        password_hash=hasher.hash(DEMO_PASSWORD),
        first_name="Demo",
        last_name="Patient",
        is_verified=True,
    )
    db.add(user)
    db.flush()

    db.add(HealthIdentifier(user_id=user.id, health_code=generate_health_code()))
    db.add(
        EmergencyInfo(
            user_id=user.id,
            blood_group="O+",
            allergies=["Penicillin"],
            chronic_diseases=[],
            medications=[],
            emergency_contacts=[
                {"name": "Alex Patient", "phone": "+15550100", "relation": "spouse"}
            ],
            organ_donor=False,
        )
    )
    db.commit()
    db.refresh(user)
    return user


def reset_database():
    """Reset all data and add the demo user."""
    settings = get_settings()
    engine = build_engine(settings)
    init_db(engine)

    with session_scope(build_session_factory(engine)) as db:
        try:
            print("\n🚀 Starting database reset...\n")

            before_counts = count_records(db)
            print_counts("BEFORE RESET", before_counts)

            if any(before_counts.values()):
                response = input("⚠️  This will delete ALL data. Continue? (yes/no): ")
                if response.lower() != "yes":
                    print("❌ Reset cancelled.")
                    return

            print("🗑️  Deleting all data...")
            for model in TABLES.values():
                db.query(model).delete()
            db.commit()
            print("✅ All data deleted successfully!\n")

            print("👤 Creating demo user...")
            user = create_demo_user(db, PasswordHasher(settings))

            print("✅ Demo user created successfully!")
            print(f"   User ID:     {user.id}")
            print(f"   Email:       {user.email}")
            print(f"   Password:    {DEMO_PASSWORD}")
            print(f"   Health code: {user.health_code}\n")

            print_counts("FINAL STATE", count_records(db))

            print("🎉 Database reset complete!")
            print("\n📝 Next steps:")
            print("   1. Log in: POST /api/v1/auth/login")
            print(f"   2. Public card: GET /api/v1/emergency/public/{user.health_code}")
            print("\n")

        except Exception as e:
            print(f"\n❌ Error during reset: {e}")
            db.rollback()
            raise
        finally:
            engine.dispose()


if __name__ == "__main__":
    reset_database()
