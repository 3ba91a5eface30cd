#!/usr/bin/env python3
"""
Seed script to add the demo admin and employee accounts to the Travel CRM.
Run with: python seed_users.py
"""

import sys

from sqlalchemy.orm import Session

from travelcrm.database import Base, SessionLocal, engine
from travelcrm.models.user import User
from travelcrm.services.auth import get_password_hash

# Users to create
USERS = [
    {
        "name": "System Administrator",
        "email": "admin@company.com",
        "password": "admin123",
        "role": "admin",
        "department": "Management",
    },
    {
        "name": "John Smith",
        "email": "john@company.com",
        "password": "emp123",
        "role": "employee",
        "department": "Sales",
    },
    {
        "name": "Sarah Johnson",
        "email": "sarah@company.com",
        "password": "emp123",
        "role": "employee",
        "department": "Sales",
    },
]


def seed_users(session: Session, users=USERS) -> int:
    """Create missing users and reset existing ones. Returns how many were created."""
    created = 0
    for user_data in users:
        existing = session.query(User).filter(User.email == user_data["email"]).first()
        if existing:
            print(f"User '{user_data['email']}' already exists (ID: {existing.id}). Updating...")
            user = existing
        else:
            print(f"Creating user '{user_data['email']}'...")
            user = User(email=user_data["email"])
            session.add(user)
            created += 1

        user.name = user_data["name"]
        user.role = user_data["role"]
        user.department = user_data.get("department")
        user.hashed_password = get_password_hash(user_data["password"])
        user.is_active = True

    session.commit()
    return created


def main():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_users(session)
        print("\nUsers created/updated successfully!")
        print("\n" + "=" * 60)
        print("USER CREDENTIALS:")
        print("=" * 60)
        for user in USERS:
            print(f"  {user['email']:22} | Pass: {user['password']:10} | Role: {user['role']}")
        print("=" * 60)
    except Exception as e:
        session.rollback()
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        session.close()


if __name__ == "__main__":
    main()
