#!/usr/bin/env python3
"""
Organization Account Seed Script
Creates a login account for one organization.

Usage:
    python -m scripts.seed_org_account <ORG> <email> <password>

Example:
    python -m scripts.seed_org_account LCO lco@school.edu securepassword123
"""
import sys
import os
from uuid import uuid4

# Add the parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.database import SessionLocal, engine, Base
from app.models.db_models import AccountStatus, Organization, OrgAccountDB
from app.auth import hash_password


def create_org_account(organization: str, email: str, password: str) -> bool:
    """Create an organization account, or reset the password of an existing one."""
    # Ensure tables exist
    Base.metadata.create_all(bind=engine)

    db: Session = SessionLocal()
    try:
        existing = db.query(OrgAccountDB).filter(OrgAccountDB.email == email).first()

        if existing:
            if existing.organization != organization:
                print(f"Error: Email '{email}' already belongs to {existing.organization}.")
                return False
            existing.password_hash = hash_password(password)
            db.commit()
            print(f"Password reset for existing {organization} account '{email}'.")
            return True

        account = OrgAccountDB(
            id=str(uuid4()),
            organization=organization,
            email=email,
            password_hash=hash_password(password),
            status=AccountStatus.ACTIVE.value,
        )

        db.add(account)
        db.commit()

        print("Organization account created successfully!")
        print(f"  Organization: {organization}")
        print(f"  Email: {email}")
        print(f"  Status: {AccountStatus.ACTIVE.value}")
        return True

    except SQLAlchemyError as e:
        print(f"Error creating organization account: {e}")
        db.rollback()
        return False
    finally:
        db.close()


def main():
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(1)

    organization = sys.argv[1].upper()
    email = sys.argv[2]
    password = sys.argv[3]

    valid = [org.value for org in Organization]
    if organization not in valid:
        print(f"Error: Unknown organization. Must be one of: {', '.join(valid)}")
        sys.exit(1)

    if len(password) < 8:
        print("Error: Password must be at least 8 characters.")
        sys.exit(1)

    if "@" not in email:
        print("Error: Invalid email format.")
        sys.exit(1)

    success = create_org_account(organization, email, password)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
