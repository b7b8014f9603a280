"""
Link a recruiter profile to a company, creating the company when it is new.
Usage: python -m entrevisto.scripts.assign_company recruiter@example.com "Acme Corp"
"""
import sys

from entrevisto.database import SessionLocal, ensure_tables_exist
from entrevisto.models.user import Role
from entrevisto.repos.company_repo import get_or_create
from entrevisto.repos.user_repo import get_by_email, set_company


def main():
    if len(sys.argv) < 3 or not sys.argv[2].strip():
        print("Usage: python -m entrevisto.scripts.assign_company <email> <company name>")
        sys.exit(1)
    email = sys.argv[1].strip()
    company_name = sys.argv[2].strip()
    ensure_tables_exist()
    db = SessionLocal()
    try:
        user = get_by_email(db, email)
        if not user:
            print(f"User not found: {email}")
            sys.exit(1)
        if user.role != Role.RECRUITER.value:
            print(f"User {email} is not a recruiter (role={user.role})")
            sys.exit(1)
        company = get_or_create(db, company_name)
        set_company(db, user.id, company.id)
        print(f"Linked {email} to company {company.name}.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
