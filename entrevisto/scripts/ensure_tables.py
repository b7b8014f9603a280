"""
Create missing tables without touching existing data.
Usage: python -m entrevisto.scripts.ensure_tables
"""
from entrevisto.database import ensure_tables_exist
from entrevisto.logging_config import setup_logging


def main():
    setup_logging()
    created = ensure_tables_exist()
    if created:
        print(f"Created tables: {', '.join(created)}")
    else:
        print("DB table check complete: all tables already exist.")


if __name__ == "__main__":
    main()
