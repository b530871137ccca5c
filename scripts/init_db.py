from folio.db import create_db_and_tables
from folio.models import *  # noqa: F401,F403  Import all models so they register with SQLModel

if __name__ == "__main__":
    print("Creating tables...")
    try:
        create_db_and_tables()
        print("Tables created successfully!")
    except Exception as e:
        print(f"Error creating tables: {e}")
        raise SystemExit(1)
