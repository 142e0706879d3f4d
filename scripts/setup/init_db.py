# scripts/setup/init_db.py
"""
Initialize database — creates raw_events, bin_events and their indexes.
Safe to re-run. Useful when the API started against a database it couldn't reach.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlalchemy import inspect, text
from app.database import create_tables, engine
from app.config import settings


def main():
    print("Smart Bin DB Initialization")
    print("=" * 40)
    print(f"Database: {engine.url.render_as_string(hide_password=True)}")
    print(f"Environment: {settings.ENVIRONMENT}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("Database connection OK")
    except Exception as e:
        print(f"Cannot connect to database: {e}")
        print("\nCheck DATABASE_URL in .env and that PostgreSQL is running.")
        sys.exit(1)

    print("\nCreating tables...")
    create_tables()

    inspector = inspect(engine)
    for table in ("raw_events", "bin_events"):
        indexes = [ix["name"] for ix in inspector.get_indexes(table)]
        print(f"   {table}: indexes {', '.join(sorted(indexes))}")

    print("\nDatabase ready! Start the API with:")
    print(f"   uvicorn app.main:app --host {settings.HOST} --port {settings.PORT}")


if __name__ == "__main__":
    main()
