#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the database connection is working.
Usage: python scripts/test_connections.py
"""
import sys
sys.path.insert(0, '.')

from jobfair.db.postgres import test_postgres_connection
from jobfair.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("JOB FAIR BACKEND - CONNECTION TEST")
    print("=" * 50)

    print("\n[1] Testing database...")
    if settings.database_url:
        print(f"    URL: {settings.database_url.split('@')[-1]}")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if test_postgres_connection():
        print("    ✅ Database: CONNECTED")
    else:
        print("    ❌ Database: FAILED")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
