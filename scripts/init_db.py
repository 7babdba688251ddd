#!/usr/bin/env python3
"""
Schema Bootstrap Script

Creates all tables and indexes (idempotent).
Usage: python scripts/init_db.py [--reset]

--reset drops every table first. All data is lost.
"""
import sys
sys.path.insert(0, '.')

from jobfair.core.logging_config import setup_logging
from jobfair.db.schema import init_schema, drop_schema


def main():
    setup_logging()
    if "--reset" in sys.argv[1:]:
        print("[1] Dropping tables...")
        drop_schema()
    print("[2] Creating tables...")
    init_schema()
    print("    ✅ Schema ready")


if __name__ == "__main__":
    main()
