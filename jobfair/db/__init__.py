"""
Database module - relational store connection and schema.
"""
from jobfair.db.postgres import get_db_session, test_postgres_connection
from jobfair.db.schema import init_schema, drop_schema

__all__ = [
    "get_db_session",
    "test_postgres_connection",
    "init_schema",
    "drop_schema"
]
