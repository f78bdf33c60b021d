#!/usr/bin/env python
"""Create the database from `DATABASE_URL` in .env and its tables.

PostgreSQL databases are created through the `postgres` maintenance
database first; SQLite files are created on first connect.

Usage:
  python scripts/create_database.py [--password PW]
"""
import argparse
import os
import sys
from getpass import getpass

# Ensure project root is on sys.path so `app` package can be imported
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import psycopg2
from psycopg2 import OperationalError, sql
from sqlalchemy.engine import make_url

from app.config import settings
from app.database import Base, engine
import app.models  # noqa: F401  registers the tables on Base.metadata


def create_postgres_database(url, password):
    conn = psycopg2.connect(
        dbname="postgres",
        user=url.username,
        password=password,
        host=url.host or "localhost",
        port=url.port or 5432,
    )
    conn.autocommit = True
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT 1 FROM pg_database WHERE datname=%s", (url.database,))
            if cur.fetchone():
                print(f"Database '{url.database}' already exists.")
            else:
                cur.execute(sql.SQL("CREATE DATABASE {};").format(sql.Identifier(url.database)))
                print(f"Database '{url.database}' created.")
    finally:
        conn.close()


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--password", "-p", help="Postgres admin password")
    args = parser.parse_args()

    url = make_url(settings.DATABASE_URL)
    if not url.database:
        print("No database name found in DATABASE_URL")
        sys.exit(1)

    if url.get_backend_name() == "postgresql":
        password = args.password or os.getenv("POSTGRES_PASSWORD") or url.password
        try:
            create_postgres_database(url, password)
        except OperationalError:
            if not sys.stdin.isatty():
                print("Password authentication failed. Provide the password via --password or POSTGRES_PASSWORD env var.")
                sys.exit(1)
            print("Password authentication failed. Please enter the Postgres password for user:", url.username)
            create_postgres_database(url, getpass())

    Base.metadata.create_all(engine)
    print("Tables ready: " + ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    main()
