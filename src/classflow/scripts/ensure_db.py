"""Utility script to prepare the configured database."""
from __future__ import annotations

import argparse
import logging
import sys
from urllib.parse import urlsplit, urlunsplit

import psycopg
from psycopg import sql

from classflow.core.logging import configure_logging
from classflow.core.settings import settings
from classflow.db.session import SessionLocal, create_tables, engine
from classflow.services import auth_service

logger = logging.getLogger(__name__)


def normalize_to_psycopg(uri: str) -> str:
    """Return a Postgres URI suitable for psycopg.connect().

    Converts SQLAlchemy schemes (postgresql+*) to plain "postgresql".
    """
    uri = (uri or "").strip().strip("'\"")
    if not uri:
        raise ValueError("DATABASE_URL is empty")
    parts = urlsplit(uri)
    scheme = parts.scheme
    if scheme.startswith("postgresql+"):
        scheme = "postgresql"
    return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))


def _split_db_url(db_url: str) -> tuple[str, str]:
    """Return `(admin_url, target_db)` using the maintenance database."""
    parts = urlsplit(normalize_to_psycopg(db_url))
    if not parts.scheme.startswith("postgresql"):
        raise ValueError(f"Unparseable DATABASE_URL (no scheme): {db_url!r}")
    target_db = parts.path.lstrip("/") or "postgres"
    admin_url = urlunsplit(("postgresql", parts.netloc, "/postgres", parts.query, ""))
    return admin_url, target_db


def ensure_database_exists(db_url: str) -> None:
    """Create the configured Postgres database if it is missing."""
    admin_url, target_db = _split_db_url(db_url)
    with psycopg.connect(admin_url, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is None:
            cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
            logger.info("Created database %s", target_db)
        else:
            logger.info("Database %s already exists", target_db)


def main() -> None:
    parser = argparse.ArgumentParser(description="Ensure the configured database and schema")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create tables from the ORM metadata instead of running migrations.",
    )
    args = parser.parse_args()
    configure_logging(settings.log_level)

    url = settings.effective_database_url
    try:
        if url.startswith("postgresql"):
            ensure_database_exists(url)
        if args.create_tables:
            create_tables(engine)
        with SessionLocal() as db:
            auth_service.ensure_admin(db, settings.admin_email, settings.admin_password)
    except (psycopg.Error, ValueError) as exc:
        logger.error("ensure_db failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
