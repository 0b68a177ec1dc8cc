import os
import sys

import dj_database_url
import psycopg
from psycopg import sql

from dotenv import load_dotenv


def _ensure_postgres_database() -> None:
    """Create the PostgreSQL database named in DATABASE_URL when it is missing."""
    db_url = os.environ.get("DATABASE_URL")
    if not db_url or os.environ.get("USE_SQLITE", "").strip().lower() in {"1", "true", "yes", "on"}:
        return
    config = dj_database_url.parse(db_url)
    target_db = config.get("NAME")
    if "postgresql" not in (config.get("ENGINE") or "") or not target_db:
        return

    params = {
        key: config[source]
        for key, source in (("host", "HOST"), ("port", "PORT"), ("user", "USER"), ("password", "PASSWORD"))
        if config.get(source)
    }
    try:
        with psycopg.connect(dbname="postgres", autocommit=True, **params) as conn:
            if conn.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,)).fetchone():
                return
            conn.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
            print(f"Created missing database '{target_db}'.")
    except psycopg.Error as exc:
        print(f"Warning: unable to ensure database '{target_db}' exists ({exc}).", file=sys.stderr)


def _default_runserver_address() -> None:
    # runserver without an address binds DJANGO_HOST:DJANGO_PORT (default 0.0.0.0:8788)
    if len(sys.argv) < 2 or sys.argv[1] != "runserver":
        return
    if any(not arg.startswith("-") for arg in sys.argv[2:]):
        return
    host = os.environ.get("DJANGO_HOST", "0.0.0.0")
    port = os.environ.get("DJANGO_PORT", "8788")
    sys.argv.append(f"{host}:{port}")


def main() -> None:
    """Run administrative tasks."""
    load_dotenv()
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings")

    _ensure_postgres_database()
    _default_runserver_address()
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
