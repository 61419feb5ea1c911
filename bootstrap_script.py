'''
Apply the SQL migrations under ``migrations/`` to the Postgres database
behind Supabase.

Each migration runs in its own transaction and is recorded in the
``schema_migrations`` table so reruns only apply what is new.
'''
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable, Sequence
from urllib.parse import quote_plus

from dotenv import load_dotenv
import psycopg
from psycopg import Connection


LOGGER = logging.getLogger(__name__)
MIGRATIONS_DIR = Path(__file__).with_name("migrations")
CONNECTION_VARIABLES = ("user", "password", "host", "port", "dbname")


def load_configuration() -> str:
    """Build a Postgres DSN from environment variables.

    ``DATABASE_URL`` wins when it is set. Otherwise the .env file is expected
    to define ``user``, ``password``, ``host``, ``port`` and ``dbname``.

    Returns:
        A Postgres connection URL (DSN) string, normalized for psycopg.

    Raises:
        RuntimeError: If neither form of configuration is complete.
    """

    load_dotenv()
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return build_conninfo(database_url)

    values = {name: os.getenv(name) for name in CONNECTION_VARIABLES}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise RuntimeError(
            "Set DATABASE_URL or all of 'user', 'password', 'host', 'port', 'dbname' "
            f"(missing: {', '.join(missing)})."
        )

    return (
        f"postgresql://{quote_plus(values['user'])}:{quote_plus(values['password'])}"
        f"@{values['host']}:{values['port']}/{values['dbname']}"
    )


def build_conninfo(db_url: str) -> str:
    """Rewrite the legacy ``postgres://`` scheme that psycopg rejects."""

    if db_url.startswith("postgres://"):
        return "postgresql://" + db_url[len("postgres://"):]
    return db_url


def ensure_schema_migrations_table(connection: Connection[Any]) -> None:
    connection.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_id TEXT PRIMARY KEY,
            applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );
        """
    )


def fetch_applied_migrations(connection: Connection[Any]) -> set[str]:
    rows = connection.execute("SELECT migration_id FROM schema_migrations;")
    return {row[0] for row in rows}


def discover_migrations(directory: Path) -> Sequence[Path]:
    """Return the ``*.sql`` files of directory, ordered by filename."""

    return sorted(directory.glob("*.sql"), key=lambda path: path.name)


def run_migration(connection: Connection[Any], migration_path: Path) -> bool:
    """Execute one migration and record it, inside a single transaction.

    Returns:
        False when the file is empty and nothing was run.
    """

    sql = migration_path.read_text(encoding="utf-8").strip()
    if not sql:
        LOGGER.info("Skipping empty migration %s", migration_path.name)
        return False

    with connection.transaction():
        connection.execute(sql)  # type: ignore
        connection.execute(
            "INSERT INTO schema_migrations (migration_id) VALUES (%s) "
            "ON CONFLICT (migration_id) DO NOTHING;",
            (migration_path.name,),
        )
    return True


def apply_pending_migrations(connection: Connection[Any], migrations: Iterable[Path]) -> list[str]:
    """Apply the migrations that have not run yet.

    Args:
        connection: Active Postgres connection.
        migrations: Migration files, already in the order they must run.

    Returns:
        Filenames of the migrations applied by this call.

    Raises:
        RuntimeError: When a migration fails; later migrations are not attempted.
    """

    ensure_schema_migrations_table(connection)
    applied = fetch_applied_migrations(connection)
    newly_applied: list[str] = []
    for migration in migrations:
        if migration.name in applied:
            LOGGER.debug("Migration %s already applied", migration.name)
            continue
        LOGGER.info("Applying migration %s", migration.name)
        try:
            ran = run_migration(connection, migration)
        except psycopg.Error as exc:
            LOGGER.error("Failed to apply migration %s: %s", migration.name, exc)
            raise RuntimeError(f"Migration {migration.name} failed") from exc
        if ran:
            newly_applied.append(migration.name)
    return newly_applied


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    conninfo = load_configuration()
    migrations = discover_migrations(MIGRATIONS_DIR)
    if not migrations:
        LOGGER.info("No migrations found under %s", MIGRATIONS_DIR)
        return

    LOGGER.info("Connecting to the hotel inventory database.")
    with psycopg.connect(conninfo) as connection:
        applied = apply_pending_migrations(connection, migrations)
        if applied:
            LOGGER.info("Applied migrations: %s", ", ".join(applied))
        else:
            LOGGER.info("Database schema already up to date.")


if __name__ == "__main__":
    main()
