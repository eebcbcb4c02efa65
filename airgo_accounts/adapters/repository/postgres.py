"""
PostgreSQL repository adapter - Implements IdentityRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Uniqueness
----------
email, phone and cnic_number carry UNIQUE constraints. ``insert_identity``
is a single INSERT; a UniqueViolation is translated into a ConflictError
naming the field, so two concurrent registrations for the same value can
never both succeed regardless of what the advisory pre-check saw.

Ownership
---------
Every address statement is scoped by ``identity_id`` as well as the
address id, so an id belonging to another account matches no row.
Addresses reference their identity with ON DELETE CASCADE.
"""

import logging
import uuid
from collections import defaultdict
from pathlib import Path

from psycopg import errors
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from airgo_accounts.domain.exceptions import ConflictError, ErrorKind
from airgo_accounts.domain.models import Address, Identity, NewIdentity

logger = logging.getLogger(__name__)

UNIQUE_FIELDS = ("email", "phone", "cnic_number")

_CONSTRAINT_FIELDS = {
    "identities_email_key": "email",
    "identities_phone_key": "phone",
    "identities_cnic_number_key": "cnic_number",
}

_IDENTITY_COLUMNS = """
    id, full_name, father_name, email, password_hash, cnic_number, cnic_image,
    country_code, phone, country, city, dob, education_level, created_at, updated_at
"""


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def _to_address(row: dict) -> Address:
    return Address(id=str(row["id"]), label=row["label"], address=row["address"])


class PostgresIdentityRepository:
    """
    Implements IdentityRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def _fetch_addresses(self, cursor, identity_id: str) -> list[Address]:
        cursor.execute(
            "SELECT id, label, address FROM addresses WHERE identity_id = %s ORDER BY position",
            (identity_id,),
        )
        return [_to_address(row) for row in cursor.fetchall()]

    def _fetch_identity(self, where: str, value: str) -> Identity | None:
        sql = f"SELECT {_IDENTITY_COLUMNS} FROM identities WHERE {where} = %s"
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, (value,))
            row = cursor.fetchone()
            if row is None:
                return None
            row["id"] = str(row["id"])
            row["addresses"] = self._fetch_addresses(cursor, row["id"])
        return Identity(**row)

    def find_by_email(self, email: str) -> Identity | None:
        return self._fetch_identity("email", email)

    def find_by_id(self, identity_id: str) -> Identity | None:
        if not _is_uuid(identity_id):
            return None
        return self._fetch_identity("id", identity_id)

    def list_identities(self) -> list[Identity]:
        """All identities, newest first, each with its addresses."""
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(
                f"SELECT {_IDENTITY_COLUMNS} FROM identities ORDER BY created_at DESC, id"
            )
            rows = cursor.fetchall()
            cursor.execute(
                "SELECT id, identity_id, label, address FROM addresses ORDER BY position"
            )
            addresses: dict[str, list[Address]] = defaultdict(list)
            for row in cursor.fetchall():
                addresses[str(row["identity_id"])].append(_to_address(row))

        identities = []
        for row in rows:
            row["id"] = str(row["id"])
            row["addresses"] = addresses.get(row["id"], [])
            identities.append(Identity(**row))
        return identities

    def exists_with(self, field: str, value: str) -> bool:
        if field not in UNIQUE_FIELDS:
            raise ValueError(f"Not a unique identity field: {field}")
        sql = f"SELECT 1 FROM identities WHERE {field} = %s"
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (value,))
            return cursor.fetchone() is not None

    def insert_identity(self, identity: NewIdentity) -> str:
        """
        Insert a new identity in one statement.

        Raises:
            ConflictError: DUPLICATE_EMAIL for the email constraint,
                DUPLICATE_FIELD (with ``field``) for phone or CNIC
        """
        sql = """
            INSERT INTO identities (
                full_name, father_name, email, password_hash, cnic_number, cnic_image,
                country_code, phone, country, city, dob, education_level
            )
            VALUES (
                %(full_name)s, %(father_name)s, %(email)s, %(password_hash)s,
                %(cnic_number)s, %(cnic_image)s, %(country_code)s, %(phone)s,
                %(country)s, %(city)s, %(dob)s, %(education_level)s
            )
            RETURNING id
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, vars(identity))
                identity_id = cursor.fetchone()[0]
                conn.commit()
        except errors.UniqueViolation as e:
            field = _CONSTRAINT_FIELDS.get(e.diag.constraint_name or "", "unknown")
            logger.info("Insert rejected by unique constraint on %s", field)
            if field == "email":
                raise ConflictError(
                    ErrorKind.DUPLICATE_EMAIL, "Email already registered", field="email"
                ) from None
            raise ConflictError(
                ErrorKind.DUPLICATE_FIELD, f"This {field} is already registered", field=field
            ) from None
        return str(identity_id)

    def update_password_hash(self, identity_id: str, password_hash: str) -> bool:
        if not _is_uuid(identity_id):
            return False
        sql = """
            UPDATE identities
            SET password_hash = %s, updated_at = NOW()
            WHERE id = %s
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (password_hash, identity_id))
            conn.commit()
            return cursor.rowcount == 1

    def delete_identity(self, identity_id: str) -> bool:
        if not _is_uuid(identity_id):
            return False
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM identities WHERE id = %s", (identity_id,))
            conn.commit()
            return cursor.rowcount == 1

    def list_addresses(self, identity_id: str) -> list[Address] | None:
        if not _is_uuid(identity_id):
            return None
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute("SELECT 1 FROM identities WHERE id = %s", (identity_id,))
            if cursor.fetchone() is None:
                return None
            return self._fetch_addresses(cursor, identity_id)

    def add_address(self, identity_id: str, label: str, address: str) -> list[Address] | None:
        if not _is_uuid(identity_id):
            return None
        insert_sql = """
            INSERT INTO addresses (identity_id, label, address)
            VALUES (%s, %s, %s)
        """
        touch_sql = "UPDATE identities SET updated_at = NOW() WHERE id = %s"
        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(insert_sql, (identity_id, label, address))
                cursor.execute(touch_sql, (identity_id,))
                addresses = self._fetch_addresses(cursor, identity_id)
                conn.commit()
        except errors.ForeignKeyViolation:
            return None
        return addresses

    def update_address(
        self, identity_id: str, address_id: str, label: str | None, address: str | None
    ) -> bool:
        if not (_is_uuid(identity_id) and _is_uuid(address_id)):
            return False
        sql = """
            UPDATE addresses
            SET label = COALESCE(%s, label),
                address = COALESCE(%s, address)
            WHERE id = %s AND identity_id = %s
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (label, address, address_id, identity_id))
            updated = cursor.rowcount == 1
            if updated:
                cursor.execute(
                    "UPDATE identities SET updated_at = NOW() WHERE id = %s", (identity_id,)
                )
            conn.commit()
            return updated

    def remove_address(self, identity_id: str, address_id: str) -> bool:
        if not (_is_uuid(identity_id) and _is_uuid(address_id)):
            return False
        sql = "DELETE FROM addresses WHERE id = %s AND identity_id = %s"
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (address_id, identity_id))
            removed = cursor.rowcount == 1
            if removed:
                cursor.execute(
                    "UPDATE identities SET updated_at = NOW() WHERE id = %s", (identity_id,)
                )
            conn.commit()
            return removed


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: airgo_accounts/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)
                conn.commit()

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
