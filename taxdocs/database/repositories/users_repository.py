from psycopg.rows import dict_row

from taxdocs.database.connection import get_connection
from taxdocs.database.models import UserRecord


class UsersRepository:
    """Database operations for the users table."""

    def find_by_email(self, email: str) -> UserRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    "SELECT id, email, name FROM users WHERE email = %s",
                    (email,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return UserRecord(id=str(row["id"]), email=row["email"], name=row["name"])

    def find_by_id(self, user_id: str) -> UserRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    "SELECT id, email, name FROM users WHERE id = %s",
                    (user_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return UserRecord(id=str(row["id"]), email=row["email"], name=row["name"])
