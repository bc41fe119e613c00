import os
import uuid
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest
from psycopg.rows import dict_row

from taxdocs.config.settings import Settings
from taxdocs.database.connection import close_pool, get_connection, init_pool

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT UNIQUE NOT NULL,
    name TEXT
);
CREATE TABLE IF NOT EXISTS tax_returns (
    id TEXT PRIMARY KEY,
    user_id TEXT REFERENCES users(id)
);
CREATE TABLE IF NOT EXISTS documents (
    id TEXT PRIMARY KEY,
    tax_return_id TEXT REFERENCES tax_returns(id),
    user_id TEXT REFERENCES users(id),
    file_path TEXT,
    file_name TEXT,
    mime_type TEXT,
    document_type TEXT,
    processing_status TEXT NOT NULL DEFAULT 'PENDING',
    extracted_data JSONB,
    ocr_text TEXT,
    processed_at TIMESTAMPTZ,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "taxfiling_test")
    return Settings(completion_provider="example", google_cloud_project_id="")


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(_SCHEMA)
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(
    integration_pool: None,
) -> Generator[list[tuple[str, str]], None, None]:
    cleanup: list[tuple[str, str]] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for table in ("documents", "tax_returns", "users"):
                for kind, row_id in cleanup:
                    if kind == table:
                        cur.execute(f"DELETE FROM {table} WHERE id = %s", (row_id,))
        conn.commit()


@pytest.fixture
def seed_user(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[tuple[str, str]],
) -> str:
    user_id = str(uuid.uuid4())
    db_conn.execute(
        "INSERT INTO users (id, email, name) VALUES (%s, %s, %s)",
        (user_id, f"{user_id}@example.com", "Jane Doe"),
    )
    db_conn.commit()
    integration_cleanup.append(("users", user_id))
    return user_id


@pytest.fixture
def seed_tax_return(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[tuple[str, str]],
    seed_user: str,
) -> str:
    return_id = str(uuid.uuid4())
    db_conn.execute(
        "INSERT INTO tax_returns (id, user_id) VALUES (%s, %s)",
        (return_id, seed_user),
    )
    db_conn.commit()
    integration_cleanup.append(("tax_returns", return_id))
    return return_id


@pytest.fixture
def seed_document(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[tuple[str, str]],
    seed_tax_return: str,
) -> str:
    document_id = str(uuid.uuid4())
    db_conn.execute(
        """
        INSERT INTO documents
        (id, tax_return_id, user_id, file_path, file_name, mime_type, document_type)
        VALUES (%s, %s, NULL, %s, %s, %s, %s)
        """,
        (
            document_id,
            seed_tax_return,
            f"{document_id}.pdf",
            "w2.pdf",
            "application/pdf",
            "W2",
        ),
    )
    db_conn.commit()
    integration_cleanup.append(("documents", document_id))
    return document_id


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def sample_pdf_on_disk(
    seed_document: str,
    files_root: Path,
    w2_pdf_bytes: bytes,
) -> tuple[str, Path]:
    (files_root / f"{seed_document}.pdf").write_bytes(w2_pdf_bytes)
    return seed_document, files_root


@pytest.fixture
def document_row(integration_pool: None) -> Callable[[str], dict[str, Any] | None]:
    """Read a documents row back, processing columns included."""

    def fetch(document_id: str) -> dict[str, Any] | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute("SELECT * FROM documents WHERE id = %s", (document_id,))
                return cur.fetchone()

    return fetch
