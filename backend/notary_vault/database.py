import sqlite3
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from notary_vault.config import settings


class Base(DeclarativeBase):
    pass


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _configure_sqlite(dbapi_conn, connection_record):
    # Built-in lower() only folds ASCII; case-insensitive LIKE goes through it.
    dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(db_path: Path | None = None):
    path = db_path or settings.db_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _configure_sqlite)
    return engine


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


SCHEMA_SQL = """\
-- ============================================================
-- CUSTOMERS
-- ============================================================
CREATE TABLE IF NOT EXISTS customers (
    id                           TEXT PRIMARY KEY,
    full_name                    TEXT NOT NULL,
    address                      TEXT,
    phone                        TEXT,
    email                        TEXT,
    customer_kind                TEXT NOT NULL DEFAULT 'Individual'
                                 CHECK(customer_kind IN ('Individual','Business')),
    document_id                  TEXT,
    passport_id                  TEXT,
    business_registration_number TEXT,
    business_name                TEXT,
    created_at                   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at                   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE UNIQUE INDEX IF NOT EXISTS uq_customers_document_id ON customers(document_id);
CREATE UNIQUE INDEX IF NOT EXISTS uq_customers_passport_id ON customers(passport_id);
CREATE UNIQUE INDEX IF NOT EXISTS uq_customers_business_reg
    ON customers(business_registration_number);
CREATE INDEX IF NOT EXISTS idx_customers_full_name ON customers(full_name);

-- ============================================================
-- DOCUMENTS
-- ============================================================
CREATE TABLE IF NOT EXISTS documents (
    id               TEXT PRIMARY KEY,
    transaction_code TEXT NOT NULL UNIQUE,
    secretary        TEXT,
    notary_public    TEXT,
    document_type    TEXT,
    description      TEXT,
    created_date     TEXT NOT NULL,
    created_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_documents_created_date ON documents(created_date);

-- ============================================================
-- PARTY / DOCUMENT LINKS
-- ============================================================
CREATE TABLE IF NOT EXISTS party_document_links (
    document_id      TEXT NOT NULL REFERENCES documents(id) ON DELETE CASCADE,
    customer_id      TEXT NOT NULL REFERENCES customers(id),
    party_role       TEXT NOT NULL CHECK(party_role IN ('PartyA','PartyB','Witness')),
    signature_status TEXT NOT NULL DEFAULT 'Pending'
                     CHECK(signature_status IN ('Pending','Signed','Rejected')),
    notary_date      TEXT NOT NULL,
    created_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    PRIMARY KEY (document_id, customer_id)
);

CREATE INDEX IF NOT EXISTS idx_links_customer ON party_document_links(customer_id);
CREATE INDEX IF NOT EXISTS idx_links_notary_date ON party_document_links(notary_date);

-- ============================================================
-- DOCUMENT FILES
-- ============================================================
CREATE TABLE IF NOT EXISTS document_files (
    id           TEXT PRIMARY KEY,
    document_id  TEXT NOT NULL REFERENCES documents(id) ON DELETE CASCADE,
    file_name    TEXT NOT NULL,
    file_size    INTEGER NOT NULL,
    content_type TEXT NOT NULL,
    bucket       TEXT NOT NULL,
    storage_key  TEXT NOT NULL,
    sha256_hash  TEXT NOT NULL,
    created_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_files_document ON document_files(document_id);
CREATE INDEX IF NOT EXISTS idx_files_hash ON document_files(sha256_hash);
CREATE UNIQUE INDEX IF NOT EXISTS uq_files_storage_key ON document_files(storage_key);
"""


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA_SQL)
    conn.close()


def check_integrity(db_path: Path | None = None) -> str:
    path = db_path or settings.db_path
    conn = sqlite3.connect(str(path))
    try:
        result = conn.execute("PRAGMA integrity_check").fetchone()
    finally:
        conn.close()
    return result[0] if result else "unknown"
