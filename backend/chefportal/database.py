import sqlite3
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from chefportal.config import settings


class Base(DeclarativeBase):
    pass


def _set_sqlite_pragmas(dbapi_conn, connection_record):
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
    event.listen(engine, "connect", _set_sqlite_pragmas)
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
-- PORTAL CONFIGURATION (admin credentials, schema version)
-- ============================================================
CREATE TABLE IF NOT EXISTS portal_config (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

-- ============================================================
-- AUTH THROTTLE
-- ============================================================
CREATE TABLE IF NOT EXISTS auth_throttle (
    key             TEXT PRIMARY KEY,
    failed_attempts INTEGER NOT NULL,
    last_failed_at  REAL NOT NULL
);

-- ============================================================
-- USERS
-- ============================================================
CREATE TABLE IF NOT EXISTS users (
    id               TEXT PRIMARY KEY,
    email            TEXT UNIQUE,
    uid              TEXT UNIQUE,
    display_name     TEXT,
    first_name       TEXT,
    last_name        TEXT,
    phone            TEXT,
    docket_completed INTEGER NOT NULL DEFAULT 0,
    archived         INTEGER NOT NULL DEFAULT 0,
    archived_at      TEXT,
    archived_reason  TEXT,
    created_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_users_archived ON users(archived);
CREATE INDEX IF NOT EXISTS idx_users_created ON users(created_at);

-- ============================================================
-- DOCKETS
-- ============================================================
CREATE TABLE IF NOT EXISTS dockets (
    id                    TEXT PRIMARY KEY,
    user_id               TEXT NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
    passport_front_url    TEXT,
    passport_last_url     TEXT,
    passport_visa_urls    TEXT NOT NULL DEFAULT '[]',
    passport_photo_url    TEXT,
    resume_url            TEXT,
    education_files       TEXT NOT NULL DEFAULT '[]',
    experience_files      TEXT NOT NULL DEFAULT '[]',
    offer_letter_url      TEXT,
    permanent_address_url TEXT,
    current_address_url   TEXT,
    other_certifications  TEXT NOT NULL DEFAULT '[]',
    "references"          TEXT NOT NULL DEFAULT '[]',
    last_updated          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

-- ============================================================
-- CONTRACTS
-- ============================================================
CREATE TABLE IF NOT EXISTS contracts (
    id                               TEXT PRIMARY KEY,
    user_id                          TEXT NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
    company_contract_original_url    TEXT,
    company_contract_signed_url      TEXT,
    company_contract_status          TEXT NOT NULL DEFAULT 'not-started',
    company_contract_signature_valid INTEGER,
    job_offer_original_url           TEXT,
    job_offer_signed_url             TEXT,
    job_offer_status                 TEXT NOT NULL DEFAULT 'not-started',
    job_offer_signature_valid        INTEGER,
    notes                            TEXT,
    created_at                       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    last_updated                     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

-- ============================================================
-- WORK PERMITS
-- ============================================================
CREATE TABLE IF NOT EXISTS work_permits (
    id               TEXT PRIMARY KEY,
    user_id          TEXT NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
    status           TEXT NOT NULL DEFAULT 'preparation',
    tracking_code    TEXT,
    application_date TEXT,
    final_docket_url TEXT,
    notes            TEXT,
    created_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    last_updated     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_work_permits_status ON work_permits(status);

-- ============================================================
-- OTP SESSIONS
-- ============================================================
CREATE TABLE IF NOT EXISTS otp_sessions (
    id         TEXT PRIMARY KEY,
    email      TEXT NOT NULL,
    code_hash  TEXT NOT NULL,
    expires_at TEXT NOT NULL,
    verified   INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_otp_email ON otp_sessions(email);

-- ============================================================
-- AUDIT LOG
-- ============================================================
CREATE TABLE IF NOT EXISTS audit_logs (
    id          TEXT PRIMARY KEY,
    action      TEXT NOT NULL,
    entity_type TEXT NOT NULL,
    entity_id   TEXT,
    user_id     TEXT,
    admin_email TEXT,
    description TEXT,
    severity    TEXT NOT NULL DEFAULT 'info'
                CHECK(severity IN ('info','warning','error','critical')),
    metadata    TEXT,
    created_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_audit_action ON audit_logs(action);
CREATE INDEX IF NOT EXISTS idx_audit_entity ON audit_logs(entity_type);
CREATE INDEX IF NOT EXISTS idx_audit_user ON audit_logs(user_id);
CREATE INDEX IF NOT EXISTS idx_audit_created ON audit_logs(created_at);
"""


MIGRATIONS = [
    # v0.2: visa page scans on the docket
    "ALTER TABLE dockets ADD COLUMN passport_visa_urls TEXT NOT NULL DEFAULT '[]'",
    # v0.3: signature check results on contracts
    "ALTER TABLE contracts ADD COLUMN company_contract_signature_valid INTEGER",
    "ALTER TABLE contracts ADD COLUMN job_offer_signature_valid INTEGER",
]


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA_SQL)
    # Run migrations idempotently (ALTER TABLE fails if the column exists)
    for migration in MIGRATIONS:
        try:
            conn.execute(migration)
            conn.commit()
        except sqlite3.OperationalError:
            pass  # already applied
    conn.close()
