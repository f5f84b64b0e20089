"""Initial schema.

Creates devices, accounts, account_devices, photos, pending_photos, quests,
reward_tiers and global_progress (seeded with its single row).

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Identity ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS devices (
            id SERIAL PRIMARY KEY,
            token VARCHAR(64) UNIQUE NOT NULL,
            can_upload BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS accounts (
            id SERIAL PRIMARY KEY,
            username VARCHAR(50) UNIQUE NOT NULL,
            password_hash TEXT NOT NULL,
            is_admin BOOLEAN NOT NULL DEFAULT false,
            avatar_url TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS account_devices (
            id SERIAL PRIMARY KEY,
            account_id INTEGER NOT NULL REFERENCES accounts(id) ON DELETE CASCADE,
            device_id INTEGER NOT NULL REFERENCES devices(id) ON DELETE CASCADE,
            bound_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_account_devices_pair UNIQUE (account_id, device_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_account_devices_device
        ON account_devices(device_id)
    """)

    # --- Photos ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS photos (
            id SERIAL PRIMARY KEY,
            blob_id VARCHAR(255) NOT NULL,
            url TEXT NOT NULL,
            account_id INTEGER REFERENCES accounts(id) ON DELETE CASCADE,
            taken_at TIMESTAMPTZ,
            uploaded_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_photos_feed_order
        ON photos((COALESCE(taken_at, uploaded_at)) DESC)
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS pending_photos (
            id SERIAL PRIMARY KEY,
            blob_id VARCHAR(255) NOT NULL,
            url TEXT NOT NULL,
            account_id INTEGER REFERENCES accounts(id) ON DELETE CASCADE,
            device_token VARCHAR(64) NOT NULL,
            quest_id INTEGER,
            taken_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- Quests & rewards ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS quests (
            id SERIAL PRIMARY KEY,
            title VARCHAR(120) NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            type VARCHAR(16) NOT NULL CHECK (type IN ('daily', 'special', 'weekly')),
            points INTEGER NOT NULL DEFAULT 0,
            start_at DATE,
            end_at DATE,
            active BOOLEAN NOT NULL DEFAULT true,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS reward_tiers (
            id SERIAL PRIMARY KEY,
            points_required INTEGER NOT NULL,
            description VARCHAR(255) NOT NULL DEFAULT '',
            icon_url TEXT
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS global_progress (
            id INTEGER PRIMARY KEY,
            total_points INTEGER NOT NULL DEFAULT 0,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        INSERT INTO global_progress (id, total_points)
        VALUES (1, 0)
        ON CONFLICT (id) DO NOTHING
    """)


def downgrade() -> None:
    for table in [
        "global_progress",
        "reward_tiers",
        "quests",
        "pending_photos",
        "photos",
        "account_devices",
        "accounts",
        "devices",
    ]:
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE")  # noqa: S608
