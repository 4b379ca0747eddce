"""Tenants, context tree, users, capabilities and config tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── 1. Tenants ────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE tenants (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            idnumber VARCHAR(100) NOT NULL,
            categoryid INTEGER,
            archived BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_tenants_idnumber UNIQUE (idnumber)
        );
    """)
    op.execute("CREATE INDEX ix_tenants_categoryid ON tenants (categoryid);")

    # ── 2. Context tree ───────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE context (
            id SERIAL PRIMARY KEY,
            contextlevel SMALLINT NOT NULL,
            instanceid INTEGER NOT NULL,
            path VARCHAR(255),
            depth SMALLINT NOT NULL DEFAULT 0,
            tenantid INTEGER,
            CONSTRAINT uq_context_level_instance UNIQUE (contextlevel, instanceid)
        );
    """)
    op.execute("CREATE INDEX ix_context_path ON context (path);")
    op.execute("CREATE INDEX ix_context_tenantid ON context (tenantid);")

    # ── 3. Users ──────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE users (
            id SERIAL PRIMARY KEY,
            username VARCHAR(100) NOT NULL,
            tenantid INTEGER REFERENCES tenants(id) ON DELETE SET NULL,
            suspended BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_users_username UNIQUE (username)
        );
    """)
    op.execute("CREATE INDEX ix_users_tenantid ON users (tenantid);")

    # ── 4. Capabilities ───────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE capabilities (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            contextlevel SMALLINT NOT NULL,
            component VARCHAR(100) NOT NULL,
            CONSTRAINT uq_capabilities_name UNIQUE (name)
        );
    """)
    op.execute("CREATE INDEX ix_capabilities_contextlevel ON capabilities (contextlevel);")

    # ── 5. Global and tenant configuration ────────────────────────────────
    op.execute("""
        CREATE TABLE config_settings (
            id SERIAL PRIMARY KEY,
            plugin VARCHAR(100) NOT NULL,
            name VARCHAR(100) NOT NULL,
            value TEXT,
            CONSTRAINT uq_config_settings_plugin_name UNIQUE (plugin, name)
        );
    """)
    op.execute("""
        CREATE TABLE tenant_config_overrides (
            id SERIAL PRIMARY KEY,
            tenantid INTEGER NOT NULL REFERENCES tenants(id) ON DELETE CASCADE,
            plugin VARCHAR(100) NOT NULL,
            name VARCHAR(100) NOT NULL,
            value TEXT,
            CONSTRAINT uq_tenant_config_overrides UNIQUE (tenantid, plugin, name)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS tenant_config_overrides;")
    op.execute("DROP TABLE IF EXISTS config_settings;")
    op.execute("DROP TABLE IF EXISTS capabilities;")
    op.execute("DROP TABLE IF EXISTS users;")
    op.execute("DROP TABLE IF EXISTS context;")
    op.execute("DROP TABLE IF EXISTS tenants;")
