"""Migration m002: roles and departments, both scoped to a company."""

from typing import Any


def up(conn: Any) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS roles (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            company_id UUID,
            name VARCHAR NOT NULL,
            code VARCHAR NOT NULL,
            description TEXT,
            level INTEGER DEFAULT 1,
            permissions VARCHAR,
            is_active BOOLEAN DEFAULT TRUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (company_id, code)
        )
    """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS departments (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            company_id UUID,
            name VARCHAR NOT NULL,
            code VARCHAR NOT NULL,
            description TEXT,
            manager_id UUID,
            is_active BOOLEAN DEFAULT TRUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (company_id, code)
        )
    """)


def down(conn: Any) -> None:
    conn.execute("DROP TABLE IF EXISTS departments")
    conn.execute("DROP TABLE IF EXISTS roles")
