"""Migration m001: companies table, home of the default organisation record."""

from typing import Any


def up(conn: Any) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS companies (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            name VARCHAR NOT NULL,
            code VARCHAR NOT NULL UNIQUE,
            description TEXT,
            email VARCHAR,
            phone VARCHAR,
            address TEXT,
            is_active BOOLEAN DEFAULT TRUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)


def down(conn: Any) -> None:
    conn.execute("DROP TABLE IF EXISTS companies")
