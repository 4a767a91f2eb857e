"""Migration m003: employees table."""

from typing import Any


def up(conn: Any) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS employees (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            company_id UUID,
            department_id UUID,
            role_id UUID,
            employee_code VARCHAR NOT NULL UNIQUE,
            name VARCHAR NOT NULL,
            email VARCHAR UNIQUE,
            phone VARCHAR,
            position VARCHAR,
            status VARCHAR DEFAULT 'active',
            hire_date DATE,
            is_active BOOLEAN DEFAULT TRUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.execute("CREATE INDEX IF NOT EXISTS idx_employees_department ON employees(department_id)")


def down(conn: Any) -> None:
    conn.execute("DROP INDEX IF EXISTS idx_employees_department")
    conn.execute("DROP TABLE IF EXISTS employees")
