"""Migration m004: KPI definitions and per-employee KPI records."""

from typing import Any


def up(conn: Any) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS kpis (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            company_id UUID,
            department_id UUID,
            name VARCHAR NOT NULL,
            description TEXT,
            target DOUBLE,
            unit VARCHAR,
            frequency VARCHAR DEFAULT 'monthly',
            category VARCHAR,
            reward_amount DOUBLE,
            penalty_amount DOUBLE,
            is_active BOOLEAN DEFAULT TRUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS kpi_records (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            kpi_id UUID NOT NULL,
            employee_id UUID NOT NULL,
            period VARCHAR NOT NULL,
            target DOUBLE,
            actual DOUBLE,
            progress DOUBLE DEFAULT 0,
            status VARCHAR DEFAULT 'not_started',
            start_date DATE,
            end_date DATE,
            submission_date TIMESTAMP,
            approval_date TIMESTAMP,
            submission_details TEXT,
            feedback TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.execute("CREATE INDEX IF NOT EXISTS idx_kpi_records_employee ON kpi_records(employee_id, status)")


def down(conn: Any) -> None:
    conn.execute("DROP INDEX IF EXISTS idx_kpi_records_employee")
    conn.execute("DROP TABLE IF EXISTS kpi_records")
    conn.execute("DROP TABLE IF EXISTS kpis")
