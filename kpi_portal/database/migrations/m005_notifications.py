"""Migration m005: Add notifications table for in-app notification system.

`user_id` holds either an employee id or the broadcast value 'all'.
"""

from typing import Any


def up(conn: Any) -> None:
    conn.execute("""
        CREATE SEQUENCE IF NOT EXISTS notifications_id_seq START 1
    """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS notifications (
            id INTEGER PRIMARY KEY DEFAULT nextval('notifications_id_seq'),
            user_id VARCHAR NOT NULL,
            type VARCHAR NOT NULL,
            priority VARCHAR DEFAULT 'medium',
            title VARCHAR NOT NULL,
            message TEXT,
            read BOOLEAN DEFAULT FALSE,
            action VARCHAR,
            action_url VARCHAR,
            metadata VARCHAR,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.execute("CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id, read)")


def down(conn: Any) -> None:
    conn.execute("DROP INDEX IF EXISTS idx_notifications_user")
    conn.execute("DROP TABLE IF EXISTS notifications")
    conn.execute("DROP SEQUENCE IF EXISTS notifications_id_seq")
