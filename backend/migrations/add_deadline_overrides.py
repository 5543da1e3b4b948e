"""
Migration: Add deadline override and appeal linkage columns.

Adds to existing databases:
1. osld_events.accomplishment_deadline_override / liquidation_deadline_override
   - replacement due dates set when an appeal is approved
2. submissions.event_id / report_kind / storage_key
   - ties a Letter of Appeal to the deadline it contests

Safe to run more than once; existing columns are skipped.
"""
from sqlalchemy import create_engine, text
import os

# Use same DB URL pattern as main app
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{os.getenv('USER', 'postgres')}@localhost:5432/org_portal"
)

COLUMNS = [
    ("osld_events", "accomplishment_deadline_override", "DATE"),
    ("osld_events", "liquidation_deadline_override", "DATE"),
    ("submissions", "event_id", "VARCHAR(36)"),
    ("submissions", "report_kind", "VARCHAR(20)"),
    ("submissions", "storage_key", "VARCHAR(500)"),
]


def column_exists(conn, table_name: str, column_name: str) -> bool:
    """Check if a column exists in the database."""
    result = conn.execute(text("""
        SELECT EXISTS (
            SELECT FROM information_schema.columns
            WHERE table_name = :table_name AND column_name = :column_name
        )
    """), {"table_name": table_name, "column_name": column_name})
    return result.fetchone()[0]


def run_migration():
    """Add override and appeal linkage columns."""
    engine = create_engine(DATABASE_URL)

    with engine.connect() as conn:
        for table_name, column_name, column_type in COLUMNS:
            if column_exists(conn, table_name, column_name):
                print(f"{table_name}.{column_name} already exists")
                continue
            conn.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_type}"))
            print(f"Added {table_name}.{column_name}")

        conn.execute(text("""
            CREATE INDEX IF NOT EXISTS ix_submissions_event_id ON submissions(event_id)
        """))

        conn.commit()
        print("\nDeadline override migration completed successfully!")


if __name__ == "__main__":
    run_migration()
