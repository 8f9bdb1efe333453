"""
Database initialization script.

Run this to create the database tables:
    python -m casedesk.db.init_db
"""

from casedesk.db.database import init_db, DATABASE_URL

if __name__ == "__main__":
    print("Initializing database...")
    init_db()
    print(f"Database initialized at: {DATABASE_URL}")
