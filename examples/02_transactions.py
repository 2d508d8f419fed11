"""
Example 02: Transactions

This example demonstrates explicit transaction control and the transaction
context manager with automatic rollback on errors.
"""

import tempfile
from pathlib import Path

from row_link import ConnectionConfig, IsolationLevel, RowLinkError, connect


def count_users(conn):
    with conn.query("SELECT COUNT(*) FROM users") as cursor:
        cursor.advance()
        return cursor.get_int(0)


def main():
    # Set up database
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    config = ConnectionConfig(
        driver="sqlite",
        database=db_path,
        isolation_level=IsolationLevel.SERIALIZABLE,
    )

    with connect(config) as conn:
        conn.execute("""
            CREATE TABLE users (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE
            )
        """)
        conn.execute("""
            CREATE TABLE audit_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                action TEXT NOT NULL,
                timestamp DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        """)

        print("=== Transaction Management ===\n")

        # Example 1: Explicit begin/commit
        print("1. Explicit begin and commit:")
        conn.begin_transaction()
        conn.execute("INSERT INTO users (name, email) VALUES (?, ?)", ["Alice", "alice@example.com"])
        conn.execute("INSERT INTO audit_log (action) VALUES (?)", ["user_created"])
        conn.commit_transaction()
        print(f"   Users after commit: {count_users(conn)}\n")

        # Example 2: Protocol violations are reported, not sent to the engine
        print("2. Commit without an active transaction:")
        result = conn.try_commit_transaction()
        print(f"   {result.error.kind.value}: {result.error}\n")

        # Example 3: Context manager with rollback on error
        print("3. Transaction with error (automatic rollback):")
        try:
            with conn.transaction() as tx:
                tx.execute("INSERT INTO users (name, email) VALUES (?, ?)", ["Bob", "bob@example.com"])
                # This will fail due to duplicate email
                tx.try_execute(
                    "INSERT INTO users (name, email) VALUES (?, ?)",
                    ["Charlie", "alice@example.com"],
                ).unwrap()
        except RowLinkError as e:
            print(f"   Error occurred: {type(e).__name__}")
            print("   Transaction was rolled back automatically\n")

        print(f"   Users after rollback: {count_users(conn)} (Bob was not added)\n")

        # Example 4: Multiple operations in one transaction
        print("4. Multiple operations in transaction:")
        with conn.transaction() as tx:
            tx.execute("INSERT INTO users (name, email) VALUES (?, ?)", ["Dave", "dave@example.com"])
            tx.execute("INSERT INTO audit_log (action) VALUES (?)", ["user_created"])
            tx.execute("INSERT INTO users (name, email) VALUES (?, ?)", ["Eve", "eve@example.com"])
            tx.execute("INSERT INTO audit_log (action) VALUES (?)", ["user_created"])
        print(f"   Users after transaction: {count_users(conn)}\n")

    # Clean up
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
