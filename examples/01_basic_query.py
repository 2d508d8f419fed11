"""
Example 01: Basic Query Execution

This example demonstrates parameterized statements, result cursors and
table introspection on a single RowLink connection.
"""

import tempfile
from pathlib import Path

from row_link import ConnectionConfig, connect


def main():
    # Create a temporary database
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    config = ConnectionConfig(driver="sqlite", database=db_path)

    print("=== Basic Query Execution ===\n")

    with connect(config) as conn:
        print(f"Healthy connection: {conn.good_connection()}")
        print(f"users table before create: {conn.table_exists('users')}")

        conn.execute("""
            CREATE TABLE users (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT NOT NULL,
                active INTEGER DEFAULT 1
            )
        """)
        print(f"users table after create: {conn.table_exists('users')}\n")

        # execute: positional '?' parameters, bound by the driver
        conn.execute("INSERT INTO users (name, email) VALUES (?, ?)", ["Alice", "alice@example.com"])
        conn.execute("INSERT INTO users (name, email) VALUES (?, ?)", ["Bob", "bob@example.com"])
        conn.execute(
            "INSERT INTO users (name, email, active) VALUES (?, ?, ?)",
            ["Charlie", "charlie@example.com", False],
        )

        # try_execute: the Result carries the affected row count or the error
        result = conn.try_execute("UPDATE users SET active = ? WHERE name = ?", [1, "Charlie"])
        print(f"try_execute result: {result.unwrap()} row(s) updated\n")

        # query: iterate a forward-only cursor
        cursor = conn.query("SELECT id, name, email FROM users WHERE active = ?", [1])
        print(f"Active users (columns {cursor.column_names}):")
        for row in cursor:
            print(f"  - {row['name']} ({row['email']})")
        print()

        # Typed column access on the current row
        with conn.query("SELECT COUNT(*) AS total FROM users") as cursor:
            cursor.advance()
            print(f"Total users: {cursor.get_int('total')}")
            print(f"As float: {cursor.get_float('total')}\n")

        # Failures come back as values, never as partial success
        failed = conn.try_execute("INSERT INTO users (name) VALUES (?)", ["Dave", "extra"])
        print(f"Mismatched parameters: {failed.error}")

    # Clean up
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
