"""
Example 01: Basic Query Execution

This example demonstrates commands, parameters and typed reads with db_field's Engine and SQLRegistry.
"""

from db_field import Engine, ConnectionConfig, SQLRegistry, get_value
import tempfile
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional


def main():
    # Create a temporary database
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    # Set up the database with some test data
    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE employees (
            EmployeeId INTEGER PRIMARY KEY,
            LastName TEXT NOT NULL,
            ReportsTo INTEGER,
            HireDate TEXT
        )
    """)
    conn.execute("INSERT INTO employees VALUES (1, 'Adams', NULL, '2002-08-14 00:00:00')")
    conn.execute("INSERT INTO employees VALUES (2, 'Edwards', 1, '2002-05-01 00:00:00')")
    conn.execute("INSERT INTO employees VALUES (3, 'Peacock', 2, '2002-04-01 00:00:00')")
    conn.commit()
    conn.close()

    # Create temporary SQL files directory
    sql_dir = Path(tempfile.mkdtemp())
    employee_dir = sql_dir / "employees"
    employee_dir.mkdir()

    # Create SQL query files
    (employee_dir / "get_by_id.sql").write_text("SELECT * FROM employees WHERE EmployeeId = :EmployeeId")
    (employee_dir / "list_all.sql").write_text("SELECT * FROM employees ORDER BY EmployeeId")
    (employee_dir / "count.sql").write_text("SELECT COUNT(*) FROM employees")

    # Configure engine
    config = ConnectionConfig(driver="sqlite", database=db_path, validate_parameters=True)
    registry = SQLRegistry(str(sql_dir))
    engine = Engine.from_config(config, registry)

    print("=== Basic Query Execution ===\n")

    # execute_query: read rows yourself
    def read_employees(reader):
        rows = []
        while reader.read():
            rows.append((
                get_value(reader, "LastName", str),
                get_value(reader, "ReportsTo", Optional[int]),
                get_value(reader, "HireDate", datetime),
            ))
        return rows

    for last_name, reports_to, hired in engine.execute_query("employees.list_all", read_employees):
        print(f"  - {last_name} reports to {reports_to}, hired {hired:%Y-%m-%d}")
    print()

    # Parameters are added through a command callback
    name = engine.execute_scalar(
        "SELECT LastName FROM employees WHERE EmployeeId = @EmployeeId",
        lambda command: command.add_parameter("EmployeeId", 2),
    )
    print(f"execute_scalar result: {name}")

    # execute_scalar with a registry key
    count = engine.execute_scalar("employees.count")
    print(f"execute_scalar result: {count} total employees\n")

    # Clean up
    engine.close()
    Path(db_path).unlink()
    for file in employee_dir.glob("*.sql"):
        file.unlink()
    employee_dir.rmdir()
    sql_dir.rmdir()


if __name__ == "__main__":
    main()
