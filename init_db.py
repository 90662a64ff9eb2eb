"""Create the finance tracker tables from ``schema.sql``.

Run once against an empty database:

    python init_db.py
"""

import os
import mysql.connector
from config import Config

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'schema.sql')


def split_statements(sql):
    # mysql-connector executes one statement per call
    return [statement for statement in sql.split(';') if statement.strip()]


def init_db(schema_path=SCHEMA_PATH):
    with open(schema_path, 'r') as f:
        statements = split_statements(f.read())

    conn = mysql.connector.connect(
        host=Config.MYSQL_HOST,
        user=Config.MYSQL_USER,
        password=Config.MYSQL_PASSWORD,
        database=Config.MYSQL_DATABASE
    )
    try:
        with conn.cursor() as cur:
            for statement in statements:
                cur.execute(statement)
        conn.commit()
    finally:
        conn.close()
    return len(statements)


if __name__ == "__main__":
    count = init_db()
    print(f"Applied {count} statements to {Config.MYSQL_DATABASE}")
