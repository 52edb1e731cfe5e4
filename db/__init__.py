from sqlalchemy import create_engine, text
from sqlalchemy.pool import NullPool

engine = None


def init_db_engine(connect_str):
    global engine
    engine = create_engine(connect_str, poolclass=NullPool)


def run_sql_script(sql_file_path):
    """Run every statement in a SQL file inside a single transaction.

    Statements are separated by semicolons so that the same scripts work on
    drivers that refuse to execute more than one statement per call (SQLite).
    """
    with open(sql_file_path) as sql:
        statements = [s.strip() for s in sql.read().split(";")]
    with engine.begin() as connection:
        for statement in statements:
            if statement:
                connection.execute(text(statement))
