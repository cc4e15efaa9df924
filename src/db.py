import sqlite3
import logging
from contextlib import contextmanager
from decimal import Decimal
from config import CONFIG, get_db_path

# Set up logging
logger = logging.getLogger('LP.db')

DEFAULT_MONTHS = ("Januar", "Februar", "März", "April", "Mai", "Juni", "Juli",
                  "August", "September", "Oktober", "November", "Dezember")

INCOME = "Income"
EXPENSE = "Expense"
KINDS = (INCOME, EXPENSE)
CENTS = Decimal("0.01")

# SQLite has no DECIMAL type - store amounts as their exact text form
sqlite3.register_adapter(Decimal, str)


class StorageError(Exception):
    """Raised when the database cannot complete an operation."""


# Open and Close DB connection
def open_db(db_path=None):
    """Open the SQLite database with foreign keys enforced."""
    db_path = db_path or get_db_path()
    conn = None
    try:
        conn = sqlite3.connect(db_path, timeout=CONFIG['DB_TIMEOUT'])
        conn.execute("PRAGMA foreign_keys = ON")
        cursor = conn.cursor()
        logger.debug(f"Database open: {db_path}")
        return conn, cursor
    except sqlite3.Error as e:
        if conn is not None:
            conn.close()
        raise StorageError(f"Failed to open database {db_path}: {e}") from e

def close_db(conn):
    if conn:
        conn.close()
    logger.debug("Database closed")

@contextmanager
def db_session(db_path=None):
    """Yield (conn, cursor) for one operation; commit on success, roll back on failure, always close."""
    conn, cursor = open_db(db_path)
    try:
        yield conn, cursor
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        raise StorageError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()
        close_db(conn)


# Schema
def create_tables(db_path=None):
    with db_session(db_path) as (conn, cursor):
        cursor.executescript("""
            CREATE TABLE IF NOT EXISTS Months (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name VARCHAR(20) UNIQUE NOT NULL
            );
            CREATE TABLE IF NOT EXISTS Entries (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title VARCHAR(255) NOT NULL,
                amount DECIMAL(15,2) NOT NULL,
                kind TEXT NOT NULL CHECK (kind IN ('Income', 'Expense')),
                month_id INTEGER,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (month_id) REFERENCES Months(id) ON DELETE CASCADE
            );
            CREATE TABLE IF NOT EXISTS Categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name VARCHAR(100) UNIQUE NOT NULL
            );
            CREATE TABLE IF NOT EXISTS EntryCategory (
                entry_id INTEGER NOT NULL,
                category_id INTEGER NOT NULL,
                PRIMARY KEY (entry_id, category_id),
                FOREIGN KEY (entry_id) REFERENCES Entries(id) ON DELETE CASCADE ON UPDATE CASCADE,
                FOREIGN KEY (category_id) REFERENCES Categories(id) ON DELETE CASCADE ON UPDATE CASCADE
            );
        """)
    logger.debug("Tables checked or created")

def insert_default_months(db_path=None):
    with db_session(db_path) as (conn, cursor):
        cursor.executemany("INSERT OR IGNORE INTO Months (name) VALUES (?)", [(m,) for m in DEFAULT_MONTHS])
    logger.debug("Default months checked or added")

def init_db(db_path=None):
    """Create the tables if missing and seed the month catalog."""
    create_tables(db_path)
    insert_default_months(db_path)


# Months Table
def fetch_month_names(db_path=None):
    with db_session(db_path) as (conn, cursor):
        cursor.execute("SELECT name FROM Months ORDER BY id")
        return [row[0] for row in cursor.fetchall()]


# Entries Table
ENTRY_SELECT = ("SELECT e.id, e.title, e.amount, e.kind, m.name "
                "FROM Entries e LEFT JOIN Months m ON m.id = e.month_id ")

def _to_entry_rows(db_rows):
    # (id, title, Decimal amount, kind, month)
    return [(row[0], row[1], Decimal(str(row[2])).quantize(CENTS), row[3], row[4]) for row in db_rows]

def fetch_all_entries(db_path=None):
    with db_session(db_path) as (conn, cursor):
        cursor.execute(ENTRY_SELECT + "ORDER BY e.id")
        return _to_entry_rows(cursor.fetchall())

def fetch_entries_by_month(month, db_path=None):
    """Entries of one month; an unknown month name gives an empty list."""
    with db_session(db_path) as (conn, cursor):
        cursor.execute(ENTRY_SELECT + "WHERE m.name = ? ORDER BY e.id", (month,))
        return _to_entry_rows(cursor.fetchall())

def insert_entry(title, amount, kind, month, db_path=None):
    """
    Insert an entry, its category and the link row in one transaction.

    Args:
        title (str): Entry title, also used as the category name
        amount (Decimal): Signed amount, already normalized for the kind
        kind (str): "Income" or "Expense"
        month (str): Month name from the Months catalog

    Returns:
        int: id of the new entry

    Raises:
        StorageError: if the month is unknown or any statement fails. Nothing is written.
    """
    with db_session(db_path) as (conn, cursor):
        # 1. Resolve the month id
        cursor.execute("SELECT id FROM Months WHERE name = ? LIMIT 1", (month,))
        month_row = cursor.fetchone()
        if month_row is None:
            raise StorageError(f"Month not found: {month}")

        # 2. Insert the entry and capture its id
        cursor.execute("INSERT INTO Entries (title, amount, kind, month_id) VALUES (?, ?, ?, ?)",
                    (title, amount, kind, month_row[0]))
        entry_id = cursor.lastrowid

        # 3. Category (if not present) and link row
        cursor.execute("INSERT OR IGNORE INTO Categories (name) VALUES (?)", (title,))
        cursor.execute("INSERT INTO EntryCategory (entry_id, category_id) "
                    "VALUES (?, (SELECT id FROM Categories WHERE name = ? LIMIT 1))",
                    (entry_id, title))
    logger.info(f"Entry saved: id={entry_id}, title={title}, amount={amount}, kind={kind}, month={month}")
    return entry_id

def delete_entry_by_id(entry_id, db_path=None):
    """Delete one entry. Returns False if no entry has that id."""
    with db_session(db_path) as (conn, cursor):
        cursor.execute("DELETE FROM Entries WHERE id = ?", (entry_id,))
        deleted = cursor.rowcount > 0
    if deleted:
        logger.info(f"Entry with ID {entry_id} deleted")
    else:
        logger.warning(f"No entry with ID {entry_id} found")
    return deleted

def delete_all_entries(db_path=None):
    with db_session(db_path) as (conn, cursor):
        cursor.execute("DELETE FROM Entries")
        count = cursor.rowcount
    logger.info(f"All {count} entries deleted")
    return count


# Categories Table
def fetch_category_names(db_path=None):
    with db_session(db_path) as (conn, cursor):
        cursor.execute("SELECT name FROM Categories ORDER BY name")
        return [row[0] for row in cursor.fetchall()]
