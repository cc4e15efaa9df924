import sqlite3
from decimal import Decimal
import pytest
import db
from db import INCOME, EXPENSE, DEFAULT_MONTHS, StorageError


def count_rows(db_path, table):
    with db.db_session(db_path) as (conn, cursor):
        cursor.execute(f"SELECT COUNT(*) FROM {table}")
        return cursor.fetchone()[0]


def test_months_seeded_once(db_path):
    assert db.fetch_month_names(db_path) == list(DEFAULT_MONTHS)
    db.init_db(db_path)
    assert db.fetch_month_names(db_path) == list(DEFAULT_MONTHS)


def test_insert_then_fetch_by_month(db_path):
    entry_id = db.insert_entry("Lohn", Decimal("2500.00"), INCOME, "Januar", db_path)
    db.insert_entry("Miete", Decimal("-1200.50"), EXPENSE, "Februar", db_path)

    rows = db.fetch_entries_by_month("Januar", db_path)
    assert rows == [(entry_id, "Lohn", Decimal("2500.00"), INCOME, "Januar")]
    assert db.fetch_entries_by_month("Februar", db_path)[0][2] == Decimal("-1200.50")


def test_fetch_all_in_insert_order(db_path):
    first = db.insert_entry("Lohn", Decimal("2500"), INCOME, "März", db_path)
    second = db.insert_entry("Strom", Decimal("-80"), EXPENSE, "Januar", db_path)
    assert [row[0] for row in db.fetch_all_entries(db_path)] == [first, second]


def test_fetch_unknown_month_is_empty(db_path):
    db.insert_entry("Lohn", Decimal("2500"), INCOME, "Januar", db_path)
    assert db.fetch_entries_by_month("Smarch", db_path) == []


def test_insert_unknown_month_writes_nothing(db_path):
    with pytest.raises(StorageError, match="Month not found"):
        db.insert_entry("Lohn", Decimal("2500"), INCOME, "Smarch", db_path)

    assert db.fetch_all_entries(db_path) == []
    assert db.fetch_category_names(db_path) == []
    assert count_rows(db_path, "EntryCategory") == 0


def test_insert_invalid_kind_rejected(db_path):
    with pytest.raises(StorageError):
        db.insert_entry("Lohn", Decimal("2500"), "Transfer", "Januar", db_path)
    assert count_rows(db_path, "Entries") == 0


def test_category_shared_by_equal_titles(db_path):
    db.insert_entry("Miete", Decimal("-1200"), EXPENSE, "Januar", db_path)
    db.insert_entry("Miete", Decimal("-1200"), EXPENSE, "Februar", db_path)
    assert db.fetch_category_names(db_path) == ["Miete"]
    assert count_rows(db_path, "EntryCategory") == 2


def test_delete_by_id(db_path):
    keep = db.insert_entry("Lohn", Decimal("2500"), INCOME, "Januar", db_path)
    gone = db.insert_entry("Miete", Decimal("-1200"), EXPENSE, "Januar", db_path)

    assert db.delete_entry_by_id(gone, db_path) is True
    assert [row[0] for row in db.fetch_all_entries(db_path)] == [keep]


def test_delete_missing_id_is_noop(db_path):
    db.insert_entry("Lohn", Decimal("2500"), INCOME, "Januar", db_path)
    assert db.delete_entry_by_id(9999, db_path) is False
    assert len(db.fetch_all_entries(db_path)) == 1


def test_delete_cascades_links_keeps_category(db_path):
    entry_id = db.insert_entry("Miete", Decimal("-1200"), EXPENSE, "Januar", db_path)
    db.delete_entry_by_id(entry_id, db_path)
    assert count_rows(db_path, "EntryCategory") == 0
    assert db.fetch_category_names(db_path) == ["Miete"]


def test_delete_all_entries(db_path):
    db.insert_entry("Lohn", Decimal("2500"), INCOME, "Januar", db_path)
    db.insert_entry("Miete", Decimal("-1200"), EXPENSE, "Januar", db_path)
    assert db.delete_all_entries(db_path) == 2
    assert db.fetch_all_entries(db_path) == []
    assert db.fetch_month_names(db_path) == list(DEFAULT_MONTHS)


def test_open_db_failure_raises_storage_error(tmp_path):
    with pytest.raises(StorageError):
        db.fetch_all_entries(str(tmp_path / "missing" / "nowhere.db"))


def test_session_rolls_back_on_error(db_path):
    with pytest.raises(RuntimeError):
        with db.db_session(db_path) as (conn, cursor):
            cursor.execute("INSERT INTO Categories (name) VALUES ('Temp')")
            raise RuntimeError("boom")
    assert db.fetch_category_names(db_path) == []


def test_largest_amount_round_trips(db_path):
    db.insert_entry("Big", Decimal("-9999999999999.99"), EXPENSE, "Juni", db_path)
    assert db.fetch_entries_by_month("Juni", db_path)[0][2] == Decimal("-9999999999999.99")


def test_open_db_closes_connection_on_pragma_failure(monkeypatch):
    class FailingConnection:
        closed = False

        def execute(self, sql):
            raise sqlite3.OperationalError("disk I/O error")

        def close(self):
            self.closed = True

    conn = FailingConnection()
    monkeypatch.setattr(db.sqlite3, "connect", lambda *args, **kwargs: conn)
    with pytest.raises(StorageError, match="disk I/O error"):
        db.open_db("whatever.db")
    assert conn.closed
