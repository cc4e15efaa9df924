# ledger.py - Moves data between the database and the main window
#
# The pure functions turn entry rows into what the window shows (table rows,
# list strings, balance labels). LedgerController runs the user actions and
# keeps the current LedgerState.

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import db
import export
from config import CONFIG, COLORS
from db import INCOME, EXPENSE, KINDS, DEFAULT_MONTHS, StorageError
from export import ExportError

# Set up logging
logger = logging.getLogger('LP.ledger')

ALL_MONTHS = "All months"
FILTER_OPTIONS = (ALL_MONTHS,) + DEFAULT_MONTHS
ZERO = Decimal("0.00")
MAX_AMOUNT = Decimal("1e13")


class ValidationError(ValueError):
    """Raised when user input cannot be turned into an entry."""


@dataclass(frozen=True)
class Entry:
    id: int
    title: str
    amount: Decimal
    kind: str
    month: str

    @classmethod
    def from_row(cls, row):
        entry_id, title, amount, kind, month = row
        return cls(entry_id, title, Decimal(amount), kind, month)


@dataclass(frozen=True)
class BalanceSummary:
    income: Decimal = ZERO
    expense: Decimal = ZERO             # absolute value of all expenses

    @property
    def balance(self):
        return self.income - self.expense

    @property
    def income_text(self):
        return f"Income: {self.income:+.2f} {CONFIG['CURRENCY']}"

    @property
    def expense_text(self):
        return f"Expenses: -{self.expense:.2f} {CONFIG['CURRENCY']}"

    @property
    def balance_text(self):
        return f"Balance: {self.balance:+.2f} {CONFIG['CURRENCY']}"

    @property
    def balance_color(self):
        return COLORS["income_tx"] if self.balance >= 0 else COLORS["expense_tx"]


@dataclass
class LedgerState:
    selected_month: str = ALL_MONTHS
    table_rows: list = field(default_factory=list)
    income_items: list = field(default_factory=list)
    expense_items: list = field(default_factory=list)
    summary: BalanceSummary = field(default_factory=BalanceSummary)


@dataclass(frozen=True)
class Outcome:
    """Result of a user action. level is 'info', 'warning', 'error' or None (log only)."""
    ok: bool
    level: str = None
    title: str = ""
    message: str = ""

    @classmethod
    def success(cls, message=""):
        return cls(True, "info" if message else None, "Liqui-Planner", message)

    @classmethod
    def warning(cls, title, message):
        return cls(False, "warning", title, message)

    @classmethod
    def error(cls, title, message):
        return cls(False, "error", title, message)

    @classmethod
    def silent_failure(cls, message):
        return cls(False, None, "", message)


# Formatting
def format_amount(amount, kind):
    """'+X.XX' for income, '-X.XX' for expense, whatever sign the stored value has."""
    magnitude = abs(Decimal(amount))
    if kind == INCOME:
        return f"+{magnitude:.2f}"
    return f"-{magnitude:.2f}"

def table_row(entry):
    return (entry.id, entry.title, f"{format_amount(entry.amount, entry.kind)} {CONFIG['CURRENCY']}",
            entry.kind, entry.month)

def list_item(entry):
    return f"{entry.title}  {format_amount(entry.amount, entry.kind)} {CONFIG['CURRENCY']} ({entry.month})"

def partition_entries(entries, selected_month):
    income_items = [list_item(e) for e in entries if e.kind == INCOME]
    expense_items = [list_item(e) for e in entries if e.kind != INCOME]
    if not income_items:
        income_items = [f"No income for {selected_month}"]
    if not expense_items:
        expense_items = [f"No expenses for {selected_month}"]
    return income_items, expense_items

def summarize(entries):
    income = sum((e.amount for e in entries if e.kind == INCOME), ZERO)
    expense = sum((abs(e.amount) for e in entries if e.kind == EXPENSE), ZERO)
    return BalanceSummary(income, expense)

def build_state(entries, selected_month, summary=None):
    income_items, expense_items = partition_entries(entries, selected_month)
    return LedgerState(
        selected_month=selected_month,
        table_rows=[table_row(e) for e in entries],
        income_items=income_items,
        expense_items=expense_items,
        summary=summary if summary is not None else summarize(entries),
    )


# Validation
def parse_amount(amount_text):
    try:
        amount = Decimal(amount_text.strip())
    except (InvalidOperation, AttributeError) as e:
        raise ValidationError("Amount must be a number.") from e
    if not amount.is_finite():
        raise ValidationError("Amount must be a number.")
    # DECIMAL(15,2): 13 integer digits plus cents
    if abs(amount) >= MAX_AMOUNT:
        raise ValidationError(f"Amount must be less than {MAX_AMOUNT:,.0f}.")
    try:
        return amount.quantize(db.CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValidationError("Amount must be a number.") from e

def normalize_amount(amount, kind):
    """Expenses are stored negative, income positive."""
    if kind == EXPENSE:
        return -abs(amount)
    return abs(amount)

def validate_entry(title, amount_text, kind, month):
    """Return (title, signed amount, kind, month) ready for insert, or raise ValidationError."""
    title = (title or "").strip()
    amount_text = (amount_text or "").strip()
    if not title or not amount_text:
        raise ValidationError("Please fill in all fields.")
    amount = parse_amount(amount_text)
    if kind not in KINDS:
        raise ValidationError(f"Kind must be one of: {', '.join(KINDS)}")
    if month not in DEFAULT_MONTHS:
        raise ValidationError(f"Unknown month: {month}")
    return title, normalize_amount(amount, kind), kind, month


class LedgerController:
    """Runs the user actions against the database and publishes the resulting LedgerState."""

    def __init__(self, db_path=None):
        self.db_path = db_path
        self.state = LedgerState()
        self._renderers = []

    def subscribe(self, render):
        self._renderers.append(render)
        render(self.state)

    def _publish(self, state):
        self.state = state
        for render in self._renderers:
            render(state)

    def fetch_entries(self, selected_month):
        if selected_month == ALL_MONTHS:
            rows = db.fetch_all_entries(self.db_path)
        else:
            rows = db.fetch_entries_by_month(selected_month, self.db_path)
        return [Entry.from_row(row) for row in rows]

    def load_all(self):
        return self.apply_filter(self.state.selected_month)

    def apply_filter(self, selected_month):
        try:
            entries = self.fetch_entries(selected_month)
            summary = self.compute_balance(selected_month)
        except StorageError as e:
            logger.exception(f"Loading entries for {selected_month} failed")
            return Outcome.error("Storage Error", f"Failed to load entries: {e}")
        self._publish(build_state(entries, selected_month, summary))
        logger.debug(f"Filter {selected_month}: {len(entries)} entries, balance {summary.balance}")
        return Outcome.success()

    def compute_balance(self, selected_month):
        """Re-query the rows of the filter and total them. Raises StorageError."""
        return summarize(self.fetch_entries(selected_month))

    def add_entry(self, title, amount_text, kind, month):
        try:
            values = validate_entry(title, amount_text, kind, month)
        except ValidationError as e:
            logger.debug(f"Entry rejected: {e}")
            return Outcome.error("Error", str(e))
        try:
            db.insert_entry(*values, db_path=self.db_path)
        except StorageError as e:
            logger.exception(f"Saving entry {values[0]} failed")
            return Outcome.error("Storage Error", f"Failed to save entry: {e}")
        outcome = self.load_all()
        if not outcome.ok:
            return Outcome(True, "warning", "Storage Error",
                           f"Entry {values[0]} was saved, but the list could not be refreshed.\n{outcome.message}")
        return outcome

    def delete_selected(self, entry_id):
        if entry_id is None or str(entry_id).strip() == "":
            return Outcome.warning("Error", "Please select a row to delete.")
        try:
            entry_id = int(str(entry_id).strip())
        except ValueError:
            return Outcome.error("Error", "Invalid ID.")
        try:
            deleted = db.delete_entry_by_id(entry_id, self.db_path)
        except StorageError as e:
            logger.exception(f"Deleting entry {entry_id} failed")
            return Outcome.error("Storage Error", f"Failed to delete entry: {e}")
        outcome = self.load_all()
        if not deleted:
            return Outcome.warning("Not Found", f"Entry {entry_id} not found.")
        return outcome

    def delete_all(self):
        try:
            count = db.delete_all_entries(self.db_path)
        except StorageError as e:
            logger.exception("Deleting all entries failed")
            return Outcome.error("Storage Error", f"Failed to delete entries: {e}")
        outcome = self.load_all()
        if not outcome.ok:
            return outcome
        return Outcome.success(f"{count} entries deleted.")

    def export_pdf(self, filepath):
        if not filepath:
            return Outcome.silent_failure("Export cancelled")
        try:
            export.export_to_pdf(self.state.table_rows, filepath)
        except ExportError as e:
            logger.error(f"PDF export failed: {e}")
            return Outcome.silent_failure(str(e))
        return Outcome.success(f"PDF saved to: {filepath}")

    def print_table(self):
        try:
            export.print_table(self.state.table_rows)
        except ExportError as e:
            logger.error(f"Print failed: {e}")
            return Outcome.silent_failure(str(e))
        return Outcome.success()
