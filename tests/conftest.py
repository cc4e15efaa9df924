import pytest
import db
from config import CONFIG
from ledger import LedgerController


@pytest.fixture(autouse=True)
def default_currency(monkeypatch):
    monkeypatch.setitem(CONFIG, 'CURRENCY', 'CHF')


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "liquiplanner_test.db")
    db.init_db(path)
    return path


class FakeView:
    """Collects every state pushed by the controller."""

    def __init__(self):
        self.states = []

    def render(self, state):
        self.states.append(state)

    @property
    def last(self):
        return self.states[-1]


@pytest.fixture
def view():
    return FakeView()


@pytest.fixture
def controller(db_path, view):
    controller = LedgerController(db_path)
    controller.subscribe(view.render)
    return controller
