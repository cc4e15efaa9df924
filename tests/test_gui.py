from types import SimpleNamespace
import pytest

pytest.importorskip("tkinter")

from db import INCOME
from gui import MainView


class FakeVar:
    def __init__(self, value):
        self.value = value

    def get(self):
        return self.value

    def set(self, value):
        self.value = value


def make_view(controller, selected):
    return SimpleNamespace(filter_var=FakeVar(selected), controller=controller, report=lambda outcome: outcome)


def test_filter_change_applies_selection(controller):
    controller.add_entry("Lohn", "2500", INCOME, "Januar")
    view = make_view(controller, "Februar")
    MainView.on_filter_change(view)
    assert controller.state.selected_month == "Februar"
    assert view.filter_var.get() == "Februar"


def test_failed_filter_change_restores_selector(controller, tmp_path):
    controller.apply_filter("Januar")
    controller.db_path = str(tmp_path / "missing" / "gone.db")

    view = make_view(controller, "März")
    MainView.on_filter_change(view)
    assert controller.state.selected_month == "Januar"
    assert view.filter_var.get() == "Januar"
