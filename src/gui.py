# gui.py - Main window of the Liqui-Planner program

import logging
import tkinter as tk
from tkinter import ttk, messagebox, filedialog
import config
from config import COLORS, CONFIG
from db import KINDS, DEFAULT_MONTHS, INCOME
from ledger import FILTER_OPTIONS, ALL_MONTHS
from ui_utils import (GRID_COLUMNS, GRID_HEADINGS, GRID_WIDTHS, refresh_grid, fill_listbox,
                      center_window, timed_message)

# Set up logging
logger = logging.getLogger('LP.gui')

WINDOW_WIDTH = 1200
WINDOW_HEIGHT = 700


class MainView:
    """Owns the widgets of the main window and renders the LedgerState pushed by the controller."""

    def __init__(self, root):
        self.root = root
        self.controller = None
        bg = config.master_bg()

        root.title("Liqui-Planner" if CONFIG['APP_ENV'] != 'test' else "Liqui-Planner (TEST)")
        center_window(root, WINDOW_WIDTH, WINDOW_HEIGHT)
        root.configure(bg=bg)
        root.resizable(False, False)
        root.protocol("WM_DELETE_WINDOW", self.exit_program)

        self._build_menu()

        tk.Label(root, text="Liqui-Planner", font=(config.lp_head14), bg=bg).place(x=20, y=10)

        # New entry form
        form = tk.LabelFrame(root, text="New Entry", font=(config.lp_normal), bg=bg, padx=10, pady=10)
        form.place(x=20, y=50, width=700, height=130)

        tk.Label(form, text="Title:", width=12, anchor=tk.E, bg=bg, font=(config.lp_normal)).grid(row=0, column=0, pady=4)
        self.title_entry = tk.Entry(form, width=30, font=(config.lp_normal))
        self.title_entry.grid(row=0, column=1, sticky="w")

        tk.Label(form, text=f"Amount ({CONFIG['CURRENCY']}):", width=14, anchor=tk.E, bg=bg,
                 font=(config.lp_normal)).grid(row=0, column=2)
        self.amount_entry = tk.Entry(form, width=14, font=(config.lp_normal), justify="right")
        self.amount_entry.grid(row=0, column=3, sticky="w")

        tk.Label(form, text="Kind:", width=12, anchor=tk.E, bg=bg, font=(config.lp_normal)).grid(row=1, column=0, pady=4)
        self.kind_var = tk.StringVar(value=INCOME)
        self.kind_menu = ttk.Combobox(form, textvariable=self.kind_var, values=list(KINDS), state="readonly",
                                      width=14, font=(config.lp_normal))
        self.kind_menu.grid(row=1, column=1, sticky="w")

        tk.Label(form, text="Month:", width=14, anchor=tk.E, bg=bg, font=(config.lp_normal)).grid(row=1, column=2)
        self.month_var = tk.StringVar(value=DEFAULT_MONTHS[0])
        self.month_menu = ttk.Combobox(form, textvariable=self.month_var, values=list(DEFAULT_MONTHS),
                                       state="readonly", width=14, font=(config.lp_normal))
        self.month_menu.grid(row=1, column=3, sticky="w")

        self.add_btn = tk.Button(form, text="Add", font=(config.lp_button), width=10, bg=COLORS["act_but_bg"],
                                 command=self.on_add)
        self.add_btn.grid(row=0, column=4, rowspan=2, padx=20)

        # Filter row
        tk.Label(root, text="Show:", bg=bg, font=(config.lp_normal_bold)).place(x=20, y=195)
        self.filter_var = tk.StringVar(value=ALL_MONTHS)
        self.filter_menu = ttk.Combobox(root, textvariable=self.filter_var, values=list(FILTER_OPTIONS),
                                        state="readonly", font=(config.lp_normal))
        self.filter_menu.place(x=80, y=192, width=160, height=26)
        self.filter_menu.bind("<<ComboboxSelected>>", self.on_filter_change)

        self.delete_btn = tk.Button(root, text="Delete Selected", font=(config.lp_button), bg=COLORS["del_but_bg"],
                                    fg="white", command=self.on_delete_selected)
        self.delete_btn.place(x=580, y=190, width=140, height=30)

        # Entries table
        style = ttk.Style()
        style.configure("Treeview.Heading", font=(config.lp_head11), background=COLORS["title_bg"])
        style.configure("Treeview", rowheight=22, font=(config.lp_normal))

        tree_frame = tk.Frame(root, bg=COLORS["panel_bg"])
        tree_frame.place(x=20, y=230, width=700, height=450)
        self.tree = ttk.Treeview(tree_frame, columns=GRID_COLUMNS, show="headings", selectmode="browse")
        for col, heading in GRID_HEADINGS.items():
            self.tree.heading(col, text=heading)
            self.tree.column(col, width=GRID_WIDTHS[col], anchor="e" if col == "amount" else "w")
        self.tree.configure(displaycolumns=GRID_COLUMNS[1:])
        self.tree.tag_configure("income", foreground=COLORS["income_tx"])
        self.tree.tag_configure("expense", foreground=COLORS["expense_tx"])
        scrollbar = tk.Scrollbar(tree_frame, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscrollcommand=scrollbar.set)
        self.tree.pack(side="left", fill="both", expand=True)
        scrollbar.pack(side="right", fill="y")

        # Balance block
        balance_frame = tk.LabelFrame(root, text="Balance", font=(config.lp_normal), bg=bg, padx=10, pady=6)
        balance_frame.place(x=740, y=50, width=440, height=130)
        self.income_lbl = tk.Label(balance_frame, anchor=tk.W, bg=bg, font=(config.lp_large),
                                   fg=COLORS["income_tx"])
        self.income_lbl.pack(fill="x")
        self.expense_lbl = tk.Label(balance_frame, anchor=tk.W, bg=bg, font=(config.lp_large),
                                    fg=COLORS["expense_tx"])
        self.expense_lbl.pack(fill="x")
        self.balance_lbl = tk.Label(balance_frame, anchor=tk.W, bg=bg, font=(config.lp_head12))
        self.balance_lbl.pack(fill="x")

        # Income and expense lists
        tk.Label(root, text="Income", bg=bg, font=(config.lp_head11), fg=COLORS["income_tx"]).place(x=740, y=195)
        self.income_list = tk.Listbox(root, font=(config.lp_normal), bg=COLORS["panel_bg"],
                                      fg=COLORS["income_tx"], activestyle="none")
        self.income_list.place(x=740, y=220, width=440, height=210)

        tk.Label(root, text="Expenses", bg=bg, font=(config.lp_head11), fg=COLORS["expense_tx"]).place(x=740, y=440)
        self.expense_list = tk.Listbox(root, font=(config.lp_normal), bg=COLORS["panel_bg"],
                                       fg=COLORS["expense_tx"], activestyle="none")
        self.expense_list.place(x=740, y=465, width=440, height=215)

        logger.debug("Main window created")

    def _build_menu(self):
        menubar = tk.Menu(self.root)
        file_menu = tk.Menu(menubar, tearoff=0)
        file_menu.add_command(label="Save as PDF...", command=self.on_save_pdf)
        file_menu.add_command(label="Print...", command=self.on_print)
        file_menu.add_separator()
        file_menu.add_command(label="Exit", command=self.exit_program)
        menubar.add_cascade(label="File", menu=file_menu)

        edit_menu = tk.Menu(menubar, tearoff=0)
        edit_menu.add_command(label="Delete All Entries...", command=self.on_delete_all)
        menubar.add_cascade(label="Edit", menu=edit_menu)
        self.root.config(menu=menubar)

    def bind_controller(self, controller):
        self.controller = controller
        controller.subscribe(self.render)

    # Rendering
    def render(self, state):
        refresh_grid(self.tree, state.table_rows,
                     row_tags=lambda row: ("income",) if row[3] == INCOME else ("expense",))
        fill_listbox(self.income_list, state.income_items, COLORS["income_tx"])
        fill_listbox(self.expense_list, state.expense_items, COLORS["expense_tx"])

        summary = state.summary
        self.income_lbl.config(text=summary.income_text)
        self.expense_lbl.config(text=summary.expense_text)
        self.balance_lbl.config(text=summary.balance_text, fg=summary.balance_color)
        if self.filter_var.get() != state.selected_month:
            self.filter_var.set(state.selected_month)

    def report(self, outcome):
        if outcome.level == "info":
            messagebox.showinfo(outcome.title, outcome.message, parent=self.root)
        elif outcome.level == "warning":
            messagebox.showwarning(outcome.title, outcome.message, parent=self.root)
        elif outcome.level == "error":
            messagebox.showerror(outcome.title, outcome.message, parent=self.root)
        elif not outcome.ok:
            logger.debug(f"Action failed without user message: {outcome.message}")
        return outcome

    def selected_entry_id(self):
        selected = self.tree.selection()
        if not selected:
            return None
        return self.tree.item(selected[0], "values")[0]

    def clear_form(self):
        self.title_entry.delete(0, tk.END)
        self.amount_entry.delete(0, tk.END)
        self.title_entry.focus_set()

    # Handlers
    def on_add(self):
        outcome = self.report(self.controller.add_entry(self.title_entry.get(), self.amount_entry.get(),
                                                        self.kind_var.get(), self.month_var.get()))
        if outcome.ok:
            self.clear_form()

    def on_filter_change(self, event=None):
        outcome = self.report(self.controller.apply_filter(self.filter_var.get()))
        if not outcome.ok:
            self.filter_var.set(self.controller.state.selected_month)

    def on_delete_selected(self):
        self.report(self.controller.delete_selected(self.selected_entry_id()))

    def on_delete_all(self):
        if not messagebox.askyesno("Delete All Entries", "Delete every entry? This cannot be undone.",
                                   parent=self.root):
            return
        self.report(self.controller.delete_all())

    def on_save_pdf(self):
        filepath = filedialog.asksaveasfilename(
            parent=self.root,
            title="Save as PDF",
            initialfile=CONFIG['PDF_DEFAULT_NAME'],
            defaultextension=".pdf",
            filetypes=[("PDF files", "*.pdf")],
        )
        if not filepath:
            logger.debug("PDF export cancelled")
            return
        self.report(self.controller.export_pdf(filepath))

    def on_print(self):
        outcome = self.report(self.controller.print_table())
        if outcome.ok:
            timed_message(self.root, "Print", "Table sent to the printer.", 2000)

    def exit_program(self):
        logger.debug("Exit requested")
        self.root.destroy()
