import logging
import tkinter as tk

# Set up logging
logger = logging.getLogger('LP.ui_utils')

# Column layout of the entries table - the id column is kept in the row values but never shown
GRID_COLUMNS = ("id", "title", "amount", "kind", "month")
GRID_HEADINGS = {"title": "Title", "amount": "Amount", "kind": "Kind", "month": "Month"}
GRID_WIDTHS = {"title": 320, "amount": 140, "kind": 110, "month": 120}


def visible_columns(columns=GRID_COLUMNS):
    return columns[1:]

def refresh_grid(tree, rows, row_tags=None):
    """
    Replace the contents of a Treeview with rows and hide the leading id column.

    Args:
        tree: ttk.Treeview built with GRID_COLUMNS
        rows: sequence of value tuples, id first
        row_tags: optional callable returning the tags for a row
    """
    tree.delete(*tree.get_children())
    for row in rows:
        tags = row_tags(row) if row_tags else ()
        tree.insert("", "end", values=list(row), tags=tags)
    tree.configure(displaycolumns=visible_columns(tree["columns"]))
    logger.debug(f"Grid refreshed with {len(rows)} rows")

def fill_listbox(listbox, items, color):
    listbox.delete(0, tk.END)
    for item in items:
        listbox.insert(tk.END, item)
    listbox.configure(fg=color)

# Center any Window on screen
def center_window(window, width, height):
    window.update_idletasks()  # Ensure window size is updated
    screen_width = window.winfo_screenwidth()
    screen_height = window.winfo_screenheight()
    x = max(0, (screen_width - width) // 2)
    y = max(0, (screen_height - height) // 2)
    window.geometry(f"{width}x{height}+{x}+{y}")

# Timed Popup message
def timed_message(parent, title, message, timer_ms):
    """
    Display a popup message that closes itself after timer_ms milliseconds
    or when the Close button is clicked.
    """
    popup = tk.Toplevel(parent)
    popup.title(title)
    popup.transient(parent)
    popup.grab_set()
    popup.configure(bg="lightgray")

    popup_width, popup_height = 260, 110
    x = parent.winfo_x() + (parent.winfo_width() - popup_width) // 2
    y = parent.winfo_y() + (parent.winfo_height() - popup_height) // 2
    popup.geometry(f"{popup_width}x{popup_height}+{x}+{y}")

    tk.Label(popup, text=message, font=("Arial", 10), wraplength=240, bg="lightgray").pack(pady=10, padx=10)
    button = tk.Button(popup, text="Close", font=("Arial", 10), width=10, command=lambda: close_popup())
    button.pack(pady=5)

    timer_id = popup.after(timer_ms, lambda: close_popup())

    def close_popup():
        popup.after_cancel(timer_id)
        popup.grab_release()
        popup.destroy()

    button.focus_set()
    popup.protocol("WM_DELETE_WINDOW", close_popup)
    popup.wait_window()
