# Creates the main form for the Liqui-Planner program

import sys
import logging
import tkinter as tk
from tkinter import messagebox
from config import init_config, CONFIG
from db import init_db, StorageError
from gui import MainView
from ledger import LedgerController

# Setup logging
logger = logging.getLogger('LP.main')


def main():
    # Initialize configuration - sets up logger and data directories
    init_config()
    logger.debug(f"Starting Liqui-Planner ({CONFIG['APP_ENV']})")

    root = tk.Tk()
    try:
        init_db()
    except StorageError as e:
        logger.exception("Database initialisation failed")
        root.withdraw()
        messagebox.showerror("Storage Error", f"Unable to open the database: {e}")
        root.destroy()
        return 1

    view = MainView(root)
    controller = LedgerController()
    view.bind_controller(controller)
    view.report(controller.load_all())

    root.mainloop()
    logger.debug("Liqui-Planner closed")
    return 0

if __name__ == "__main__":
    sys.exit(main())
