# src/config.py
# Centralized configuration for the Liqui-Planner project

import os
import glob
import logging
from logging.handlers import TimedRotatingFileHandler
from datetime import datetime, timedelta
from dotenv import load_dotenv

# Load .env file from project root
load_dotenv()

# Set up logging
logger = logging.getLogger('LP.config')

log_levels = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR
}

# Set up Fonts - standardise use of fonts across app
lp_normal = "Arial", 10
lp_normal_bold = "Arial", 10, "bold"
lp_button = "Arial", 11
lp_large = "Arial", 12
# Headings
lp_head11 = "Arial", 11, "bold"
lp_head12 = "Arial", 12, "bold"
lp_head14 = "Arial", 14, "bold"

# Base directory for user data
BASE_DIR = os.path.join(os.path.expanduser("~"), "LiquiPlanner")

# Configuration dictionary
CONFIG = {
    'APP_ENV': os.getenv('APP_ENV', 'prod'),
    'APP_DEBUG': os.getenv('APP_DEBUG', 'False').lower() == 'true',
    'APP_LOG_LEVEL': os.getenv('APP_LOG_LEVEL', 'info').lower(),
    'DATA_DIR': os.getenv('DATA_DIR', os.path.join(BASE_DIR, 'database')),
    'LOG_DIR': os.getenv('LOG_DIR', os.path.join(BASE_DIR, 'logs')),
    'DB_PATH': os.getenv('DB_PATH', os.path.join(BASE_DIR, 'database', 'LiquiPlanner.db')),
    'DB_PATH_TEST': os.getenv('DB_PATH_TEST', os.path.join(BASE_DIR, 'database', 'LiquiPlanner_test.db')),
    'DB_TIMEOUT': float(os.getenv('DB_TIMEOUT', '5')),
    'LOG_DAYS_TO_KEEP': int(os.getenv('LOG_DAYS_TO_KEEP', '10')),
    'CURRENCY': os.getenv('CURRENCY', 'CHF'),
    'PDF_DEFAULT_NAME': os.getenv('PDF_DEFAULT_NAME', 'LiquiPlanner_Report.pdf'),
}

# Colour palette
COLORS = {
    "home_bg": "#F0F8F8",           # Main Form BG
    "home_test_bg": "#F0D0D0",      # Main Form BG - TEST mode
    "panel_bg": "#FFFFFF",          # List and table panels
    "title_bg": "#E0E0E0",          # Treeview header row
    "act_but_bg": "#E0FFE0",        # Active Button BG
    "exit_but_bg": "#ADD8E6",       # Exit/Close Buttons BG
    "del_but_bg": "#DD4040",        # Delete Button BG
    "normal_tx": "#000000",         # Enabled widget text colour
    "income_tx": "#006400",         # Income list and labels - dark green
    "expense_tx": "#FF0000",        # Expense list and labels - red
}


def master_bg():
    """Background colour for the main window, pink when running against the test DB."""
    if CONFIG['APP_ENV'] == 'test':
        return COLORS["home_test_bg"]
    return COLORS["home_bg"]


def get_db_path():
    """Path of the SQLite database for the current environment."""
    if CONFIG['APP_ENV'] == 'test':
        return get_config('DB_PATH_TEST')
    return get_config('DB_PATH')


def setup_logging():
    """Configure logging with file and optional console handlers, and clean up old logs."""
    logger = logging.getLogger('LP')
    logger.setLevel(log_levels.get(CONFIG['APP_LOG_LEVEL'], logging.INFO))

    # Clear any existing handlers to prevent duplicates
    logger.handlers.clear()

    # File handler with rotation
    log_file = os.path.join(CONFIG['LOG_DIR'], 'app.log')
    file_handler = TimedRotatingFileHandler(
        log_file,
        when='midnight',
        interval=1,
        backupCount=CONFIG['LOG_DAYS_TO_KEEP'],
        encoding='utf-8'
    )
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    logger.addHandler(file_handler)

    # Console handler (optional, only for interactive runs)
    if CONFIG['APP_DEBUG']:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        logger.addHandler(console_handler)

    cleanup_old_logs()


def cleanup_old_logs():
    """Delete rotated log files older than LOG_DAYS_TO_KEEP days."""
    cutoff_date = datetime.now() - timedelta(days=CONFIG['LOG_DAYS_TO_KEEP'])
    logger.debug(f"Cleaning up logs older than {cutoff_date.strftime('%Y-%m-%d')}")

    removed = 0
    for log_file in glob.glob(os.path.join(CONFIG['LOG_DIR'], 'app.log.*')):
        try:
            file_mtime = datetime.fromtimestamp(os.path.getmtime(log_file))
            if file_mtime < cutoff_date:
                os.remove(log_file)
                removed += 1
                logger.debug(f"Deleted old log file: {log_file}")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to delete old log file {log_file}: {e}")
    return removed


def get_config(key):
    """Get a configuration value by key."""
    return CONFIG.get(key)


def init_config():
    """Initialize configuration and ensure directories exist."""
    db_dir = os.path.dirname(get_db_path())
    for dir_path in [CONFIG['DATA_DIR'], CONFIG['LOG_DIR'], db_dir]:
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)
    setup_logging()

    logger = logging.getLogger('LP.init')
    logger.debug("++++++++++++++++++++++++ START OF NEW SESSION ++++++++++++++++++++++++")
    logger.debug(f"APP_ENV: {CONFIG['APP_ENV']}, LOG_DIR: {CONFIG['LOG_DIR']}")
    logger.debug(f"DB_PATH: {get_db_path()}")
    logger.debug("Configuration initialized")
