import os
import time
import logging
from logging.handlers import TimedRotatingFileHandler
import config
from config import CONFIG, COLORS


def test_db_path_follows_env(monkeypatch):
    monkeypatch.setitem(CONFIG, 'DB_PATH', '/data/live.db')
    monkeypatch.setitem(CONFIG, 'DB_PATH_TEST', '/data/test.db')
    monkeypatch.setitem(CONFIG, 'APP_ENV', 'prod')
    assert config.get_db_path() == '/data/live.db'
    monkeypatch.setitem(CONFIG, 'APP_ENV', 'test')
    assert config.get_db_path() == '/data/test.db'


def test_master_bg_marks_test_mode(monkeypatch):
    monkeypatch.setitem(CONFIG, 'APP_ENV', 'test')
    assert config.master_bg() == COLORS["home_test_bg"]
    monkeypatch.setitem(CONFIG, 'APP_ENV', 'prod')
    assert config.master_bg() == COLORS["home_bg"]


def test_get_config():
    assert config.get_config('CURRENCY') == CONFIG['CURRENCY']
    assert config.get_config('NOT_A_KEY') is None


def test_cleanup_old_logs(tmp_path, monkeypatch):
    monkeypatch.setitem(CONFIG, 'LOG_DIR', str(tmp_path))
    monkeypatch.setitem(CONFIG, 'LOG_DAYS_TO_KEEP', 10)
    old_log = tmp_path / "app.log.2020-01-01"
    new_log = tmp_path / "app.log.2020-01-02"
    current = tmp_path / "app.log"
    for path in (old_log, new_log, current):
        path.write_text("x")
    stale = time.time() - 30 * 86400
    os.utime(old_log, (stale, stale))
    os.utime(current, (stale, stale))

    assert config.cleanup_old_logs() == 1
    assert not old_log.exists()
    assert new_log.exists()
    assert current.exists()


def test_init_config_sets_up_logging(tmp_path, monkeypatch):
    monkeypatch.setitem(CONFIG, 'DATA_DIR', str(tmp_path / "database"))
    monkeypatch.setitem(CONFIG, 'LOG_DIR', str(tmp_path / "logs"))
    monkeypatch.setitem(CONFIG, 'DB_PATH', str(tmp_path / "database" / "lp.db"))
    monkeypatch.setitem(CONFIG, 'APP_ENV', 'prod')
    monkeypatch.setitem(CONFIG, 'APP_DEBUG', False)

    config.init_config()
    lp_logger = logging.getLogger('LP')
    try:
        assert (tmp_path / "database").is_dir()
        assert any(isinstance(h, TimedRotatingFileHandler) for h in lp_logger.handlers)
        logging.getLogger('LP.test').warning("hello")
        for handler in lp_logger.handlers:
            handler.flush()
        assert "hello" in (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")
    finally:
        for handler in list(lp_logger.handlers):
            handler.close()
            lp_logger.removeHandler(handler)
