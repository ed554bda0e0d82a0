from __future__ import annotations

import logging
import os

from perfreport.logging_utils import configure_logging, load_env


def test_configure_logging_writes_file(tmp_path):
    root = logging.getLogger()
    before = list(root.handlers)
    try:
        log_path = configure_logging("INFO", output_dir=tmp_path / "logs")
        assert log_path == tmp_path / "logs" / "perfreport.log"
        logging.getLogger("perfreport.test").warning("hello from test")
        for handler in root.handlers:
            handler.flush()
        assert "hello from test" in log_path.read_text()
    finally:
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)
                handler.close()


def test_configure_logging_without_file():
    assert configure_logging("DEBUG") is None


def test_load_env_reads_file(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("PERFREPORT_TEST_VALUE=42\n")
    monkeypatch.delenv("PERFREPORT_TEST_VALUE", raising=False)
    load_env(str(env_file))
    assert os.environ["PERFREPORT_TEST_VALUE"] == "42"


def test_load_env_uses_env_file_variable(tmp_path, monkeypatch):
    env_file = tmp_path / "custom.env"
    env_file.write_text("PERFREPORT_OTHER=yes\n")
    monkeypatch.setenv("ENV_FILE", str(env_file))
    monkeypatch.delenv("PERFREPORT_OTHER", raising=False)
    load_env()
    assert os.environ["PERFREPORT_OTHER"] == "yes"
