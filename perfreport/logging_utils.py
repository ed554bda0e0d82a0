"""Logging helpers for the report engine."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO", output_dir: Optional[Path] = None) -> Optional[Path]:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(log_level)
    if output_dir is None:
        return None

    output_dir.mkdir(parents=True, exist_ok=True)
    log_path = output_dir / "perfreport.log"
    file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(file_handler)
    return log_path


def load_env(path: str | None = None) -> None:
    if path is None:
        path = os.getenv("ENV_FILE", ".env")
    load_dotenv(path)
