"""
Settings and logging setup for tdtree.

Settings come from environment variables; explicit function arguments
always win over them.

    TDTREE_LOG_LEVEL       DEBUG | INFO | WARNING | ERROR   (default INFO)
    TDTREE_BASE_URI        prefix for '#fragment' leaves    (default "")
    TDTREE_CSV_DELIMITER   delimiter of tree CSV files      (default ",")
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    base_uri: str = ""
    csv_delimiter: str = ","


def load_settings() -> Settings:
    """Read Settings from the environment."""
    delimiter = os.getenv("TDTREE_CSV_DELIMITER", ",")
    if len(delimiter) != 1:
        raise ValueError(f"TDTREE_CSV_DELIMITER must be a single character, got {delimiter!r}")
    return Settings(
        log_level=os.getenv("TDTREE_LOG_LEVEL", "INFO").upper(),
        base_uri=os.getenv("TDTREE_BASE_URI", ""),
        csv_delimiter=delimiter,
    )


def configure_logging(
    level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
    log_to_console: bool = True,
) -> None:
    """Configure the tdtree logger. Call once from an application entry point."""
    level_name = (level or load_settings().log_level).upper()
    level_value = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger("tdtree")
    logger.setLevel(level_value)
    # Avoid duplicate handlers when called twice
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level_value)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(file_handler)
    if log_to_console:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(level_value)
        console.setFormatter(logging.Formatter("%(levelname)s | %(name)s | %(message)s"))
        logger.addHandler(console)


__all__ = ["Settings", "configure_logging", "load_settings"]
