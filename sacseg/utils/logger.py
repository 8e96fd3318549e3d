"""Logging utilities."""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Union


def setup_logger(name: str = 'sacseg', log_level: Union[int, str] = logging.INFO,
                log_file: str = None) -> logging.Logger:
    """Setup logger with console and optional file handler."""
    logger = logging.getLogger(name)
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
    logger.setLevel(log_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Repeated setup must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def setup_logger_from_config(config: dict, name: str = 'sacseg') -> logging.Logger:
    """Setup logger from the ``logging`` section of a config dict."""
    section = config.get('logging', {})
    log_dir = section.get('log_dir')
    log_file = create_session_log_file(log_dir) if log_dir else None
    return setup_logger(name, section.get('level', logging.INFO), log_file)


def create_session_log_file(log_dir: str = 'logs') -> str:
    """Create timestamped log file for session."""
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return f"{log_dir}/sacseg_{timestamp}.log"
