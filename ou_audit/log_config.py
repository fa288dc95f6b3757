"""Настройка логирования.

- Консольный handler: всегда (stderr).
- Файловый handler: только если задан путь (--log-file / OU_AUDIT_LOG_FILE),
  ротация по размеру через RotatingFileHandler.
- Уровень: настраивается через log_level (по умолчанию INFO).
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAME = "ou_audit"

# Отслеживаем установленные handlers, чтобы при повторном вызове удалять старые.
_file_handler: logging.Handler | None = None
_console_handler: logging.Handler | None = None


def _parse_level(level: str) -> int:
    level_str = (level or "INFO").strip().upper()
    if level_str not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        level_str = "INFO"
    return getattr(logging, level_str, logging.INFO)


def setup_logging(
    level: str = "INFO",
    log_file: str = "",
    max_size_mb: int = 10,
    backup_count: int = 5,
) -> logging.Logger:
    """Настраивает логгер приложения и возвращает его."""
    global _file_handler, _console_handler

    log_level = _parse_level(level)
    logger = logging.getLogger(LOGGER_NAME)

    for h in (_file_handler, _console_handler):
        if h and h in logger.handlers:
            logger.removeHandler(h)
            h.close()
    _file_handler = None

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    _console_handler = ch
    logger.addHandler(ch)

    path = (log_file or "").strip()
    if path:
        log_dir = os.path.dirname(os.path.abspath(path))
        os.makedirs(log_dir, exist_ok=True)
        fh = RotatingFileHandler(
            path,
            maxBytes=max(1, int(max_size_mb)) * 1024 * 1024,
            backupCount=max(0, int(backup_count)),
            encoding="utf-8",
        )
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        _file_handler = fh
        logger.addHandler(fh)

    logger.setLevel(log_level)
    logger.propagate = False

    # ldap3 очень шумный на DEBUG
    logging.getLogger("ldap3").setLevel(max(log_level, logging.WARNING))

    logger.debug("Логирование настроено: уровень=%s, файл=%s", logging.getLevelName(log_level), path or "—")
    return logger
