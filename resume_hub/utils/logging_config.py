"""
Logging setup for the Resume Hub service.

Console output always, rotating log files (all records plus an errors-only
file) outside of tests. Module loggers live under the ``resume_hub`` namespace.
"""
import functools
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, List

FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-34s | %(funcName)-20s:%(lineno)-4d | %(message)s",
}
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# noisy third-party loggers and the level they are capped at
QUIET_LOGGERS = {"pdfminer": "ERROR", "pymongo": "WARNING", "multipart": "WARNING"}


def _rotating_handler(path: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(path),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": LOG_BACKUPS,
        "encoding": "utf8",
    }


def setup_logging(level: str = "INFO", log_dir: str = None, to_file: bool = True, style: str = "detailed") -> None:
    """
    Configure the root logger

    Args:
        level: Root level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for log files (LOG_DIR env var, default ./logs)
        to_file: Also write rotating log files
        style: 'simple' or 'detailed' console format
    """
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": style if style in FORMATS else "detailed",
            "stream": "ext://sys.stdout",
        }
    }

    log_dir = Path(log_dir or os.getenv("LOG_DIR", "logs"))
    if to_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d")
        handlers["file"] = _rotating_handler(log_dir / f"resume_hub_{stamp}.log", level)
        handlers["error_file"] = _rotating_handler(log_dir / f"resume_hub_errors_{stamp}.log", "ERROR")

    names: List[str] = list(handlers)
    loggers: Dict[str, Dict[str, Any]] = {
        "": {"level": level, "handlers": list(names), "propagate": False},
        "uvicorn": {"level": "INFO", "handlers": list(names), "propagate": False},
    }
    for name, cap in QUIET_LOGGERS.items():
        loggers[name] = {"level": cap, "handlers": [], "propagate": True}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            key: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"} for key, fmt in FORMATS.items()
        },
        "handlers": handlers,
        "loggers": loggers,
    })

    logging.getLogger("resume_hub.logging").info(
        f"Logging configured - level={level}, handlers={names}, dir={log_dir if to_file else '-'}"
    )


def configure_for_environment():
    """Pick logging settings from ENVIRONMENT (production, development, testing) and LOG_LEVEL"""
    environment = os.getenv("ENVIRONMENT", "development").lower()
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    if environment == "testing":
        setup_logging(level="WARNING", to_file=False, style="simple")
    elif environment == "development":
        setup_logging(level="DEBUG")
    else:
        setup_logging(level=log_level)


def get_logger(name: str) -> logging.Logger:
    """Logger under the resume_hub namespace for a module name"""
    if name.startswith("resume_hub"):
        return logging.getLogger(name)
    return logging.getLogger(f"resume_hub.{name}")


def log_function_call(func):
    """Debug-log entry and duration of a core function; errors are logged and re-raised"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        start = time.perf_counter()
        logger.debug(f"Entering {func.__name__}")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error in {func.__name__} after {time.perf_counter() - start:.3f}s: {e}")
            raise
        logger.debug(f"Completed {func.__name__} in {time.perf_counter() - start:.3f}s")
        return result

    return wrapper


class PerformanceMonitor:
    """Times a block and logs it, warning above ``threshold_ms``"""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.start_time = None
        self.elapsed_ms = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self.start_time) * 1000
        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(f"{self.operation_name} took {self.elapsed_ms:.2f}ms (threshold {self.threshold_ms}ms)")
        else:
            self.logger.info(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms")
        return False
