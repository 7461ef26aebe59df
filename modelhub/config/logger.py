"""
Logger configuration for ModelHub using Loguru.

This module provides the logging setup shared by the store, the registry
and the HTTP layer:
- Colored console output
- Rotating file handlers for application, error and request logs
- Request/response logging helpers for the API middleware
"""

import sys
from datetime import datetime
from pathlib import Path

from fastapi import Request
from loguru import logger

from modelhub.config.settings import settings


class LoguruConfig:
    """Loguru configuration class for the application."""

    def __init__(self, app_name: str = "modelhub", logs_dir: str = settings.LOGS_DIR):
        self.app_name = app_name
        self.logs_dir = Path(logs_dir)

    def setup_logger(self, log_level: str = "INFO", log_to_file: bool = True) -> None:
        """Configure Loguru logger for the application."""

        # Remove default handler
        logger.remove()

        # Console handler with colors and formatting
        logger.add(
            sys.stdout,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            level=log_level,
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

        if not log_to_file:
            return

        self.logs_dir.mkdir(parents=True, exist_ok=True)

        # General application logs
        logger.add(
            self.logs_dir / "app.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
            compression="zip",
            encoding="utf-8",
        )

        # Error logs only (store write failures land here)
        logger.add(
            self.logs_dir / "errors.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="ERROR",
            rotation="5 MB",
            retention="30 days",
            compression="zip",
            encoding="utf-8",
        )

        # Request logs
        logger.add(
            self.logs_dir / "requests.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}",
            level="INFO",
            rotation="20 MB",
            retention="14 days",
            compression="zip",
            encoding="utf-8",
            filter=lambda record: "REQUEST" in record["message"],
        )


def log_request_start(request: Request) -> None:
    """Log the start of a request using Loguru."""
    logger.bind(
        client_ip=request.client.host if request.client else None,
        timestamp=datetime.now().isoformat(),
    ).info(f"REQUEST START: {request.method} {request.url.path}")


def log_request_end(request: Request, status_code: int, process_time: float) -> None:
    """Log the completion of a request using Loguru."""
    logger.info(
        f"REQUEST END: {request.method} {request.url.path} - {status_code} ({process_time:.4f}s)"
    )


def log_request_error(request: Request, error: Exception, process_time: float) -> None:
    """Log a request error using Loguru."""
    logger.bind(error_type=type(error).__name__).error(
        f"REQUEST ERROR: {request.method} {request.url.path} - {error} ({process_time:.4f}s)"
    )


# Initialize Loguru configuration
loguru_config = LoguruConfig()
loguru_config.setup_logger(log_level=settings.LOG_LEVEL, log_to_file=settings.LOG_TO_FILE)

# Export logger for use in other modules
app_logger = logger
