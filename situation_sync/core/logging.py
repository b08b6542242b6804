"""Application logging with Loguru + Slack notifications.

Every line carries the sync job it ran under (``extra[job]``, "-" outside a run),
so fetcher, HTTP and store messages from concurrent sources can be told apart.
"""

import logging
import sys
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any

import httpx
from loguru import logger

from situation_sync.core.config import settings

LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[job]} | {extra[name]}:{function}:{line} | {message}"
)
NO_JOB = "-"

_logging_configured = False


class InterceptHandler(logging.Handler):
    """Redirect stdlib logs to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_name == "emit":
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _slack_sink(message: Any) -> None:
    if not settings.SLACK_WEBHOOK_URL:
        return

    record = message.record
    name = record["extra"].get("name") or record.get("name", "situation_sync")
    job = record["extra"].get("job", NO_JOB)
    where = f"{job} {name}" if job != NO_JOB else name
    text = f"[{record['level'].name}] {where}:{record['function']}:{record['line']}\n{record['message']}"
    try:
        httpx.post(settings.SLACK_WEBHOOK_URL, json={"text": text}, timeout=5.0)
    except httpx.HTTPError:
        # Logging from inside a sink would recurse
        pass


def _normalize_level(raw: str | None) -> str:
    level = (raw or "INFO").strip().upper()
    level = {"WARN": "WARNING", "FATAL": "CRITICAL"}.get(level, level)
    if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
        return "INFO"
    return level


def configure_logging() -> None:
    global _logging_configured

    if _logging_configured:
        return
    _logging_configured = True

    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    level = _normalize_level(settings.effective_log_level)

    logger.remove()
    logger.configure(extra={"name": "situation_sync", "job": NO_JOB})
    logger.add(
        sys.stdout,
        level=level,
        format=LOG_FORMAT,
        backtrace=False,
        diagnose=False,
    )
    logger.add(
        log_dir / "sync.log",
        level=level,
        format=LOG_FORMAT,
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        backtrace=False,
        diagnose=False,
    )

    if settings.SLACK_WEBHOOK_URL:
        logger.add(_slack_sink, level="ERROR", enqueue=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access", "alembic"]:
        logging.getLogger(logger_name).handlers = [InterceptHandler()]
        logging.getLogger(logger_name).propagate = False

    # per-request INFO lines from the upstream clients
    for logger_name in ["httpx", "httpcore"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> logger.__class__:
    return logger.bind(name=name)


def job_context(job: str) -> AbstractContextManager:
    """Tag every message logged while the block runs, including from gathered tasks."""
    return logger.contextualize(job=job)


configure_logging()
