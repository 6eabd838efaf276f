"""Structured logging setup for batch evaluation runs."""

from __future__ import annotations

import logging
from typing import Literal

import structlog

LogFormat = Literal["json", "console"]


def configure_logging(level: str = "INFO", *, log_format: LogFormat = "json") -> None:
    """Configure structlog for the CLI.

    JSON lines are the default so evaluation runs can be collected by log
    shippers; ``console`` renders key/value pairs for local form debugging.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=log_level, format="%(message)s")

    renderer = (
        structlog.dev.ConsoleRenderer(colors=False)
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )


def bind_run_context(*, form_id: str, **extra: object) -> None:
    """Attach form-level fields to every log event of the current run."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(form_id=form_id, **extra)
