"""Structured logging for the cdv2spm CLI (structlog over stdlib logging)."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

_QUIET_LIBRARIES = ("httpx", "httpcore")


def _renderers(log_format: str) -> list[structlog.types.Processor]:
    if log_format == "json":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    # ConsoleRenderer prints tracebacks itself
    return [structlog.dev.ConsoleRenderer(colors=False)]


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Route structlog events through one stderr handler.

    *level* and *fmt* override ``CDV2SPM_LOG_LEVEL`` (default INFO) and
    ``CDV2SPM_LOG_FORMAT`` (``console`` or ``json``). Stdout is left to the
    converter's own progress messages.
    """
    log_level = (level or os.environ.get("CDV2SPM_LOG_LEVEL", "INFO")).upper()
    log_format = (fmt or os.environ.get("CDV2SPM_LOG_FORMAT", "console")).lower()

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="%H:%M:%S"),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "cdv2spm": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        *_renderers(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "cdv2spm",
                },
            },
            "root": {"handlers": ["stderr"], "level": log_level},
            "loggers": {
                "cdv2spm": {"level": log_level},
                **{name: {"level": "WARNING"} for name in _QUIET_LIBRARIES},
            },
        }
    )
