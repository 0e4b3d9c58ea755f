"""Logging for apidoc-validator.

Log records go through ``click.echo`` on stderr, next to the command's own
output, so ``CliRunner`` captures them the same way.
"""

from __future__ import annotations

import logging

import click

_LOGGER_NAME = "apidoc_validator"

LEVEL_COLORS = {
    logging.DEBUG: "blue",
    logging.INFO: "green",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}


class ClickEchoHandler(logging.Handler):
    """Echo formatted records to stderr with a colored level tag."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            tag = click.style(record.levelname.lower(), fg=LEVEL_COLORS.get(record.levelno))
            click.echo(f"{tag}: {message}", err=True)
        except Exception:
            self.handleError(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the apidoc_validator hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Route apidoc_validator records through click; DEBUG and logger names when verbose."""
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = ClickEchoHandler(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s" if verbose else "%(message)s"))
    logger.addHandler(handler)
    return logger
