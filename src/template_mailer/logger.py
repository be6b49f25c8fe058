"""Logging utilities for the template mailer.

This module provides a centralized logging helper. The actual logging setup
(level, handlers, format) is configured via ``logging.basicConfig()`` in the
command-line entry point to avoid duplicate handlers.

Example:
    Typical usage in a module::

        from template_mailer.logger import get_logger

        logger = get_logger("Dispatcher")
        logger.info("Email sent")
"""

import logging

DEFAULT_LOGGER_NAME = "TemplateMailer"


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Retrieve a logger instance.

    This function returns a standard library logger with the specified name.
    It does not configure handlers or formatters; that responsibility lies
    with the application entry point.

    Args:
        name: The logger name. Defaults to "TemplateMailer".

    Returns:
        A ``logging.Logger`` instance bound to the given name.
    """
    return logging.getLogger(name)


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler used by the command-line entry point."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
