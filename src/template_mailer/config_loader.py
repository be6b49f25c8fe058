# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Settings loader for the template mailer.

Settings are read from an INI file with environment variables as fallbacks.
The file path is taken from the argument, else ``TEMPLATE_MAILER_CONFIG``,
else ``config.ini`` in the working directory; a missing file is not an error.

Example:
    Configuration file format (config.ini)::

        [smtp]
        host = smtp.example.com
        port = 587
        user = mailer@example.com
        password = secret
        timeout = 10

        [templates]
        default_path = /etc/template-mailer/base.html

        [logging]
        level = INFO

    Environment variables:
      SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, SMTP_TIMEOUT
      TEMPLATE_MAILER_TEMPLATE - Default template path
      TEMPLATE_MAILER_LOG_LEVEL - Logging level (default: INFO)
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .logger import get_logger

DEFAULT_SMTP_PORT = 587
DEFAULT_SMTP_TIMEOUT = 10.0


@dataclass
class MailerSettings:
    """Resolved mailer settings.

    Attributes:
        smtp_host: SMTP server hostname.
        smtp_port: SMTP server port.
        smtp_user: SMTP login, also the sender address.
        smtp_password: SMTP password.
        smtp_timeout: Per-command SMTP timeout in seconds.
        default_template: Template used when a send gives none.
        log_level: Logging level name.
    """

    smtp_host: str | None = None
    smtp_port: int = DEFAULT_SMTP_PORT
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_timeout: float = DEFAULT_SMTP_TIMEOUT
    default_template: str | None = None
    log_level: str = "INFO"

    def missing_smtp_fields(self) -> list[str]:
        """Names of the required SMTP environment variables that have no value."""
        required = {
            "SMTP_HOST": self.smtp_host,
            "SMTP_USER": self.smtp_user,
            "SMTP_PASS": self.smtp_password,
        }
        return [name for name, value in required.items() if not value]

    def transport_config(self) -> dict[str, Any]:
        return {
            "host": self.smtp_host or "",
            "port": self.smtp_port,
            "user": self.smtp_user or "",
            "pass": self.smtp_password or "",
        }


def load_settings(config_path: str | Path | None = None) -> MailerSettings:
    """Load settings from an INI file with environment variables as fallbacks.

    Raises:
        ValueError: If a numeric setting cannot be parsed.
    """
    path = Path(config_path or os.getenv("TEMPLATE_MAILER_CONFIG", "config.ini"))
    parser = configparser.ConfigParser()
    read_files = parser.read(path)
    if read_files:
        get_logger("ConfigLoader").debug("Loaded settings from %s", path)

    def get(section: str, option: str, fallback: str | None = None) -> str | None:
        if parser.has_option(section, option):
            return parser.get(section, option)
        return fallback

    def get_int(section: str, option: str, fallback: str | None, default: int) -> int:
        value = get(section, option, fallback)
        if value is None or value == "":
            return default
        return int(value)

    def get_float(section: str, option: str, fallback: str | None, default: float) -> float:
        value = get(section, option, fallback)
        if value is None or value == "":
            return default
        return float(value)

    return MailerSettings(
        smtp_host=get("smtp", "host", os.getenv("SMTP_HOST")),
        smtp_port=get_int("smtp", "port", os.getenv("SMTP_PORT"), DEFAULT_SMTP_PORT),
        smtp_user=get("smtp", "user", os.getenv("SMTP_USER")),
        smtp_password=get("smtp", "password", os.getenv("SMTP_PASS")),
        smtp_timeout=get_float("smtp", "timeout", os.getenv("SMTP_TIMEOUT"), DEFAULT_SMTP_TIMEOUT),
        default_template=get("templates", "default_path", os.getenv("TEMPLATE_MAILER_TEMPLATE")),
        log_level=get("logging", "level", os.getenv("TEMPLATE_MAILER_LOG_LEVEL")) or "INFO",
    )
