# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""template-mailer: validate, render and send template-based emails over SMTP.

Usage:
    from template_mailer import EmailDispatcher

    dispatcher = EmailDispatcher()
    dispatcher.configure({"host": "smtp.example.com", "port": 587,
                          "user": "me@example.com", "pass": "secret"})
    await dispatcher.send({"to": "you@example.com", "subject": "Hi",
                           "html": "-", "data": {"name": "Ana"}})
"""

from .dispatcher import EmailDispatcher
from .errors import (
    ConfigurationError,
    DispatchError,
    InvalidDataError,
    MailerError,
    NotConfiguredError,
    TemplateNotFoundError,
    TemplateRenderError,
)
from .interface import EMAIL_PORT_ID, EmailPort, MailerComponent, MailerInterface
from .models import AttachmentRecord, EmailRecord, TransportConfig
from .transport import SmtpTransport, Transport

__version__ = "0.1.0"

__all__ = [
    "EmailDispatcher",
    "TransportConfig",
    "AttachmentRecord",
    "EmailRecord",
    "Transport",
    "SmtpTransport",
    "MailerInterface",
    "EmailPort",
    "MailerComponent",
    "EMAIL_PORT_ID",
    "MailerError",
    "ConfigurationError",
    "NotConfiguredError",
    "InvalidDataError",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "DispatchError",
]
