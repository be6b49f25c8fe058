# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exceptions raised by the template mailer.

Every error carries a stable ``code`` attribute so callers (and the metrics
collector) can tell failures apart without matching on messages.
"""

from __future__ import annotations


class MailerError(RuntimeError):
    """Base class for all template mailer failures."""

    code = "mailer_error"
    default_message = "Email operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class ConfigurationError(MailerError):
    """Raised when an SMTP transport configuration is invalid."""

    code = "invalid_configuration"
    default_message = "Invalid SMTP configuration"


class NotConfiguredError(MailerError):
    """Raised when sending before a transport has been configured."""

    code = "not_configured"
    default_message = "SMTP not configured. Call configure() first."


class InvalidDataError(MailerError):
    """Raised when an email payload (or one of its attachments) is invalid."""

    code = "invalid_data"
    default_message = "Invalid email data"


class TemplateNotFoundError(MailerError):
    """Raised when the template file cannot be read."""

    code = "template_not_found"

    def __init__(self, path: str):
        super().__init__(f"Template file not found: {path}")
        self.path = path


class TemplateRenderError(MailerError):
    """Raised when a template cannot be compiled or rendered."""

    code = "template_error"
    default_message = "Template rendering failed"


class DispatchError(MailerError):
    """Raised when the transport fails to hand off a message.

    The original transport exception is chained as ``__cause__``.
    """

    code = "dispatch_failed"
    default_message = "Failed to send email"
