# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Validation, template rendering and dispatch of outgoing emails.

This module provides the EmailDispatcher class, which:

- Validates and stores the SMTP transport configuration
- Validates email payloads and their attachments
- Renders the HTML body from a template file
- Hands the resulting message to the transport exactly once

The rendered template always replaces the payload's literal ``html`` field;
``html`` must still be present for the payload to be valid.

Example:
    Sending an email::

        dispatcher = EmailDispatcher()
        dispatcher.configure(
            {"host": "smtp.example.com", "port": 587, "user": "me@example.com", "pass": "secret"}
        )
        await dispatcher.send(
            {"to": "you@example.com", "subject": "Hi", "html": "-", "data": {"name": "Ana"}},
            template_path="welcome.html",
        )
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import (
    ConfigurationError,
    DispatchError,
    InvalidDataError,
    MailerError,
    NotConfiguredError,
    TemplateNotFoundError,
)
from .logger import get_logger
from .metrics import MailerMetrics
from .models import EmailRecord, TransportConfig
from .templates import DEFAULT_TEMPLATE_PATH, TemplateRenderer, read_template
from .transport import SmtpTransport, Transport

TransportFactory = Callable[..., Transport]


def _describe_errors(exc: ValidationError) -> str:
    """Summarize a ValidationError by field and reason, without input values."""
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'value'}: {error['msg']}"
        for error in exc.errors(include_input=False, include_url=False)
    )


class EmailDispatcher:
    """Configure an SMTP transport and send template-rendered emails.

    Attributes:
        transport: The transport built by ``configure``, or None.
        logger: Logger used for configuration and delivery events.
        metrics: Optional Prometheus collector.
    """

    def __init__(
        self,
        config: TransportConfig | Mapping[str, Any] | None = None,
        *,
        default_template_path: str | Path | None = None,
        transport_factory: TransportFactory | None = None,
        renderer: TemplateRenderer | None = None,
        metrics: MailerMetrics | None = None,
    ):
        self.transport: Transport | None = None
        self._config: TransportConfig | None = None
        self._default_template_path = str(default_template_path or DEFAULT_TEMPLATE_PATH)
        self._transport_factory = transport_factory or SmtpTransport
        self._renderer = renderer or TemplateRenderer()
        self.metrics = metrics
        self.logger = get_logger("EmailDispatcher")

        if config is not None:
            self.configure(config)

    def configure(self, config: TransportConfig | Mapping[str, Any]) -> None:
        """Validate the SMTP configuration and build the transport.

        Port 465 selects implicit TLS; every other port uses a plain
        connection.

        Raises:
            ConfigurationError: If the configuration is malformed or invalid.
        """
        try:
            transport_config = TransportConfig.create(config)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid SMTP configuration: {_describe_errors(exc)}") from exc

        if not transport_config.is_valid():
            raise ConfigurationError()

        self._config = transport_config
        self.transport = self._transport_factory(
            host=transport_config.host,
            port=transport_config.port,
            user=transport_config.user,
            password=transport_config.password,
            secure=transport_config.secure,
        )
        self.logger.info(
            "SMTP transport configured for %s:%s (secure=%s)",
            transport_config.host,
            transport_config.port,
            transport_config.secure,
        )

    def is_configured(self) -> bool:
        return self.transport is not None and self._config is not None

    async def send(
        self,
        email: EmailRecord | Mapping[str, Any],
        template_path: str | Path | None = None,
    ) -> None:
        """Validate, render and dispatch one email.

        Args:
            email: Email payload (to, subject, html, data, attachments).
            template_path: Template to render instead of the default one.

        Raises:
            NotConfiguredError: If ``configure`` has not succeeded yet.
            InvalidDataError: If the payload or an attachment is invalid.
            TemplateNotFoundError: If the template file cannot be read.
            TemplateRenderError: If the template cannot be rendered.
            DispatchError: If the transport fails; no retry is attempted.
        """
        try:
            await self._send(email, template_path)
        except MailerError as exc:
            if self.metrics:
                self.metrics.inc_error(exc.code)
            raise
        if self.metrics:
            self.metrics.inc_sent()

    async def _send(
        self,
        email: EmailRecord | Mapping[str, Any],
        template_path: str | Path | None,
    ) -> None:
        if not self.is_configured():
            raise NotConfiguredError()

        try:
            record = EmailRecord.create(email)
        except ValidationError as exc:
            raise InvalidDataError(f"Invalid email data: {_describe_errors(exc)}") from exc
        if not record.is_valid():
            raise InvalidDataError()

        path = str(template_path or self._default_template_path)
        try:
            template_text = await read_template(path)
        except TemplateNotFoundError:
            self.logger.warning("Template %s not found, email to %s not sent", path, record.to)
            raise
        html = self._renderer.render(template_text, record.data)

        attachments = [
            {
                "filename": att.filename,
                "content": att.content,
                "path": att.path,
                "content_type": att.resolve_content_type(),
            }
            for att in record.attachments or []
        ]
        message = {
            "from": self._config.user,
            "to": record.to,
            "subject": record.subject,
            "html": html,
            "attachments": attachments,
        }

        try:
            await self.transport.dispatch(message)
        except Exception as exc:
            self.logger.error("Error sending email to %s: %s", record.to, exc)
            raise DispatchError(
                f"Failed to send email: {type(exc).__name__}: {exc}"
            ) from exc
        self.logger.info("Email sent successfully to %s", record.to)

    def get_transport_config(self) -> TransportConfig | None:
        return self._config

    def set_default_template_path(self, template_path: str | Path) -> None:
        self._default_template_path = str(template_path)

    def get_default_template_path(self) -> str:
        return self._default_template_path
