# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Component/port layer exposing the dispatcher behind a small interface.

Callers that only need ``configure`` and ``send`` depend on
``MailerInterface``; ``EmailPort`` is the concrete implementation and
``MailerComponent`` groups the ports a component provides.

Example:
    Using the component::

        component = MailerComponent()
        port = component.get_port(EMAIL_PORT_ID)
        port.configure(smtp_config)
        await port.send(email)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from .dispatcher import EmailDispatcher
from .logger import get_logger
from .models import EmailRecord, TransportConfig

EMAIL_PORT_ID = "emailService"


@runtime_checkable
class MailerInterface(Protocol):
    """Public contract of the mailer component."""

    def configure(self, config: TransportConfig | Mapping[str, Any]) -> None: ...

    async def send(self, email: EmailRecord | Mapping[str, Any]) -> None: ...


class EmailPort:
    """Port delegating every call to an EmailDispatcher."""

    def __init__(self, port_id: str, dispatcher: EmailDispatcher | None = None):
        self.id = port_id
        self.dispatcher = dispatcher or EmailDispatcher()
        get_logger("EmailPort").info("Email interface port initialized with id %s", port_id)

    def configure(self, config: TransportConfig | Mapping[str, Any]) -> None:
        self.dispatcher.configure(config)

    async def send(self, email: EmailRecord | Mapping[str, Any]) -> None:
        await self.dispatcher.send(email)


class MailerComponent:
    """Component holding the mailer's ports."""

    def __init__(self, dispatcher: EmailDispatcher | None = None):
        self.ports: list[EmailPort] = [EmailPort(EMAIL_PORT_ID, dispatcher)]

    def get_port(self, port_id: str) -> EmailPort:
        for port in self.ports:
            if port.id == port_id:
                return port
        raise KeyError(port_id)
