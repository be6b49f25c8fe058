# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SMTP transport for rendered messages.

The dispatcher hands the transport a plain message dictionary::

    {
        "from": "sender@example.com",
        "to": "a@example.com, b@example.com",
        "subject": "Hello",
        "html": "<p>Hi</p>",
        "attachments": [
            {"filename": "report.pdf", "content": b"...", "path": None,
             "content_type": "application/pdf"},
        ],
    }

``SmtpTransport`` turns it into an ``EmailMessage`` and delivers it with
aiosmtplib, opening one connection per dispatch.

TLS behaviour depends only on the ``secure`` flag:
- secure=True: implicit TLS from the first byte (port 465)
- secure=False: plain connection, upgraded with STARTTLS when the server
  advertises it
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from email.message import EmailMessage
from pathlib import Path
from typing import Any, Protocol

import aiohttp
import aiosmtplib

from .logger import get_logger
from .models import DEFAULT_CONTENT_TYPE

DEFAULT_TIMEOUT = 10.0


class Transport(Protocol):
    """Anything able to deliver a message dictionary."""

    async def dispatch(self, message: dict[str, Any]) -> None: ...


class AttachmentLoader:
    """Resolve attachment content from inline bytes, a local file or a URL."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self._timeout = timeout

    async def load(self, attachment: dict[str, Any]) -> bytes:
        content = attachment.get("content")
        if content is not None:
            return bytes(content)

        path = attachment.get("path")
        if not path:
            raise ValueError(f"Attachment {attachment.get('filename')} has no content")

        if path.startswith(("http://", "https://")):
            return await self._fetch_url(path)
        return await asyncio.to_thread(Path(path).read_bytes)

    async def load_all(self, attachments: Sequence[dict[str, Any]]) -> list[bytes]:
        return list(await asyncio.gather(*(self.load(att) for att in attachments)))

    async def _fetch_url(self, url: str) -> bytes:
        timeout = aiohttp.ClientTimeout(total=self._timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url) as response:
                response.raise_for_status()
                return await response.read()


def _split_content_type(content_type: str | None) -> tuple[str, str]:
    mime = (content_type or "").split(";", 1)[0].strip()
    if "/" in mime:
        maintype, subtype = mime.split("/", 1)
        if maintype.strip() and subtype.strip():
            return maintype.strip(), subtype.strip()
    return tuple(DEFAULT_CONTENT_TYPE.split("/", 1))  # type: ignore[return-value]


def build_message(
    message: dict[str, Any], contents: Sequence[bytes] = ()
) -> EmailMessage:
    """Build an EmailMessage from a message dictionary.

    Args:
        message: Message dictionary (from, to, subject, html, attachments).
        contents: Loaded content for each attachment, in the same order.

    Raises:
        ValueError: If the number of contents does not match the attachments.
    """
    attachments = message.get("attachments") or []
    if len(contents) != len(attachments):
        raise ValueError(
            f"Expected content for {len(attachments)} attachments, got {len(contents)}"
        )

    msg = EmailMessage()
    msg["From"] = message["from"]
    msg["To"] = ", ".join(
        part.strip() for part in message["to"].split(",") if part.strip()
    )
    msg["Subject"] = message["subject"]
    msg.set_content(message.get("html", ""), subtype="html")

    for att, content in zip(attachments, contents, strict=True):
        maintype, subtype = _split_content_type(att.get("content_type"))
        msg.add_attachment(content, maintype=maintype, subtype=subtype, filename=att["filename"])
    return msg


class SmtpTransport:
    """Deliver messages through an SMTP relay with aiosmtplib.

    Attributes:
        host: SMTP server hostname.
        port: SMTP server port.
        secure: Whether implicit TLS is used.
        timeout: Per-command timeout in seconds.
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        *,
        secure: bool,
        timeout: float = DEFAULT_TIMEOUT,
        attachment_loader: AttachmentLoader | None = None,
    ):
        self.host = host
        self.port = port
        self.secure = secure
        self.timeout = timeout
        self._user = user
        self._password = password
        self._attachments = attachment_loader or AttachmentLoader(timeout=timeout)
        self.logger = get_logger("SmtpTransport")

    async def _connect(self) -> aiosmtplib.SMTP:
        """Open and authenticate a new SMTP connection.

        Raises:
            asyncio.TimeoutError: If connection and login exceed the hard limit.
            aiosmtplib.SMTPException: If connection or authentication fails.
        """
        if self.secure:
            smtp = aiosmtplib.SMTP(
                hostname=self.host, port=self.port, use_tls=True, start_tls=False, timeout=self.timeout
            )
        else:
            smtp = aiosmtplib.SMTP(
                hostname=self.host, port=self.port, use_tls=False, start_tls=None, timeout=self.timeout
            )

        async def _do_connect():
            await smtp.connect()
            await smtp.login(self._user, self._password)

        try:
            # aiosmtplib timeouts apply per command; this bounds the whole handshake
            await asyncio.wait_for(_do_connect(), timeout=self.timeout + 5.0)
        except BaseException:
            smtp.close()
            raise
        return smtp

    async def dispatch(self, message: dict[str, Any]) -> None:
        contents = await self._attachments.load_all(message.get("attachments") or [])
        msg = build_message(message, contents)

        smtp = await self._connect()
        try:
            await asyncio.wait_for(smtp.send_message(msg), timeout=self.timeout * 3)
        finally:
            try:
                await smtp.quit()
            except Exception as exc:
                self.logger.debug("Ignoring error while closing SMTP session: %s", exc)
                smtp.close()
