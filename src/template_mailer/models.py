# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pydantic models for the template mailer.

This module defines the records handled by the dispatcher. Construction only
copies (and type-coerces) the raw fields; business validity is checked
separately through ``is_valid()`` so that an incomplete record can still be
built, inspected and reported on.

Models:
    - TransportConfig: SMTP connection credentials
    - AttachmentRecord: A single file attachment
    - EmailRecord: One outgoing message with its attachments
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

SECURE_PORT = 465
MAX_PORT = 65535

DEFAULT_CONTENT_TYPE = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "txt": "text/plain",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "zip": "application/zip",
    "rar": "application/x-rar-compressed",
}

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def _is_blank(value: str | None) -> bool:
    return not value or not value.strip()


class TransportConfig(BaseModel):
    """SMTP connection credentials.

    The password is accepted either as ``password`` or under the raw key
    ``pass``.

    Attributes:
        host: SMTP server hostname.
        port: SMTP server port (1-65535).
        user: Login name, also used as the sender address.
        password: Login password.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    host: Annotated[str, Field(default="", description="SMTP server hostname")]
    port: Annotated[int, Field(default=0, description="SMTP server port")]
    user: Annotated[str, Field(default="", description="SMTP login and sender address")]
    password: Annotated[
        str,
        Field(default="", alias="pass", description="SMTP login password")
    ]

    @classmethod
    def create(cls, raw: TransportConfig | Mapping[str, Any]) -> TransportConfig:
        """Copy raw configuration fields into a new immutable record."""
        if isinstance(raw, cls):
            return raw.model_copy()
        return cls.model_validate(dict(raw))

    def is_valid(self) -> bool:
        return (
            len(self.host) > 0
            and 0 < self.port <= MAX_PORT
            and len(self.user) > 0
            and len(self.password) > 0
        )

    @property
    def secure(self) -> bool:
        """Implicit TLS is used on the SMTPS port only."""
        return self.port == SECURE_PORT


class AttachmentRecord(BaseModel):
    """A file attached to an outgoing email.

    Content is provided either inline (``content``) or by reference
    (``path``, a filesystem path or an ``http(s)://`` URL).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    filename: Annotated[str, Field(default="", description="Attachment filename")]
    content: Annotated[
        bytes | None,
        Field(default=None, description="Inline attachment content")
    ]
    path: Annotated[
        str | None,
        Field(default=None, description="Filesystem path or URL of the content")
    ]
    content_type: Annotated[
        str | None,
        Field(default=None, description="Explicit MIME type")
    ]

    @classmethod
    def create(cls, raw: AttachmentRecord | Mapping[str, Any]) -> AttachmentRecord:
        if isinstance(raw, cls):
            return raw
        return cls.model_validate(dict(raw))

    def is_valid(self) -> bool:
        """Check that the attachment has a name and a content source.

        A ``path`` that is given but blank makes the attachment invalid even
        when inline content is present.
        """
        if _is_blank(self.filename):
            return False
        if self.content is None and not self.path:
            return False
        if self.path is not None and _is_blank(self.path):
            return False
        return True

    def resolve_content_type(self) -> str:
        """Return the explicit MIME type, or infer it from the filename extension."""
        if self.content_type:
            return self.content_type
        _, dot, extension = self.filename.rpartition(".")
        if not dot:
            return DEFAULT_CONTENT_TYPE
        return MIME_TYPES.get(extension.lower(), DEFAULT_CONTENT_TYPE)


class EmailRecord(BaseModel):
    """One outgoing message.

    ``html`` is required for the record to be valid but the dispatcher always
    replaces it with the rendered template output.

    Attributes:
        to: Recipient address, or several comma-separated addresses.
        subject: Subject line.
        html: Literal HTML body.
        data: Values substituted into the template.
        attachments: Ordered attachments, or None.
    """

    model_config = ConfigDict(extra="ignore")

    to: Annotated[str, Field(default="", description="Comma-separated recipients")]
    subject: Annotated[str, Field(default="", description="Email subject")]
    html: Annotated[str, Field(default="", description="Literal HTML body")]
    data: Annotated[
        dict[str, Any] | None,
        Field(default=None, description="Template substitution values")
    ]
    attachments: Annotated[
        list[AttachmentRecord] | None,
        Field(default=None, description="Attachments in send order")
    ]

    @classmethod
    def create(cls, raw: EmailRecord | Mapping[str, Any]) -> EmailRecord:
        if isinstance(raw, cls):
            return raw.model_copy(deep=True)
        return cls.model_validate(dict(raw))

    def is_valid(self) -> bool:
        if _is_blank(self.to) or _is_blank(self.subject) or _is_blank(self.html):
            return False

        # Only the first address is checked.
        first_address = self.to.split(",")[0].strip()
        if not EMAIL_PATTERN.fullmatch(first_address):
            return False

        return all(attachment.is_valid() for attachment in self.attachments or [])

    def recipients(self) -> list[str]:
        return [part.strip() for part in self.to.split(",") if part.strip()]

    def add_attachment(self, raw: AttachmentRecord | Mapping[str, Any]) -> bool:
        """Append an attachment if it is valid.

        Invalid candidates are discarded without raising.

        Returns:
            True if the attachment was added, False if it was rejected.
        """
        try:
            attachment = AttachmentRecord.create(raw)
        except ValidationError:
            return False
        if not attachment.is_valid():
            return False
        if self.attachments is None:
            self.attachments = []
        self.attachments.append(attachment)
        return True

    def remove_attachment(self, filename: str) -> bool:
        """Remove every attachment named ``filename``; True if any was removed."""
        if not self.attachments:
            return False
        initial_count = len(self.attachments)
        self.attachments = [att for att in self.attachments if att.filename != filename]
        return len(self.attachments) < initial_count

    def attachment_count(self) -> int:
        return len(self.attachments or [])
