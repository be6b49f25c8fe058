"""Tests for the TransportConfig, AttachmentRecord and EmailRecord models."""

import pytest
from pydantic import ValidationError

from template_mailer.models import (
    DEFAULT_CONTENT_TYPE,
    AttachmentRecord,
    EmailRecord,
    TransportConfig,
)


def make_config(**overrides):
    raw = {"host": "smtp.test.com", "port": 587, "user": "u@test.com", "pass": "p"}
    raw.update(overrides)
    return TransportConfig.create(raw)


def make_email(**overrides):
    raw = {"to": "r@test.com", "subject": "S", "html": "<p>body</p>"}
    raw.update(overrides)
    return EmailRecord.create(raw)


# --- TransportConfig Tests ---

class TestTransportConfig:
    """Tests for TransportConfig creation and validity."""

    def test_create_copies_fields(self):
        config = make_config()
        assert config.host == "smtp.test.com"
        assert config.port == 587
        assert config.user == "u@test.com"
        assert config.password == "p"

    def test_password_accepted_by_field_name(self):
        config = TransportConfig.create(
            {"host": "h", "port": 25, "user": "u", "password": "secret"}
        )
        assert config.password == "secret"

    def test_create_from_existing_record(self):
        config = make_config()
        assert TransportConfig.create(config) == config

    def test_is_frozen(self):
        config = make_config()
        with pytest.raises(ValidationError):
            config.port = 25

    @pytest.mark.parametrize("port", [1, 25, 465, 587, 65535])
    def test_valid_ports(self, port):
        assert make_config(port=port).is_valid() is True

    @pytest.mark.parametrize("port", [0, -1, 65536, 100000])
    def test_invalid_ports(self, port):
        assert make_config(port=port).is_valid() is False

    @pytest.mark.parametrize("field", ["host", "user", "pass"])
    def test_empty_text_field_is_invalid(self, field):
        assert make_config(**{field: ""}).is_valid() is False

    def test_missing_fields_are_invalid(self):
        assert TransportConfig.create({}).is_valid() is False

    def test_port_string_is_coerced(self):
        assert make_config(port="2525").port == 2525

    def test_non_numeric_port_raises(self):
        with pytest.raises(ValidationError):
            make_config(port="smtp")

    def test_secure_only_on_465(self):
        assert make_config(port=465).secure is True
        assert make_config(port=587).secure is False
        assert make_config(port=25).secure is False


# --- AttachmentRecord Tests ---

class TestAttachmentRecord:
    """Tests for attachment validity and MIME type resolution."""

    def test_valid_with_content(self):
        att = AttachmentRecord.create({"filename": "a.txt", "content": b"hello"})
        assert att.is_valid() is True

    def test_valid_with_path(self):
        att = AttachmentRecord.create({"filename": "a.txt", "path": "/tmp/a.txt"})
        assert att.is_valid() is True

    def test_empty_content_counts_as_present(self):
        att = AttachmentRecord.create({"filename": "empty.txt", "content": b""})
        assert att.is_valid() is True

    @pytest.mark.parametrize("filename", ["", "   "])
    def test_blank_filename_invalid(self, filename):
        att = AttachmentRecord.create({"filename": filename, "content": b"x"})
        assert att.is_valid() is False

    def test_no_content_source_invalid(self):
        assert AttachmentRecord.create({"filename": "a.txt"}).is_valid() is False

    def test_empty_path_invalid(self):
        att = AttachmentRecord.create({"filename": "a.txt", "path": ""})
        assert att.is_valid() is False

    def test_blank_path_invalid_even_with_content(self):
        att = AttachmentRecord.create({"filename": "a.txt", "content": b"x", "path": "  "})
        assert att.is_valid() is False

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("report.pdf", "application/pdf"),
            ("photo.JPG", "image/jpeg"),
            ("photo.jpeg", "image/jpeg"),
            ("notes.txt", "text/plain"),
            ("sheet.xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
            ("archive.tar.zip", "application/zip"),
            ("bundle.rar", "application/x-rar-compressed"),
            ("data.unknownext", DEFAULT_CONTENT_TYPE),
            ("README", DEFAULT_CONTENT_TYPE),
            ("trailing.", DEFAULT_CONTENT_TYPE),
        ],
    )
    def test_resolve_content_type(self, filename, expected):
        att = AttachmentRecord.create({"filename": filename, "content": b"x"})
        assert att.resolve_content_type() == expected

    def test_explicit_content_type_wins(self):
        att = AttachmentRecord.create(
            {"filename": "report.pdf", "content": b"x", "content_type": "text/csv"}
        )
        assert att.resolve_content_type() == "text/csv"


# --- EmailRecord Tests ---

class TestEmailRecordValidation:
    """Tests for EmailRecord.is_valid()."""

    def test_valid_email(self):
        assert make_email().is_valid() is True

    @pytest.mark.parametrize("field", ["to", "subject", "html"])
    def test_empty_required_field_invalid(self, field):
        assert make_email(**{field: ""}).is_valid() is False

    def test_whitespace_subject_invalid(self):
        assert make_email(subject="   ").is_valid() is False

    @pytest.mark.parametrize("to", ["not-an-email", "a@b", "a b@c.com", "@c.com"])
    def test_malformed_address_invalid(self, to):
        assert make_email(to=to).is_valid() is False

    def test_only_first_address_checked(self):
        assert make_email(to="a@b.com, c@d.com").is_valid() is True
        assert make_email(to="a@b.com, not-an-email").is_valid() is True
        assert make_email(to="not-an-email, a@b.com").is_valid() is False

    def test_invalid_attachment_makes_email_invalid(self):
        email = make_email(attachments=[{"filename": "a.txt", "content": b"x"}, {"filename": ""}])
        assert email.is_valid() is False

    def test_create_maps_attachments_in_order(self):
        email = make_email(
            attachments=[
                {"filename": "one.txt", "content": b"1"},
                {"filename": "two.txt", "path": "/tmp/two.txt"},
            ]
        )
        assert [att.filename for att in email.attachments] == ["one.txt", "two.txt"]
        assert all(isinstance(att, AttachmentRecord) for att in email.attachments)

    def test_recipients_are_split_and_trimmed(self):
        email = make_email(to=" a@b.com ,c@d.com,, ")
        assert email.recipients() == ["a@b.com", "c@d.com"]


class TestEmailRecordAttachments:
    """Tests for attachment list mutation."""

    def test_count_without_attachments(self):
        assert make_email().attachment_count() == 0

    def test_add_valid_attachment(self):
        email = make_email()
        assert email.add_attachment({"filename": "a.txt", "content": b"x"}) is True
        assert email.attachment_count() == 1

    def test_add_invalid_attachment_is_discarded(self):
        email = make_email()
        assert email.add_attachment({"filename": "", "content": b"x"}) is False
        assert email.attachment_count() == 0

    def test_add_malformed_attachment_is_discarded(self):
        email = make_email()
        assert email.add_attachment({"filename": "a.txt", "content": 12}) is False
        assert email.attachment_count() == 0

    def test_remove_existing_attachment(self):
        email = make_email(attachments=[{"filename": "x.txt", "content": b"x"}])
        assert email.remove_attachment("x.txt") is True
        assert email.attachment_count() == 0

    def test_remove_removes_all_matches(self):
        email = make_email(
            attachments=[
                {"filename": "x.txt", "content": b"1"},
                {"filename": "y.txt", "content": b"2"},
                {"filename": "x.txt", "content": b"3"},
            ]
        )
        assert email.remove_attachment("x.txt") is True
        assert [att.filename for att in email.attachments] == ["y.txt"]

    def test_remove_missing_attachment(self):
        email = make_email(attachments=[{"filename": "x.txt", "content": b"x"}])
        assert email.remove_attachment("other.txt") is False
        assert email.attachment_count() == 1

    def test_remove_without_attachments(self):
        assert make_email().remove_attachment("x.txt") is False
