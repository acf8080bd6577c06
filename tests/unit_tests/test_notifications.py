"""Tests for santa notification senders."""

from unittest.mock import MagicMock
from unittest.mock import patch

import pytest

from santa_api.workflow.notifications import SANTA_EMAIL_SUBJECT
from santa_api.workflow.notifications import LogNotificationSender
from santa_api.workflow.notifications import SmtpNotificationSender
from santa_api.workflow.notifications import build_santa_message


class TestBuildSantaMessage:
    """Tests for the disclosure message body."""

    def test_headers(self):
        message = build_santa_message("noreply@example.com", "santa@example.com", "Socks", "1 Elm St")

        assert message["Subject"] == SANTA_EMAIL_SUBJECT
        assert message["From"] == "noreply@example.com"
        assert message["To"] == "santa@example.com"

    def test_text_and_html_parts(self):
        message = build_santa_message("noreply@example.com", "santa@example.com", "Socks", "1 Elm St")

        text = message.get_body(preferencelist=("plain",)).get_content()
        html_body = message.get_body(preferencelist=("html",)).get_content()

        assert "Socks" in text and "1 Elm St" in text
        assert "Their name is hidden" in text
        assert "Socks" in html_body

    def test_html_is_escaped(self):
        message = build_santa_message("noreply@example.com", "santa@example.com", "<script>x</script>", "1 Elm St")
        html_body = message.get_body(preferencelist=("html",)).get_content()

        assert "<script>" not in html_body
        assert "&lt;script&gt;" in html_body


class TestSmtpNotificationSender:
    """Tests for SmtpNotificationSender."""

    @pytest.mark.asyncio
    @patch("santa_api.workflow.notifications.sender.smtplib.SMTP")
    async def test_sends_with_starttls_and_login(self, mock_smtp_cls):
        smtp = MagicMock()
        mock_smtp_cls.return_value.__enter__.return_value = smtp

        sender = SmtpNotificationSender(
            host="smtp.example.com",
            port=2525,
            username="mailer",
            password="secret",
            from_email="noreply@example.com",
        )
        await sender.send_santa_email("santa@example.com", "Socks", "1 Elm St")

        mock_smtp_cls.assert_called_once_with("smtp.example.com", 2525, timeout=30.0)
        smtp.starttls.assert_called_once()
        smtp.login.assert_called_once_with("mailer", "secret")
        sent = smtp.send_message.call_args[0][0]
        assert sent["To"] == "santa@example.com"

    @pytest.mark.asyncio
    @patch("santa_api.workflow.notifications.sender.smtplib.SMTP")
    async def test_no_tls_no_credentials(self, mock_smtp_cls):
        smtp = MagicMock()
        mock_smtp_cls.return_value.__enter__.return_value = smtp

        sender = SmtpNotificationSender(host="localhost", port=25, use_tls=False)
        await sender.send_santa_email("santa@example.com", "Socks", "1 Elm St")

        smtp.starttls.assert_not_called()
        smtp.login.assert_not_called()
        smtp.send_message.assert_called_once()

    @pytest.mark.asyncio
    @patch("santa_api.workflow.notifications.sender.smtplib.SMTP")
    async def test_delivery_error_propagates(self, mock_smtp_cls):
        mock_smtp_cls.side_effect = ConnectionRefusedError("no relay")

        sender = SmtpNotificationSender(host="localhost")
        with pytest.raises(ConnectionRefusedError):
            await sender.send_santa_email("santa@example.com", "Socks", "1 Elm St")


class TestLogNotificationSender:
    @pytest.mark.asyncio
    async def test_logs_without_content(self, captured_logs):
        await LogNotificationSender().send_santa_email("santa@example.com", "Secret wish", "Secret street")

        messages = [r for r in captured_logs if "SMTP not configured" in r["message"]]
        assert len(messages) == 1
        assert "Secret wish" not in str(captured_logs)
        assert "Secret street" not in str(captured_logs)
