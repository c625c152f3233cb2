"""
Tests for the SmtpClient collaborator.

The live client is exercised with smtplib.SMTP patched out, so no mail
server is needed.
"""

import smtplib
from unittest.mock import call, patch

import pytest

from spending_alerts.adapters import ConnectionMode, Email, EmailSent, SmtpClient, SmtpServerAddress
from spending_alerts.adapters.smtp_client import compose_message
from spending_alerts.events import track_output

SERVER = SmtpServerAddress(host="smtp.example.org", port=2525)

EMAIL = Email(
    sender="sender@example.org",
    recipient="recipient@example.org",
    subject="A subject",
    text="Some text",
)


@pytest.fixture
def mock_smtp():
    with patch("spending_alerts.adapters.smtp_client.smtplib.SMTP") as smtp_class:
        yield smtp_class


class TestEmail:
    """Tests for the email value."""

    @pytest.mark.parametrize("field", ["sender", "recipient", "subject", "text"])
    def test_empty_field_rejected(self, field):
        fields = {"sender": "a@example.org", "recipient": "b@example.org", "subject": "s", "text": "t"}
        fields[field] = ""

        with pytest.raises(ValueError, match=field):
            Email(**fields)


class TestComposeMessage:
    """Tests for building the MIME message."""

    def test_headers_and_body(self):
        message = compose_message(EMAIL)

        assert message["From"] == "sender@example.org"
        assert message["To"] == "recipient@example.org"
        assert message["Subject"] == "A subject"
        assert message.get_content_type() == "text/plain"
        assert message.get_payload(decode=True).decode("utf-8") == "Some text"


class TestLiveSmtpClient:
    """Tests for the smtplib backed client."""

    @pytest.mark.asyncio
    async def test_connects_sends_and_quits(self, mock_smtp):
        client = SmtpClient.create(timeout_seconds=10)

        await client.send_email(SERVER, EMAIL)

        mock_smtp.assert_called_once_with(timeout=10)
        smtp = mock_smtp.return_value
        assert smtp.mock_calls[0] == call.connect("smtp.example.org", 2525)
        assert smtp.mock_calls[1][0] == "send_message"
        assert smtp.mock_calls[2] == call.quit()

    @pytest.mark.asyncio
    async def test_sends_composed_message(self, mock_smtp):
        client = SmtpClient.create()

        await client.send_email(SERVER, EMAIL)

        message = mock_smtp.return_value.send_message.call_args[0][0]
        assert message["To"] == "recipient@example.org"
        assert message["Subject"] == "A subject"

    @pytest.mark.asyncio
    async def test_emits_email_sent(self, mock_smtp):
        client = SmtpClient.create()
        events = track_output(client.events)

        await client.send_email(SERVER, EMAIL)

        assert events.data() == [EmailSent(smtp_server=SERVER, email=EMAIL)]

    @pytest.mark.asyncio
    async def test_connection_closed_when_send_fails(self, mock_smtp):
        smtp = mock_smtp.return_value
        smtp.send_message.side_effect = smtplib.SMTPDataError(554, b"Rejected")
        client = SmtpClient.create()
        events = track_output(client.events)

        with pytest.raises(smtplib.SMTPDataError):
            await client.send_email(SERVER, EMAIL)

        smtp.quit.assert_called_once()
        assert events.data() == []

    @pytest.mark.asyncio
    async def test_connect_failure_propagates(self, mock_smtp):
        mock_smtp.return_value.connect.side_effect = ConnectionRefusedError()
        client = SmtpClient.create()

        with pytest.raises(ConnectionRefusedError):
            await client.send_email(SERVER, EMAIL)

        mock_smtp.return_value.send_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_disconnected_server_is_closed_quietly(self, mock_smtp):
        smtp = mock_smtp.return_value
        smtp.quit.side_effect = smtplib.SMTPServerDisconnected()
        client = SmtpClient.create()

        await client.send_email(SERVER, EMAIL)

        smtp.close.assert_called_once()

    def test_mode(self):
        assert SmtpClient.create().mode is ConnectionMode.LIVE


class TestNullSmtpClient:
    """Tests for the null client."""

    @pytest.mark.asyncio
    async def test_send_succeeds_and_emits(self):
        client = SmtpClient.create_null()
        events = track_output(client.events)

        await client.send_email(SERVER, EMAIL)

        assert events.data() == [EmailSent(smtp_server=SERVER, email=EMAIL)]

    @pytest.mark.asyncio
    async def test_configured_error_raised(self):
        client = SmtpClient.create_null(error_on_send=RuntimeError("my error"))
        events = track_output(client.events)

        with pytest.raises(RuntimeError, match="my error"):
            await client.send_email(SERVER, EMAIL)

        assert events.data() == []

    @pytest.mark.asyncio
    async def test_never_touches_smtplib(self, mock_smtp):
        client = SmtpClient.create_null()

        await client.send_email(SERVER, EMAIL)

        mock_smtp.assert_not_called()

    def test_mode(self):
        assert SmtpClient.create_null().is_null is True
