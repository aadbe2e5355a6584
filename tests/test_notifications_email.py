import smtplib
from unittest.mock import MagicMock, patch

from descomplicar.notifications.email import EmailSender


def _settings(**overrides):
    values = dict(
        smtp_host="smtp.test",
        smtp_port=587,
        smtp_user="user",
        smtp_password="pass",
        smtp_use_tls=True,
        smtp_from_email="noreply@descomplicar.app",
        smtp_from_name="Descomplicar",
    )
    values.update(overrides)
    return MagicMock(**values)


class TestEmailSender:
    @patch("descomplicar.notifications.email.get_settings")
    def test_is_configured_true(self, mock_settings):
        mock_settings.return_value = _settings()
        assert EmailSender.is_configured() is True

    @patch("descomplicar.notifications.email.get_settings")
    def test_is_configured_false_no_host(self, mock_settings):
        mock_settings.return_value = _settings(smtp_host="")
        assert EmailSender.is_configured() is False

    @patch("descomplicar.notifications.email.get_settings")
    def test_is_configured_false_user_without_password(self, mock_settings):
        mock_settings.return_value = _settings(smtp_password="")
        assert EmailSender.is_configured() is False

    @patch("descomplicar.notifications.email.get_settings")
    def test_send_not_configured(self, mock_settings):
        mock_settings.return_value = _settings(smtp_host="")
        result = EmailSender().send("ana@example.com", "Oi", "texto")

        assert result.sent is False
        assert result.error == "SMTP not configured"

    @patch("descomplicar.notifications.email.get_settings")
    def test_send_success(self, mock_settings):
        mock_settings.return_value = _settings()
        sender = EmailSender()

        with patch("descomplicar.notifications.email.smtplib.SMTP") as mock_smtp_cls:
            server = MagicMock()
            mock_smtp_cls.return_value.__enter__.return_value = server

            result = sender.send("ana@example.com", "Oi", "texto", "<p>texto</p>")

        assert result.sent is True
        assert result.error is None
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("user", "pass")
        from_addr, to_addrs, message = server.sendmail.call_args.args
        assert from_addr == "noreply@descomplicar.app"
        assert to_addrs == ["ana@example.com"]
        assert "text/html" in message
        assert "Descomplicar <noreply@descomplicar.app>" in message

    @patch("descomplicar.notifications.email.get_settings")
    def test_send_smtp_error(self, mock_settings):
        mock_settings.return_value = _settings()
        sender = EmailSender()

        with patch("descomplicar.notifications.email.smtplib.SMTP") as mock_smtp_cls:
            server = MagicMock()
            server.sendmail.side_effect = smtplib.SMTPRecipientsRefused({})
            mock_smtp_cls.return_value.__enter__.return_value = server

            result = sender.send("ana@example.com", "Oi", "texto")

        assert result.sent is False
        assert result.error

    @patch("descomplicar.notifications.email.get_settings")
    def test_send_connection_error(self, mock_settings):
        mock_settings.return_value = _settings(smtp_user="", smtp_password="")

        with patch(
            "descomplicar.notifications.email.smtplib.SMTP",
            side_effect=ConnectionRefusedError("refused"),
        ):
            result = EmailSender().send("ana@example.com", "Oi", "texto")

        assert result.sent is False
        assert "refused" in result.error
