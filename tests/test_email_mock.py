import smtplib
from unittest.mock import patch, MagicMock

from app.models.enums import Decision
from app.services.email_service import send_decision_email


@patch("app.services.email_service.settings.SMTP_HOST", "smtp.test.local")
@patch("app.services.email_service.smtplib.SMTP")
def test_send_approval_email(mock_smtp):
    mock_server_instance = MagicMock()
    mock_smtp.return_value.__enter__.return_value = mock_server_instance

    sent = send_decision_email(
        "jane@example.com",
        Decision.Approved,
        notes="Great work",
        student_name="Jane Doe",
        achievement_title="Smart India Hackathon",
        points=15,
    )

    assert sent is True
    mock_server_instance.sendmail.assert_called()
    recipient = mock_server_instance.sendmail.call_args[0][1]
    assert recipient == "jane@example.com"


@patch("app.services.email_service.settings.SMTP_HOST", "smtp.test.local")
@patch("app.services.email_service.smtplib.SMTP")
def test_send_rejection_email(mock_smtp):
    mock_server_instance = MagicMock()
    mock_smtp.return_value.__enter__.return_value = mock_server_instance

    sent = send_decision_email("john@example.com", "REJECTED", notes="Certificate is blurred")

    assert sent is True
    recipient = mock_server_instance.sendmail.call_args[0][1]
    assert recipient == "john@example.com"


@patch("app.services.email_service.settings.SMTP_HOST", "smtp.test.local")
@patch("app.services.email_service.smtplib.SMTP")
def test_smtp_failure_returns_false(mock_smtp):
    mock_server_instance = MagicMock()
    mock_server_instance.sendmail.side_effect = smtplib.SMTPException("relay denied")
    mock_smtp.return_value.__enter__.return_value = mock_server_instance

    assert send_decision_email("jane@example.com", Decision.Approved) is False


@patch("app.services.email_service.settings.SMTP_HOST", None)
@patch("app.services.email_service.smtplib.SMTP")
def test_no_smtp_host_skips_sending(mock_smtp):
    assert send_decision_email("jane@example.com", Decision.Approved) is False
    mock_smtp.assert_not_called()


@patch("app.services.email_service.smtplib.SMTP")
def test_missing_student_email_skips_sending(mock_smtp):
    assert send_decision_email(None, Decision.Rejected) is False
    mock_smtp.assert_not_called()
