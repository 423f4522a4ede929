import os
import smtplib
from datetime import datetime
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger

from app.core.config import settings
from app.models.enums import Decision

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
template_dir = os.path.join(BASE_DIR, "templates", "email")

email_env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(["html", "xml"]),
)

DECISION_TEMPLATES = {
    Decision.Approved: ("achievement_approved.html", "Achievement Approved - Points Awarded"),
    Decision.Rejected: ("achievement_rejected.html", "Achievement Verification Update"),
}


# Helper to send email via SMTP
def send_email_via_smtp(to_email: str, subject: str, html_content: str) -> bool:
    # Only HOST is required. User/Pass are optional (for Mailpit)
    if not settings.SMTP_HOST:
        logger.warning("SMTP host not configured. Skipping email.")
        return False

    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{settings.EMAILS_FROM_NAME} <{settings.EMAILS_FROM_EMAIL}>"
        msg["To"] = to_email
        msg.attach(MIMEText(html_content, "html"))

        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
            server.ehlo()

            # TLS only on submission ports; Mailpit (1025) runs plain
            if settings.SMTP_PORT in [587, 2525]:
                server.starttls()
                server.ehlo()

            if settings.SMTP_USER and settings.SMTP_PASSWORD:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)

            server.sendmail(settings.EMAILS_FROM_EMAIL, to_email, msg.as_string())

        logger.info(f"Email sent to {to_email}")
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


# ---------------------------------------------------------
# ACHIEVEMENT DECISION EMAIL
# ---------------------------------------------------------
def send_decision_email(
    student_email: Optional[str],
    decision: Decision,
    notes: Optional[str] = None,
    student_name: Optional[str] = None,
    achievement_title: Optional[str] = None,
    points: int = 0,
) -> bool:
    """Best-effort notification. Returns whether the mail went out."""
    if not student_email:
        logger.warning("No student email on record. Decision email not sent.")
        return False

    template_name, subject = DECISION_TEMPLATES[Decision(decision)]
    context = {
        "name": student_name or "Student",
        "achievement_title": achievement_title or "your achievement",
        "notes": notes,
        "points": points,
        "decision_date": datetime.now().strftime("%d-%m-%Y"),
        "dashboard_url": f"{settings.FRONTEND_URL}/achievements",
    }
    html_content = email_env.get_template(template_name).render(context)
    return send_email_via_smtp(student_email, subject, html_content)
