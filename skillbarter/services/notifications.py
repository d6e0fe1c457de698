"""Email notification service using SMTP with a logged, simulated fallback."""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional

from skillbarter.config import settings

logger = logging.getLogger(__name__)

HTML_TEMPLATE_BASE = """
<!DOCTYPE html>
<html>
<head>
    <style>
        body { font-family: -apple-system, sans-serif; background-color: #f8f9fa; color: #333; margin: 0; padding: 0; }
        .container { max-width: 600px; margin: 40px auto; background: #ffffff; border-radius: 12px; overflow: hidden; }
        .header { background: #00bfff; padding: 30px 40px; text-align: center; }
        .header h1 { color: #ffffff; margin: 0; font-size: 24px; }
        .content { padding: 40px; line-height: 1.6; }
        .message-box { background: #f8f9fa; border-left: 4px solid #6c757d; padding: 16px 20px; font-style: italic; margin-bottom: 24px; }
        .btn { display: inline-block; background: #00bfff; color: #ffffff; text-decoration: none; padding: 14px 28px; border-radius: 8px; font-weight: 600; }
        .footer { background: #f1f3f5; padding: 20px; text-align: center; color: #6c757d; font-size: 13px; }
    </style>
</head>
<body>
    <div class="container">
        <div class="header"><h1>SkillBarter</h1></div>
        <div class="content">{body}</div>
        <div class="footer"><p>You received this email because you are a registered user of SkillBarter.</p></div>
    </div>
</body>
</html>
"""


def _send_email_sync(recipient_email: str, subject: str, html_body: str) -> bool:
    """Send the email, or log it when SMTP is not configured. Returns True if sent."""
    if not settings.SMTP_USERNAME or not settings.SMTP_PASSWORD:
        logger.info("Simulated email to %s: %s", recipient_email, subject)
        logger.debug("Simulated email body:\n%s", html_body)
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"SkillBarter <{settings.SMTP_USERNAME}>"
    msg["To"] = recipient_email
    msg.attach(MIMEText(html_body, "html"))

    try:
        server = smtplib.SMTP(settings.SMTP_SERVER, settings.SMTP_PORT)
        server.starttls()
        server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(msg)
        server.quit()
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", recipient_email, e)
        return False

    logger.info("Email sent to %s", recipient_email)
    return True


def render_offer_accepted(tutor_name: str, learner_name: str, skill: str) -> str:
    body = f"""
    <h2>Hello {escape(tutor_name)},</h2>
    <p><strong>{escape(learner_name)}</strong> accepted your offer to teach <strong>{escape(skill)}</strong>.</p>
    <p>Log into SkillBarter to plan your first session.</p>
    <p><a href="{settings.PUBLIC_BASE_URL}/availability" class="btn">Set Availability</a></p>
    """
    return HTML_TEMPLATE_BASE.replace("{body}", body)


def render_offer_received(learner_name: str, tutor_name: str, skill: str, message: Optional[str]) -> str:
    body = f"""
    <h2>Hello {escape(learner_name)},</h2>
    <p><strong>{escape(tutor_name)}</strong> offered to teach you <strong>{escape(skill)}</strong>.</p>
    """
    if message:
        body += f'<div class="message-box">"{escape(message)}"<br><br>— {escape(tutor_name)}</div>'
    body += f'<p><a href="{settings.PUBLIC_BASE_URL}/waiting-list" class="btn">View Offer</a></p>'
    return HTML_TEMPLATE_BASE.replace("{body}", body)


async def send_offer_accepted_email(recipient_email: str, tutor_name: str, learner_name: str, skill: str):
    """Tell a tutor their offer was accepted."""
    subject = f"{learner_name} accepted your {skill} offer"
    html = render_offer_accepted(tutor_name, learner_name, skill)
    # SMTP is blocking; keep it off the event loop
    await asyncio.to_thread(_send_email_sync, recipient_email, subject, html)


async def send_offer_received_email(
    recipient_email: str, learner_name: str, tutor_name: str, skill: str, message: Optional[str] = None
):
    """Tell a learner a tutor has made them an offer."""
    subject = f"New offer to teach you {skill}"
    html = render_offer_received(learner_name, tutor_name, skill, message)
    await asyncio.to_thread(_send_email_sync, recipient_email, subject, html)
