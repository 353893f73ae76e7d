"""
Confirmation emails over SMTP with jinja2 templates.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from pathlib import Path
from typing import Any, Dict, Mapping

import pendulum
from jinja2 import Environment, FileSystemLoader, select_autoescape
from rich.console import Console

from ..config import SmtpConfig
from ..domain.exceptions import BookingError, ErrorKind

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def format_date(value: str) -> str:
    """Render ``YYYY-MM-DD`` as ``DD/MM/YYYY``."""
    year, month, day = value.split("-")
    return f"{day}/{month}/{year}"


def payment_label(value: str) -> str:
    return "Pagar no local" if value == "later" else "Pago antecipadamente"


def build_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["format_date"] = format_date
    env.filters["payment_label"] = payment_label
    return env


class SmtpEmailSender:
    """
    Sends appointment confirmations through an SMTP server.

    Port 465 uses implicit TLS; any other port upgrades with STARTTLS.
    """

    def __init__(self, config: SmtpConfig, shop_name: str = "Distrito Barbearia", smtp_factory=None):
        self.config = config
        self.shop_name = shop_name
        self._env = build_environment()
        self._smtp_factory = smtp_factory

    def render(self, appointment: Mapping[str, Any]) -> Dict[str, str]:
        """Render subject, HTML and plain-text bodies for an appointment."""
        context = {**appointment, "shop_name": self.shop_name}
        return {
            "subject": f"Confirmação de Agendamento - {appointment['confirmationCode']}",
            "html": self._env.get_template("confirmation.html").render(**context),
            "text": self._env.get_template("confirmation.txt").render(**context),
        }

    def build_message(self, appointment: Mapping[str, Any]) -> MIMEMultipart:
        rendered = self.render(appointment)
        sender = self.config.get_sender()

        msg = MIMEMultipart("alternative")
        msg["Subject"] = rendered["subject"]
        msg["From"] = sender
        msg["To"] = appointment["customerEmail"]
        msg["Message-ID"] = make_msgid(domain=sender.split("@")[-1] if "@" in sender else None)
        msg.attach(MIMEText(rendered["text"], "plain", "utf-8"))
        msg.attach(MIMEText(rendered["html"], "html", "utf-8"))
        return msg

    def send_confirmation_email(self, appointment: Mapping[str, Any]) -> Dict[str, str]:
        """
        Send the confirmation email for an appointment.

        Returns:
            ``{"message_id": ..., "sent_at": ...}``

        Raises:
            ValueError: If SMTP credentials are not configured
            BookingError: ``EMAIL_SEND_FAILED`` when the SMTP exchange fails
        """
        if not self.config.is_configured():
            raise ValueError(
                "SMTP credentials not configured. "
                "Please set GMAIL_USER and GMAIL_APP_PASSWORD environment variables."
            )

        logger.info(
            "Sending confirmation email to %s for %s %s (code %s)",
            appointment.get("customerEmail"),
            appointment.get("date"),
            appointment.get("time"),
            appointment.get("confirmationCode"),
        )

        msg = self.build_message(appointment)

        try:
            with self._open_connection() as server:
                server.login(self.config.username, self.config.password)
                server.sendmail(msg["From"], [msg["To"]], msg.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(
                "Error sending email to %s (code %s): %s",
                appointment.get("customerEmail"),
                appointment.get("confirmationCode"),
                exc,
            )
            raise BookingError(ErrorKind.EMAIL_SEND_FAILED) from exc

        logger.info("Email sent successfully: %s", msg["Message-ID"])
        return {
            "message_id": msg["Message-ID"],
            "sent_at": pendulum.now("UTC").to_iso8601_string(),
        }

    def _open_connection(self) -> smtplib.SMTP:
        if self._smtp_factory is not None:
            return self._smtp_factory(self.config.host, self.config.port)

        context = ssl.create_default_context()
        if self.config.port == 465:
            return smtplib.SMTP_SSL(self.config.host, self.config.port, context=context, timeout=30)

        server = smtplib.SMTP(self.config.host, self.config.port, timeout=30)
        server.starttls(context=context)
        return server


class ConsoleEmailSender:
    """
    Mock sender that prints the rendered email instead of sending it.
    """

    def __init__(self, shop_name: str = "Distrito Barbearia", console: Console | None = None):
        self.shop_name = shop_name
        self.console = console or Console()
        self._renderer = SmtpEmailSender(SmtpConfig(), shop_name=shop_name)
        self.sent: list[Dict[str, Any]] = []

    def send_confirmation_email(self, appointment: Mapping[str, Any]) -> Dict[str, str]:
        rendered = self._renderer.render(appointment)
        self.console.print(f"[dim]To:[/dim] {appointment['customerEmail']}")
        self.console.print(f"[dim]Subject:[/dim] {rendered['subject']}")
        self.console.print(rendered["text"])
        self.sent.append(dict(appointment))
        return {
            "message_id": make_msgid(domain="mock.local"),
            "sent_at": pendulum.now("UTC").to_iso8601_string(),
        }
