"""
Adapters layer - External integrations (document store, SMTP).
"""

from .appointment_store import MongoAppointmentStore
from .email_sender import ConsoleEmailSender, SmtpEmailSender
from .in_memory_store import InMemoryAppointmentStore

__all__ = ["ConsoleEmailSender", "InMemoryAppointmentStore", "MongoAppointmentStore", "SmtpEmailSender"]
