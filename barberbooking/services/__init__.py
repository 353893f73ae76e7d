"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .appointment_service import AppointmentService, AppointmentStore, EmailSender
from .catalog_service import CatalogService

__all__ = ["AppointmentService", "AppointmentStore", "CatalogService", "EmailSender"]
