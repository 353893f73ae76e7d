"""
Entry points for the serverless functions.

``BookingApp`` loads the catalog once and wires a fresh store, service and
handler for every invocation.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from .adapters.appointment_store import MongoAppointmentStore
from .adapters.email_sender import SmtpEmailSender
from .config import AppConfig
from .domain.catalog import Catalog
from .handlers import (
    ApiResponse,
    AppointmentConfirmationHandler,
    AppointmentHandler,
    BarbersHandler,
    ServicesHandler,
    TimeSlotsHandler,
)
from .request_logger import RequestLogger
from .services.appointment_service import AppointmentService, AppointmentStore, EmailSender
from .services.catalog_service import CatalogService


class BookingApp:
    """Per-invocation wiring of handlers and their collaborators."""

    def __init__(
        self,
        config: AppConfig,
        catalog: Optional[Catalog] = None,
        store_factory: Optional[Callable[[], AppointmentStore]] = None,
        email_sender: Optional[EmailSender] = None,
        clock=None,
    ) -> None:
        self.config = config
        self.catalog = catalog or Catalog.load(config.catalog_dir)
        self._store_factory = store_factory or (lambda: MongoAppointmentStore(config.store))
        self._email_sender = email_sender
        self._clock = clock

    def _appointment_service(self, logger: RequestLogger) -> AppointmentService:
        return AppointmentService(
            self._store_factory(),
            self.catalog,
            business_hours=self.config.business_hours,
            timezone=self.config.timezone,
            clock=self._clock,
            logger=logger,
        )

    def _sender(self) -> EmailSender:
        if self._email_sender is None:
            self._email_sender = SmtpEmailSender(self.config.smtp, shop_name=self.config.shop_name)
        return self._email_sender

    def barbers(self, body: Any = None) -> ApiResponse:
        return BarbersHandler(CatalogService(self.catalog)).execute(body)

    def services(self, body: Any = None) -> ApiResponse:
        return ServicesHandler(CatalogService(self.catalog)).execute(body)

    def time_slots(self, body: Any) -> ApiResponse:
        logger = RequestLogger(function_name="time-slots")
        return TimeSlotsHandler(self._appointment_service(logger), logger).execute(body)

    def appointments(self, body: Any) -> ApiResponse:
        logger = RequestLogger(function_name="appointments")
        return AppointmentHandler(self._appointment_service(logger), logger).execute(body)

    def appointment_confirmation(self, body: Any) -> ApiResponse:
        logger = RequestLogger(function_name="appointment-confirmation")
        handler = AppointmentConfirmationHandler(self._appointment_service(logger), self._sender(), logger)
        return handler.execute(body)
