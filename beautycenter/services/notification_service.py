"""
Notification Service
Event listeners that react to appointment lifecycle and user account events
"""

import logging

from ..domain.events import (
    AppointmentCreated,
    AppointmentStatusChanged,
    DomainEvent,
    DomainEventListener,
    UserCreated,
    UserDeleted,
    UserUpdated,
)
from ..models import AppointmentStatus

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("audit")


class AppointmentNotificationListener(DomainEventListener):
    """Customer-facing notifications for appointment changes"""

    def on_appointment_created(self, event: AppointmentCreated) -> None:
        logger.info(
            f"📅 Appointment created: id={event.appointment_id}, company={event.company_id}, "
            f"customer={event.customer_id}, start={event.start_time.isoformat()}"
        )
        self._send(event.appointment_id, "booking received")

    def on_appointment_status_changed(self, event: AppointmentStatusChanged) -> None:
        logger.info(
            f"Appointment {event.appointment_id} status change: "
            f"{event.old_status.value} → {event.new_status.value}"
        )
        if event.new_status == AppointmentStatus.CONFIRMED:
            self._send(event.appointment_id, "confirmation")
        elif event.new_status == AppointmentStatus.CANCELLED:
            self._send(event.appointment_id, "cancellation")
        elif event.new_status == AppointmentStatus.COMPLETED:
            self._send(event.appointment_id, "completion")

    def _send(self, appointment_id: str, notification_type: str) -> None:
        # Delivery channel (email/SMS) is configured per deployment; log the intent
        logger.info(f"📧 Sending {notification_type} notification for appointment: {appointment_id}")


class AuditLogListener(DomainEventListener):
    """Writes one audit line per domain event to the "audit" logger"""

    def _log(self, event: DomainEvent, description: str) -> None:
        audit_logger.info(f"AUDIT: [{event.event_type}] (Event ID: {event.event_id}) - {description}")

    def on_appointment_created(self, event: AppointmentCreated) -> None:
        self._log(
            event,
            f"appointment {event.appointment_id} booked for employee {event.employee_id} "
            f"{event.start_time.isoformat()} - {event.end_time.isoformat()}",
        )

    def on_appointment_status_changed(self, event: AppointmentStatusChanged) -> None:
        self._log(
            event,
            f"appointment {event.appointment_id} {event.old_status.value} -> {event.new_status.value}",
        )

    def on_user_created(self, event: UserCreated) -> None:
        self._log(event, f"user {event.username} ({event.user_id}) created")

    def on_user_updated(self, event: UserUpdated) -> None:
        self._log(event, f"user {event.username} ({event.user_id}) updated: {event.change}")

    def on_user_deleted(self, event: UserDeleted) -> None:
        self._log(event, f"user {event.username} ({event.user_id}) deleted")


def default_listeners() -> list[DomainEventListener]:
    return [AppointmentNotificationListener(), AuditLogListener()]
