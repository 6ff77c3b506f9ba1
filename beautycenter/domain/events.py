"""
Domain events and the bus that delivers them.

Events are published by the domain services only after their transaction has
committed. Delivery is best-effort and at-most-once: a listener that raises
is logged and skipped, and never affects the operation that emitted the
event.
"""

import logging
import uuid
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from fastapi import Request

from ..models import AppointmentStatus

logger = logging.getLogger(__name__)


class DomainEventListener:
    """Receives domain events; override the hooks you care about"""

    def on_appointment_created(self, event: "AppointmentCreated") -> None:
        pass

    def on_appointment_status_changed(self, event: "AppointmentStatusChanged") -> None:
        pass

    def on_user_created(self, event: "UserCreated") -> None:
        pass

    def on_user_updated(self, event: "UserUpdated") -> None:
        pass

    def on_user_deleted(self, event: "UserDeleted") -> None:
        pass


@dataclass(frozen=True)
class DomainEvent:
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()), kw_only=True)
    occurred_at: datetime = field(default_factory=datetime.utcnow, kw_only=True)

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def dispatch(self, listener: DomainEventListener) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class AppointmentCreated(DomainEvent):
    appointment_id: str
    company_id: str
    employee_id: str
    customer_id: str
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus

    def dispatch(self, listener: DomainEventListener) -> None:
        listener.on_appointment_created(self)


@dataclass(frozen=True)
class AppointmentStatusChanged(DomainEvent):
    appointment_id: str
    company_id: str
    old_status: AppointmentStatus
    new_status: AppointmentStatus

    def dispatch(self, listener: DomainEventListener) -> None:
        listener.on_appointment_status_changed(self)


@dataclass(frozen=True)
class UserCreated(DomainEvent):
    user_id: str
    username: str

    def dispatch(self, listener: DomainEventListener) -> None:
        listener.on_user_created(self)


@dataclass(frozen=True)
class UserUpdated(DomainEvent):
    user_id: str
    username: str
    change: str  # what changed, e.g. "profile", "roles", "deactivated"

    def dispatch(self, listener: DomainEventListener) -> None:
        listener.on_user_updated(self)


@dataclass(frozen=True)
class UserDeleted(DomainEvent):
    user_id: str
    username: str

    def dispatch(self, listener: DomainEventListener) -> None:
        listener.on_user_deleted(self)


class EventBus:
    """
    Fan-out of domain events to an injected list of listeners.

    With an executor, each (listener, event) delivery runs on the executor and
    publish() returns immediately. Without one, delivery is synchronous.
    """

    def __init__(
        self,
        listeners: Optional[Iterable[DomainEventListener]] = None,
        executor: Optional[Executor] = None,
    ):
        self._listeners = list(listeners or [])
        self._executor = executor

    @classmethod
    def threaded(cls, listeners: Iterable[DomainEventListener], max_workers: int) -> "EventBus":
        executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="events")
        return cls(listeners, executor)

    @property
    def listeners(self) -> tuple[DomainEventListener, ...]:
        return tuple(self._listeners)

    def publish(self, event: DomainEvent) -> None:
        logger.debug(f"Publishing event: {event.event_type} ({event.event_id})")
        for listener in self._listeners:
            if self._executor is None:
                self._deliver(listener, event)
                continue
            try:
                self._executor.submit(self._deliver, listener, event)
            except RuntimeError as e:
                # Executor already shut down
                logger.error(f"Dropped event {event.event_type} for {type(listener).__name__}: {e}")

    @staticmethod
    def _deliver(listener: DomainEventListener, event: DomainEvent) -> None:
        try:
            event.dispatch(listener)
        except Exception as e:
            logger.error(
                f"Error handling event {event.event_type} with listener {type(listener).__name__}: {e}",
                exc_info=True,
            )

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)


def get_event_bus(request: Request) -> EventBus:
    """Dependency returning the application's event bus (built in main.py)"""
    return request.app.state.event_bus
