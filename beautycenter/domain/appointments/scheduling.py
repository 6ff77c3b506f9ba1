"""
Scheduling conflict checks and the per-slot write locks.

Two appointments for the same (company, employee) conflict when both hold the
slot (status REQUESTED, CONFIRMED or IN_PROGRESS) and their half-open
intervals [start, end) overlap. Touching endpoints are not a conflict.
"""

import hashlib
import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from ...config import SLOT_LOCK_STRIPES
from ...shared.validators import to_utc_naive
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)


def is_slot_available(
    db: Session,
    company_id: Optional[str],
    employee_id: Optional[str],
    start: Optional[datetime],
    end: Optional[datetime],
    exclude_appointment_id: Optional[str] = None,
) -> bool:
    """
    Check whether an employee is free for the window [start, end).

    Returns False instead of raising when an argument is missing or the window
    is empty or inverted. Read-only.
    """
    if not company_id or not employee_id or start is None or end is None:
        return False

    start = to_utc_naive(start)
    end = to_utc_naive(end)
    if end <= start:
        return False

    overlapping = AppointmentRepository.find_overlapping(
        db, company_id, employee_id, start, end, exclude_appointment_id=exclude_appointment_id
    )
    if overlapping:
        logger.debug(
            f"Slot taken for employee {employee_id} {start.isoformat()} - {end.isoformat()}: "
            f"{[a.id for a in overlapping]}"
        )
    return not overlapping


def slot_key(company_id: str, employee_id: str) -> int:
    """Stable signed 64-bit key for a (company, employee) pair"""
    digest = hashlib.sha256(f"{company_id}:{employee_id}".encode()).digest()
    return int.from_bytes(digest[:8], "big", signed=True)


class SlotLockRegistry:
    """
    Striped in-process locks keyed by (company, employee).

    Different pairs may share a stripe; that only serializes unrelated
    bookings, it never lets two writers into the same slot.
    """

    def __init__(self, stripes: int = SLOT_LOCK_STRIPES):
        if stripes < 1:
            raise ValueError("stripes must be at least 1")
        self._locks = [threading.Lock() for _ in range(stripes)]

    def lock_for(self, company_id: str, employee_id: str) -> threading.Lock:
        return self._locks[slot_key(company_id, employee_id) % len(self._locks)]

    @contextmanager
    def hold(self, company_id: str, employee_id: str) -> Iterator[None]:
        lock = self.lock_for(company_id, employee_id)
        with lock:
            yield


def acquire_advisory_lock(db: Session, company_id: str, employee_id: str) -> None:
    """
    Take a transaction-scoped PostgreSQL advisory lock for the slot.

    Released by the database on commit or rollback. No-op on other dialects,
    where the in-process lock is the only serialization.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": slot_key(company_id, employee_id)})


# Shared by every request in this process
slot_locks = SlotLockRegistry()
