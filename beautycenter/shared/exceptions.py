"""Domain error taxonomy, translated to HTTP responses in main.py"""


class DomainError(Exception):
    """Base class for errors raised by the domain services"""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(DomainError):
    """Malformed input, rejected before touching the store"""

    status_code = 400


class AuthenticationError(DomainError):
    status_code = 401


class NotFoundError(DomainError):
    status_code = 404

    def __init__(self, entity: str, entity_id=None):
        detail = f"{entity} not found" if entity_id is None else f"{entity} not found with id: {entity_id}"
        super().__init__(detail)
        self.entity = entity
        self.entity_id = entity_id


class AlreadyExistsError(DomainError):
    status_code = 409


class SlotConflictError(DomainError):
    """The requested (employee, interval) overlaps an active appointment"""

    status_code = 409

    def __init__(self, detail: str = "The selected time slot is not available"):
        super().__init__(detail)


class InvalidTransitionError(DomainError):
    status_code = 409

    def __init__(self, trigger: str, current_status):
        status_name = getattr(current_status, "value", current_status)
        super().__init__(f"Cannot {trigger.replace('_', ' ')} an appointment in status {status_name}")
        self.trigger = trigger
        self.current_status = current_status
