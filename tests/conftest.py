import os
import tempfile

# Configure a throwaway database before the application modules are imported
_tmpdir = tempfile.mkdtemp(prefix="beautycenter-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["APPOINTMENT_TRANSITION_POLICY"] = "lenient"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from datetime import datetime  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from beautycenter.database import Base, SessionLocal, engine  # noqa: E402
from beautycenter.domain.appointments.schemas import AppointmentCreate  # noqa: E402
from beautycenter.domain.appointments.scheduling import SlotLockRegistry  # noqa: E402
from beautycenter.domain.appointments.service import AppointmentService  # noqa: E402
from beautycenter.domain.events import DomainEventListener, EventBus, get_event_bus  # noqa: E402
from beautycenter.main import app  # noqa: E402
from beautycenter.models import Company, Customer, Employee, Role, Service, User  # noqa: E402
from beautycenter.security_utils import create_access_token, hash_password  # noqa: E402

STRONG_PASSWORD = "Str0ng!Pass"


class RecordingListener(DomainEventListener):
    """Keeps every delivered event, in order"""

    def __init__(self):
        self.events = []

    def on_appointment_created(self, event):
        self.events.append(event)

    def on_appointment_status_changed(self, event):
        self.events.append(event)

    def on_user_created(self, event):
        self.events.append(event)

    def on_user_updated(self, event):
        self.events.append(event)

    def on_user_deleted(self, event):
        self.events.append(event)

    def of_type(self, event_type):
        return [e for e in self.events if isinstance(e, event_type)]


@pytest.fixture(autouse=True)
def _reset_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def recorder():
    return RecordingListener()


@pytest.fixture
def event_bus(recorder):
    # No executor: delivery happens synchronously inside publish()
    return EventBus([recorder])


@pytest.fixture
def client(event_bus):
    app.dependency_overrides[get_event_bus] = lambda: event_bus
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def appointment_service(db, event_bus):
    return AppointmentService(db, event_bus, slot_lock_registry=SlotLockRegistry(8))


@pytest.fixture
def make_user(db):
    def _make(username, roles=(Role.USER,), company=None, active=True, password=STRONG_PASSWORD):
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password(password),
            roles=[Role(r).value for r in roles],
            company_id=company.id if company else None,
            active=active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


def auth_headers(user):
    token, _ = create_access_token(user.id, {"username": user.username, "roles": user.roles})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(make_user):
    return make_user("admin", roles=(Role.ADMIN,))


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def make_company(db):
    def _make(name="Glow Studio", **fields):
        company = Company(name=name, active=True, **fields)
        db.add(company)
        db.commit()
        db.refresh(company)
        return company

    return _make


@pytest.fixture
def company(make_company):
    return make_company()


@pytest.fixture
def make_employee(db):
    def _make(company, first_name="Anna", last_name="Stylist"):
        employee = Employee(company_id=company.id, first_name=first_name, last_name=last_name, active=True)
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee

    return _make


@pytest.fixture
def employee(make_employee, company):
    return make_employee(company)


@pytest.fixture
def customer(db):
    customer = Customer(first_name="Maria", last_name="Client", email="maria@example.com")
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer


@pytest.fixture
def make_service(db):
    def _make(company, name="Haircut", duration_minutes=60, price="40.00"):
        service = Service(
            company_id=company.id,
            name=name,
            duration_minutes=duration_minutes,
            price=Decimal(price),
            active=True,
        )
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    return _make


@pytest.fixture
def service(make_service, company):
    return make_service(company)


@pytest.fixture
def booking(company, employee, customer, service):
    """Builds AppointmentCreate payloads for the default company, employee and service"""

    def _booking(start: datetime, end=None, **overrides):
        data = {
            "companyId": company.id,
            "employeeId": employee.id,
            "customerId": customer.id,
            "serviceId": service.id,
            "startTime": start,
            "endTime": end,
        }
        data.update(overrides)
        return AppointmentCreate(**data)

    return _booking


@pytest.fixture
def staff(make_user, company):
    return make_user("reception", roles=(Role.RECEPTIONIST,), company=company)


@pytest.fixture
def staff_headers(staff):
    return auth_headers(staff)
