import os

# Must be set before the package reads its configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RESEND_API_KEY"] = ""

from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from fastapi import Depends  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from dental_api import email_service  # noqa: E402
from dental_api.auth import get_current_profile  # noqa: E402
from dental_api.database import Base, SessionLocal, engine, get_db  # noqa: E402
from dental_api.main import app  # noqa: E402
from dental_api.models import (  # noqa: E402
    Clinic,
    Patient,
    ProfessionalSchedule,
    Profile,
    Treatment,
)


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(tables):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clinic(db):
    clinic = Clinic(name="Sonrisa Dental", email="hola@sonrisa.test", phone="+5215550000000")
    db.add(clinic)
    db.commit()
    return clinic


@pytest.fixture
def other_clinic(db):
    clinic = Clinic(name="Other Clinic")
    db.add(clinic)
    db.commit()
    return clinic


def make_profile(db, clinic, uid, first_name, role="dentist"):
    profile = Profile(
        firebase_uid=uid,
        clinic_id=clinic.id,
        email=f"{uid}@sonrisa.test",
        first_name=first_name,
        last_name="Pérez",
        role=role,
    )
    db.add(profile)
    db.commit()
    return profile


@pytest.fixture
def new_profile(db):
    def _new(clinic, uid, first_name, role="dentist"):
        return make_profile(db, clinic, uid, first_name, role)

    return _new


@pytest.fixture
def admin(db, clinic):
    return make_profile(db, clinic, "admin-uid", "Ana", role="admin")


@pytest.fixture
def dentist(db, clinic):
    return make_profile(db, clinic, "dentist-uid", "Diego")


@pytest.fixture
def patient(db, clinic):
    patient = Patient(
        clinic_id=clinic.id,
        first_name="Laura",
        last_name="Gómez",
        email="laura@example.com",
        phone="+5215512345678",
    )
    db.add(patient)
    db.commit()
    return patient


@pytest.fixture
def treatment(db, clinic):
    treatment = Treatment(clinic_id=clinic.id, name="Limpieza", price=800.0, duration_minutes=45)
    db.add(treatment)
    db.commit()
    return treatment


@pytest.fixture
def add_window(db):
    """Store a weekly working window for a professional"""

    def _add(profile, day_of_week, start_time, end_time, is_working_day=True):
        row = ProfessionalSchedule(
            clinic_id=profile.clinic_id,
            profile_id=profile.id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            is_working_day=is_working_day,
        )
        db.add(row)
        db.commit()
        return row

    return _add


@pytest.fixture
def login_as():
    """Authenticate requests as the given profile, loaded through the request's session"""

    def _login(profile):
        profile_id = profile.id

        def override(db: Session = Depends(get_db)):
            return db.query(Profile).filter(Profile.id == profile_id).first()

        app.dependency_overrides[get_current_profile] = override

    yield _login
    app.dependency_overrides.pop(get_current_profile, None)


@pytest.fixture
def client(login_as, admin):
    login_as(admin)
    return TestClient(app)


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outgoing Resend calls instead of delivering them"""
    sent = []

    def fake_send(params):
        sent.append(params)
        return {"id": f"email_{len(sent)}"}

    monkeypatch.setattr(email_service, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(email_service, "resend", SimpleNamespace(Emails=SimpleNamespace(send=fake_send)))
    monkeypatch.setattr(email_service, "compile_mjml_to_html", lambda content: f"<html>{content}</html>")
    return sent
