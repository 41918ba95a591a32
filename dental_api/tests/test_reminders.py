import asyncio
from datetime import datetime
from types import SimpleNamespace

import pytest

from dental_api import email_service
from dental_api.models import Appointment, Patient
from dental_api.models_notifications import EmailLog, EmailSettings
from dental_api.services.reminder_service import due_appointments, send_due_reminders

NOW = datetime(2024, 1, 8, 9, 0)


@pytest.fixture
def reminder_settings(db, clinic):
    settings = EmailSettings(clinic_id=clinic.id, reminder_enabled=True, reminder_hours_before=24)
    db.add(settings)
    db.commit()
    return settings


def add_appointment(db, clinic, patient, scheduled_at, **extra):
    appointment = Appointment(clinic_id=clinic.id, patient_id=patient.id, scheduled_at=scheduled_at, **extra)
    db.add(appointment)
    db.commit()
    return appointment


def run(db, now=NOW):
    return asyncio.run(send_due_reminders(db, now=now))


def test_reminds_next_day_appointments(db, clinic, patient, reminder_settings, sent_emails):
    tomorrow = add_appointment(db, clinic, patient, datetime(2024, 1, 9, 10, 30))
    later = add_appointment(db, clinic, patient, datetime(2024, 1, 10, 10, 30))

    assert run(db) == {"sent": 1, "errors": []}

    assert sent_emails[0]["subject"] == "⏰ Reminder: your appointment is tomorrow at 10:30"
    db.refresh(tomorrow)
    db.refresh(later)
    assert tomorrow.reminder_sent is True
    assert later.reminder_sent is False


def test_reminder_sent_once(db, clinic, patient, reminder_settings, sent_emails):
    add_appointment(db, clinic, patient, datetime(2024, 1, 9, 10, 30))

    run(db)
    assert run(db) == {"sent": 0, "errors": []}
    assert len(sent_emails) == 1


def test_same_day_reminder(db, clinic, patient, reminder_settings, sent_emails):
    reminder_settings.reminder_hours_before = 2
    db.commit()
    add_appointment(db, clinic, patient, datetime(2024, 1, 8, 16, 0))

    run(db)
    assert sent_emails[0]["subject"] == "⏰ Reminder: your appointment is TODAY at 16:00"


def test_skips_cancelled_and_unreachable(db, clinic, patient, reminder_settings, sent_emails):
    no_email = Patient(clinic_id=clinic.id, first_name="Mario", last_name="Ruiz")
    db.add(no_email)
    db.commit()
    add_appointment(db, clinic, patient, datetime(2024, 1, 9, 9, 0), status="cancelled")
    silent = add_appointment(db, clinic, no_email, datetime(2024, 1, 9, 11, 0))

    assert run(db)["sent"] == 0
    db.refresh(silent)
    assert silent.reminder_sent is False


def test_disabled_clinic_is_skipped(db, clinic, patient, reminder_settings, sent_emails):
    reminder_settings.send_appointment_reminder = False
    db.commit()
    add_appointment(db, clinic, patient, datetime(2024, 1, 9, 10, 0))

    assert run(db) == {"sent": 0, "errors": []}


def test_clinic_without_settings_gets_no_reminders(db, clinic, patient, sent_emails):
    add_appointment(db, clinic, patient, datetime(2024, 1, 9, 10, 0))
    assert run(db)["sent"] == 0


def test_delivery_failure_is_reported_per_clinic(db, clinic, patient, reminder_settings):
    appointment = add_appointment(db, clinic, patient, datetime(2024, 1, 9, 10, 0))

    result = run(db)

    assert result["sent"] == 0
    assert result["errors"] == [f"Clinic {clinic.id}, appointment {appointment.id}: Email service not configured"]
    db.refresh(appointment)
    assert appointment.reminder_sent is False
    assert db.query(EmailLog).one().status == "failed"


def test_due_appointments_covers_whole_day(db, clinic, patient):
    early = add_appointment(db, clinic, patient, datetime(2024, 1, 9, 0, 0))
    late = add_appointment(db, clinic, patient, datetime(2024, 1, 9, 23, 59))
    add_appointment(db, clinic, patient, datetime(2024, 1, 10, 0, 0))

    due = due_appointments(db, clinic.id, datetime(2024, 1, 9).date())
    assert [a.id for a in due] == [early.id, late.id]


def test_run_endpoint_requires_admin(client, dentist, login_as):
    assert client.post("/notifications/reminders/run").json() == {"sent": 0, "errors": []}

    login_as(dentist)
    assert client.post("/notifications/reminders/run").status_code == 403


def test_failed_reminder_does_not_block_other_patients(db, clinic, patient, reminder_settings, sent_emails, monkeypatch):
    bounced = Patient(clinic_id=clinic.id, first_name="Mario", last_name="Ruiz", email="bounce@example.com")
    db.add(bounced)
    db.commit()
    first = add_appointment(db, clinic, bounced, datetime(2024, 1, 9, 9, 0))
    second = add_appointment(db, clinic, patient, datetime(2024, 1, 9, 11, 0))

    def send(params):
        if params["to"] == ["bounce@example.com"]:
            raise RuntimeError("mailbox unavailable")
        sent_emails.append(params)
        return {"id": "email_ok"}

    monkeypatch.setattr(email_service, "resend", SimpleNamespace(Emails=SimpleNamespace(send=send)))

    result = run(db)

    assert result["sent"] == 1
    assert len(result["errors"]) == 1
    assert result["errors"][0].startswith(f"Clinic {clinic.id}, appointment {first.id}:")
    assert [e["to"] for e in sent_emails] == [["laura@example.com"]]
    db.refresh(first)
    db.refresh(second)
    assert (first.reminder_sent, second.reminder_sent) == (False, True)
