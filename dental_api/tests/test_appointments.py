from datetime import datetime

import pytest

from dental_api.models import Appointment, Patient
from dental_api.models_notifications import EmailLog

MONDAY = "2024-01-08"


@pytest.fixture
def monday_hours(dentist, add_window):
    add_window(dentist, 1, "09:00", "17:00")


def book(client, patient, dentist=None, date=MONDAY, time="10:00", **extra):
    payload = {"patient_id": patient.id, "date": date, "time": time, **extra}
    if dentist is not None:
        payload["dentist_id"] = dentist.id
    return client.post("/appointments", json=payload)


def test_book_inside_working_hours(client, patient, dentist, treatment, monday_hours, sent_emails, db):
    response = book(client, patient, dentist, treatment_id=treatment.id)
    assert response.status_code == 201

    body = response.json()
    assert body["scheduled_at"] == "2024-01-08T10:00:00"
    assert body["status"] == "scheduled"
    assert body["duration_minutes"] == 45
    assert body["dentist_id"] == dentist.id

    assert len(sent_emails) == 1
    assert sent_emails[0]["to"] == ["laura@example.com"]
    assert sent_emails[0]["subject"].startswith("✅ Appointment confirmed")

    appointment = db.query(Appointment).one()
    assert appointment.confirmation_sent is True
    log = db.query(EmailLog).one()
    assert (log.template_name, log.status, log.recipient_id) == ("appointment_confirmation", "sent", patient.id)


def test_explicit_duration_wins_over_treatment(client, patient, treatment):
    response = book(client, patient, treatment_id=treatment.id, duration_minutes=90)
    assert response.json()["duration_minutes"] == 90


def test_default_duration_without_treatment(client, patient):
    assert book(client, patient).json()["duration_minutes"] == 30


def test_booking_survives_email_failure(client, patient, db):
    response = book(client, patient)
    assert response.status_code == 201
    assert response.json()["confirmation_sent"] is False

    log = db.query(EmailLog).one()
    assert log.status == "failed"
    assert log.error_message == "Email service not configured"


def test_booking_outside_professional_hours_is_blocked(client, patient, dentist, monday_hours, db):
    response = book(client, patient, dentist, time="08:30")

    assert response.status_code == 422
    assert response.json()["detail"] == {
        "code": "outside_professional_hours",
        "message": "Outside the professional's hours (09:00 - 17:00)",
    }
    assert db.query(Appointment).count() == 0


def test_booking_on_professional_day_off_is_blocked(client, patient, dentist, add_window):
    add_window(dentist, 1, "09:00", "17:00", is_working_day=False)

    response = book(client, patient, dentist)
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "professional_day_off"


def test_booking_at_window_end_is_blocked(client, patient, dentist, monday_hours):
    assert book(client, patient, dentist, time="17:00").status_code == 422
    assert book(client, patient, dentist, time="09:00").status_code == 201


def test_booking_outside_clinic_hours_without_dentist(client, patient, dentist, monday_hours):
    response = book(client, patient, time="18:30")
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Outside clinic hours (09:00 - 17:00)"


def test_booking_without_schedules_is_unconstrained(client, patient):
    assert book(client, patient, time="23:30").status_code == 201


def test_start_at_end_of_day_rejected(client, patient):
    assert book(client, patient, time="24:00").status_code == 422


def test_patient_from_another_clinic(client, db, other_clinic):
    stranger = Patient(clinic_id=other_clinic.id, first_name="Otro", last_name="Paciente")
    db.add(stranger)
    db.commit()

    response = book(client, stranger)
    assert response.status_code == 403


def test_unknown_patient(client):
    response = client.post("/appointments", json={"patient_id": 999, "date": MONDAY, "time": "10:00"})
    assert response.status_code == 404


def test_dentist_from_another_clinic(client, patient, other_clinic, new_profile):
    outsider = new_profile(other_clinic, "outsider-uid", "Olga")
    assert book(client, patient, outsider).status_code == 403


def test_reschedule_revalidates(client, patient, dentist, monday_hours):
    appointment_id = book(client, patient, dentist).json()["id"]

    response = client.patch(f"/appointments/{appointment_id}", json={"time": "07:00"})
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "outside_professional_hours"

    response = client.patch(f"/appointments/{appointment_id}", json={"time": "11:15"})
    assert response.status_code == 200
    assert response.json()["scheduled_at"] == "2024-01-08T11:15:00"


def test_reschedule_resets_reminder_flag(client, patient, db):
    appointment_id = book(client, patient).json()["id"]
    db.query(Appointment).filter(Appointment.id == appointment_id).update({"reminder_sent": True})
    db.commit()

    response = client.patch(f"/appointments/{appointment_id}", json={"date": "2024-01-09"})
    assert response.status_code == 200
    assert response.json()["scheduled_at"] == "2024-01-09T10:00:00"
    assert response.json()["reminder_sent"] is False


def test_notes_update_skips_hours_check(client, patient, dentist, add_window):
    appointment_id = book(client, patient, dentist, time="08:00").json()["id"]
    # Hours configured after the booking now exclude it
    add_window(dentist, 1, "09:00", "17:00")

    response = client.patch(f"/appointments/{appointment_id}", json={"notes": "Sensitive gums", "status": "confirmed"})
    assert response.status_code == 200
    assert response.json()["notes"] == "Sensitive gums"
    assert response.json()["status"] == "confirmed"


def test_changing_dentist_revalidates(client, patient, dentist, add_window):
    appointment_id = book(client, patient, time="08:00").json()["id"]
    add_window(dentist, 1, "09:00", "17:00")

    response = client.patch(f"/appointments/{appointment_id}", json={"dentist_id": dentist.id})
    assert response.status_code == 422


def test_invalid_status_rejected(client, patient):
    appointment_id = book(client, patient).json()["id"]
    response = client.patch(f"/appointments/{appointment_id}", json={"status": "done"})
    assert response.status_code == 422


def test_null_status_rejected(client, patient, db):
    appointment_id = book(client, patient).json()["id"]

    response = client.patch(f"/appointments/{appointment_id}", json={"status": None})
    assert response.status_code == 422
    assert db.query(Appointment).one().status == "scheduled"


def test_null_date_and_time_keep_the_slot(client, patient):
    appointment_id = book(client, patient).json()["id"]

    response = client.patch(f"/appointments/{appointment_id}", json={"date": None, "time": None, "notes": "ok"})
    assert response.status_code == 200
    assert response.json()["scheduled_at"] == "2024-01-08T10:00:00"


def test_cancel_sends_notice(client, patient, sent_emails):
    appointment_id = book(client, patient).json()["id"]

    response = client.post(f"/appointments/{appointment_id}/cancel", json={"reason": "Patient request"})
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert sent_emails[-1]["subject"].startswith("❌ Appointment cancelled")
    assert "Patient request" in sent_emails[-1]["html"]

    again = client.post(f"/appointments/{appointment_id}/cancel")
    assert again.status_code == 400


def test_list_filters(client, patient, db):
    book(client, patient, date="2024-01-08", time="10:00")
    book(client, patient, date="2024-01-09", time="10:00")
    third = book(client, patient, date="2024-01-10", time="10:00").json()["id"]
    client.post(f"/appointments/{third}/cancel")

    in_range = client.get("/appointments", params={"date_from": "2024-01-09", "date_to": "2024-01-10"}).json()
    assert [a["scheduled_at"][:10] for a in in_range] == ["2024-01-09", "2024-01-10"]

    cancelled = client.get("/appointments", params={"status": "cancelled"}).json()
    assert [a["id"] for a in cancelled] == [third]


def test_other_clinic_cannot_see_appointment(client, patient, login_as, other_clinic, new_profile):
    appointment_id = book(client, patient).json()["id"]

    login_as(new_profile(other_clinic, "outsider-uid", "Olga"))
    assert client.get(f"/appointments/{appointment_id}").status_code == 404
    assert client.get("/appointments").json() == []


def test_delete(client, patient):
    appointment_id = book(client, patient).json()["id"]
    assert client.delete(f"/appointments/{appointment_id}").status_code == 200
    assert client.get(f"/appointments/{appointment_id}").status_code == 404


def test_scheduled_at_is_stored_naive(client, patient, db):
    book(client, patient, time="09:45")
    assert db.query(Appointment).one().scheduled_at == datetime(2024, 1, 8, 9, 45)
