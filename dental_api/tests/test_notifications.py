import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest

from dental_api import email_service
from dental_api.email_templates import TEMPLATES
from dental_api.models_notifications import EmailLog, EmailSettings, WhatsAppConfig, WhatsAppMessageLog
from dental_api.services import whatsapp_service
from dental_api.services.notification_service import send_notification
from dental_api.services.whatsapp_service import decrypt_credential, encrypt_credential


@pytest.fixture
def graph_api(monkeypatch):
    """Route the WhatsApp service's httpx calls to an in-process handler"""
    requests = []
    responses = {}
    real_client = httpx.AsyncClient

    def handler(request: httpx.Request):
        requests.append(request)
        status, body = responses.get(request.method, (200, {}))
        return httpx.Response(status, json=body)

    monkeypatch.setattr(
        whatsapp_service.httpx,
        "AsyncClient",
        lambda *args, **kwargs: real_client(transport=httpx.MockTransport(handler)),
    )
    return SimpleNamespace(requests=requests, responses=responses)


@pytest.fixture
def whatsapp_config(db, clinic):
    config = WhatsAppConfig(
        clinic_id=clinic.id,
        phone_number_id=encrypt_credential("123456789"),
        access_token=encrypt_credential("EAAB-token"),
        is_enabled=True,
        is_verified=True,
    )
    db.add(config)
    db.commit()
    return config


# Email


def test_compile_mjml_accepts_dict_result(monkeypatch):
    monkeypatch.setattr(email_service, "mjml_to_html", lambda fp: {"html": "<p>ok</p>", "errors": []})
    assert email_service.compile_mjml_to_html("<mjml></mjml>") == "<p>ok</p>"


def test_compile_mjml_accepts_object_result(monkeypatch):
    captured = {}

    def fake(fp):
        captured["source"] = fp.read()
        return SimpleNamespace(html="<p>obj</p>", errors=[])

    monkeypatch.setattr(email_service, "mjml_to_html", fake)
    assert email_service.compile_mjml_to_html("<mjml>x</mjml>") == "<p>obj</p>"
    assert captured["source"] == "<mjml>x</mjml>"


def test_compile_mjml_wraps_errors(monkeypatch):
    def broken(fp):
        raise RuntimeError("bad markup")

    monkeypatch.setattr(email_service, "mjml_to_html", broken)
    with pytest.raises(Exception, match="Failed to compile MJML template"):
        email_service.compile_mjml_to_html("<mjml>")


def test_every_template_renders_subject_and_markup():
    data = {
        "clinicName": "Sonrisa Dental",
        "year": 2024,
        "patientName": "Laura Gómez",
        "date": "Monday, January 08, 2024",
        "time": "10:00",
        "items": [{"description": "Limpieza", "total": 800}],
        "total": 800,
        "budgetNumber": 3,
        "amount": 800,
        "paymentMethod": "cash",
    }
    for name, render in TEMPLATES.items():
        subject, mjml = render(data)
        assert subject, name
        assert mjml.strip().startswith("<mjml>"), name
        assert "Sonrisa Dental" in mjml, name


def test_reminder_subject_for_today():
    subject, _ = TEMPLATES["appointment_reminder"]({"clinicName": "C", "year": 2024, "time": "09:00", "isToday": True})
    assert subject == "⏰ Reminder: your appointment is TODAY at 09:00"


def test_unknown_template_rejected(db, clinic):
    with pytest.raises(ValueError, match="not found"):
        asyncio.run(email_service.send_template_email(db, clinic.id, "a@b.test", "welcome", {}))


def test_template_email_uses_clinic_settings(db, clinic, sent_emails):
    db.add(
        EmailSettings(
            clinic_id=clinic.id,
            from_name="Dra. Ana Pérez",
            reply_to_email="citas@sonrisa.test",
            email_signature="Gracias por su confianza",
        )
    )
    db.commit()

    result = asyncio.run(
        email_service.send_template_email(
            db,
            clinic.id,
            "laura@example.com",
            "appointment_confirmation",
            {"patientName": "Laura", "date": "Monday", "time": "10:00"},
            recipient_id=5,
        )
    )

    assert result == {"success": True, "id": "email_1"}
    params = sent_emails[0]
    assert params["from"] == "Dra. Ana Pérez <onboarding@resend.dev>"
    assert params["reply_to"] == "citas@sonrisa.test"
    assert "Gracias por su confianza" in params["html"]
    assert "hola@sonrisa.test" in params["html"]

    log = db.query(EmailLog).one()
    assert (log.status, log.resend_id, log.recipient_id) == ("sent", "email_1", 5)
    assert log.payload["patientName"] == "Laura"


def test_caller_data_overrides_enrichment(db, clinic):
    enriched = email_service.enrich_template_data(clinic, None, {"clinicName": "Custom"})
    assert enriched["clinicName"] == "Custom"
    assert enriched["clinicPhone"] == "+5215550000000"
    assert enriched["signature"] is None


def test_missing_clinic_uses_default_name():
    enriched = email_service.enrich_template_data(None, None, {})
    assert enriched["clinicName"] == "Dental Clinic"


# WhatsApp


def test_credentials_round_trip():
    token = encrypt_credential("secret")
    assert token != "secret"
    assert decrypt_credential(token) == "secret"


def test_connection_test_rejects_non_numeric_id():
    with pytest.raises(ValueError, match="numeric"):
        asyncio.run(whatsapp_service.test_connection("12/../me", "token"))
    with pytest.raises(ValueError, match="Access token"):
        asyncio.run(whatsapp_service.test_connection("123", ""))


def test_connection_test_success(graph_api):
    graph_api.responses["GET"] = (200, {"display_phone_number": "+52 55 1234 5678"})

    result = asyncio.run(whatsapp_service.test_connection("123456789", "EAAB-token"))

    assert result == {"success": True, "message": "Connection successful", "phone_number": "+52 55 1234 5678"}
    request = graph_api.requests[0]
    assert str(request.url) == "https://graph.facebook.com/v18.0/123456789"
    assert request.headers["Authorization"] == "Bearer EAAB-token"


def test_connection_test_failure(graph_api):
    graph_api.responses["GET"] = (401, {"error": {"message": "Invalid OAuth access token"}})

    result = asyncio.run(whatsapp_service.test_connection("123456789", "bad"))
    assert result == {"success": False, "error": "Invalid OAuth access token"}


def test_send_message(db, clinic, whatsapp_config, graph_api):
    graph_api.responses["POST"] = (200, {"messages": [{"id": "wamid.1"}]})

    success, error = asyncio.run(
        whatsapp_service.send_whatsapp_message(
            db, clinic.id, "+52 1 55 1234 5678", "Hola", "appointment_confirmation", "Appointment", 9
        )
    )

    assert (success, error) == (True, None)
    request = graph_api.requests[0]
    assert str(request.url) == "https://graph.facebook.com/v18.0/123456789/messages"
    assert json.loads(request.content) == {
        "messaging_product": "whatsapp",
        "to": "5215512345678",
        "type": "text",
        "text": {"body": "Hola"},
    }
    log = db.query(WhatsAppMessageLog).one()
    assert (log.status, log.whatsapp_message_id, log.entity_id) == ("sent", "wamid.1", 9)


def test_send_message_api_error_is_logged(db, clinic, whatsapp_config, graph_api):
    graph_api.responses["POST"] = (400, {"error": {"message": "Recipient not allowed"}})

    success, error = asyncio.run(
        whatsapp_service.send_whatsapp_message(db, clinic.id, "+5215512345678", "Hola", "budget_sent")
    )

    assert (success, error) == (False, "Recipient not allowed")
    assert db.query(WhatsAppMessageLog).one().status == "failed"


def test_send_message_respects_switches(db, clinic, whatsapp_config, graph_api):
    whatsapp_config.send_reminders = False
    db.commit()

    success, error = asyncio.run(
        whatsapp_service.send_whatsapp_message(db, clinic.id, "+5215512345678", "Hola", "appointment_reminder")
    )
    assert success is False
    assert "disabled" in error
    assert graph_api.requests == []


def test_send_message_without_config(db, clinic):
    assert asyncio.run(
        whatsapp_service.send_whatsapp_message(db, clinic.id, "+5215512345678", "Hola", "budget_sent")
    ) == (False, "No WhatsApp configuration")


def test_send_message_invalid_phone(db, clinic):
    success, error = asyncio.run(whatsapp_service.send_whatsapp_message(db, clinic.id, "call me", "Hola", "x"))
    assert (success, error) == (False, "Invalid phone number format")


# Unified sender


def test_unified_sender_reports_both_channels(db, clinic, patient, whatsapp_config, graph_api, sent_emails):
    graph_api.responses["POST"] = (200, {"messages": [{"id": "wamid.2"}]})

    result = asyncio.run(
        send_notification(
            db,
            clinic.id,
            patient,
            "appointment_confirmation",
            email_data={"patientName": "Laura", "date": "Monday", "time": "10:00"},
            whatsapp_message="Hola Laura",
        )
    )

    assert result == {"email_sent": True, "whatsapp_sent": True, "email_error": None, "whatsapp_error": None}


def test_unified_sender_collects_errors(db, clinic, patient):
    result = asyncio.run(
        send_notification(db, clinic.id, patient, "appointment_confirmation", email_data={}, whatsapp_message="Hi")
    )

    assert result["email_sent"] is False
    assert result["email_error"] == "Email service not configured"
    assert result["whatsapp_error"] == "No WhatsApp configuration"


# Settings routes


def test_connect_whatsapp_stores_encrypted_credentials(client, clinic, db, graph_api):
    graph_api.responses["GET"] = (200, {"display_phone_number": "+52 55 0000 0000"})

    response = client.post(
        "/notifications/whatsapp/connect",
        json={"phone_number_id": "123456789", "access_token": "EAAB-token"},
    )
    assert response.status_code == 200

    config = db.query(WhatsAppConfig).one()
    assert config.phone_number_id != "123456789"
    assert decrypt_credential(config.access_token) == "EAAB-token"
    assert config.is_verified is True
    assert config.business_phone == "+52 55 0000 0000"

    status = client.get("/notifications/whatsapp/status").json()
    assert status["connected"] is True
    assert status["is_verified"] is True


def test_connect_whatsapp_rejects_bad_credentials(client, graph_api):
    graph_api.responses["GET"] = (400, {"error": {"message": "Unsupported get request"}})

    response = client.post(
        "/notifications/whatsapp/test",
        json={"phone_number_id": "123456789", "access_token": "nope"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Unsupported get request"


def test_whatsapp_test_validates_id(client):
    response = client.post("/notifications/whatsapp/test", json={"phone_number_id": "abc", "access_token": "t"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Phone Number ID must be numeric"


def test_whatsapp_settings_require_admin(client, dentist, login_as):
    login_as(dentist)
    response = client.post("/notifications/whatsapp/test", json={"phone_number_id": "1", "access_token": "t"})
    assert response.status_code == 403


def test_email_settings_defaults_and_update(client):
    assert client.get("/notifications/email-settings").json()["reminder_hours_before"] == 24

    response = client.put(
        "/notifications/email-settings",
        json={"from_name": "Sonrisa", "reply_to_email": "Citas@Sonrisa.test", "reminder_hours_before": 48},
    )
    assert response.status_code == 200
    assert response.json()["reply_to_email"] == "citas@sonrisa.test"
    assert client.get("/notifications/email-settings").json()["reminder_hours_before"] == 48


def test_email_settings_validation(client):
    assert client.put("/notifications/email-settings", json={"reminder_hours_before": 0}).status_code == 422
    assert client.put("/notifications/email-settings", json={"reply_to_email": "nope"}).status_code == 422
