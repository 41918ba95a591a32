"""
MJML Email Templates
Patient-facing emails sent on behalf of a clinic
"""

from typing import Callable

# Clinic theme colors - Emerald/Slate color scheme
THEME = {
    "primary": "#10b981",
    "primary_light": "#d1fae5",
    "background": "#f8fafc",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#6b7280",
    "border": "#e5e7eb",
    "warning": "#f59e0b",
    "warning_light": "#fef3c7",
    "danger": "#ef4444",
    "danger_light": "#fee2e2",
}


def format_money(amount) -> str:
    return f"${float(amount or 0):,.2f}"


def get_base_template(data: dict, title: str, preview_text: str, content_sections: str) -> str:
    """Base MJML wrapper with the clinic header, signature and contact footer"""
    if data.get("clinicLogo"):
        header = f"""
            <mj-image src="{data['clinicLogo']}" alt="{data['clinicName']}" width="140px" padding="0" />
        """
    else:
        header = f"""
            <mj-text align="center" font-size="26px" font-weight="700" color="#ffffff" padding="0">
              🦷 {data['clinicName']}
            </mj-text>
        """

    signature = ""
    if data.get("signature"):
        signature = f"""
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="24px 0 16px 0" />
            <mj-text color="{THEME['text_muted']}" css-class="signature">{data['signature']}</mj-text>
        """

    contact_lines = [data["clinicName"]]
    if data.get("clinicAddress"):
        contact_lines.append(data["clinicAddress"])
    if data.get("clinicPhone"):
        contact_lines.append(f"📞 {data['clinicPhone']}")
    if data.get("clinicEmail"):
        contact_lines.append(f"✉️ {data['clinicEmail']}")

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <!-- Header -->
        <mj-section background-color="{THEME['primary']}" padding="28px 20px">
          <mj-column>
            {header}
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="32px 40px 40px 40px">
          <mj-column>
            {content_sections}
            {signature}
          </mj-column>
        </mj-section>

        <!-- Footer -->
        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              {"<br/>".join(contact_lines)}
            </mj-text>
            <mj-text align="center" font-size="12px" color="#94a3b8" padding="12px 0 0 0">
              © {data['year']} {data['clinicName']}
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def appointment_card(data: dict) -> str:
    rows = [f"<strong>📅 Date:</strong> {data.get('date', '')}", f"<strong>🕐 Time:</strong> {data.get('time', '')}"]
    if data.get("dentistName"):
        rows.append(f"<strong>👩‍⚕️ Professional:</strong> {data['dentistName']}")
    if data.get("treatment"):
        rows.append(f"<strong>🦷 Treatment:</strong> {data['treatment']}")
    if data.get("clinicAddress"):
        rows.append(f"<strong>📍 Address:</strong> {data['clinicAddress']}")

    return f"""
    <mj-text background-color="{THEME['primary_light']}" padding="20px" container-background-color="{THEME['primary_light']}">
      {"<br/>".join(rows)}
    </mj-text>
    """


def appointment_confirmation_template(data: dict) -> tuple[str, str]:
    subject = f"✅ Appointment confirmed - {data.get('date')} at {data.get('time')}"
    content = f"""
    <mj-text font-size="22px" font-weight="600" color="{THEME['primary']}">Your appointment is confirmed!</mj-text>
    <mj-text>Hello <strong>{data.get('patientName', '')}</strong>,</mj-text>
    <mj-text>We confirm your appointment at <strong>{data['clinicName']}</strong>:</mj-text>
    {appointment_card(data)}
    <mj-text>
      Please arrive on time. If you need to cancel or reschedule, contact us at least 24 hours in advance.
    </mj-text>
    """
    return subject, get_base_template(data, "Appointment confirmed", subject, content)


def appointment_reminder_template(data: dict) -> tuple[str, str]:
    when = "TODAY" if data.get("isToday") else "tomorrow"
    subject = f"⏰ Reminder: your appointment is {when} at {data.get('time')}"

    tips = ["Arrive 10 minutes before your appointment", "Bring your ID document"]
    if data.get("notes"):
        tips.append(str(data["notes"]))
    tips_html = "".join(f"<li>{tip}</li>" for tip in tips)

    confirm_button = ""
    if data.get("confirmUrl"):
        confirm_button = f"""
        <mj-button href="{data['confirmUrl']}" background-color="{THEME['primary']}" color="#ffffff"
                   font-weight="600" border-radius="8px" padding="24px 0">
          Confirm attendance
        </mj-button>
        """

    content = f"""
    <mj-text font-size="22px" font-weight="600" color="{THEME['warning']}">📅 Appointment reminder</mj-text>
    <mj-text>Hello <strong>{data.get('patientName', '')}</strong>,</mj-text>
    <mj-text>This is a reminder that you have an appointment <strong>{when}</strong>:</mj-text>
    {appointment_card(data)}
    <mj-text container-background-color="{THEME['warning_light']}" padding="16px">
      <strong>💡 Recommendations:</strong>
      <ul>{tips_html}</ul>
    </mj-text>
    <mj-text>If you cannot attend, please let us know as soon as possible.</mj-text>
    {confirm_button}
    """
    return subject, get_base_template(data, "Appointment reminder", subject, content)


def appointment_cancelled_template(data: dict) -> tuple[str, str]:
    subject = f"❌ Appointment cancelled - {data.get('date')}"
    reason = f"<br/><strong>Reason:</strong> {data['reason']}" if data.get("reason") else ""
    content = f"""
    <mj-text font-size="22px" font-weight="600" color="{THEME['danger']}">Appointment cancelled</mj-text>
    <mj-text>Hello <strong>{data.get('patientName', '')}</strong>,</mj-text>
    <mj-text>Your appointment has been cancelled:</mj-text>
    <mj-text container-background-color="{THEME['danger_light']}" padding="20px">
      <strong>📅 Date:</strong> {data.get('date', '')}<br/>
      <strong>🕐 Time:</strong> {data.get('time', '')}{reason}
    </mj-text>
    <mj-text>If you would like to reschedule, please contact us.</mj-text>
    """
    return subject, get_base_template(data, "Appointment cancelled", subject, content)


def budget_sent_template(data: dict) -> tuple[str, str]:
    subject = f"📋 New treatment quote #{data.get('budgetNumber')} - {data['clinicName']}"

    rows = "".join(
        f"""
        <tr style="border-bottom: 1px solid {THEME['border']};">
          <td style="padding: 10px 0;">{item.get('description', '')}</td>
          <td style="padding: 10px 0; text-align: right;">{format_money(item.get('total'))}</td>
        </tr>
        """
        for item in data.get("items") or []
    )
    valid_until = f"<br/><strong>Valid until:</strong> {data['validUntil']}" if data.get("validUntil") else ""
    notes = (
        f'<mj-text color="{THEME["text_muted"]}" font-style="italic">{data["notes"]}</mj-text>'
        if data.get("notes")
        else ""
    )

    content = f"""
    <mj-text font-size="22px" font-weight="600" color="{THEME['primary']}">Treatment quote</mj-text>
    <mj-text>Hello <strong>{data.get('patientName', '')}</strong>,</mj-text>
    <mj-text>We have prepared a quote for you:</mj-text>
    <mj-text>
      <strong>Quote #:</strong> {data.get('budgetNumber')}<br/>
      <strong>Date:</strong> {data.get('date', '')}{valid_until}
    </mj-text>
    <mj-table>
      <tr style="border-bottom: 1px solid {THEME['border']}; text-align: left;">
        <th style="padding: 10px 0; color: {THEME['text_muted']};">Treatment</th>
        <th style="padding: 10px 0; color: {THEME['text_muted']}; text-align: right;">Price</th>
      </tr>
      {rows}
      <tr>
        <td style="padding: 14px 0; font-weight: 700;">Total</td>
        <td style="padding: 14px 0; font-weight: 700; text-align: right; color: {THEME['primary']};">
          {format_money(data.get('total'))}
        </td>
      </tr>
    </mj-table>
    {notes}
    <mj-text font-size="14px" color="{THEME['text_muted']}">Contact us if you have any questions.</mj-text>
    """
    return subject, get_base_template(data, "Treatment quote", subject, content)


def payment_receipt_template(data: dict) -> tuple[str, str]:
    amount = format_money(data.get("amount"))
    subject = f"🧾 Payment receipt - {amount} - {data['clinicName']}"
    content = f"""
    <mj-text font-size="22px" font-weight="600" color="{THEME['primary']}">Payment receipt</mj-text>
    <mj-text>Hello <strong>{data.get('patientName', '')}</strong>,</mj-text>
    <mj-text>We have received your payment. Here is your receipt:</mj-text>
    <mj-text align="center" font-size="14px" color="{THEME['text_muted']}">Amount paid</mj-text>
    <mj-text align="center" font-size="32px" font-weight="700" color="{THEME['primary']}">{amount}</mj-text>
    <mj-text>
      <strong>Date:</strong> {data.get('date', '')}<br/>
      <strong>Payment method:</strong> {data.get('paymentMethod', '')}
    </mj-text>
    <mj-text font-size="14px" color="{THEME['text_muted']}">Keep this email as proof of your payment.</mj-text>
    """
    return subject, get_base_template(data, "Payment receipt", subject, content)


TEMPLATES: dict[str, Callable[[dict], tuple[str, str]]] = {
    "appointment_confirmation": appointment_confirmation_template,
    "appointment_reminder": appointment_reminder_template,
    "appointment_cancelled": appointment_cancelled_template,
    "budget_sent": budget_sent_template,
    "payment_receipt": payment_receipt_template,
}
