# dealership/utils/mail.py
"""
Отправка писем через Flask-Mail

Письма отправляются синхронно. Ошибка отправки записывается в лог и не
прерывает запрос, функции возвращают признак успешной отправки.
"""

from flask import current_app
from flask_mail import Message
from dealership.extensions import mail


def send_email(subject, recipients, body, html=None):
    """
    Отправка письма

    Args:
        subject: Тема письма
        recipients: Список адресов получателей
        body: Текст письма
        html: HTML версия письма

    Returns:
        True если письмо отправлено
    """
    msg = Message(subject=subject, recipients=recipients, body=body, html=html)

    try:
        mail.send(msg)
    except Exception as e:
        current_app.logger.error(f"Failed to send email '{subject}' to {recipients}: {e}")
        return False

    current_app.logger.info(f"Email '{subject}' sent to {recipients}")
    return True


def _app_name():
    return current_app.config.get('APP_NAME', 'Dealership')


def _format_status(status):
    return status.replace('_', ' ').capitalize()


def send_invitation_email(to, inviter_name, role, token):
    invite_url = f"{current_app.config['APP_URL']}/auth/invite?token={token}"
    days = current_app.config.get('INVITATION_EXPIRES_DAYS', 7)
    body = (
        f"Hello,\n\n"
        f"{inviter_name} has invited you to join {_app_name()} as {role.replace('_', ' ')}.\n"
        f"Accept the invitation and set up your account: {invite_url}\n\n"
        f"This invitation will expire in {days} days."
    )
    return send_email(f"You've been invited to join {_app_name()}", [to], body)


def send_password_reset_email(to, name, token):
    reset_url = f"{current_app.config['APP_URL']}/auth/reset-password?token={token}"
    hours = current_app.config.get('PASSWORD_RESET_EXPIRES_HOURS', 24)
    body = (
        f"Hello {name or to},\n\n"
        f"Reset your password: {reset_url}\n\n"
        f"The link is valid for {hours} hours. "
        f"If you did not request a password reset, ignore this email."
    )
    return send_email(f"Reset Your {_app_name()} Password", [to], body)


def send_welcome_email(to, name):
    body = f"Hello {name},\n\nWelcome to {_app_name()}! Your account is ready."
    return send_email(f"Welcome to {_app_name()}", [to], body)


def send_ticket_status_email(ticket, response_message=None):
    body = (
        f"Hello {ticket.name},\n\n"
        f"Your support ticket {ticket.ticket_number} is now {_format_status(ticket.status)}."
    )
    if response_message:
        body += f"\n\nResponse from our team:\n{response_message}"
    return send_email(f"Ticket {ticket.ticket_number} - {_format_status(ticket.status)}", [ticket.email], body)


def send_ticket_created_email(ticket):
    body = (
        f"Hello {ticket.name},\n\n"
        f"We have received your request. Your ticket number is {ticket.ticket_number}.\n"
        f"Our team will contact you shortly."
    )
    return send_email(f"Ticket {ticket.ticket_number} received", [ticket.email], body)


def send_booking_status_email(booking):
    service_name = booking.service.name if booking.service else 'service'
    body = (
        f"Hello {booking.name},\n\n"
        f"Your booking #{booking.booking_id} for {service_name} on "
        f"{booking.preferred_date:%Y-%m-%d %H:%M} is {_format_status(booking.status)}."
    )
    return send_email(
        f"Service Booking #{booking.booking_id} - {_format_status(booking.status)}",
        [booking.email], body
    )


def send_booking_response_email(booking, message):
    service_name = booking.service.name if booking.service else 'service'
    body = (
        f"Hello {booking.name},\n\n"
        f"There is a new response to your booking #{booking.booking_id} for {service_name}:\n\n"
        f"{message}"
    )
    return send_email(f"New Response to Your Service Booking #{booking.booking_id}", [booking.email], body)
