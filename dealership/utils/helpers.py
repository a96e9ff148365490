# dealership/utils/helpers.py
"""
Вспомогательные функции общего назначения
"""

import secrets
from typing import Optional
from flask import request
from email_validator import validate_email, EmailNotValidError


def generate_secure_token(length=32):
    """Генерация безопасного токена (hex)"""
    return secrets.token_hex(length)


def validate_email_address(email: str) -> str:
    """
    Валидация и нормализация email адреса

    Args:
        email: Email адрес

    Returns:
        Нормализованный email в нижнем регистре

    Raises:
        ValueError: Если email некорректный
    """
    try:
        validation = validate_email(email, check_deliverability=False)
        return validation.normalized.lower()
    except EmailNotValidError:
        raise ValueError("Invalid email address")


def truncate(text: Optional[str], length: int) -> Optional[str]:
    """Обрезка текста до заданной длины"""
    if text is None:
        return None
    return text[:length]


def parse_bool_arg(name: str) -> Optional[bool]:
    """Булев параметр запроса: true/1/yes, false/0/no, иначе None"""
    value = request.args.get(name)
    if value is None:
        return None
    if value.lower() in ['true', '1', 'yes']:
        return True
    if value.lower() in ['false', '0', 'no']:
        return False
    return None


def get_client_ip() -> str:
    """
    Получение IP адреса клиента с учетом прокси

    Returns:
        IP адрес клиента
    """
    ip = request.headers.get('X-Forwarded-For')
    if ip:
        # Берем первый IP из списка
        ip = ip.split(',')[0].strip()
    else:
        ip = request.headers.get('X-Real-IP') or request.remote_addr

    return ip or '127.0.0.1'


def get_user_agent() -> str:
    """Получение User-Agent клиента"""
    return request.headers.get('User-Agent', 'Unknown')


def build_response(data=None, message=None):
    """Стандартизированный успешный ответ"""
    response = {'data': data}
    if message:
        response['message'] = message
    return response
