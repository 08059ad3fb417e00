"""
Field validators shared by the request serializers.

Each validator raises ``serializers.ValidationError`` with a message the
mobile client can show as-is.
"""
from __future__ import annotations

import re
from decimal import Decimal

import bleach
from rest_framework import serializers

PHONE_DIGITS = re.compile(r'^[0-9]{10,15}$')
LICENSE_NUMBER = re.compile(r'^LIC-[A-Z0-9]{6}$')

SPECIALIZATIONS = (
    'General Practice',
    'Cardiology',
    'Dermatology',
    'Neurology',
    'Pediatrics',
    'Psychiatry',
    'Orthopedics',
    'Ophthalmology',
    'ENT',
    'Gynecology',
)
CURRENCIES = ('GHS', 'USD', 'EUR', 'GBP', 'ZAR')

PASSWORD_MIN_LENGTH = 8
MAX_PAYMENT_AMOUNT = Decimal('1000000')
MAX_NOTES_LENGTH = 5000
MAX_REASON_LENGTH = 500
MAX_EXPERIENCE_YEARS = 70


def sanitize(value: str) -> str:
    return bleach.clean((value or '').strip(), tags=[], strip=True)


def password_problems(password: str) -> list[str]:
    problems = []
    if len(password) < PASSWORD_MIN_LENGTH:
        problems.append(f'Password must be at least {PASSWORD_MIN_LENGTH} characters long')
    if not re.search(r'[A-Z]', password):
        problems.append('Password must contain at least one uppercase letter')
    if not re.search(r'[a-z]', password):
        problems.append('Password must contain at least one lowercase letter')
    if not re.search(r'[0-9]', password):
        problems.append('Password must contain at least one number')
    if not re.search(r'[!@#$%^&*]', password):
        problems.append('Password must contain at least one special character (!@#$%^&*)')
    return problems


def validate_phone(value: str) -> str:
    digits = re.sub(r'\D', '', value or '')
    if not PHONE_DIGITS.match(digits):
        raise serializers.ValidationError('Phone number must have 10 to 15 digits')
    return value.strip()


def validate_password_strength(value: str) -> str:
    problems = password_problems(value or '')
    if problems:
        raise serializers.ValidationError(problems)
    return value


def validate_license_number(value: str) -> str:
    value = (value or '').strip().upper()
    if not LICENSE_NUMBER.match(value):
        raise serializers.ValidationError('License number must look like LIC-XXXXXX')
    return value


def validate_specialization(value: str) -> str:
    if value not in SPECIALIZATIONS:
        raise serializers.ValidationError('Unknown specialization')
    return value


def validate_experience(value: int) -> int:
    if value < 0 or value > MAX_EXPERIENCE_YEARS:
        raise serializers.ValidationError(f'Years of experience must be between 0 and {MAX_EXPERIENCE_YEARS}')
    return value


def validate_amount(value: Decimal) -> Decimal:
    if value <= 0 or value > MAX_PAYMENT_AMOUNT:
        raise serializers.ValidationError('Amount must be greater than 0 and at most 1,000,000')
    return value


def validate_currency(value: str) -> str:
    value = (value or '').upper()
    if value not in CURRENCIES:
        raise serializers.ValidationError('Unsupported currency')
    return value


def validate_notes(value: str) -> str:
    value = sanitize(value)
    if not value or len(value) > MAX_NOTES_LENGTH:
        raise serializers.ValidationError(f'Notes must be 1 to {MAX_NOTES_LENGTH} characters')
    return value


def validate_reason(value: str) -> str:
    value = sanitize(value)
    if not value or len(value) > MAX_REASON_LENGTH:
        raise serializers.ValidationError(f'Reason must be 1 to {MAX_REASON_LENGTH} characters')
    return value
