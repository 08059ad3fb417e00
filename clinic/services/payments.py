"""
Payments.

The gateway is only reachable through serverless functions on the
backend; this module initialises and verifies transactions through them
and keeps the ``payments`` table and the appointment's payment status in
step.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.utils import timezone

from clinic.backend import invoke_function
from clinic.services.envelope import error_message, fail, first_row, ok, service_call

logger = logging.getLogger(__name__)

PAYMENTS_TABLE = 'payments'
APPOINTMENT_PAYMENT_STATUSES = ('unpaid', 'pending', 'paid', 'refunded')
VERIFICATION_FAILED = 'Payment verification failed'


@dataclass
class PaymentInitData:
    appointment_id: str
    amount: Decimal
    email: str
    full_name: str


@dataclass
class PaymentVerifyData:
    reference: str
    appointment_id: str


def to_minor_units(amount) -> int:
    """Major currency units to the gateway's minor units (cedis to pesewas)."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


@service_call
async def initialize_payment(client, data: PaymentInitData) -> dict:
    response = await invoke_function(client, 'initialize-payment', {
        'appointmentId': data.appointment_id,
        'amount': to_minor_units(data.amount),
        'email': data.email,
        'fullName': data.full_name,
    })
    tx = (response or {}).get('data') or {}
    return ok({
        'authorizationUrl': tx.get('authorization_url'),
        'accessCode': tx.get('access_code'),
        'reference': tx.get('reference'),
    })


@service_call
async def verify_payment(client, data: PaymentVerifyData) -> dict:
    response = await invoke_function(client, 'verify-payment', {
        'reference': data.reference,
        'appointmentId': data.appointment_id,
    })
    if (response or {}).get('status') != 'success':
        logger.info("payment %s not verified: %s", data.reference, (response or {}).get('status'))
        return fail(VERIFICATION_FAILED)

    try:
        await client.table('appointments').update({
            'payment_status': 'paid',
            'payment_reference': data.reference,
        }).eq('id', data.appointment_id).execute()
    except Exception as e:
        logger.warning("payment %s verified but appointment %s not updated: %s",
                       data.reference, data.appointment_id, error_message(e))
    return ok(response)


@service_call
async def get_payment_history(client, user_id: str) -> dict:
    response = await (
        client.table(PAYMENTS_TABLE)
        .select('*')
        .eq('user_id', user_id)
        .order('created_at', desc=True)
        .execute()
    )
    return ok(response.data)


@service_call
async def get_payment_details(client, payment_id: str) -> dict:
    response = await client.table(PAYMENTS_TABLE).select('*').eq('id', payment_id).single().execute()
    return ok(response.data)


@service_call
async def create_payment_record(client, user_id: str, appointment_id: str, amount, reference: str) -> dict:
    response = await client.table(PAYMENTS_TABLE).insert({
        'user_id': user_id,
        'appointment_id': appointment_id,
        'amount': float(amount),
        'reference': reference,
        'status': 'pending',
        'created_at': timezone.now().isoformat(),
    }).execute()
    return ok(first_row(response))


@service_call
async def process_refund(client, reference: str, amount=None, reason: str = '') -> dict:
    body = {'reference': reference, 'reason': reason}
    if amount is not None:
        body['amount'] = to_minor_units(amount)
    response = await invoke_function(client, 'process-refund', body)
    return ok(response)


@service_call
async def refund_payment(client, payment_id: str, reason: str) -> dict:
    """Record a refund settled outside the gateway functions."""
    response = await client.table(PAYMENTS_TABLE).update({
        'status': 'refunded',
        'refund_reason': reason,
        'refunded_at': timezone.now().isoformat(),
    }).eq('id', payment_id).execute()
    return ok(first_row(response))


@service_call
async def update_appointment_payment_status(client, appointment_id: str, payment_status: str) -> dict:
    if payment_status not in APPOINTMENT_PAYMENT_STATUSES:
        raise ValueError(f'Invalid payment status: {payment_status}')
    response = await (
        client.table('appointments')
        .update({'payment_status': payment_status})
        .eq('id', appointment_id)
        .execute()
    )
    return ok(first_row(response))
