"""
Appointments, consultations, prescriptions and lab requests.

Rows are owned jointly by a patient and a provider account; listing
functions pick the owning column from the caller's ``user_type``.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from django.utils import timezone

from clinic.services.envelope import first_row, ok, service_call

APPOINTMENT_TYPES = ('consultation', 'follow_up', 'check_up')
APPOINTMENT_STATUSES = ('scheduled', 'in_progress', 'completed', 'cancelled')
CONSULTATION_STATUSES = APPOINTMENT_STATUSES
LAB_REQUEST_STATUSES = ('requested', 'scheduled', 'in_progress', 'completed', 'cancelled')
USER_TYPES = ('patient', 'provider')

DEFAULT_DURATION_MINUTES = 30
DEFAULT_REFILLS = 3


@dataclass
class AppointmentData:
    patient_id: str
    provider_id: str
    appointment_date: str
    appointment_type: str
    duration_minutes: Optional[int] = None
    notes: Optional[str] = None


@dataclass
class ConsultationData:
    appointment_id: str
    patient_id: str
    provider_id: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    consultation_notes: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    follow_up_date: Optional[str] = None


@dataclass
class ConsultationUpdate:
    """Clinical fields a provider may revise after a consultation is opened."""
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    consultation_notes: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    follow_up_date: Optional[str] = None

    def as_row(self) -> dict:
        row = {k: v for k, v in asdict(self).items() if v is not None}
        if not row:
            raise ValueError('Nothing to update')
        return row


@dataclass
class PrescriptionData:
    consultation_id: str
    patient_id: str
    provider_id: str
    medication_name: str
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None
    quantity: Optional[int] = None
    notes: Optional[str] = None


@dataclass
class LabRequestData:
    patient_id: str
    provider_id: str
    test_name: str
    test_description: Optional[str] = None
    scheduled_date: Optional[str] = None
    notes: Optional[str] = None
    consultation_id: Optional[str] = None


def owner_column(user_type: str) -> str:
    if user_type not in USER_TYPES:
        raise ValueError(f'Unknown user type: {user_type}')
    return 'patient_id' if user_type == 'patient' else 'provider_id'


def check_status(status: str, allowed) -> str:
    if status not in allowed:
        raise ValueError(f'Invalid status: {status}')
    return status


async def list_owned(client, table: str, user_id: str, user_type: str, order_by: str, *, desc: bool) -> dict:
    response = await (
        client.table(table)
        .select('*')
        .eq(owner_column(user_type), user_id)
        .order(order_by, desc=desc)
        .execute()
    )
    return ok(response.data)


# -----------------------------------------------------------------------------
# Appointments
# -----------------------------------------------------------------------------
@service_call
async def create_appointment(client, appointment: AppointmentData) -> dict:
    if appointment.appointment_type not in APPOINTMENT_TYPES:
        raise ValueError(f'Invalid appointment type: {appointment.appointment_type}')
    response = await client.table('appointments').insert({
        'patient_id': appointment.patient_id,
        'provider_id': appointment.provider_id,
        'appointment_date': appointment.appointment_date,
        'duration_minutes': appointment.duration_minutes or DEFAULT_DURATION_MINUTES,
        'appointment_type': appointment.appointment_type,
        'notes': appointment.notes,
        'status': 'scheduled',
    }).execute()
    return ok(first_row(response))


@service_call
async def get_appointments(client, user_id: str, user_type: str) -> dict:
    return await list_owned(client, 'appointments', user_id, user_type, 'appointment_date', desc=False)


@service_call
async def update_appointment_status(client, appointment_id: str, status: str) -> dict:
    check_status(status, APPOINTMENT_STATUSES)
    response = await client.table('appointments').update({'status': status}).eq('id', appointment_id).execute()
    return ok(first_row(response))


# -----------------------------------------------------------------------------
# Consultations
# -----------------------------------------------------------------------------
@service_call
async def create_consultation(client, consultation: ConsultationData) -> dict:
    response = await client.table('consultations').insert({
        **asdict(consultation),
        'status': 'scheduled',
    }).execute()
    return ok(first_row(response))


@service_call
async def get_consultations(client, user_id: str, user_type: str) -> dict:
    return await list_owned(client, 'consultations', user_id, user_type, 'start_time', desc=True)


@service_call
async def update_consultation(client, consultation_id: str, updates: ConsultationUpdate) -> dict:
    response = await client.table('consultations').update(updates.as_row()).eq('id', consultation_id).execute()
    return ok(first_row(response))


# -----------------------------------------------------------------------------
# Prescriptions
# -----------------------------------------------------------------------------
@service_call
async def create_prescription(client, prescription: PrescriptionData) -> dict:
    response = await client.table('prescriptions').insert({
        **asdict(prescription),
        'status': 'active',
        'refills_remaining': DEFAULT_REFILLS,
    }).execute()
    return ok(first_row(response))


@service_call
async def get_prescriptions(client, user_id: str, user_type: str) -> dict:
    return await list_owned(client, 'prescriptions', user_id, user_type, 'created_at', desc=True)


# -----------------------------------------------------------------------------
# Lab requests
# -----------------------------------------------------------------------------
@service_call
async def create_lab_request(client, lab_request: LabRequestData) -> dict:
    response = await client.table('lab_requests').insert({
        **asdict(lab_request),
        'status': 'requested',
    }).execute()
    return ok(first_row(response))


@service_call
async def get_lab_requests(client, user_id: str, user_type: str) -> dict:
    return await list_owned(client, 'lab_requests', user_id, user_type, 'created_at', desc=True)


@service_call
async def update_lab_request_status(client, lab_request_id: str, status: str,
                                    results_url: Optional[str] = None) -> dict:
    check_status(status, LAB_REQUEST_STATUSES)
    completed = timezone.localdate().isoformat() if status == 'completed' else None
    response = await client.table('lab_requests').update({
        'status': status,
        'results_url': results_url,
        'completed_date': completed,
    }).eq('id', lab_request_id).execute()
    return ok(first_row(response))
