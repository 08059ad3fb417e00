"""
Account profile and patient records: demographics, medical history,
allergies, medications, insurance and consents.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from django.utils import timezone
from supabase import PostgrestAPIError

from clinic.services.envelope import first_row, is_no_rows, ok, service_call


@dataclass
class UserProfileUpdate:
    """Account fields the owner may change; email and role are not among them."""
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    avatar_url: Optional[str] = None

    def as_row(self) -> dict:
        row = {k: v for k, v in asdict(self).items() if v is not None}
        if not row:
            raise ValueError('Nothing to update')
        return row


@dataclass
class PatientProfile:
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None


@dataclass
class InsuranceInfo:
    provider_name: Optional[str] = None
    member_id: Optional[str] = None
    group_number: Optional[str] = None
    policy_start_date: Optional[str] = None
    policy_end_date: Optional[str] = None


async def optional_row(query) -> dict:
    """Single-row read where a missing row is not an error."""
    try:
        response = await query.single().execute()
    except PostgrestAPIError as e:
        if is_no_rows(e):
            return ok(None)
        raise
    return ok(response.data)


async def rows_for_user(client, table: str, user_id: str) -> dict:
    response = await client.table(table).select('*').eq('user_id', user_id).execute()
    return ok(response.data)


@service_call
async def get_user_profile(client, user_id: str) -> dict:
    response = await client.table('users').select('*').eq('id', user_id).single().execute()
    return ok(response.data)


@service_call
async def update_user_profile(client, user_id: str, updates: UserProfileUpdate) -> dict:
    response = await client.table('users').update(updates.as_row()).eq('id', user_id).execute()
    return ok(first_row(response))


@service_call
async def upsert_patient_profile(client, user_id: str, profile: PatientProfile) -> dict:
    response = await (
        client.table('patient_profiles')
        .upsert({'user_id': user_id, **asdict(profile)}, on_conflict='user_id')
        .execute()
    )
    return ok(first_row(response))


@service_call
async def get_patient_profile(client, user_id: str) -> dict:
    return await optional_row(client.table('patient_profiles').select('*').eq('user_id', user_id))


@service_call
async def add_medical_history(client, user_id: str, condition: str, notes: Optional[str] = None) -> dict:
    response = await client.table('medical_history').insert({
        'user_id': user_id,
        'condition': condition,
        'notes': notes,
        'status': 'active',
    }).execute()
    return ok(first_row(response))


@service_call
async def get_medical_history(client, user_id: str) -> dict:
    return await rows_for_user(client, 'medical_history', user_id)


@service_call
async def add_allergy(client, user_id: str, allergen: str, severity: str, reaction: Optional[str] = None) -> dict:
    response = await client.table('allergies').insert({
        'user_id': user_id,
        'allergen': allergen,
        'severity': severity,
        'reaction': reaction,
    }).execute()
    return ok(first_row(response))


@service_call
async def get_allergies(client, user_id: str) -> dict:
    return await rows_for_user(client, 'allergies', user_id)


@service_call
async def add_medication(client, user_id: str, medication_name: str, dosage: Optional[str] = None,
                         frequency: Optional[str] = None, reason: Optional[str] = None) -> dict:
    response = await client.table('medications').insert({
        'user_id': user_id,
        'medication_name': medication_name,
        'dosage': dosage,
        'frequency': frequency,
        'reason': reason,
        'start_date': timezone.localdate().isoformat(),
    }).execute()
    return ok(first_row(response))


@service_call
async def get_medications(client, user_id: str) -> dict:
    return await rows_for_user(client, 'medications', user_id)


@service_call
async def upsert_insurance_info(client, user_id: str, insurance: InsuranceInfo) -> dict:
    response = await (
        client.table('insurance_info')
        .upsert({'user_id': user_id, **asdict(insurance)}, on_conflict='user_id')
        .execute()
    )
    return ok(first_row(response))


@service_call
async def get_insurance_info(client, user_id: str) -> dict:
    return await optional_row(client.table('insurance_info').select('*').eq('user_id', user_id))


@service_call
async def upsert_consent(client, user_id: str, consent_type: str, is_accepted: bool) -> dict:
    response = await client.table('consents').upsert({
        'user_id': user_id,
        'consent_type': consent_type,
        'is_accepted': is_accepted,
        'accepted_at': timezone.now().isoformat() if is_accepted else None,
    }, on_conflict='user_id,consent_type').execute()
    return ok(first_row(response))


@service_call
async def get_consents(client, user_id: str) -> dict:
    return await rows_for_user(client, 'consents', user_id)
