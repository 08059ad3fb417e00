"""
Video consultations.

Room tokens and recordings are handled by serverless functions in front
of the video provider; the consultation row tracks the session lifecycle
``scheduled -> in_progress -> completed``.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Optional

from django.utils import timezone

from clinic.backend import invoke_function
from clinic.services.envelope import first_row, ok, service_call


@dataclass
class Medication:
    name: str
    dosage: str
    frequency: str
    duration: str


async def update_consultation(client, consultation_id: str, row: dict) -> dict:
    response = await client.table('consultations').update(row).eq('id', consultation_id).execute()
    return ok(first_row(response))


@service_call
async def get_video_token(client, consultation_id: str, user_id: str, user_name: str) -> dict:
    response = await invoke_function(client, 'generate-video-token', {
        'consultationId': consultation_id,
        'userId': user_id,
        'userName': user_name,
    }) or {}
    return ok({'token': response.get('token'), 'roomName': response.get('roomName')})


@service_call
async def start_recording(client, consultation_id: str) -> dict:
    return ok(await invoke_function(client, 'start-recording', {'consultationId': consultation_id}))


@service_call
async def stop_recording(client, consultation_id: str) -> dict:
    return ok(await invoke_function(client, 'stop-recording', {'consultationId': consultation_id}))


@service_call
async def start_consultation(client, consultation_id: str) -> dict:
    return await update_consultation(client, consultation_id, {
        'status': 'in_progress',
        'started_at': timezone.now().isoformat(),
    })


@service_call
async def end_consultation(client, consultation_id: str, notes: Optional[str] = None) -> dict:
    return await update_consultation(client, consultation_id, {
        'status': 'completed',
        'ended_at': timezone.now().isoformat(),
        'notes': notes or None,
    })


@service_call
async def add_consultation_notes(client, consultation_id: str, notes: str) -> dict:
    return await update_consultation(client, consultation_id, {'notes': notes})


@service_call
async def create_prescription_from_consultation(client, consultation_id: str, provider_id: str,
                                                patient_id: str, medications: List[Medication]) -> dict:
    response = await client.table('prescriptions').insert({
        'consultation_id': consultation_id,
        'provider_id': provider_id,
        'patient_id': patient_id,
        'medications': [asdict(m) for m in medications],
        'status': 'active',
        'issued_at': timezone.now().isoformat(),
    }).execute()
    return ok(first_row(response))


@service_call
async def get_consultation_details(client, consultation_id: str) -> dict:
    response = await client.table('consultations').select('*').eq('id', consultation_id).single().execute()
    return ok(response.data)
