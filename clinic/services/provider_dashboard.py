"""
Provider workspace: live queue, consultation history, clinical actions,
task list and headline statistics.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from django.utils import timezone

from clinic.services.appointments import CONSULTATION_STATUSES, check_status
from clinic.services.envelope import first_row, ok, service_call

TASKS_TABLE = 'provider_tasks'
TASK_STATUSES = ('pending', 'in_progress', 'completed')
TASK_PRIORITIES = ('low', 'medium', 'high')
QUEUE_STATUSES = ['waiting', 'live']
OPEN_TASK_STATUSES = ['pending', 'in_progress']


@dataclass
class TaskUpdate:
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None

    def as_row(self) -> dict:
        row = {k: v for k, v in asdict(self).items() if v is not None}
        if not row:
            raise ValueError('Nothing to update')
        if 'priority' in row:
            check_status(row['priority'], TASK_PRIORITIES)
        if 'status' in row:
            check_status(row['status'], TASK_STATUSES)
        return row


def completion_rate(total: int, completed: int) -> float:
    if not total:
        return 0
    return completed / total * 100


def stamped(row: dict) -> dict:
    return {**row, 'updated_at': timezone.now().isoformat()}


async def count(query) -> int:
    response = await query.execute()
    return getattr(response, 'count', None) or 0


@service_call
async def get_consultation_queue(client, provider_id: str) -> dict:
    response = await (
        client.table('consultations')
        .select('*')
        .eq('provider_id', provider_id)
        .in_('status', QUEUE_STATUSES)
        .order('scheduled_time')
        .execute()
    )
    return ok(response.data)


@service_call
async def get_consultation_history(client, provider_id: str, limit: int = 20) -> dict:
    response = await (
        client.table('consultations')
        .select('*')
        .eq('provider_id', provider_id)
        .eq('status', 'completed')
        .order('end_time', desc=True)
        .limit(limit)
        .execute()
    )
    return ok(response.data)


@service_call
async def update_consultation_status(client, consultation_id: str, status: str) -> dict:
    check_status(status, CONSULTATION_STATUSES)
    response = await (
        client.table('consultations')
        .update(stamped({'status': status}))
        .eq('id', consultation_id)
        .execute()
    )
    return ok(first_row(response))


@service_call
async def add_consultation_notes(client, consultation_id: str, notes: str) -> dict:
    response = await (
        client.table('consultations')
        .update(stamped({'notes': notes}))
        .eq('id', consultation_id)
        .execute()
    )
    return ok(first_row(response))


@service_call
async def create_prescription(client, consultation_id: str, patient_id: str, medication: str,
                              dosage: str, frequency: str, duration: str) -> dict:
    response = await client.table('prescriptions').insert({
        'consultation_id': consultation_id,
        'patient_id': patient_id,
        'medication': medication,
        'dosage': dosage,
        'frequency': frequency,
        'duration': duration,
        'status': 'active',
        'created_at': timezone.now().isoformat(),
    }).execute()
    return ok(first_row(response))


@service_call
async def order_lab_test(client, consultation_id: str, patient_id: str, test_name: str, instructions: str) -> dict:
    response = await client.table('lab_orders').insert({
        'consultation_id': consultation_id,
        'patient_id': patient_id,
        'test_name': test_name,
        'instructions': instructions,
        'status': 'pending',
        'created_at': timezone.now().isoformat(),
    }).execute()
    return ok(first_row(response))


@service_call
async def get_provider_tasks(client, provider_id: str) -> dict:
    response = await (
        client.table(TASKS_TABLE)
        .select('*')
        .eq('provider_id', provider_id)
        .in_('status', OPEN_TASK_STATUSES)
        .order('due_date')
        .execute()
    )
    return ok(response.data)


@service_call
async def create_provider_task(client, provider_id: str, title: str, description: str, due_date: str,
                               priority: str, patient_id: Optional[str] = None) -> dict:
    check_status(priority, TASK_PRIORITIES)
    response = await client.table(TASKS_TABLE).insert({
        'provider_id': provider_id,
        'title': title,
        'description': description,
        'due_date': due_date,
        'priority': priority,
        'patient_id': patient_id,
        'status': 'pending',
        'created_at': timezone.now().isoformat(),
    }).execute()
    return ok(first_row(response))


@service_call
async def update_task_status(client, task_id: str, status: str) -> dict:
    check_status(status, TASK_STATUSES)
    response = await client.table(TASKS_TABLE).update(stamped({'status': status})).eq('id', task_id).execute()
    return ok(first_row(response))


@service_call
async def update_task(client, task_id: str, updates: TaskUpdate) -> dict:
    response = await client.table(TASKS_TABLE).update(stamped(updates.as_row())).eq('id', task_id).execute()
    return ok(first_row(response))


@service_call
async def get_provider_stats(client, provider_id: str) -> dict:
    """Headline numbers for the dashboard.

    The three counts are separate queries and may reflect different moments
    under concurrent writes.
    """
    def consultations():
        return client.table('consultations').select('*', count='exact', head=True).eq('provider_id', provider_id)

    total = await count(consultations())
    completed = await count(consultations().eq('status', 'completed'))
    pending_tasks = await count(
        client.table(TASKS_TABLE)
        .select('*', count='exact', head=True)
        .eq('provider_id', provider_id)
        .eq('status', 'pending')
    )
    return ok({
        'totalConsultations': total,
        'completedConsultations': completed,
        'pendingTasks': pending_tasks,
        'completionRate': completion_rate(total, completed),
    })


@service_call
async def get_patient_details(client, patient_id: str) -> dict:
    response = await client.table('users').select('*').eq('id', patient_id).single().execute()
    return ok(response.data)


@service_call
async def get_patient_medical_history(client, patient_id: str) -> dict:
    response = await (
        client.table('medical_history')
        .select('*')
        .eq('user_id', patient_id)
        .order('created_at', desc=True)
        .execute()
    )
    return ok(response.data)


@service_call
async def schedule_follow_up(client, patient_id: str, provider_id: str, scheduled_time: str, reason: str) -> dict:
    response = await client.table('consultations').insert({
        'patient_id': patient_id,
        'provider_id': provider_id,
        'scheduled_time': scheduled_time,
        'reason': reason,
        'status': 'scheduled',
        'created_at': timezone.now().isoformat(),
    }).execute()
    return ok(first_row(response))
