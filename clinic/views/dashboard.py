"""
Provider workspace endpoints: queue, history, clinical actions, tasks and
statistics.  Every endpoint here is provider-only and scoped to the caller.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from clinic.permissions import IsProvider
from clinic.serializers.providers import (
    ConsultationStatusSerializer,
    DashboardPrescriptionSerializer,
    FollowUpSerializer,
    HistoryQuerySerializer,
    LabOrderSerializer,
    NotesSerializer,
    TaskSerializer,
    TaskStatusSerializer,
    TaskUpdateSerializer,
)
from clinic.services import provider_dashboard as dashboard
from clinic.services.cache import (
    TTL_MEDIUM,
    TTL_SHORT,
    consultation_queue_key,
    provider_stats_key,
    provider_tasks_key,
)
from clinic.views.base import call_service, iso

PROVIDER_ONLY = [IsAuthenticated, IsProvider]


def workspace_keys(provider_id: str) -> list:
    return [consultation_queue_key(provider_id), provider_stats_key(provider_id)]


@api_view(['GET'])
@permission_classes(PROVIDER_ONLY)
def queue(request):
    key = consultation_queue_key(request.user.id)
    return call_service(request, dashboard.get_consultation_queue, request.user.id, cache_as=(key, TTL_SHORT))


@api_view(['GET'])
@permission_classes(PROVIDER_ONLY)
def history(request):
    q = HistoryQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return call_service(request, dashboard.get_consultation_history, request.user.id,
                        q.validated_data.get('limit', 20))


@api_view(['GET'])
@permission_classes(PROVIDER_ONLY)
def stats(request):
    key = provider_stats_key(request.user.id)
    return call_service(request, dashboard.get_provider_stats, request.user.id, cache_as=(key, TTL_MEDIUM))


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def consultation_status(request, pk: str):
    s = ConsultationStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, dashboard.update_consultation_status, pk, s.validated_data['status'],
                        invalidates=workspace_keys(request.user.id))


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def consultation_notes(request, pk: str):
    s = NotesSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, dashboard.add_consultation_notes, pk, s.validated_data['notes'])


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def prescription(request):
    s = DashboardPrescriptionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    return call_service(request, dashboard.create_prescription, d['consultationId'], d['patientId'],
                        d['medication'], d['dosage'], d['frequency'], d['duration'],
                        success_status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def lab_order(request):
    s = LabOrderSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    return call_service(request, dashboard.order_lab_test, d['consultationId'], d['patientId'],
                        d['testName'], d['instructions'], success_status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes(PROVIDER_ONLY)
def tasks(request):
    provider_id = request.user.id
    if request.method == 'GET':
        return call_service(request, dashboard.get_provider_tasks, provider_id,
                            cache_as=(provider_tasks_key(provider_id), TTL_SHORT))
    s = TaskSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    return call_service(request, dashboard.create_provider_task, provider_id, d['title'], d['description'],
                        iso(d['dueDate']), d['priority'], d.get('patientId'),
                        invalidates=[provider_tasks_key(provider_id), provider_stats_key(provider_id)],
                        success_status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def task_update(request, pk: str):
    s = TaskUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    updates = dashboard.TaskUpdate(
        title=d.get('title'),
        description=d.get('description'),
        due_date=iso(d.get('dueDate')),
        priority=d.get('priority'),
        status=d.get('status'),
    )
    provider_id = request.user.id
    return call_service(request, dashboard.update_task, pk, updates,
                        invalidates=[provider_tasks_key(provider_id), provider_stats_key(provider_id)])


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def task_status(request, pk: str):
    s = TaskStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    provider_id = request.user.id
    return call_service(request, dashboard.update_task_status, pk, s.validated_data['status'],
                        invalidates=[provider_tasks_key(provider_id), provider_stats_key(provider_id)])


@api_view(['GET'])
@permission_classes(PROVIDER_ONLY)
def patient_detail(request, pk: str):
    return call_service(request, dashboard.get_patient_details, pk)


@api_view(['GET'])
@permission_classes(PROVIDER_ONLY)
def patient_medical_history(request, pk: str):
    return call_service(request, dashboard.get_patient_medical_history, pk)


@api_view(['POST'])
@permission_classes(PROVIDER_ONLY)
def follow_up(request):
    s = FollowUpSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    return call_service(request, dashboard.schedule_follow_up, d['patientId'], request.user.id,
                        iso(d['scheduledTime']), d['reason'],
                        invalidates=workspace_keys(request.user.id),
                        success_status=status.HTTP_201_CREATED)
