"""
Appointments, consultations, prescriptions and lab requests.

Listing endpoints return the caller's own rows; ``userType`` picks the
owning column and defaults to the caller's account type.
"""
from __future__ import annotations

from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from clinic.permissions import IsProvider, IsProviderOrReadOnly
from clinic.serializers.care import (
    AppointmentSerializer,
    ConsultationSerializer,
    ConsultationUpdateSerializer,
    LabRequestSerializer,
    LabRequestStatusSerializer,
    PrescriptionSerializer,
    StatusSerializer,
    UserTypeQuerySerializer,
)
from clinic.services import appointments
from clinic.services import cache as service_cache
from clinic.services.cache import TTL_SHORT, appointment_list_key, appointment_party_keys
from clinic.views.base import call_service, iso, user_type_of


def listing_type(request) -> str:
    q = UserTypeQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return user_type_of(request)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def appointment_list(request):
    user = request.user
    if request.method == 'GET':
        user_type = listing_type(request)
        return call_service(request, appointments.get_appointments, user.id, user_type,
                            cache_as=(appointment_list_key(f'{user_type}:{user.id}'), TTL_SHORT))
    s = AppointmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    data = appointments.AppointmentData(
        patient_id=user.id,
        provider_id=d['providerId'],
        appointment_date=iso(d['appointmentDate']),
        appointment_type=d['appointmentType'],
        duration_minutes=d.get('durationMinutes'),
        notes=d.get('notes'),
    )
    return call_service(request, appointments.create_appointment, data,
                        invalidates=[appointment_list_key(f'patient:{user.id}'),
                                     appointment_list_key(f"provider:{d['providerId']}")],
                        success_status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def appointment_status(request, pk: str):
    s = StatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    response = call_service(request, appointments.update_appointment_status, pk, s.validated_data['status'],
                            invalidates=[appointment_list_key(f'{request.user.user_type}:{request.user.id}')])
    if response.data.get('success'):
        keys = appointment_party_keys(response.data.get('data') or {})
        if keys:
            async_to_sync(service_cache.invalidate)(*keys)
    return response


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsProviderOrReadOnly])
def consultation_list(request):
    if request.method == 'GET':
        return call_service(request, appointments.get_consultations, request.user.id, listing_type(request))
    s = ConsultationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    data = appointments.ConsultationData(
        appointment_id=d['appointmentId'],
        patient_id=d['patientId'],
        provider_id=request.user.id,
        start_time=iso(d.get('startTime')),
    )
    return call_service(request, appointments.create_consultation, data, success_status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsProvider])
def consultation_update(request, pk: str):
    s = ConsultationUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    updates = appointments.ConsultationUpdate(
        start_time=iso(d.get('startTime')),
        end_time=iso(d.get('endTime')),
        consultation_notes=d.get('consultationNotes'),
        diagnosis=d.get('diagnosis'),
        treatment_plan=d.get('treatmentPlan'),
        follow_up_date=iso(d.get('followUpDate')),
    )
    return call_service(request, appointments.update_consultation, pk, updates)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsProviderOrReadOnly])
def prescription_list(request):
    if request.method == 'GET':
        return call_service(request, appointments.get_prescriptions, request.user.id, listing_type(request))
    s = PrescriptionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    data = appointments.PrescriptionData(
        consultation_id=d['consultationId'],
        patient_id=d['patientId'],
        provider_id=request.user.id,
        medication_name=d['medicationName'],
        dosage=d.get('dosage'),
        frequency=d.get('frequency'),
        duration=d.get('duration'),
        quantity=d.get('quantity'),
        notes=d.get('notes'),
    )
    return call_service(request, appointments.create_prescription, data, success_status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsProviderOrReadOnly])
def lab_request_list(request):
    if request.method == 'GET':
        return call_service(request, appointments.get_lab_requests, request.user.id, listing_type(request))
    s = LabRequestSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    data = appointments.LabRequestData(
        patient_id=d['patientId'],
        provider_id=request.user.id,
        test_name=d['testName'],
        test_description=d.get('testDescription'),
        scheduled_date=iso(d.get('scheduledDate')),
        notes=d.get('notes'),
        consultation_id=d.get('consultationId'),
    )
    return call_service(request, appointments.create_lab_request, data, success_status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsProvider])
def lab_request_status(request, pk: str):
    s = LabRequestStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, appointments.update_lab_request_status, pk, s.validated_data['status'],
                        s.validated_data.get('resultsUrl'))
