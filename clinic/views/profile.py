"""
The caller's own account profile and patient record.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from clinic.serializers.profile import (
    AllergySerializer,
    ConsentSerializer,
    InsuranceSerializer,
    MedicalHistorySerializer,
    MedicationSerializer,
    PatientProfileSerializer,
    ProfileUpdateSerializer,
)
from clinic.services import profile
from clinic.services.cache import TTL_MEDIUM, user_profile_key
from clinic.views.base import call_service, iso


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_profile(request):
    key = user_profile_key(request.user.id)
    return call_service(request, profile.get_user_profile, request.user.id, cache_as=(key, TTL_MEDIUM))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def user_profile_update(request):
    s = ProfileUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    updates = profile.UserProfileUpdate(full_name=d.get('fullName'), phone_number=d.get('phone'),
                                        avatar_url=d.get('avatarUrl'))
    return call_service(request, profile.update_user_profile, request.user.id, updates,
                        invalidates=[user_profile_key(request.user.id)])


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patient_profile(request):
    if request.method == 'GET':
        return call_service(request, profile.get_patient_profile, request.user.id)
    s = PatientProfileSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    data = profile.PatientProfile(
        date_of_birth=iso(d.get('dateOfBirth')),
        gender=d.get('gender'),
        address=d.get('address'),
        city=d.get('city'),
        state=d.get('state'),
        postal_code=d.get('postalCode'),
        country=d.get('country'),
        emergency_contact_name=d.get('emergencyContactName'),
        emergency_contact_phone=d.get('emergencyContactPhone'),
    )
    return call_service(request, profile.upsert_patient_profile, request.user.id, data)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def medical_history(request):
    if request.method == 'GET':
        return call_service(request, profile.get_medical_history, request.user.id)
    s = MedicalHistorySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, profile.add_medical_history, request.user.id,
                        s.validated_data['condition'], s.validated_data.get('notes'))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def allergies(request):
    if request.method == 'GET':
        return call_service(request, profile.get_allergies, request.user.id)
    s = AllergySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    return call_service(request, profile.add_allergy, request.user.id, d['allergen'], d['severity'],
                        d.get('reaction'))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def medications(request):
    if request.method == 'GET':
        return call_service(request, profile.get_medications, request.user.id)
    s = MedicationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    return call_service(request, profile.add_medication, request.user.id, d['medicationName'],
                        d.get('dosage'), d.get('frequency'), d.get('reason'))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def insurance(request):
    if request.method == 'GET':
        return call_service(request, profile.get_insurance_info, request.user.id)
    s = InsuranceSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    data = profile.InsuranceInfo(
        provider_name=d.get('providerName'),
        member_id=d.get('memberId'),
        group_number=d.get('groupNumber'),
        policy_start_date=iso(d.get('policyStartDate')),
        policy_end_date=iso(d.get('policyEndDate')),
    )
    return call_service(request, profile.upsert_insurance_info, request.user.id, data)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def consents(request):
    if request.method == 'GET':
        return call_service(request, profile.get_consents, request.user.id)
    s = ConsentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, profile.upsert_consent, request.user.id,
                        s.validated_data['consentType'], s.validated_data['isAccepted'])
