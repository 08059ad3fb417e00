"""
Provider directory (any signed-in account) and a provider's own profile.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from clinic.permissions import IsProvider
from clinic.serializers.providers import (
    AvailabilitySerializer,
    LicenseSerializer,
    ProviderProfileUpdateSerializer,
)
from clinic.services import providers
from clinic.services.cache import (
    TTL_LONG,
    TTL_VERY_LONG,
    provider_profile_key,
    provider_rating_key,
)
from clinic.views.base import call_service


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def provider_detail(request, pk: str):
    return call_service(request, providers.get_provider_profile, pk, cache_as=(provider_profile_key(pk), TTL_VERY_LONG))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def provider_availability(request, pk: str):
    return call_service(request, providers.get_provider_availability, pk)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def provider_rating(request, pk: str):
    return call_service(request, providers.get_provider_rating, pk, cache_as=(provider_rating_key(pk), TTL_LONG))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsProvider])
def my_profile(request):
    return call_service(request, providers.get_provider_profile, request.user.id)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsProvider])
def my_profile_update(request):
    s = ProviderProfileUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    updates = providers.ProviderProfileUpdate(
        specialization=d.get('specialization'),
        license_number=d.get('licenseNumber'),
        years_of_experience=d.get('yearsOfExperience'),
        bio=d.get('bio'),
        is_active=d.get('isActive'),
    )
    return call_service(request, providers.update_provider_profile, request.user.id, updates,
                        invalidates=[provider_profile_key(request.user.id)])


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsProvider])
def verify_license(request):
    s = LicenseSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return call_service(request, providers.verify_provider_license, request.user.id,
                        s.validated_data['licenseNumber'],
                        invalidates=[provider_profile_key(request.user.id)])


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsProvider])
def my_availability_update(request):
    s = AvailabilitySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    slots = [
        providers.AvailabilitySlot(
            day_of_week=slot['dayOfWeek'],
            start_time=slot['startTime'].isoformat(),
            end_time=slot['endTime'].isoformat(),
            is_available=slot['isAvailable'],
        )
        for slot in s.validated_data['slots']
    ]
    return call_service(request, providers.update_provider_availability, request.user.id, slots)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsProvider])
def my_appointments(request):
    return call_service(request, providers.get_provider_appointments, request.user.id)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsProvider])
def my_consultations(request):
    return call_service(request, providers.get_provider_consultations, request.user.id)
